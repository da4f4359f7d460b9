# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .dependent_finder import DependentFinder
from .migration_planner import build_plan, plan, validate_replacement
from .reference_migrator import ReferenceMigrator
from .deletion_executor import DeletionExecutor
from .reference_integrity import ReferenceIntegrityService
from .paginated_cursor import PaginatedQueryCursor
from .entity_service import EntityService
from .user_service import UserService
from .row_actions import RowActionDispatcher, UnknownRowActionError

__all__ = [
    "DependentFinder",
    "build_plan",
    "plan",
    "validate_replacement",
    "ReferenceMigrator",
    "DeletionExecutor",
    "ReferenceIntegrityService",
    "PaginatedQueryCursor",
    "EntityService",
    "UserService",
    "RowActionDispatcher",
    "UnknownRowActionError",
]
