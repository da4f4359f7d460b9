# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - documents.py: Avatar, Category, Challenge and User read models
# - reference.py: Soft foreign keys, dependent sets, migration plans/results
# - pagination.py: Cursor state and pages for keyset pagination
# =============================================================================

# -----------------------------------------------------------------------------
# Document Models - What the console lists and edits
# -----------------------------------------------------------------------------
from .documents import (
    Avatar,
    Category,
    Challenge,
    StoreDocument,
    User,
)

# -----------------------------------------------------------------------------
# Reference Models - Dependents and migrations
# -----------------------------------------------------------------------------
from .reference import (
    REFERENCE_SPECS,
    DeletionResult,
    DependentSet,
    MigrationDecision,
    MigrationPlan,
    MigrationResult,
    MigrationStatus,
    ReferenceKind,
    ReferenceSpec,
)

# -----------------------------------------------------------------------------
# Pagination Models - Users list cursor
# -----------------------------------------------------------------------------
from .pagination import (
    CursorKey,
    CursorState,
    Page,
)

__all__ = [
    # Documents
    "Avatar",
    "Category",
    "Challenge",
    "StoreDocument",
    "User",
    # Reference
    "REFERENCE_SPECS",
    "DeletionResult",
    "DependentSet",
    "MigrationDecision",
    "MigrationPlan",
    "MigrationResult",
    "MigrationStatus",
    "ReferenceKind",
    "ReferenceSpec",
    # Pagination
    "CursorKey",
    "CursorState",
    "Page",
]
