# =============================================================================
# core/services/migration_planner.py - Deletion Path Decision
# =============================================================================
# Pure decisions, no I/O:
# - plan(): may the entity be deleted directly, or must dependents move first?
# - validate_replacement(): is the operator's replacement choice acceptable?
# =============================================================================

from typing import Iterable

from core.models.reference import MigrationDecision, MigrationPlan
from app.exceptions import InvalidReplacementError


def plan(dependent_count: int) -> MigrationDecision:
    """
    Decide the deletion path from a dependent count.

    0 dependents -> DIRECT_DELETE_ALLOWED, otherwise REQUIRES_MIGRATION.

    Raises:
        ValueError: If dependent_count is negative
    """
    if dependent_count < 0:
        raise ValueError(f"dependent_count must be >= 0, got {dependent_count}")
    if dependent_count == 0:
        return MigrationDecision.DIRECT_DELETE_ALLOWED
    return MigrationDecision.REQUIRES_MIGRATION


def build_plan(
    entity_id: str,
    dependent_count: int,
    replacement_id: str | None = None,
) -> MigrationPlan:
    """Wrap the planner decision into a MigrationPlan value."""
    return MigrationPlan(
        entity_id=entity_id,
        dependent_count=dependent_count,
        decision=plan(dependent_count),
        replacement_id=replacement_id,
    )


def validate_replacement(
    entity_id: str,
    replacement_id: str | None,
    candidate_ids: Iterable[str],
) -> str:
    """
    Check the replacement chosen for an entity being deleted.

    The replacement must be given, differ from the entity, and exist in the
    same collection (`candidate_ids`).

    Returns:
        The validated replacement id

    Raises:
        InvalidReplacementError: If any rule is broken
    """
    if not replacement_id:
        raise InvalidReplacementError(entity_id, replacement_id or "", "no replacement selected")
    if replacement_id == entity_id:
        raise InvalidReplacementError(entity_id, replacement_id, "replacement is the entity being deleted")
    if replacement_id not in set(candidate_ids):
        raise InvalidReplacementError(entity_id, replacement_id, "replacement does not exist")
    return replacement_id
