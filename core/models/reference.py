# =============================================================================
# core/models/reference.py - Reference Integrity Schemas
# =============================================================================
# These models describe soft foreign keys between collections and the values
# produced while deleting a referenced entity:
# - ReferenceKind / ReferenceSpec: which collection points at which entity
# - DependentSet: documents currently referencing an entity
# - MigrationDecision / MigrationPlan: what the planner decided
# - MigrationResult: tagged outcome of rewriting dependents in batches
#
# The store enforces no referential constraint. Everything here is in-memory
# state for one operator-confirmed deletion flow and is never persisted.
# =============================================================================

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class ReferenceKind(str, Enum):
    """
    Entity kinds that other documents reference by id.

    - avatar: challenges point at an avatar through their `avatar` field
    - category: challenges point at a category through `category_id`
    """
    AVATAR = "avatar"
    CATEGORY = "category"

    @property
    def spec(self) -> "ReferenceSpec":
        return REFERENCE_SPECS[self]


class ReferenceSpec(BaseModel):
    """
    Describes one soft foreign key.

    Example:
        ReferenceSpec(
            entity_collection="avatars",
            referencing_collection="challenges",
            field_name="avatar",
        )
    """

    entity_collection: str = Field(..., min_length=1)
    referencing_collection: str = Field(..., min_length=1)
    field_name: str = Field(..., min_length=1)

    model_config = {"frozen": True}


REFERENCE_SPECS: dict[ReferenceKind, ReferenceSpec] = {
    ReferenceKind.AVATAR: ReferenceSpec(
        entity_collection="avatars",
        referencing_collection="challenges",
        field_name="avatar",
    ),
    ReferenceKind.CATEGORY: ReferenceSpec(
        entity_collection="categories",
        referencing_collection="challenges",
        field_name="category_id",
    ),
}


class DependentSet(BaseModel):
    """
    Documents whose reference field equals `entity_id`.

    `documents` is empty when only a count was requested.
    """

    entity_id: str
    referencing_collection: str
    field_name: str
    count: int = Field(default=0, ge=0)
    documents: list[dict[str, Any]] = Field(default_factory=list)

    @property
    def document_ids(self) -> list[str]:
        return [str(doc["id"]) for doc in self.documents]


class MigrationDecision(str, Enum):
    """
    Planner outcome.

    - direct_delete_allowed: nothing references the entity
    - requires_migration: dependents must move to a replacement first
    """
    DIRECT_DELETE_ALLOWED = "direct_delete_allowed"
    REQUIRES_MIGRATION = "requires_migration"


class MigrationPlan(BaseModel):
    """Ephemeral plan for one deletion flow."""

    entity_id: str
    dependent_count: int = Field(..., ge=0)
    decision: MigrationDecision
    replacement_id: str | None = None

    @property
    def requires_migration(self) -> bool:
        return self.decision == MigrationDecision.REQUIRES_MIGRATION


class MigrationStatus(str, Enum):
    """
    Tagged outcome of a migration.

    State machine per batch:
        pending -> committed
        pending -> failed (stop; later batches are never attempted)

    - success: every batch committed
    - partial: at least one batch committed before a failure
    - failed: the first batch failed, nothing was written
    """
    SUCCESS = "success"
    PARTIAL = "partial"
    FAILED = "failed"


class MigrationResult(BaseModel):
    """
    Result of rewriting a dependent set to a replacement id.

    Batches are 0-indexed. On failure, `failed_batch_index` names the batch
    that was rejected and `migrated` counts documents in committed batches.
    """

    status: MigrationStatus
    field_name: str
    replacement_id: str
    total: int = Field(default=0, ge=0)
    migrated: int = Field(default=0, ge=0)
    total_batches: int = Field(default=0, ge=0)
    completed_batches: int = Field(default=0, ge=0)
    failed_batch_index: int | None = None
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.status == MigrationStatus.SUCCESS

    @property
    def remaining(self) -> int:
        return self.total - self.migrated

    def describe(self) -> str:
        """Operator-facing progress line, e.g. "3 of 7 dependents migrated"."""
        return f"{self.migrated} of {self.total} dependents migrated"


class DeletionResult(BaseModel):
    """Returned once an entity has actually been removed."""

    kind: ReferenceKind
    entity_id: str
    replacement_id: str | None = None
    migration: MigrationResult | None = None
