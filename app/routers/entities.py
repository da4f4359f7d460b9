# =============================================================================
# app/routers/entities.py - Referenced Entity Endpoints
# =============================================================================
# Deleting avatars and categories without leaving challenges pointing at
# documents that no longer exist.
#
# Endpoints:
# - GET /entities/{kind}: List entities (replacement choices)
# - GET /entities/{kind}/{entity_id}/dependents: Count + deletion path
# - DELETE /entities/{kind}/{entity_id}: Delete an entity with no dependents
# - POST /entities/{kind}/{entity_id}/transfer: Migrate dependents, then delete
# - POST /entities/{kind}/{entity_id}/actions/{action}: Row action dispatch
# =============================================================================

import logging
from typing import Annotated, Any

from fastapi import APIRouter, HTTPException, Path
from pydantic import BaseModel, Field

from app.dependencies import EntityServiceDep, IntegrityServiceDep
from core.models.reference import (
    DeletionResult,
    MigrationDecision,
    MigrationResult,
    ReferenceKind,
)
from core.services.reference_integrity import ReferenceIntegrityService
from core.services.row_actions import RowActionDispatcher, UnknownRowActionError

logger = logging.getLogger(__name__)

router = APIRouter()

KindPath = Annotated[ReferenceKind, Path(description="Entity kind: avatar or category")]
EntityIdPath = Annotated[str, Path(min_length=1, description="Entity id")]


# =============================================================================
# Request/Response Models
# =============================================================================

class EntitySummary(BaseModel):
    """Entity as shown in pickers."""
    id: str = Field(..., examples=["A2"])
    name: str = Field("", examples=["Friendly Fiona"])


class EntityListResponse(BaseModel):
    kind: ReferenceKind
    entities: list[EntitySummary]
    total: int


class DependentsResponse(BaseModel):
    """What deleting an entity involves."""
    kind: ReferenceKind
    entity_id: str = Field(..., examples=["A1"])
    referencing_collection: str = Field(..., examples=["challenges"])
    field_name: str = Field(..., examples=["avatar"])
    dependent_count: int = Field(..., examples=[3])
    decision: MigrationDecision
    replacement_candidates: list[EntitySummary] = Field(default_factory=list)


class TransferRequest(BaseModel):
    """Operator-chosen replacement."""
    replacement_id: str = Field(..., min_length=1, examples=["A2"])


class DeletionResponse(BaseModel):
    kind: ReferenceKind
    entity_id: str
    replacement_id: str | None = None
    migration: MigrationResult | None = None
    message: str


def _summary(entity: Any) -> EntitySummary:
    return EntitySummary(id=entity.id, name=getattr(entity, "name", "") or "")


def _deletion_response(result: DeletionResult) -> DeletionResponse:
    if result.migration:
        message = (
            f"Deleted {result.kind.value} {result.entity_id}; "
            f"{result.migration.migrated} dependents moved to {result.replacement_id}"
        )
    else:
        message = f"Deleted {result.kind.value} {result.entity_id}"
    return DeletionResponse(**result.model_dump(), message=message)


def _row_actions(service: ReferenceIntegrityService, kind: ReferenceKind) -> RowActionDispatcher:
    actions = RowActionDispatcher()
    actions.register("check", lambda entity_id: service.check_dependents(kind, entity_id))
    actions.register("delete", lambda entity_id: service.delete_direct(kind, entity_id))
    return actions


# =============================================================================
# Endpoints
# =============================================================================

@router.get("/{kind}", response_model=EntityListResponse)
async def list_entities(kind: KindPath, entities: EntityServiceDep):
    """List every entity of a kind, sorted by name."""
    items = await entities.list_entities(kind)
    return EntityListResponse(
        kind=kind,
        entities=[_summary(e) for e in items],
        total=len(items),
    )


@router.get("/{kind}/{entity_id}/dependents", response_model=DependentsResponse)
async def get_dependents(
    kind: KindPath,
    entity_id: EntityIdPath,
    service: IntegrityServiceDep,
    entities: EntityServiceDep,
):
    """
    Count the documents referencing an entity.

    When `decision` is `requires_migration`, pick one of the
    `replacement_candidates` and call the transfer endpoint. A failed
    lookup returns 503 and must be treated as blocking the delete.
    """
    plan = await service.check_dependents(kind, entity_id)
    candidates = []
    if plan.requires_migration:
        candidates = [_summary(e) for e in await entities.replacement_candidates(kind, entity_id)]

    spec = kind.spec
    return DependentsResponse(
        kind=kind,
        entity_id=entity_id,
        referencing_collection=spec.referencing_collection,
        field_name=spec.field_name,
        dependent_count=plan.dependent_count,
        decision=plan.decision,
        replacement_candidates=candidates,
    )


@router.delete("/{kind}/{entity_id}", response_model=DeletionResponse)
async def delete_entity(kind: KindPath, entity_id: EntityIdPath, service: IntegrityServiceDep):
    """
    Delete an entity nothing references.

    Returns 409 (STALE_DEPENDENT_SET) when dependents exist; use the
    transfer endpoint instead.
    """
    result = await service.delete_direct(kind, entity_id)
    return _deletion_response(result)


@router.post("/{kind}/{entity_id}/transfer", response_model=DeletionResponse)
async def transfer_and_delete(
    kind: KindPath,
    entity_id: EntityIdPath,
    request: TransferRequest,
    service: IntegrityServiceDep,
):
    """
    Move every dependent to `replacement_id`, then delete the entity.

    On 409 PARTIAL_MIGRATION the entity still exists and `details` reports
    how many dependents were moved before the failing batch.
    """
    logger.info(f"Transfer requested: {kind.value} {entity_id} -> {request.replacement_id}")
    result = await service.migrate_and_delete(kind, entity_id, request.replacement_id)
    return _deletion_response(result)


@router.post("/{kind}/{entity_id}/actions/{action}")
async def run_row_action(
    kind: KindPath,
    entity_id: EntityIdPath,
    action: Annotated[str, Path(description="Row action name")],
    service: IntegrityServiceDep,
):
    """Dispatch a row action (`check` or `delete`) for one entity."""
    actions = _row_actions(service, kind)
    try:
        result = await actions.dispatch(action, entity_id)
    except UnknownRowActionError:
        raise HTTPException(
            status_code=404,
            detail=f"Unknown action {action!r}; available: {', '.join(actions.available_actions)}",
        )

    if isinstance(result, DeletionResult):
        return _deletion_response(result)
    return result
