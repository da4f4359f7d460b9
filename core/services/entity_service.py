# =============================================================================
# core/services/entity_service.py - Referenced Entity Reads
# =============================================================================
# Lists avatars and categories, e.g. to offer replacement choices when one
# of them is being deleted.
# =============================================================================

import logging
from typing import Any

from app.exceptions import EntityNotFoundError
from lib.document_store import DocumentStore
from lib.supabase_client import SupabaseClient
from core.models.documents import Avatar, Category, StoreDocument
from core.models.reference import ReferenceKind

logger = logging.getLogger(__name__)

DOCUMENT_MODELS: dict[ReferenceKind, type[StoreDocument]] = {
    ReferenceKind.AVATAR: Avatar,
    ReferenceKind.CATEGORY: Category,
}


class EntityService:
    """Read access to the entities other documents reference."""

    def __init__(self, store: DocumentStore = SupabaseClient):
        self.store = store

    async def list_entities(self, kind: ReferenceKind) -> list[StoreDocument]:
        """All entities of a kind, sorted by name."""
        rows = await self.store.list_documents(kind.spec.entity_collection)
        model = DOCUMENT_MODELS[kind]
        entities = [model.from_row(row) for row in rows]
        return sorted(entities, key=lambda e: (getattr(e, "name", "") or "").lower())

    async def get_entity(self, kind: ReferenceKind, entity_id: str) -> StoreDocument:
        """
        Fetch one entity.

        Raises:
            EntityNotFoundError: If it doesn't exist
        """
        collection = kind.spec.entity_collection
        row: dict[str, Any] | None = await self.store.fetch_document(collection, entity_id)
        if row is None:
            raise EntityNotFoundError(collection, entity_id)
        return DOCUMENT_MODELS[kind].from_row(row)

    async def replacement_candidates(
        self,
        kind: ReferenceKind,
        entity_id: str,
    ) -> list[StoreDocument]:
        """Entities of the same kind that can receive the dependents of `entity_id`."""
        return [e for e in await self.list_entities(kind) if e.id != entity_id]
