# =============================================================================
# core/services/deletion_executor.py - Entity Removal
# =============================================================================
# Deletes the entity document itself. Runs only once nothing references the
# entity any more: either there were no dependents, or every batch of the
# migration committed.
# =============================================================================

import logging

from lib.document_store import DocumentStore
from lib.supabase_client import SupabaseClient
from app.exceptions import DeleteFailedError

logger = logging.getLogger(__name__)


class DeletionExecutor:
    """Single-document delete with a domain error on failure."""

    def __init__(self, store: DocumentStore = SupabaseClient):
        self.store = store

    async def delete_entity(self, collection: str, entity_id: str, migrated: int = 0) -> None:
        """
        Delete `entity_id` from `collection`.

        Args:
            collection: Entity collection
            entity_id: Document to remove
            migrated: Dependents moved beforehand (reported on failure)

        Raises:
            DeleteFailedError: If the store rejects the delete. The entity
                remains and any completed migration stays in place.
        """
        try:
            await self.store.delete_document(collection, entity_id)
        except Exception as e:
            logger.error(f"Failed to delete {entity_id} from {collection}: {e}")
            raise DeleteFailedError(collection, entity_id, str(e), migrated=migrated) from e

        logger.info(f"Deleted {entity_id} from {collection}")
