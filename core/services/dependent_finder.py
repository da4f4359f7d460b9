# =============================================================================
# core/services/dependent_finder.py - Dependent Lookup
# =============================================================================
# Finds the documents that reference an entity through a soft foreign key.
# Read-only. A failed lookup is never reported as "no dependents": callers
# get QueryFailedError and must block the deletion.
# =============================================================================

import asyncio
import logging

from lib.document_store import DocumentStore
from lib.supabase_client import SupabaseClient
from core.models.reference import DependentSet
from app.exceptions import QueryFailedError

logger = logging.getLogger(__name__)


class DependentFinder:
    """
    Looks up dependents of an entity.

    Example:
        finder = DependentFinder()
        dependents = await finder.find_dependents("challenges", "avatar", "A1")
        print(dependents.count)
    """

    def __init__(self, store: DocumentStore = SupabaseClient):
        self.store = store

    async def find_dependents(
        self,
        referencing_collection: str,
        field_name: str,
        entity_id: str,
        include_documents: bool = True,
    ) -> DependentSet:
        """
        Find documents in `referencing_collection` whose `field_name` equals `entity_id`.

        Args:
            referencing_collection: Collection holding the references
            field_name: Reference field
            entity_id: Referenced entity id (non-empty)
            include_documents: Fetch full documents (needed for migration);
                otherwise only an exact count is requested

        Returns:
            DependentSet with exact count (and documents when requested)

        Raises:
            ValueError: If entity_id is empty
            QueryFailedError: If the store query fails
        """
        if not entity_id:
            raise ValueError("entity_id must be a non-empty string")

        try:
            if include_documents:
                documents = await self.store.query_equal(
                    referencing_collection, field_name, entity_id
                )
                count = len(documents)
            else:
                documents = []
                count = await self.store.count_equal(
                    referencing_collection, field_name, entity_id
                )
        except Exception as e:
            logger.error(
                f"Dependent lookup failed for {referencing_collection}.{field_name} = {entity_id}: {e}"
            )
            raise QueryFailedError(referencing_collection, field_name, entity_id, str(e)) from e

        logger.debug(f"{count} {referencing_collection} reference {entity_id} via {field_name}")

        return DependentSet(
            entity_id=entity_id,
            referencing_collection=referencing_collection,
            field_name=field_name,
            count=count,
            documents=documents,
        )

    async def count_dependents(
        self,
        referencing_collection: str,
        field_name: str,
        entity_id: str,
    ) -> int:
        """Exact dependent count without fetching documents."""
        dependents = await self.find_dependents(
            referencing_collection, field_name, entity_id, include_documents=False
        )
        return dependents.count

    async def check_many(
        self,
        referencing_collection: str,
        field_name: str,
        entity_ids: list[str],
    ) -> dict[str, int]:
        """
        Count dependents of several entities concurrently.

        Reads are independent, so the lookups run in parallel. Any failed
        lookup fails the whole call.

        Returns:
            Mapping of entity id to dependent count
        """
        counts = await asyncio.gather(*(
            self.count_dependents(referencing_collection, field_name, entity_id)
            for entity_id in entity_ids
        ))
        return dict(zip(entity_ids, counts))
