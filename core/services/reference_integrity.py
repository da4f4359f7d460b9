# =============================================================================
# core/services/reference_integrity.py - Safe Entity Deletion
# =============================================================================
# Keeps soft foreign keys consistent when an avatar or category is deleted.
#
# Flow:
#   check_dependents -> plan
#     -> no dependents:  delete_direct
#     -> N dependents:   operator picks a replacement -> migrate_and_delete
#
# migrate_and_delete re-reads the dependent set right before migrating, so
# only dependents created after that read (and before the delete) can slip
# through; VERIFY_BEFORE_DELETE re-counts once more and aborts if any did.
# =============================================================================

import logging

from app.config import settings
from app.exceptions import (
    EntityNotFoundError,
    PartialMigrationError,
    QueryFailedError,
    StaleDependentSetError,
)
from lib.document_store import DocumentStore
from lib.supabase_client import SupabaseClient
from core.models.reference import (
    DeletionResult,
    MigrationDecision,
    MigrationPlan,
    ReferenceKind,
)
from core.services.migration_planner import build_plan, validate_replacement
from core.services.migration_planner import plan as decide
from core.services.deletion_executor import DeletionExecutor
from core.services.dependent_finder import DependentFinder
from core.services.reference_migrator import ReferenceMigrator

logger = logging.getLogger(__name__)


class ReferenceIntegrityService:
    """
    Service object for deleting referenced entities without leaving
    dangling references.

    Example:
        service = ReferenceIntegrityService()
        plan = await service.check_dependents(ReferenceKind.AVATAR, "A1")
        if plan.requires_migration:
            await service.migrate_and_delete(ReferenceKind.AVATAR, "A1", "A2")
        else:
            await service.delete_direct(ReferenceKind.AVATAR, "A1")
    """

    def __init__(
        self,
        store: DocumentStore = SupabaseClient,
        finder: DependentFinder | None = None,
        migrator: ReferenceMigrator | None = None,
        executor: DeletionExecutor | None = None,
        verify_before_delete: bool | None = None,
    ):
        self.store = store
        self.finder = finder or DependentFinder(store)
        self.migrator = migrator or ReferenceMigrator(store)
        self.executor = executor or DeletionExecutor(store)
        self.verify_before_delete = (
            settings.VERIFY_BEFORE_DELETE if verify_before_delete is None else verify_before_delete
        )

    # -------------------------------------------------------------------------
    # Read side
    # -------------------------------------------------------------------------

    async def check_dependents(self, kind: ReferenceKind, entity_id: str) -> MigrationPlan:
        """
        Count dependents of an entity and decide the deletion path.

        Raises:
            EntityNotFoundError: If the entity doesn't exist
            QueryFailedError: If the lookup fails (deletion must be blocked)
        """
        spec = kind.spec
        await self._require_entity(spec.entity_collection, entity_id)

        count = await self.finder.count_dependents(
            spec.referencing_collection, spec.field_name, entity_id
        )
        return build_plan(entity_id, count)

    @staticmethod
    def plan(dependent_count: int) -> MigrationDecision:
        """Planner decision for a dependent count."""
        return decide(dependent_count)

    # -------------------------------------------------------------------------
    # Write side
    # -------------------------------------------------------------------------

    async def delete_direct(self, kind: ReferenceKind, entity_id: str) -> DeletionResult:
        """
        Delete an entity that has no dependents.

        The count is taken again immediately before deleting; if anything
        references the entity now, nothing is deleted.

        Raises:
            EntityNotFoundError: If the entity doesn't exist
            QueryFailedError: If dependents can't be counted
            StaleDependentSetError: If dependents exist
            DeleteFailedError: If the store rejects the delete
        """
        spec = kind.spec
        await self._require_entity(spec.entity_collection, entity_id)

        count = await self.finder.count_dependents(
            spec.referencing_collection, spec.field_name, entity_id
        )
        if decide(count) == MigrationDecision.REQUIRES_MIGRATION:
            logger.warning(f"Refusing direct delete of {kind.value} {entity_id}: {count} dependents")
            raise StaleDependentSetError(entity_id, count)

        await self.executor.delete_entity(spec.entity_collection, entity_id)
        return DeletionResult(kind=kind, entity_id=entity_id)

    async def migrate_and_delete(
        self,
        kind: ReferenceKind,
        entity_id: str,
        replacement_id: str,
    ) -> DeletionResult:
        """
        Move every dependent to `replacement_id`, then delete the entity.

        Steps run strictly in order and each must succeed before the next:
        validate replacement -> re-query dependents -> migrate -> (re-count)
        -> delete.

        Raises:
            EntityNotFoundError: If the entity doesn't exist
            InvalidReplacementError: If the replacement is the entity itself
                or doesn't exist
            QueryFailedError: If dependents can't be read
            PartialMigrationError: If a batch failed; the entity is kept
            StaleDependentSetError: If new dependents appeared after migration
            DeleteFailedError: If the store rejects the delete
        """
        spec = kind.spec
        await self._require_entity(spec.entity_collection, entity_id)

        replacement_exists = (
            replacement_id != entity_id
            and bool(replacement_id)
            and await self._fetch_entity(spec.entity_collection, replacement_id) is not None
        )
        validate_replacement(
            entity_id,
            replacement_id,
            [replacement_id] if replacement_exists else [],
        )

        dependents = await self.finder.find_dependents(
            spec.referencing_collection, spec.field_name, entity_id
        )

        migration = None
        if dependents.count:
            migration = await self.migrator.migrate(
                spec.referencing_collection,
                dependents.documents,
                spec.field_name,
                replacement_id,
            )
            if not migration.succeeded:
                raise PartialMigrationError(entity_id, migration)
        else:
            logger.info(f"No dependents left on {kind.value} {entity_id}; deleting without migration")

        if self.verify_before_delete:
            remaining = await self.finder.count_dependents(
                spec.referencing_collection, spec.field_name, entity_id
            )
            if remaining:
                logger.warning(
                    f"{remaining} new {spec.referencing_collection} reference "
                    f"{kind.value} {entity_id} after migration"
                )
                raise StaleDependentSetError(entity_id, remaining)

        await self.executor.delete_entity(
            spec.entity_collection,
            entity_id,
            migrated=migration.migrated if migration else 0,
        )

        return DeletionResult(
            kind=kind,
            entity_id=entity_id,
            replacement_id=replacement_id,
            migration=migration,
        )

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    async def _fetch_entity(self, collection: str, entity_id: str) -> dict | None:
        try:
            return await self.store.fetch_document(collection, entity_id)
        except Exception as e:
            raise QueryFailedError(collection, "id", entity_id, str(e)) from e

    async def _require_entity(self, collection: str, entity_id: str) -> dict:
        entity = await self._fetch_entity(collection, entity_id)
        if entity is None:
            raise EntityNotFoundError(collection, entity_id)
        return entity
