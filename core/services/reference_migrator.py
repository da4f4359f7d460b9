# =============================================================================
# core/services/reference_migrator.py - Dependent Migration
# =============================================================================
# Rewrites a reference field on every dependent to a replacement id.
#
# Dependents are split into batches no larger than the store's atomic batch
# limit. Each batch is one all-or-nothing write; batches are submitted one
# after another. There is no atomicity across batches: when batch k fails,
# batches before k stay committed and batches after k are never attempted.
# The outcome is reported as a tagged MigrationResult, never raised.
# =============================================================================

import logging
from typing import Any

from app.config import settings
from lib.document_store import DocumentStore
from lib.supabase_client import SupabaseClient
from lib.utils import chunked
from core.models.reference import MigrationResult, MigrationStatus

logger = logging.getLogger(__name__)


class ReferenceMigrator:
    """
    Moves dependents from one entity to another in sequential atomic batches.

    A failed batch may be resubmitted in place with identical contents
    (`batch_retries` times). That write is idempotent: it sets the same
    field to the same value.
    """

    def __init__(
        self,
        store: DocumentStore = SupabaseClient,
        batch_size: int | None = None,
        batch_retries: int | None = None,
    ):
        self.store = store
        self.batch_size = settings.STORE_BATCH_LIMIT if batch_size is None else batch_size
        self.batch_retries = (
            settings.MIGRATION_BATCH_RETRIES if batch_retries is None else batch_retries
        )
        if self.batch_size < 1:
            raise ValueError(f"batch_size must be >= 1, got {self.batch_size}")

    async def migrate(
        self,
        collection: str,
        dependents: list[dict[str, Any]],
        field_name: str,
        replacement_id: str,
    ) -> MigrationResult:
        """
        Set `field_name = replacement_id` on every dependent document.

        Args:
            collection: Collection the dependents live in
            dependents: Dependent documents (each with an "id")
            field_name: Reference field to rewrite
            replacement_id: New value for the field

        Returns:
            MigrationResult tagged SUCCESS, PARTIAL or FAILED
        """
        document_ids = [str(doc["id"]) for doc in dependents]
        batches = list(chunked(document_ids, self.batch_size))
        patch = {field_name: replacement_id}

        result = MigrationResult(
            status=MigrationStatus.SUCCESS,
            field_name=field_name,
            replacement_id=replacement_id,
            total=len(document_ids),
            total_batches=len(batches),
        )

        for index, batch in enumerate(batches):
            error = await self._commit_batch(collection, index, batch, patch)

            if error is not None:
                result.status = (
                    MigrationStatus.PARTIAL if result.completed_batches else MigrationStatus.FAILED
                )
                result.failed_batch_index = index
                result.error = error
                logger.error(
                    f"Migration of {collection}.{field_name} -> {replacement_id} stopped at "
                    f"batch {index + 1}/{len(batches)}: {result.describe()}"
                )
                return result

            result.completed_batches += 1
            result.migrated += len(batch)
            logger.info(
                f"Committed batch {index + 1}/{len(batches)} "
                f"({len(batch)} {collection}) -> {field_name}={replacement_id}"
            )

        logger.info(f"Migrated {result.migrated} {collection} to {field_name}={replacement_id}")
        return result

    async def _commit_batch(
        self,
        collection: str,
        index: int,
        batch: list[str],
        patch: dict[str, Any],
    ) -> str | None:
        """Submit one batch, retrying in place. Returns the last error, or None on commit."""
        attempts = self.batch_retries + 1
        last_error: str | None = None

        for attempt in range(1, attempts + 1):
            try:
                await self.store.update_batch(collection, batch, patch)
                return None
            except Exception as e:
                last_error = str(e)
                if attempt < attempts:
                    logger.warning(
                        f"Batch {index + 1} of {collection} failed "
                        f"(attempt {attempt}/{attempts}), retrying: {e}"
                    )

        return last_error
