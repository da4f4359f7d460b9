# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# This module provides a typed async wrapper for Supabase database operations.
# It implements the singleton pattern to reuse a single client connection
# and implements the DocumentStore interface used by:
# - The dependent finder (equality queries and counts)
# - The reference migrator (atomic batch updates)
# - The deletion executor (single-document deletes)
# - The users cursor (keyset-ordered pages)
#
# Every PostgREST request runs in its own transaction, so one
# `UPDATE ... WHERE id IN (...)` is the all-or-nothing batch primitive.
#
# Usage:
#   from lib.supabase_client import SupabaseClient
#   challenges = await SupabaseClient.query_equal("challenges", "avatar", "A1")
# =============================================================================

from __future__ import annotations

import logging
from typing import Any

from supabase import AsyncClient, acreate_client

from app.config import settings
from core.models.pagination import CursorKey

# Set up logging for this module
logger = logging.getLogger(__name__)


class SupabaseClientError(Exception):
    """
    Error during Supabase operations.

    Provides actionable error messages: errors should tell HOW to fix,
    not just WHAT failed.
    """

    def __init__(
        self,
        message: str,
        code: str = "SUPABASE_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f" Suggestion: {self.suggestion}"
        return result


def _quote(value: Any) -> str:
    """Quote a value for a PostgREST logical filter (timestamps contain ':' and '+')."""
    text = value.isoformat() if hasattr(value, "isoformat") else str(value)
    return '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'


class SupabaseClient:
    """
    Typed async wrapper for Supabase database operations.

    Implements singleton pattern - one client instance is shared across
    the application. All methods are class methods, so the class itself
    is passed wherever a DocumentStore is expected.

    Example:
        count = await SupabaseClient.count_equal("challenges", "category_id", "C9")
        if count == 0:
            await SupabaseClient.delete_document("categories", "C9")
    """

    _instance: AsyncClient | None = None

    @classmethod
    async def get_client(cls) -> AsyncClient:
        """
        Get or create the singleton Supabase client.

        Uses service_role key which bypasses Row Level Security (RLS).
        This is appropriate for server-side operations.

        Raises:
            SupabaseClientError: If client creation fails
        """
        if cls._instance is None:
            try:
                cls._instance = await acreate_client(
                    settings.SUPABASE_URL,
                    settings.SUPABASE_SERVICE_KEY
                )
                logger.info("Supabase client initialized successfully")
            except Exception as e:
                raise SupabaseClientError(
                    message=f"Failed to create Supabase client: {e}",
                    code="CLIENT_INIT_FAILED",
                    suggestion="Check SUPABASE_URL and SUPABASE_SERVICE_KEY in your .env file"
                )
        return cls._instance

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    @classmethod
    async def fetch_document(
        cls,
        collection: str,
        document_id: str,
    ) -> dict[str, Any] | None:
        """
        Fetch a document by ID.

        Returns:
            Document dict with all fields, or None if not found

        Raises:
            SupabaseClientError: If query fails
        """
        client = await cls.get_client()

        try:
            response = await (
                client.table(collection)
                .select("*")
                .eq("id", document_id)
                .limit(1)
                .execute()
            )
            rows = response.data or []
            return rows[0] if rows else None

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch document: {e}",
                code="FETCH_DOCUMENT_FAILED",
                suggestion="Check that the collection exists and is accessible",
                details={"collection": collection, "document_id": document_id}
            )

    @classmethod
    async def list_documents(
        cls,
        collection: str,
        columns: str = "*",
    ) -> list[dict[str, Any]]:
        """
        Fetch every document of a collection.

        Only meant for small reference collections (avatars, categories).
        """
        client = await cls.get_client()

        try:
            response = await client.table(collection).select(columns).execute()
            return response.data or []

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to list documents: {e}",
                code="LIST_DOCUMENTS_FAILED",
                details={"collection": collection}
            )

    @classmethod
    async def query_equal(
        cls,
        collection: str,
        field: str,
        value: Any,
        columns: str = "*",
    ) -> list[dict[str, Any]]:
        """
        Fetch documents where `field == value`.

        Raises:
            SupabaseClientError: If query fails
        """
        client = await cls.get_client()

        try:
            response = await (
                client.table(collection)
                .select(columns)
                .eq(field, value)
                .execute()
            )
            rows = response.data or []
            logger.debug(f"Fetched {len(rows)} {collection} where {field} = {value}")
            return rows

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to query {collection}: {e}",
                code="QUERY_FAILED",
                details={"collection": collection, "field": field, "value": str(value)}
            )

    @classmethod
    async def count_equal(cls, collection: str, field: str, value: Any) -> int:
        """
        Exact count of documents where `field == value`.

        Uses a HEAD request so no rows are transferred.
        """
        client = await cls.get_client()

        try:
            response = await (
                client.table(collection)
                .select("id", count="exact", head=True)
                .eq(field, value)
                .execute()
            )
            if response.count is None:
                raise SupabaseClientError(
                    message="Count request returned no count",
                    code="COUNT_MISSING"
                )
            return response.count

        except SupabaseClientError:
            raise
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to count {collection}: {e}",
                code="COUNT_FAILED",
                details={"collection": collection, "field": field, "value": str(value)}
            )

    @classmethod
    async def fetch_ordered_page(
        cls,
        collection: str,
        order_field: str,
        limit: int,
        after: CursorKey | None = None,
    ) -> list[dict[str, Any]]:
        """
        Fetch rows ordered by (`order_field` DESC, id DESC).

        Keyset pagination: with `after`, only rows strictly older than the
        key (or equally old with a smaller id) are returned. Rows without
        an `order_field` value are left out: Postgres sorts nulls first in
        DESC order and a null key can't be compared in the keyset filter.

        Raises:
            SupabaseClientError: If query fails
        """
        client = await cls.get_client()

        try:
            query = (
                client.table(collection)
                .select("*")
                .not_.is_(order_field, "null")
            )

            if after is not None:
                ts = _quote(after.timestamp)
                doc_id = _quote(after.document_id)
                query = query.or_(
                    f"{order_field}.lt.{ts},"
                    f"and({order_field}.eq.{ts},id.lt.{doc_id})"
                )

            response = await (
                query
                .order(order_field, desc=True)
                .order("id", desc=True)
                .limit(limit)
                .execute()
            )
            return response.data or []

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch page of {collection}: {e}",
                code="FETCH_PAGE_FAILED",
                details={"collection": collection, "order_field": order_field, "limit": limit}
            )

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    @classmethod
    async def update_batch(
        cls,
        collection: str,
        document_ids: list[str],
        patch: dict[str, Any],
    ) -> int:
        """
        Apply `patch` to all listed documents in one statement.

        The statement either updates every matching row or none of them.

        Returns:
            Number of rows updated

        Raises:
            SupabaseClientError: If the update is rejected
        """
        if not document_ids:
            return 0

        client = await cls.get_client()

        try:
            response = await (
                client.table(collection)
                .update(patch)
                .in_("id", document_ids)
                .execute()
            )
            updated = len(response.data or [])
            logger.debug(f"Updated {updated}/{len(document_ids)} {collection} with {list(patch)}")
            return updated

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to update {collection}: {e}",
                code="UPDATE_BATCH_FAILED",
                suggestion="No document in this batch was changed",
                details={"collection": collection, "batch_size": len(document_ids)}
            )

    @classmethod
    async def delete_document(cls, collection: str, document_id: str) -> None:
        """
        Delete a document by ID.

        Raises:
            SupabaseClientError: If delete fails
        """
        client = await cls.get_client()

        try:
            await (
                client.table(collection)
                .delete()
                .eq("id", document_id)
                .execute()
            )

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to delete document: {e}",
                code="DELETE_DOCUMENT_FAILED",
                details={"collection": collection, "document_id": document_id}
            )
