# =============================================================================
# lib/document_store.py - Document Store Interface
# =============================================================================
# The operations the reference integrity engine and the users cursor need
# from a document store. SupabaseClient implements it against PostgREST;
# tests use an in-memory implementation with failure injection.
#
# Collections are tables, documents are rows keyed by an "id" column.
# =============================================================================

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from core.models.pagination import CursorKey


@runtime_checkable
class DocumentStore(Protocol):
    """
    Async document store.

    All methods raise SupabaseClientError (or the implementation's own
    store error) on transport or store failures. None of them retry.
    """

    async def fetch_document(
        self, collection: str, document_id: str
    ) -> dict[str, Any] | None:
        """Point read. Returns None when the document doesn't exist."""
        ...

    async def list_documents(
        self, collection: str, columns: str = "*"
    ) -> list[dict[str, Any]]:
        """Every document of a collection."""
        ...

    async def query_equal(
        self, collection: str, field: str, value: Any, columns: str = "*"
    ) -> list[dict[str, Any]]:
        """Documents whose `field` equals `value`."""
        ...

    async def count_equal(self, collection: str, field: str, value: Any) -> int:
        """Exact number of documents whose `field` equals `value`."""
        ...

    async def update_batch(
        self, collection: str, document_ids: list[str], patch: dict[str, Any]
    ) -> int:
        """
        Apply `patch` to every listed document as one all-or-nothing write.

        Returns the number of documents updated.
        """
        ...

    async def delete_document(self, collection: str, document_id: str) -> None:
        """Single-document delete."""
        ...

    async def fetch_ordered_page(
        self,
        collection: str,
        order_field: str,
        limit: int,
        after: CursorKey | None = None,
    ) -> list[dict[str, Any]]:
        """
        Rows ordered by (`order_field` DESC, id DESC).

        When `after` is given, only rows strictly after that key in this
        order are returned. Rows whose `order_field` is null are excluded.
        """
        ...
