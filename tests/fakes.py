# =============================================================================
# tests/fakes.py - In-Memory Document Store
# =============================================================================
# Implements the DocumentStore interface over plain dicts so services can be
# tested without Supabase. Supports failure injection:
# - fail_methods: method names that always raise
# - fail_update_calls: 0-based update_batch attempts that raise
# - after_update: hook run after every committed batch
# =============================================================================

from __future__ import annotations

import copy
from datetime import datetime, timedelta, timezone
from typing import Any, Callable

from core.models.pagination import CursorKey


class StoreUnavailable(Exception):
    """Injected store failure."""
    pass


def _sort_value(value: Any) -> Any:
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return value
    return value


class InMemoryDocumentStore:
    """Dict-backed DocumentStore with call recording."""

    def __init__(
        self,
        collections: dict[str, list[dict[str, Any]]] | None = None,
        max_batch_size: int = 500,
    ):
        self.collections: dict[str, dict[str, dict[str, Any]]] = {}
        for name, docs in (collections or {}).items():
            self.collections[name] = {str(doc["id"]): copy.deepcopy(doc) for doc in docs}

        self.max_batch_size = max_batch_size
        self.fail_methods: set[str] = set()
        self.fail_update_calls: set[int] = set()
        self.after_update: Callable[[InMemoryDocumentStore], None] | None = None

        self.calls: list[str] = []
        self.update_attempts: list[list[str]] = []
        self.page_requests: list[tuple[int, CursorKey | None]] = []

    # -------------------------------------------------------------------------
    # Helpers for tests
    # -------------------------------------------------------------------------

    def add(self, collection: str, document: dict[str, Any]) -> None:
        self.collections.setdefault(collection, {})[str(document["id"])] = copy.deepcopy(document)

    def get(self, collection: str, document_id: str) -> dict[str, Any] | None:
        return self.collections.get(collection, {}).get(document_id)

    def where(self, collection: str, field: str, value: Any) -> list[dict[str, Any]]:
        return [
            doc for doc in self.collections.get(collection, {}).values()
            if doc.get(field) == value
        ]

    def _check(self, method: str) -> None:
        self.calls.append(method)
        if method in self.fail_methods:
            raise StoreUnavailable(f"{method} unavailable")

    # -------------------------------------------------------------------------
    # DocumentStore
    # -------------------------------------------------------------------------

    async def fetch_document(self, collection: str, document_id: str) -> dict[str, Any] | None:
        self._check("fetch_document")
        doc = self.get(collection, document_id)
        return copy.deepcopy(doc) if doc is not None else None

    async def list_documents(self, collection: str, columns: str = "*") -> list[dict[str, Any]]:
        self._check("list_documents")
        return [copy.deepcopy(doc) for doc in self.collections.get(collection, {}).values()]

    async def query_equal(
        self, collection: str, field: str, value: Any, columns: str = "*"
    ) -> list[dict[str, Any]]:
        self._check("query_equal")
        return [copy.deepcopy(doc) for doc in self.where(collection, field, value)]

    async def count_equal(self, collection: str, field: str, value: Any) -> int:
        self._check("count_equal")
        return len(self.where(collection, field, value))

    async def update_batch(
        self, collection: str, document_ids: list[str], patch: dict[str, Any]
    ) -> int:
        self._check("update_batch")
        attempt = len(self.update_attempts)
        self.update_attempts.append(list(document_ids))

        if len(document_ids) > self.max_batch_size:
            raise StoreUnavailable(f"batch of {len(document_ids)} exceeds {self.max_batch_size}")
        if attempt in self.fail_update_calls:
            raise StoreUnavailable(f"update attempt {attempt} rejected")

        docs = self.collections.get(collection, {})
        for document_id in document_ids:
            if document_id in docs:
                docs[document_id].update(patch)

        if self.after_update:
            self.after_update(self)
        return len(document_ids)

    async def delete_document(self, collection: str, document_id: str) -> None:
        self._check("delete_document")
        self.collections.get(collection, {}).pop(document_id, None)

    async def fetch_ordered_page(
        self,
        collection: str,
        order_field: str,
        limit: int,
        after: CursorKey | None = None,
    ) -> list[dict[str, Any]]:
        self._check("fetch_ordered_page")
        self.page_requests.append((limit, after))

        def key(doc: dict[str, Any]) -> tuple:
            return (_sort_value(doc.get(order_field)), str(doc["id"]))

        rows = sorted(
            (doc for doc in self.collections.get(collection, {}).values()
             if doc.get(order_field) is not None),
            key=key,
            reverse=True,
        )
        if after is not None:
            bound = (_sort_value(after.timestamp), after.document_id)
            rows = [doc for doc in rows if key(doc) < bound]
        return [copy.deepcopy(doc) for doc in rows[:limit]]


# =============================================================================
# Seed Data Builders
# =============================================================================

BASE_TIME = datetime(2024, 1, 15, 10, 0, tzinfo=timezone.utc)


def make_users(count: int, start: datetime = BASE_TIME) -> list[dict[str, Any]]:
    """Users created one minute apart; u000 is the oldest."""
    return [
        {
            "id": f"u{i:03d}",
            "email": f"user{i}@example.com",
            "firstName": f"First{i}",
            "lastName": f"Last{i}",
            "createdTime": start + timedelta(minutes=i),
            "role": "user",
            "user_credits": None if i % 2 else 10,
        }
        for i in range(count)
    ]


def make_challenges(
    count: int,
    avatar: str = "A1",
    category_id: str = "C1",
    prefix: str = "ch",
) -> list[dict[str, Any]]:
    return [
        {
            "id": f"{prefix}{i}",
            "title": f"Challenge {i}",
            "type": "Cold Call",
            "avatar": avatar,
            "category_id": category_id,
        }
        for i in range(count)
    ]
