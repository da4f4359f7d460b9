# =============================================================================
# core/services/paginated_cursor.py - Incremental List Loading
# =============================================================================
# Forward-only cursor over a collection ordered by creation time (newest
# first), with the document id as tie-breaker.
#
# State machine:
#   idle -> fetching -> idle (more available)
#                    -> idle (exhausted)
#   any  -> fetching (refresh) -> ...
#
# A cursor belongs to one list view and is never shared. Only one fetch may
# be pending at a time; a second request while one is in flight is rejected.
# =============================================================================

import logging
from typing import Any

from app.exceptions import FetchInProgressError
from lib.document_store import DocumentStore
from lib.supabase_client import SupabaseClient
from core.models.pagination import CursorKey, CursorState, Page

logger = logging.getLogger(__name__)


class PaginatedQueryCursor:
    """
    Loads a collection page by page.

    Example:
        cursor = PaginatedQueryCursor(collection="users", page_size=25)
        page = await cursor.fetch_page()          # first 25
        while not page.exhausted:
            page = await cursor.fetch_page()      # appended to cursor.items
        await cursor.refresh()                    # back to page one
    """

    def __init__(
        self,
        store: DocumentStore = SupabaseClient,
        collection: str = "users",
        order_field: str = "createdTime",
        page_size: int = 25,
        state: CursorState | None = None,
    ):
        self.store = store
        self.collection = collection
        self.order_field = order_field
        self.state = state or CursorState(page_size=page_size)
        self.items: list[dict[str, Any]] = []
        self._fetching = False

    @property
    def page_size(self) -> int:
        return self.state.page_size

    @property
    def is_fetching(self) -> bool:
        return self._fetching

    @property
    def exhausted(self) -> bool:
        return self.state.exhausted

    async def fetch_page(self, refresh: bool = False) -> Page:
        """
        Fetch the next page, or the first page when refreshing.

        - refresh=True: discard cursor and held items, load page one
        - refresh=False without cursor: load page one
        - refresh=False with cursor: load rows strictly after the last one
          seen and append them
        - refresh=False on an exhausted cursor: no query, empty page

        Raises:
            FetchInProgressError: If a fetch is already pending
            SupabaseClientError: If the store query fails (state unchanged)
        """
        if self._fetching:
            raise FetchInProgressError(self.collection)

        if not refresh and self.state.exhausted:
            return Page(items=[], state=self.state.model_copy())

        self._fetching = True
        try:
            after = None if refresh else self.state.last_seen_key
            # One extra row tells whether another page exists
            rows = await self.store.fetch_ordered_page(
                self.collection,
                self.order_field,
                self.page_size + 1,
                after=after,
            )
        finally:
            self._fetching = False

        items = rows[: self.page_size]
        exhausted = len(rows) <= self.page_size

        if refresh or after is None:
            self.items = list(items)
        else:
            self.items.extend(items)

        last_seen = (
            CursorKey.from_document(items[-1], self.order_field)
            if items else (None if refresh else self.state.last_seen_key)
        )
        self.state = CursorState(
            last_seen_key=last_seen,
            page_size=self.page_size,
            exhausted=exhausted,
        )

        logger.debug(
            f"Fetched {len(items)} {self.collection} "
            f"(held {len(self.items)}, exhausted={exhausted})"
        )
        return Page(items=items, state=self.state.model_copy())

    async def refresh(self) -> Page:
        """Discard accumulated items and cursor, then load page one."""
        return await self.fetch_page(refresh=True)
