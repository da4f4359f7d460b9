# =============================================================================
# core/services/user_service.py - Users List
# =============================================================================
# Stateless paging for the HTTP users list. The caller hands back the token
# it received with the previous page; a PaginatedQueryCursor is rebuilt from
# it for exactly one fetch.
# =============================================================================

import logging

from app.config import settings
from app.exceptions import InvalidCursorError
from lib.document_store import DocumentStore
from lib.supabase_client import SupabaseClient
from core.models.documents import User
from core.models.pagination import CursorState
from core.services.paginated_cursor import PaginatedQueryCursor

logger = logging.getLogger(__name__)

USERS_COLLECTION = "users"


class UserService:
    """Service for the users list."""

    def __init__(self, store: DocumentStore = SupabaseClient):
        self.store = store

    def open_cursor(self, page_size: int | None = None) -> PaginatedQueryCursor:
        """New cursor for one list view, newest users first."""
        return PaginatedQueryCursor(
            store=self.store,
            collection=USERS_COLLECTION,
            order_field=settings.USERS_ORDER_FIELD,
            page_size=page_size or settings.USERS_PAGE_SIZE,
        )

    async def list_users(
        self,
        cursor_token: str | None = None,
        page_size: int | None = None,
    ) -> tuple[list[User], CursorState]:
        """
        Fetch one page of users.

        Args:
            cursor_token: Token from the previous page, None for page one
            page_size: Page size for a fresh listing (a token keeps its own)

        Returns:
            Tuple of (users, cursor state after the fetch)

        Raises:
            InvalidCursorError: If the token can't be decoded
        """
        if cursor_token:
            try:
                state = CursorState.from_token(cursor_token)
            except ValueError as e:
                raise InvalidCursorError(str(e)) from e
            cursor = PaginatedQueryCursor(
                store=self.store,
                collection=USERS_COLLECTION,
                order_field=settings.USERS_ORDER_FIELD,
                state=state,
            )
        else:
            cursor = self.open_cursor(page_size)

        page = await cursor.fetch_page()
        users = [User.from_row(row) for row in page.items]
        return users, page.state
