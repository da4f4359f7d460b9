# =============================================================================
# app/routers/users.py - Users List Endpoints
# =============================================================================
# Newest users first, loaded incrementally. Each response carries an opaque
# `next_cursor`; pass it back to get the following page.
# =============================================================================

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Query
from pydantic import BaseModel, Field

from app.dependencies import UserServiceDep

router = APIRouter()


# =============================================================================
# Response Models
# =============================================================================

class UserSummary(BaseModel):
    """User row in the list."""
    id: str = Field(..., examples=["u_123"])
    email: str = Field("", examples=["jane@example.com"])
    name: str = Field("", examples=["Jane Doe"])
    role: str = Field("user", examples=["user"])
    created_time: datetime | None = None
    user_credits: int = 0
    is_credits_locked: bool = False


class UserPageResponse(BaseModel):
    users: list[UserSummary]
    page_size: int
    next_cursor: str | None = Field(None, description="Pass as `cursor` for the next page")
    exhausted: bool


# =============================================================================
# Endpoints
# =============================================================================

@router.get("", response_model=UserPageResponse)
async def list_users(
    service: UserServiceDep,
    cursor: Annotated[str | None, Query(description="Token from the previous page")] = None,
    page_size: Annotated[int | None, Query(ge=1, le=100, description="Items per page")] = None,
):
    """
    List users ordered by creation time, newest first.

    Omit `cursor` to (re)start from the first page.
    """
    users, state = await service.list_users(cursor_token=cursor, page_size=page_size)

    return UserPageResponse(
        users=[
            UserSummary(
                id=u.id,
                email=u.email,
                name=u.full_name,
                role=u.role,
                created_time=u.createdTime,
                user_credits=u.user_credits,
                is_credits_locked=u.is_credits_locked,
            )
            for u in users
        ],
        page_size=state.page_size,
        next_cursor=None if state.exhausted else state.to_token(),
        exhausted=state.exhausted,
    )
