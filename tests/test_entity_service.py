# =============================================================================
# tests/test_entity_service.py - Entity Reads and Row Actions
# =============================================================================

import pytest

from app.exceptions import EntityNotFoundError, InvalidCursorError
from core.models import Avatar, Category, ReferenceKind
from core.services.entity_service import EntityService
from core.services.row_actions import RowActionDispatcher, UnknownRowActionError
from core.services.user_service import UserService
from tests.fakes import BASE_TIME


class TestEntityService:
    """Tests for EntityService."""

    @pytest.mark.asyncio
    async def test_list_avatars(self, store):
        avatars = await EntityService(store).list_entities(ReferenceKind.AVATAR)

        assert all(isinstance(a, Avatar) for a in avatars)
        assert [a.id for a in avatars] == ["A3", "A2", "A1"]

    @pytest.mark.asyncio
    async def test_list_avatars_with_null_columns(self, store):
        store.add("avatars", {
            "id": "A4", "name": None, "age": None, "gender": None,
            "description": None, "image_url": None, "voice_id": None, "book_rate": None,
        })

        avatars = await EntityService(store).list_entities(ReferenceKind.AVATAR)

        # Unnamed sorts first
        assert avatars[0].id == "A4"
        assert avatars[0].age == 0
        assert len(avatars) == 4

    @pytest.mark.asyncio
    async def test_get_category(self, store):
        category = await EntityService(store).get_entity(ReferenceKind.CATEGORY, "C2")

        assert isinstance(category, Category)
        assert category.name == "Closing"

    @pytest.mark.asyncio
    async def test_get_missing(self, store):
        with pytest.raises(EntityNotFoundError):
            await EntityService(store).get_entity(ReferenceKind.CATEGORY, "C7")

    @pytest.mark.asyncio
    async def test_candidates_exclude_entity(self, store):
        candidates = await EntityService(store).replacement_candidates(ReferenceKind.CATEGORY, "C1")
        assert {c.id for c in candidates} == {"C2", "C9"}


class TestUserService:
    """Tests for UserService."""

    @pytest.mark.asyncio
    async def test_token_continues_listing(self, store):
        service = UserService(store)

        first, state = await service.list_users(page_size=20)
        second, final = await service.list_users(cursor_token=state.to_token())

        assert len(first) == 20
        assert len(second) == 10
        assert final.exhausted
        assert {u.id for u in first}.isdisjoint(u.id for u in second)

    @pytest.mark.asyncio
    async def test_rows_with_null_columns(self, store):
        store.add("users", {
            "id": "u999",
            "email": None,
            "firstName": None,
            "lastName": None,
            "role": None,
            "createdTime": BASE_TIME.replace(year=2025),
            "user_credits": None,
            "is_credits_locked": None,
        })

        users, _ = await UserService(store).list_users(page_size=5)

        assert users[0].id == "u999"
        assert users[0].role == "user"
        assert users[0].full_name == ""
        assert users[0].user_credits == 0

    @pytest.mark.asyncio
    async def test_bad_token(self, store):
        with pytest.raises(InvalidCursorError):
            await UserService(store).list_users(cursor_token="%%%")

    def test_open_cursor_uses_default_page_size(self, store):
        cursor = UserService(store).open_cursor()

        assert cursor.page_size == 25
        assert cursor.order_field == "createdTime"


class TestRowActionDispatcher:
    """Tests for RowActionDispatcher."""

    @pytest.mark.asyncio
    async def test_dispatch_by_name(self):
        seen = []

        async def delete(record_id):
            seen.append(record_id)
            return "deleted"

        actions = RowActionDispatcher()
        actions.register("delete", delete)

        assert await actions.dispatch("delete", "A1") == "deleted"
        assert seen == ["A1"]

    @pytest.mark.asyncio
    async def test_unknown_action(self):
        with pytest.raises(UnknownRowActionError):
            await RowActionDispatcher().dispatch("archive", "A1")

    def test_duplicate_registration(self):
        async def noop(record_id):
            return None

        actions = RowActionDispatcher()
        actions.register("check", noop)

        with pytest.raises(ValueError):
            actions.register("check", noop)
        assert actions.available_actions == ["check"]
