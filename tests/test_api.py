# =============================================================================
# tests/test_api.py - HTTP Endpoint Tests
# =============================================================================
# Runs the FastAPI app against the in-memory store by overriding the
# get_document_store dependency.
# =============================================================================

import pytest
from fastapi.testclient import TestClient

from app.dependencies import get_document_store
from app.main import app
from tests.fakes import BASE_TIME, InMemoryDocumentStore, make_challenges


@pytest.fixture
def client(store):
    app.dependency_overrides[get_document_store] = lambda: store
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


# =============================================================================
# Health
# =============================================================================

class TestHealth:
    """Tests for health endpoints."""

    def test_health(self, client):
        response = client.get("/api/v1/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_ready(self, client):
        assert response_json(client.get("/api/v1/health/ready"))["database"] == "healthy"

    def test_degraded_when_store_down(self, client, store):
        store.fail_methods.add("fetch_ordered_page")

        body = response_json(client.get("/api/v1/health/ready"))

        assert body["status"] == "degraded"


def response_json(response):
    assert response.status_code == 200, response.text
    return response.json()


# =============================================================================
# Entities
# =============================================================================

class TestEntities:
    """Tests for /api/v1/entities."""

    def test_list_sorted_by_name(self, client):
        body = response_json(client.get("/api/v1/entities/avatar"))

        assert body["total"] == 3
        assert [e["name"] for e in body["entities"]] == [
            "Busy Bob", "Friendly Fiona", "Skeptical Steve"
        ]

    def test_list_with_null_columns(self, client, store):
        store.add("avatars", {"id": "A4", "name": None, "age": None, "book_rate": None})

        body = response_json(client.get("/api/v1/entities/avatar"))

        assert body["total"] == 4
        assert body["entities"][0] == {"id": "A4", "name": ""}

    def test_schema_examples(self):
        schema = app.openapi()["components"]["schemas"]

        assert schema["TransferRequest"]["properties"]["replacement_id"]["examples"] == ["A2"]
        assert schema["UserSummary"]["properties"]["email"]["examples"] == ["jane@example.com"]

    def test_unknown_kind(self, client):
        response = client.get("/api/v1/entities/badge")

        assert response.status_code == 422
        assert response.json()["code"] == "VALIDATION_ERROR"

    def test_dependents_with_candidates(self, client):
        body = response_json(client.get("/api/v1/entities/avatar/A1/dependents"))

        assert body["dependent_count"] == 3
        assert body["decision"] == "requires_migration"
        assert body["field_name"] == "avatar"
        assert {c["id"] for c in body["replacement_candidates"]} == {"A2", "A3"}

    def test_dependents_none(self, client):
        body = response_json(client.get("/api/v1/entities/category/C9/dependents"))

        assert body["dependent_count"] == 0
        assert body["decision"] == "direct_delete_allowed"
        assert body["replacement_candidates"] == []

    def test_dependents_lookup_failure(self, client, store):
        store.fail_methods.add("count_equal")

        response = client.get("/api/v1/entities/avatar/A1/dependents")

        assert response.status_code == 503
        assert response.json()["code"] == "QUERY_FAILED"

    def test_missing_entity(self, client):
        response = client.get("/api/v1/entities/avatar/ghost/dependents")

        assert response.status_code == 404
        assert response.json()["code"] == "ENTITY_NOT_FOUND"

    def test_direct_delete(self, client, store):
        body = response_json(client.delete("/api/v1/entities/category/C9"))

        assert body["message"] == "Deleted category C9"
        assert body["migration"] is None
        assert store.get("categories", "C9") is None

    def test_direct_delete_refused_with_dependents(self, client, store):
        response = client.delete("/api/v1/entities/avatar/A1")

        assert response.status_code == 409
        assert response.json()["code"] == "STALE_DEPENDENT_SET"
        assert store.get("avatars", "A1") is not None

    def test_transfer(self, client, store):
        body = response_json(
            client.post("/api/v1/entities/avatar/A1/transfer", json={"replacement_id": "A2"})
        )

        assert body["message"] == "Deleted avatar A1; 3 dependents moved to A2"
        assert body["migration"]["status"] == "success"
        assert store.where("challenges", "avatar", "A1") == []

    def test_transfer_to_self(self, client):
        response = client.post(
            "/api/v1/entities/avatar/A1/transfer", json={"replacement_id": "A1"}
        )

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_REPLACEMENT"

    def test_transfer_requires_replacement(self, client):
        response = client.post("/api/v1/entities/avatar/A1/transfer", json={})
        assert response.status_code == 422

    def test_partial_migration_reports_progress(self, store):
        store.add("avatars", {"id": "A9", "name": "Busy Avatar"})
        for doc in make_challenges(700, avatar="A9", prefix="big"):
            store.add("challenges", doc)
        store.fail_update_calls.add(1)
        app.dependency_overrides[get_document_store] = lambda: store

        try:
            with TestClient(app) as client:
                response = client.post(
                    "/api/v1/entities/avatar/A9/transfer", json={"replacement_id": "A2"}
                )
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 409
        body = response.json()
        assert body["code"] == "PARTIAL_MIGRATION"
        assert body["details"]["migrated"] == 100
        assert body["details"]["total"] == 700
        assert body["details"]["failed_batch_index"] == 1
        assert store.get("avatars", "A9") is not None

    def test_row_action_check(self, client):
        body = response_json(client.post("/api/v1/entities/avatar/A3/actions/check"))

        assert body["dependent_count"] == 1
        assert body["decision"] == "requires_migration"

    def test_row_action_delete(self, client, store):
        body = response_json(client.post("/api/v1/entities/category/C9/actions/delete"))

        assert body["entity_id"] == "C9"
        assert store.get("categories", "C9") is None

    def test_unknown_row_action(self, client):
        response = client.post("/api/v1/entities/avatar/A1/actions/archive")

        assert response.status_code == 404
        assert "check" in response.json()["detail"]


# =============================================================================
# Users
# =============================================================================

class TestUsers:
    """Tests for /api/v1/users."""

    def test_pages_through_all_users(self, client):
        first = response_json(client.get("/api/v1/users"))

        assert len(first["users"]) == 25
        assert first["exhausted"] is False
        assert first["users"][0]["id"] == "u029"
        assert first["next_cursor"]

        second = response_json(
            client.get("/api/v1/users", params={"cursor": first["next_cursor"]})
        )

        assert len(second["users"]) == 5
        assert second["exhausted"] is True
        assert second["next_cursor"] is None
        ids = [u["id"] for u in first["users"] + second["users"]]
        assert len(set(ids)) == 30

    def test_row_defaults(self, client):
        body = response_json(client.get("/api/v1/users", params={"page_size": 1}))
        user = body["users"][0]

        # u029 has no stored credits
        assert user["user_credits"] == 0
        assert user["is_credits_locked"] is False
        assert user["name"] == "First29 Last29"

    def test_null_columns_do_not_break_the_page(self, client, store):
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

        body = response_json(client.get("/api/v1/users"))
        user = body["users"][0]

        assert len(body["users"]) == 25
        assert user["id"] == "u999"
        assert user["role"] == "user"
        assert user["name"] == ""
        assert user["email"] == ""

    def test_page_size_kept_in_cursor(self, client):
        first = response_json(client.get("/api/v1/users", params={"page_size": 10}))
        second = response_json(client.get("/api/v1/users", params={"cursor": first["next_cursor"]}))

        assert second["page_size"] == 10
        assert second["users"][0]["id"] == "u019"

    def test_invalid_cursor(self, client):
        response = client.get("/api/v1/users", params={"cursor": "garbage!"})

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_CURSOR"

    def test_page_size_bounds(self, client):
        assert client.get("/api/v1/users", params={"page_size": 0}).status_code == 422
        assert client.get("/api/v1/users", params={"page_size": 101}).status_code == 422

    def test_empty_collection(self):
        app.dependency_overrides[get_document_store] = lambda: InMemoryDocumentStore({"users": []})
        try:
            with TestClient(app) as client:
                body = response_json(client.get("/api/v1/users"))
        finally:
            app.dependency_overrides.clear()

        assert body["users"] == []
        assert body["exhausted"] is True
