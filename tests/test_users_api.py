"""
Users API — HTTP Endpoint Tests
=================================

What:  End-to-end tests of the /users route table and /health.
How:   HTTPX AsyncClient over ASGITransport against an app backed by a real
       SqlUserStore on a temporary SQLite file (test_client), or by a mocked
       store when a failure must be forced (mock_client).

What we test:
    ✅ Status codes: 200 / 201 / 404 / 500 for every operation
    ✅ Error bodies are plain text and leak no internal detail
    ✅ Missing or malformed bodies (empty payload → 201/200, bad types → 500)
    ✅ Partial update keeps untouched fields
    ✅ Delete returns the prior state; a second delete is a clean 404
"""

import logging
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient

from users_api.main import create_app

UNKNOWN_UUID = "00000000-0000-4000-8000-000000000000"


async def create(client, **fields):
    response = await client.post("/users", json=fields)
    assert response.status_code == 201
    return response.json()


class TestListUsers:

    @pytest.mark.asyncio
    async def test_empty_store_returns_404(self, test_client):
        response = await test_client.get("/users")

        assert response.status_code == 404
        assert response.text == "No users found"
        assert response.headers["content-type"].startswith("text/plain")

    @pytest.mark.asyncio
    async def test_returns_every_user_in_insertion_order(self, test_client):
        created = [
            await create(test_client, name="A", age=5, email="a@x.com"),
            await create(test_client, name="B", age=6, email="b@x.com"),
            await create(test_client, name="C"),
        ]

        response = await test_client.get("/users")

        assert response.status_code == 200
        assert response.json() == created


class TestGetUser:

    @pytest.mark.asyncio
    async def test_existing_user(self, test_client, sample_user_payload):
        user = await create(test_client, **sample_user_payload)

        response = await test_client.get(f"/users/{user['id']}")

        assert response.status_code == 200
        assert response.json() == user

    @pytest.mark.asyncio
    @pytest.mark.parametrize("user_id", [UNKNOWN_UUID, "999", "not-an-id"])
    async def test_unknown_id_returns_404(self, test_client, user_id):
        response = await test_client.get(f"/users/{user_id}")

        assert response.status_code == 404
        assert response.text == "No user found"


class TestCreateUser:

    @pytest.mark.asyncio
    async def test_assigns_fresh_identifier(self, test_client, sample_user_payload):
        first = await create(test_client, **sample_user_payload)
        second = await create(test_client, **sample_user_payload)

        assert first["id"]
        assert first["id"] != second["id"]
        assert first["name"] == "A"
        assert first["age"] == 5
        assert first["email"] == "a@x.com"

    @pytest.mark.asyncio
    async def test_missing_fields_stay_unset_and_unknown_fields_are_ignored(self, test_client):
        response = await test_client.post("/users", json={"name": "Solo", "role": "admin"})

        assert response.status_code == 201
        body = response.json()
        assert body["name"] == "Solo"
        assert body["age"] is None
        assert body["email"] is None
        assert "role" not in body

    @pytest.mark.asyncio
    async def test_missing_body_creates_empty_user(self, test_client):
        response = await test_client.post("/users")

        assert response.status_code == 201
        body = response.json()
        assert body["id"]
        assert (body["name"], body["age"], body["email"]) == (None, None, None)

    @pytest.mark.asyncio
    async def test_whole_ages_stay_integers(self, test_client):
        whole = await create(test_client, name="A", age=5)
        fractional = await create(test_client, name="B", age=5.5)

        assert isinstance(whole["age"], int) and whole["age"] == 5
        assert fractional["age"] == 5.5

        stored = (await test_client.get(f"/users/{whole['id']}")).json()
        assert isinstance(stored["age"], int) and stored["age"] == 5


class TestUpdateUser:

    @pytest.mark.asyncio
    async def test_partial_update_preserves_untouched_fields(self, test_client, sample_user_payload):
        user = await create(test_client, **sample_user_payload)

        response = await test_client.put(f"/users/{user['id']}", json={"age": 6})

        assert response.status_code == 200
        assert response.json() == {"id": user["id"], "name": "A", "age": 6, "email": "a@x.com"}

        stored = await test_client.get(f"/users/{user['id']}")
        assert stored.json()["age"] == 6

    @pytest.mark.asyncio
    async def test_empty_body_returns_record_unchanged(self, test_client, sample_user_payload):
        user = await create(test_client, **sample_user_payload)

        response = await test_client.put(f"/users/{user['id']}", json={})

        assert response.status_code == 200
        assert response.json() == user

    @pytest.mark.asyncio
    async def test_unknown_id_returns_404_and_leaves_store_untouched(self, test_client, sample_user_payload):
        user = await create(test_client, **sample_user_payload)

        response = await test_client.put(f"/users/{UNKNOWN_UUID}", json={"age": 1})

        assert response.status_code == 404
        assert response.text == "No user found"
        listing = await test_client.get("/users")
        assert listing.json() == [user]

    @pytest.mark.asyncio
    async def test_missing_body_returns_record_unchanged(self, test_client, sample_user_payload):
        user = await create(test_client, **sample_user_payload)

        response = await test_client.put(f"/users/{user['id']}")

        assert response.status_code == 200
        assert response.json() == user


class TestDeleteUser:

    @pytest.mark.asyncio
    async def test_delete_returns_prior_state_then_404(self, test_client, sample_user_payload):
        user = await create(test_client, **sample_user_payload)

        response = await test_client.delete(f"/users/{user['id']}")
        assert response.status_code == 200
        assert response.json() == user

        assert (await test_client.get(f"/users/{user['id']}")).status_code == 404

    @pytest.mark.asyncio
    async def test_second_delete_is_404(self, test_client, sample_user_payload):
        user = await create(test_client, **sample_user_payload)

        await test_client.delete(f"/users/{user['id']}")
        response = await test_client.delete(f"/users/{user['id']}")

        assert response.status_code == 404
        assert response.text == "No user found"


class TestMalformedBody:
    """Bodies that do not fit the user fields get the generic plain-text 500."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [
            {"name": "A", "age": "old"},
            {"name": {"first": "A"}},
            ["A", 5],
        ],
    )
    async def test_create_with_wrong_types_returns_500(self, test_client, caplog, payload):
        response = await test_client.post("/users", json=payload)

        assert response.status_code == 500
        assert response.text == "Internal Server Error"
        assert response.headers["content-type"].startswith("text/plain")
        assert "Unusable request body" in caplog.text
        assert (await test_client.get("/users")).status_code == 404

    @pytest.mark.asyncio
    async def test_invalid_json_returns_500_without_echoing_input(self, test_client):
        response = await test_client.post(
            "/users",
            content=b'{"name": "secret-value",',
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 500
        assert response.text == "Internal Server Error"
        assert "secret-value" not in response.text

    @pytest.mark.asyncio
    async def test_update_with_wrong_types_leaves_record_untouched(
        self, test_client, sample_user_payload
    ):
        user = await create(test_client, **sample_user_payload)

        response = await test_client.put(f"/users/{user['id']}", json={"age": "old"})

        assert response.status_code == 500
        assert response.text == "Internal Server Error"
        assert (await test_client.get(f"/users/{user['id']}")).json() == user


class TestStoreFailures:
    """Store faults surface as a generic plain-text 500."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "store_method, method, path, body",
        [
            ("find_all", "GET", "/users", None),
            ("find_by_id", "GET", "/users/1", None),
            ("insert", "POST", "/users", {"name": "A"}),
            ("update_by_id", "PUT", "/users/1", {"age": 2}),
            ("delete_by_id", "DELETE", "/users/1", None),
        ],
    )
    async def test_store_failure_returns_500(
        self, mock_client, mock_store, caplog, store_method, method, path, body
    ):
        getattr(mock_store, store_method).side_effect = ConnectionError("connection reset by 10.0.0.5")

        response = await mock_client.request(method, path, json=body)

        assert response.status_code == 500
        assert response.text == "Internal Server Error"
        assert "10.0.0.5" in caplog.text
        traced = [r for r in caplog.records if r.exc_info and r.name.startswith("users_api")]
        assert len(traced) == 1
        assert not [r for r in caplog.records if r.name == "users_api.main" and r.levelno >= logging.ERROR]

    @pytest.mark.asyncio
    async def test_unexpected_error_returns_500(self, mock_store):
        app = create_app(store=mock_store)
        app.state.user_service = MagicMock(list_users=AsyncMock(side_effect=RuntimeError("boom")))

        transport = ASGITransport(app=app, raise_app_exceptions=False)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.get("/users")

        assert response.status_code == 500
        assert response.text == "Internal Server Error"


class TestRequestId:

    @pytest.mark.asyncio
    async def test_generated_when_absent(self, test_client):
        response = await test_client.get("/users")

        assert len(response.headers["X-Request-ID"]) == 8

    @pytest.mark.asyncio
    async def test_client_value_is_echoed(self, test_client):
        response = await test_client.get("/users", headers={"X-Request-ID": "trace-123"})

        assert response.headers["X-Request-ID"] == "trace-123"


class TestHealth:

    @pytest.mark.asyncio
    async def test_healthy_with_reachable_store(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"

    @pytest.mark.asyncio
    async def test_unhealthy_when_ping_fails(self, mock_client, mock_store):
        mock_store.ping.return_value = False

        response = await mock_client.get("/health")

        assert response.json()["status"] == "unhealthy"
        assert response.json()["database"] == "disconnected"
