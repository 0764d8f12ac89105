"""
Users API — Test Configuration (conftest.py)
==============================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── mock_store: AsyncMock standing in for any DocumentStore
    ├── sql_store: SqlUserStore connected to a throwaway SQLite file
    ├── test_client: HTTPX AsyncClient bound to an app serving sql_store
    └── sample_user_payload: a complete user body
"""

import os
import tempfile

# Override settings BEFORE any users_api import so the module-level app never
# points at a real MongoDB instance
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///" + os.path.join(
    tempfile.mkdtemp(prefix="users_api_test_"), "unused.db"
)
os.environ["LOG_LEVEL"] = "WARNING"

from unittest.mock import AsyncMock  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from users_api.main import create_app  # noqa: E402
from users_api.stores import DocumentStore, SqlUserStore  # noqa: E402


@pytest.fixture
def mock_store():
    """
    A DocumentStore whose every method is an AsyncMock.

    Usage:
        mock_store.find_by_id.return_value = UserResponse(id="1", name="A")
        mock_store.find_all.side_effect = ConnectionError("down")
    """
    store = AsyncMock(spec=DocumentStore)
    store.ping.return_value = True
    return store


@pytest_asyncio.fixture
async def sql_store(tmp_path):
    """A connected SqlUserStore on a fresh SQLite database file."""
    store = SqlUserStore(f"sqlite+aiosqlite:///{tmp_path / 'users.db'}")
    await store.connect()
    yield store
    await store.close()


def _client_for(app):
    transport = ASGITransport(app=app)
    return AsyncClient(transport=transport, base_url="http://test")


@pytest_asyncio.fixture
async def test_client(sql_store):
    """
    HTTPX AsyncClient talking to an app backed by the SQLite store.

    ASGITransport does not run the lifespan; sql_store is already connected.

    Usage:
        async def test_list(test_client):
            response = await test_client.get("/users")
    """
    app = create_app(store=sql_store)
    async with _client_for(app) as client:
        yield client


@pytest_asyncio.fixture
async def mock_client(mock_store):
    """HTTPX AsyncClient talking to an app backed by mock_store."""
    app = create_app(store=mock_store)
    async with _client_for(app) as client:
        yield client


@pytest.fixture
def sample_user_payload():
    return {"name": "A", "age": 5, "email": "a@x.com"}
