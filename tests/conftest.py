"""Shared fixtures — in-memory database + FastAPI test client.

Every test gets a fresh in-memory SQLite database, injected into the app
through create_app(database=...).
"""

import os
import uuid

import pytest
from httpx import ASGITransport, AsyncClient

# Keep test runs quiet and away from any local .env database
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("SQLITE_PATH", ":memory:")

from crudserver.server.config import Settings  # noqa: E402
from crudserver.server.db import Database  # noqa: E402
from crudserver.server.models import UserCreate  # noqa: E402
from crudserver.server.server import create_app  # noqa: E402


@pytest.fixture
async def db():
    database = Database(":memory:")
    await database.connect()
    database.create_tables()
    yield database
    await database.disconnect()


@pytest.fixture
def app(db):
    return create_app(database=db, settings=Settings(sqlite_path=":memory:"))


@pytest.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def make_user(db):
    """Create a user directly through the persistence layer."""

    async def _make(username: str, **fields):
        data = {
            "username": username,
            "email": fields.pop("email", f"{username}@example.com"),
            "name": fields.pop("name", username.title()),
            **fields,
        }
        return await db.create(UserCreate(**data))

    return _make


@pytest.fixture
def missing_id():
    return str(uuid.uuid4())
