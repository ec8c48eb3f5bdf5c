import itertools
import os
from unittest.mock import patch

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from mongomock_motor import AsyncMongoMockClient

os.environ.setdefault("MONGODB_URL", "mongodb://localhost:27017")
os.environ["MONGODB_DB"] = "campus_social_test"
os.environ["MONGODB_TRANSACTIONS"] = "false"
os.environ["JWT_SECRET_KEY"] = "test-secret"
os.environ["ALLOWED_EMAIL_DOMAINS"] = "ppsu.ac.in"
os.environ["BCRYPT_ROUNDS"] = "4"

# The Mongo module builds its client at import time
with patch("motor.motor_asyncio.AsyncIOMotorClient", AsyncMongoMockClient):
    from campus_social.db.mongo import ALL_COLLECTIONS, init_db_indexes
    from campus_social.main import app
    from campus_social.services import notify

_emails = itertools.count(1)


@pytest_asyncio.fixture
async def db():
    for collection in ALL_COLLECTIONS:
        await collection.delete_many({})
    await init_db_indexes()
    yield
    await notify.drain()


@pytest_asyncio.fixture
async def client(db):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def make_user(client):
    """Registers a user and returns {id, name, email, token, headers}."""

    async def _make(name="Asha Patel", email=None, password="secret123"):
        email = email or f"student{next(_emails)}@ppsu.ac.in"
        res = await client.post(
            "/api/auth/register",
            json={"name": name, "email": email, "password": password},
        )
        assert res.status_code == 201, res.text
        body = res.json()
        return {
            "id": body["user"]["id"],
            "name": name,
            "email": email,
            "token": body["token"],
            "headers": {"Authorization": f"Bearer {body['token']}"},
        }

    return _make


@pytest.fixture
def make_post(client):
    async def _make(user, **fields):
        payload = {"caption": "Hello campus"}
        payload.update(fields)
        res = await client.post("/api/posts", json=payload, headers=user["headers"])
        assert res.status_code == 201, res.text
        return res.json()["post"]

    return _make
