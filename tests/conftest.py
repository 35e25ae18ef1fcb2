import asyncio

import pytest
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from studysphere.database import get_db
from studysphere.main import app


@pytest.fixture
def db():
    return AsyncMongoMockClient()["studysphere_test"]


@pytest.fixture
def client(db):
    async def override_get_db():
        return db

    app.dependency_overrides[get_db] = override_get_db
    # Not used as a context manager: startup would try to reach a real MongoDB
    test_client = TestClient(app)
    yield test_client
    app.dependency_overrides.clear()


def run(coro):
    return asyncio.run(coro)


def seed_user(db, email: str, role: str = "user", **extra) -> str:
    result = run(db.users.insert_one({"email": email, "role": role, **extra}))
    return str(result.inserted_id)


def login(client: TestClient, email: str) -> None:
    response = client.post("/jwt_token", json={"userEmail": email})
    assert response.status_code == 200


@pytest.fixture
def as_user(client, db):
    seed_user(db, "student@example.com")
    login(client, "student@example.com")
    return client


@pytest.fixture
def as_admin(client, db):
    seed_user(db, "admin@example.com", role="admin")
    login(client, "admin@example.com")
    return client
