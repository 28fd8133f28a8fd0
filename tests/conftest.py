"""
Pytest configuration and fixtures for the pizza service tests.

Provides:
- an in-memory motor-compatible database (mongomock-motor), fresh per test
- the FastAPI app wired to that database and to a fake pizza factory
- registered diner and admin users with live tokens
"""

import uuid

import httpx
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from mongomock_motor import AsyncMongoMockClient

from core.dependencies import get_factory_client
from db.db_operation import create_indexes, get_db
from main import app
from models.user import AdminRole, UserInDB
from services.factory_client import FactoryClient
from services.user_service import UserStore


def random_name() -> str:
    return uuid.uuid4().hex[:10]


class FakeFactory:
    """Stands in for the pizza factory; tests flip `status_code` and `body`."""

    def __init__(self):
        self.status_code = 200
        self.body = {"reportUrl": "http://example.com/report", "jwt": "factory-jwt-123"}
        self.requests = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, json=self.body)


@pytest_asyncio.fixture
async def db():
    client = AsyncMongoMockClient()
    database = client["pizza_test"]
    await create_indexes(database)
    yield database


@pytest.fixture
def factory():
    return FakeFactory()


@pytest_asyncio.fixture
async def async_client(db, factory):
    """
    AsyncClient pointing at the app, with the database and factory
    dependencies overridden.
    """
    async def override_get_db():
        return db

    def override_factory_client():
        return FactoryClient(
            base_url="http://factory.test",
            api_key="test-key",
            transport=httpx.MockTransport(factory.handler),
        )

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_factory_client] = override_factory_client

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def register(async_client):
    """Register a fresh diner; returns the body plus the password used."""
    async def _register(password: str = "dinerpass"):
        name = random_name()
        res = await async_client.post(
            "/api/auth",
            json={"name": name, "email": f"{name}@jwt.com", "password": password},
        )
        assert res.status_code == 200, res.text
        body = res.json()
        body["password"] = password
        return body
    return _register


@pytest_asyncio.fixture
async def diner(register):
    return await register()


@pytest_asyncio.fixture
async def admin(db, async_client):
    name = random_name()
    password = "toomanysecrets"
    await UserStore(db).add_user(
        UserInDB(name=name, email=f"{name}@admin.com", password=password, roles=[AdminRole()])
    )
    res = await async_client.put("/api/auth", json={"email": f"{name}@admin.com", "password": password})
    assert res.status_code == 200, res.text
    body = res.json()
    body["password"] = password
    return body
