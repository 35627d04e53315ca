"""
Shared test fixtures for GetStreetCred Backend tests.

Provides:
- Test storage (SqlStorage over in-memory SQLite)
- Test client (httpx AsyncClient over the ASGI app)
- Test user factory (regular, second, admin)
- Test project factory
"""

import os
import uuid
from typing import AsyncGenerator, Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.pool import StaticPool

# Set test environment variables before importing app modules
os.environ["SECRET_KEY"] = "test-secret-key-for-testing-purposes-only-32chars"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["STORAGE_BACKEND"] = "sql"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["TRUST_CLIENT_IDENTITY"] = "true"
os.environ["ADMIN_EMAIL"] = "admin@getstreetcred.com"

from streetcred.api.deps import get_storage
from streetcred.core.database import build_engine
from streetcred.main import app
from streetcred.storage.sql import SqlStorage


# =============================================================================
# Storage Fixtures
# =============================================================================

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

ADMIN_EMAIL = "admin@getstreetcred.com"


@pytest_asyncio.fixture(scope="function")
async def storage() -> AsyncGenerator[SqlStorage, None]:
    """
    Provide a SqlStorage over a fresh in-memory database.

    StaticPool keeps the single connection (and so the database) alive
    for the duration of the test.
    """
    engine = build_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    test_storage = SqlStorage(engine)
    await test_storage.create_tables()

    yield test_storage

    await test_storage.close()


# =============================================================================
# Test Client Fixtures
# =============================================================================


@pytest_asyncio.fixture(scope="function")
async def async_client(storage: SqlStorage) -> AsyncGenerator[AsyncClient, None]:
    """
    Provide an async HTTP client for testing the FastAPI application.

    Overrides the storage dependency to use the test storage.
    """
    app.dependency_overrides[get_storage] = lambda: storage

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    # Clean up
    app.dependency_overrides.clear()


# =============================================================================
# User Fixtures
# =============================================================================


async def signup_user(
    client: AsyncClient,
    email: Optional[str] = None,
    password: str = "TestPassword123!",
) -> dict:
    """Sign up through the API; returns the response body plus the password."""
    email = email or f"user_{uuid.uuid4().hex[:8]}@example.com"
    response = await client.post(
        "/api/auth/signup",
        json={"email": email, "password": password},
    )
    assert response.status_code == 201, f"Failed to create user: {response.text}"
    return {**response.json(), "password": password}


@pytest_asyncio.fixture
async def test_user(async_client: AsyncClient) -> dict:
    """
    Create a test user.

    Returns dict with id, email, role, password, and accessToken.
    """
    return await signup_user(async_client)


@pytest.fixture
def auth_headers(test_user: dict) -> dict:
    """Provide authentication headers for the test user."""
    return {"Authorization": f"Bearer {test_user['accessToken']}"}


@pytest_asyncio.fixture
async def second_test_user(async_client: AsyncClient) -> dict:
    """Create a second test user for authorization tests."""
    return await signup_user(async_client, password="SecondPassword123!")


@pytest.fixture
def second_auth_headers(second_test_user: dict) -> dict:
    """Provide authentication headers for the second test user."""
    return {"Authorization": f"Bearer {second_test_user['accessToken']}"}


@pytest_asyncio.fixture
async def admin_user(async_client: AsyncClient) -> dict:
    """Create the admin account (the reserved admin email)."""
    return await signup_user(async_client, email=ADMIN_EMAIL, password="AdminPassword123!")


@pytest.fixture
def admin_headers(admin_user: dict) -> dict:
    """Provide authentication headers for the admin."""
    return {"Authorization": f"Bearer {admin_user['accessToken']}"}


# =============================================================================
# Project Fixtures
# =============================================================================


def project_payload(**overrides) -> dict:
    """A valid project creation body in wire (camelCase) form."""
    payload = {
        "name": "Test Bridge",
        "location": "X",
        "description": "Y",
        "imageUrl": "http://img",
        "category": "Bridge",
        "completionYear": 2020,
    }
    payload.update(overrides)
    return payload


@pytest_asyncio.fixture
async def test_project(async_client: AsyncClient, test_user: dict) -> dict:
    """Create a project owned by test_user."""
    response = await async_client.post(
        "/api/projects",
        json=project_payload(userId=test_user["id"]),
    )
    assert response.status_code == 201, f"Failed to create project: {response.text}"
    return response.json()
