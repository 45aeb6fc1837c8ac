"""
Fixtures for API tests: an HTTP client bound to the test database and
helpers for obtaining access tokens.
"""

from typing import AsyncGenerator, Awaitable, Callable, Dict

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from project_management_api.core.database import get_session
from project_management_api.core.database.entities import User
from project_management_api.server.main import app

DEFAULT_PASSWORD = "secret123"


@pytest_asyncio.fixture(name="client")
async def client_fixture(session_maker) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client; every request gets its own session on the test database."""

    async def get_session_override() -> AsyncGenerator[AsyncSession, None]:
        async with session_maker() as request_session:
            yield request_session

    app.dependency_overrides[get_session] = get_session_override

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://localhost") as client:
        yield client

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def login(client: AsyncClient) -> Callable[..., Awaitable[dict]]:
    """Log in through the API and return the token response body."""

    async def _login(username: str, password: str = DEFAULT_PASSWORD) -> dict:
        response = await client.post("/api/tokens", json={"username": username, "password": password})
        assert response.status_code == 200, response.text
        return response.json()

    return _login


@pytest_asyncio.fixture
async def auth_headers_for(login) -> Callable[[User], Awaitable[Dict[str, str]]]:
    """Bearer headers for an existing user created with the default password."""

    async def _headers(user: User) -> Dict[str, str]:
        body = await login(user.username)
        return {"Authorization": f"Bearer {body['token']}"}

    return _headers


@pytest_asyncio.fixture
async def alice(make_user) -> User:
    return await make_user("alice", first_name="Alice", last_name="Anders")


@pytest_asyncio.fixture
async def bob(make_user) -> User:
    return await make_user("bob", first_name="Bob", last_name="Berg")


@pytest_asyncio.fixture
async def alice_headers(alice, auth_headers_for) -> Dict[str, str]:
    return await auth_headers_for(alice)


@pytest_asyncio.fixture
async def bob_headers(bob, auth_headers_for) -> Dict[str, str]:
    return await auth_headers_for(bob)
