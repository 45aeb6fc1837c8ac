"""API tests for login, refresh and refresh-token rotation."""

from datetime import datetime, timedelta, timezone

import jwt
import pytest
from httpx import AsyncClient

from project_management_api.core import security
from project_management_api.core.database.entities import TokenStatus
from project_management_api.core.database.repositories import RefreshTokenRepository
from project_management_api.server.core.config import settings

pytestmark = pytest.mark.asyncio


async def _statuses(session_maker, user_id):
    async with session_maker() as session:
        return [token.status for token in await RefreshTokenRepository(session).list_for_user(user_id)]


class TestLogin:
    async def test_login_issues_token_pair(self, client: AsyncClient, alice):
        response = await client.post("/api/tokens", json={"username": "alice", "password": "secret123"})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["tokenType"] == "bearer"
        assert body["expiresIn"] == 5 * 60
        assert body["refreshToken"]

        claims = jwt.decode(
            body["token"],
            settings.jwt.secret_key,
            algorithms=["HS256"],
            audience="project-management-app",
            issuer="fmi",
        )
        assert claims["sub"] == str(alice.id)
        assert claims["LoggedUserId"] == str(alice.id)
        assert claims["exp"] - claims["iat"] == 5 * 60

    @pytest.mark.parametrize(
        "username,password",
        [("alice", "wrong-password"), ("nobody", "secret123")],
    )
    async def test_bad_credentials(self, client: AsyncClient, alice, username, password):
        response = await client.post("/api/tokens", json={"username": username, "password": password})

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid username or password."

    async def test_short_credentials_fail_validation(self, client: AsyncClient):
        response = await client.post("/api/tokens", json={"username": "al", "password": "123"})

        assert response.status_code == 400
        fields = {error["field"] for error in response.json()["errors"]}
        assert fields == {"username", "password"}

    async def test_each_login_leaves_one_pending_token(self, client: AsyncClient, session_maker, alice, login):
        first = await login("alice")
        await login("alice")

        assert await _statuses(session_maker, alice.id) == [TokenStatus.USED, TokenStatus.PENDING]

        response = await client.post("/api/refreshtokens", json={"refreshToken": first["refreshToken"]})
        assert response.status_code == 401


class TestRefresh:
    async def test_refresh_rotates_tokens(self, client: AsyncClient, session_maker, alice, login):
        issued = await login("alice")

        response = await client.post("/api/refreshtokens", json={"refreshToken": issued["refreshToken"]})

        assert response.status_code == 200
        body = response.json()
        assert body["refreshToken"] != issued["refreshToken"]
        assert body["expiresIn"] == 2 * 60
        assert await _statuses(session_maker, alice.id) == [TokenStatus.USED, TokenStatus.PENDING]

        me = await client.get(f"/api/users/{alice.id}", headers={"Authorization": f"Bearer {body['token']}"})
        assert me.status_code == 200

    async def test_used_token_is_rejected(self, client: AsyncClient, login, alice):
        issued = await login("alice")
        first = await client.post("/api/refreshtokens", json={"refreshToken": issued["refreshToken"]})
        assert first.status_code == 200

        again = await client.post("/api/refreshtokens", json={"refreshToken": issued["refreshToken"]})

        assert again.status_code == 401
        assert again.json()["detail"] == "Refresh token has already been used."

    async def test_unknown_token(self, client: AsyncClient):
        response = await client.post("/api/refreshtokens", json={"refreshToken": "not-a-real-token"})

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid refresh token."

    @pytest.mark.parametrize("payload", [{}, {"refreshToken": ""}, {"refreshToken": "x" * 256}])
    async def test_invalid_payload(self, client: AsyncClient, payload):
        response = await client.post("/api/refreshtokens", json=payload)

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "refreshToken"

    async def test_rotation_is_scoped_to_one_user(self, client: AsyncClient, session_maker, alice, bob, login):
        await login("bob")
        issued = await login("alice")
        await client.post("/api/refreshtokens", json={"refreshToken": issued["refreshToken"]})

        assert await _statuses(session_maker, bob.id) == [TokenStatus.PENDING]


class TestBearerAuthentication:
    async def test_missing_header(self, client: AsyncClient):
        response = await client.get("/api/categories")

        assert response.status_code == 401
        assert response.headers["www-authenticate"] == "Bearer"

    @pytest.mark.parametrize("header", ["Token abc", "Bearer", "Bearer not.a.jwt"])
    async def test_malformed_header(self, client: AsyncClient, header):
        response = await client.get("/api/categories", headers={"Authorization": header})
        assert response.status_code == 401

    async def test_expired_token(self, client: AsyncClient, alice):
        token = security.build_access_token(user_id=alice.id, expires_minutes=-1)

        response = await client.get("/api/categories", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401
        assert response.json()["detail"] == "Access token has expired."

    async def test_token_of_deleted_user(self, client: AsyncClient, alice, alice_headers):
        response = await client.delete(f"/api/users/{alice.id}", headers=alice_headers)
        assert response.status_code == 200

        response = await client.get("/api/categories", headers=alice_headers)
        assert response.status_code == 401


async def test_login_records_token_creation_time(client: AsyncClient, session_maker, alice, login):
    before = datetime.now(timezone.utc).replace(tzinfo=None)
    await login("alice")

    async with session_maker() as session:
        tokens = await RefreshTokenRepository(session).list_for_user(alice.id)

    assert len(tokens) == 1
    assert tokens[0].created_at.tzinfo is None
    assert tokens[0].created_at >= before - timedelta(seconds=1)
