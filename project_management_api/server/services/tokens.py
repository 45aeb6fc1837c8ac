"""
Token Service.

Issues access tokens on password login and on refresh-token exchange, and
rotates refresh tokens so that each user holds at most one PENDING token.

Rotation for a user runs in a single transaction with the user row locked:
every PENDING token of that user becomes USED and one new PENDING token is
added. A refresh additionally claims the presented token with a conditional
update, so a token can be exchanged at most once even under concurrency.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from project_management_api.core import security
from project_management_api.core.database.entities import TokenStatus, User
from project_management_api.core.database.repositories import RefreshTokenRepository, UserRepository
from project_management_api.core.models.io import RefreshTokenRequest, TokenRequest, TokenResponse
from project_management_api.core.monitoring import log_auth_event
from project_management_api.core.validation import (
    ensure_valid,
    validate_credentials,
    validate_refresh_token,
)
from project_management_api.server.core.config import JWTConfig, settings

logger = logging.getLogger(__name__)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


@dataclass(frozen=True)
class IssuedTokens:
    access_token: str
    refresh_token: str
    expires_in: int

    def to_response(self) -> TokenResponse:
        return TokenResponse(token=self.access_token, refresh_token=self.refresh_token, expires_in=self.expires_in)


class TokenService:
    """Login, refresh and refresh-token rotation."""

    def __init__(self, session: AsyncSession, jwt_config: Optional[JWTConfig] = None):
        self.session = session
        self.jwt_config = jwt_config or settings.jwt
        self.users = UserRepository(session)
        self.refresh_tokens = RefreshTokenRepository(session)

    async def login(self, request: TokenRequest) -> IssuedTokens:
        """Exchange a username and password for a token pair.

        Raises:
            ValidationFailed: If the credentials break the length rules
            HTTPException: 401 if the username is unknown or the password is wrong
        """
        ensure_valid(validate_credentials(request.username, request.password))

        user = await self.users.get_by_username(request.username)
        if user is None or not security.verify_password(request.password, user.password_hash):
            logger.info(f"Login rejected for username={request.username!r}")
            log_auth_event("login", success=False)
            raise _unauthorized("Invalid username or password.")

        issued = await self._issue(user, self.jwt_config.access_token_expire_minutes)
        logger.info(f"User {user.id} logged in")
        log_auth_event("login", user_id=user.id)
        return issued

    async def refresh(self, request: RefreshTokenRequest) -> IssuedTokens:
        """Exchange a PENDING refresh token for a new token pair.

        Raises:
            ValidationFailed: If the token is missing or too long
            HTTPException: 401 if the token is unknown or already used
        """
        ensure_valid(validate_refresh_token(request.refresh_token))

        token = await self.refresh_tokens.get_by_hash(security.hash_refresh_token(request.refresh_token))
        if token is None:
            log_auth_event("refresh", success=False)
            raise _unauthorized("Invalid refresh token.")
        if token.status is TokenStatus.USED:
            logger.warning(f"Reuse of a used refresh token for user {token.user_id}")
            log_auth_event("refresh", user_id=token.user_id, success=False)
            raise _unauthorized("Refresh token has already been used.")

        user_id = token.user_id
        try:
            if not await self.users.lock(user_id):
                raise _unauthorized("Invalid refresh token owner.")
            if not await self.refresh_tokens.claim(token.id):
                raise _unauthorized("Refresh token has already been used.")
            user = await self.users.get_by_id(user_id)
            raw_refresh_token = await self._rotate(user_id)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info(f"User {user_id} refreshed their tokens")
        log_auth_event("refresh", user_id=user_id)
        return self._pair(user, raw_refresh_token, self.jwt_config.refreshed_access_token_expire_minutes)

    async def _issue(self, user: User, expires_minutes: int) -> IssuedTokens:
        try:
            await self.users.lock(user.id)
            raw_refresh_token = await self._rotate(user.id)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        return self._pair(user, raw_refresh_token, expires_minutes)

    async def _rotate(self, user_id: int) -> str:
        """Invalidate the user's PENDING tokens and add a new one. Caller commits."""
        invalidated = await self.refresh_tokens.invalidate_pending(user_id)
        raw_refresh_token = security.build_refresh_token()
        await self.refresh_tokens.add_pending(user_id, security.hash_refresh_token(raw_refresh_token))
        logger.debug(f"Rotated refresh tokens for user {user_id}: {invalidated} invalidated")
        return raw_refresh_token

    def _pair(self, user: User, raw_refresh_token: str, expires_minutes: int) -> IssuedTokens:
        access_token = security.build_access_token(
            user_id=user.id, expires_minutes=expires_minutes, config=self.jwt_config
        )
        return IssuedTokens(
            access_token=access_token,
            refresh_token=raw_refresh_token,
            expires_in=expires_minutes * 60,
        )
