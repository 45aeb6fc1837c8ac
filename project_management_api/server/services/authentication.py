"""
Bearer authentication dependencies for protected routes.
"""

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from project_management_api.core import security
from project_management_api.core.database import get_session
from project_management_api.core.database.entities import User
from project_management_api.core.database.repositories import UserRepository


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _extract_bearer_token(authorization: str | None) -> str:
    raw = (authorization or "").strip()
    if not raw:
        raise _unauthorized("Missing Authorization header.")

    parts = raw.split(" ", 1)
    if len(parts) != 2:
        raise _unauthorized("Invalid Authorization header format.")

    scheme, token = parts[0].strip().lower(), parts[1].strip()
    if scheme != "bearer" or not token:
        raise _unauthorized("Authorization must be: Bearer <token>.")
    return token


async def get_bearer_token(authorization: str | None = Header(default=None)) -> str:
    return _extract_bearer_token(authorization)


async def get_current_user(
    access_token: str = Depends(get_bearer_token),
    session: AsyncSession = Depends(get_session),
) -> User:
    """Resolve the caller from a valid access token.

    The user must still exist; tokens of deleted users are rejected.
    """
    try:
        payload = security.decode_access_token(access_token)
    except security.AuthSecurityError as exc:
        raise _unauthorized(str(exc)) from exc

    subject = str(payload.get("sub") or "")
    if not subject.isdigit():
        raise _unauthorized("Invalid access token subject.")

    user = await UserRepository(session).get_by_id(int(subject))
    if user is None:
        raise _unauthorized("User no longer exists.")
    return user
