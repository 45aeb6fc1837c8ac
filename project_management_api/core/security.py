"""
Password hashing and token primitives.

Passwords are stored as bcrypt hashes. Access tokens are HS256 JWTs signed
with the configured secret. Refresh tokens are random URL-safe strings of
which only the SHA-256 digest is persisted.
"""

from __future__ import annotations

import hashlib
import secrets
import time
from typing import Any, Optional

import bcrypt
import jwt

from project_management_api.server.core.config import JWTConfig, settings

# bcrypt only looks at the first 72 bytes; longer inputs are cut explicitly
# because recent bcrypt releases reject them instead of truncating.
BCRYPT_MAX_BYTES = 72

# Claim carrying the user id next to ``sub``, kept for existing clients.
LOGGED_USER_ID_CLAIM = "LoggedUserId"


class AuthSecurityError(RuntimeError):
    pass


def now_epoch_s() -> int:
    return int(time.time())


def _password_bytes(plain_password: Optional[str]) -> bytes:
    return (plain_password or "").encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(plain_password: str, rounds: Optional[int] = None) -> str:
    password = _password_bytes(plain_password)
    if not password:
        raise AuthSecurityError("Password is empty.")
    salt = bcrypt.gensalt(rounds=rounds or settings.security.bcrypt_rounds)
    return bcrypt.hashpw(password, salt).decode("utf-8")


def verify_password(plain_password: str, password_hash: str) -> bool:
    password = _password_bytes(plain_password)
    hashed = (password_hash or "").encode("utf-8")
    if not password or not hashed:
        return False
    try:
        return bcrypt.checkpw(password, hashed)
    except ValueError:
        return False


def _signing_key(config: JWTConfig) -> str:
    secret = (config.secret_key or "").strip()
    if not secret:
        raise AuthSecurityError("JWT secret is not configured. Set JWT__SECRET_KEY.")
    return secret


def build_access_token(*, user_id: int, expires_minutes: int, config: Optional[JWTConfig] = None) -> str:
    """Sign an access token for ``user_id`` valid for ``expires_minutes``."""
    config = config or settings.jwt
    issued_at = now_epoch_s()
    payload = {
        "sub": str(user_id),
        LOGGED_USER_ID_CLAIM: str(user_id),
        "iss": config.issuer,
        "aud": config.audience,
        "type": "access",
        "iat": issued_at,
        "exp": issued_at + expires_minutes * 60,
    }
    return jwt.encode(payload, _signing_key(config), algorithm=config.algorithm)


def decode_access_token(token: str, config: Optional[JWTConfig] = None) -> dict[str, Any]:
    """Verify signature, expiry, issuer and audience and return the claims."""
    config = config or settings.jwt
    raw = (token or "").strip()
    if not raw:
        raise AuthSecurityError("Access token is empty.")

    try:
        payload = jwt.decode(
            raw,
            _signing_key(config),
            algorithms=[config.algorithm],
            audience=config.audience,
            issuer=config.issuer,
            options={"require": ["exp", "iat", "sub"]},
        )
    except jwt.ExpiredSignatureError as exc:
        raise AuthSecurityError("Access token has expired.") from exc
    except jwt.InvalidTokenError as exc:
        raise AuthSecurityError("Invalid access token.") from exc

    token_type = str(payload.get("type") or "").strip().lower()
    if token_type != "access":
        raise AuthSecurityError("Token is not an access token.")

    return payload


def build_refresh_token() -> str:
    # URL-safe random string for client storage/transmission.
    return secrets.token_urlsafe(48)


def hash_refresh_token(raw_refresh_token: str) -> str:
    token = (raw_refresh_token or "").encode("utf-8")
    if not token:
        raise AuthSecurityError("Refresh token is empty.")
    return hashlib.sha256(token).hexdigest()
