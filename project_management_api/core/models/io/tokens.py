"""
Token I/O models for login and refresh.
"""

from __future__ import annotations

from typing import Optional

from .base import ApiModel


class TokenRequest(ApiModel):
    """Credentials for ``POST /api/tokens``."""

    username: Optional[str] = None
    password: Optional[str] = None


class RefreshTokenRequest(ApiModel):
    """Body of ``POST /api/refreshtokens``."""

    refresh_token: Optional[str] = None


class TokenResponse(ApiModel):
    """A freshly issued access token and its paired refresh token."""

    success: bool = True
    token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int
