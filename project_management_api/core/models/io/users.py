"""
User I/O models for API requests and responses.

The password hash never leaves the server; ``UserRead`` has no password field.
"""

from __future__ import annotations

from typing import Optional

from pydantic import Field

from .base import ApiModel, DbId


class UserRead(ApiModel):
    """Schema for reading a user."""

    id: int
    username: str
    first_name: str
    last_name: str
    is_admin: bool


class UserCreate(ApiModel):
    """Schema for creating a user. Length rules are checked by the service layer."""

    username: Optional[str] = Field(default=None, description="3-50 characters, unique")
    password: Optional[str] = Field(default=None, description="6-100 characters")
    first_name: Optional[str] = Field(default=None, description="Up to 50 characters")
    last_name: Optional[str] = Field(default=None, description="Up to 50 characters")
    is_admin: bool = False


class UserUpdate(UserCreate):
    """Schema for replacing a user; the body carries the id."""

    id: DbId
