"""
Category I/O models for API requests and responses.
"""

from __future__ import annotations

from typing import Optional

from pydantic import Field

from .base import ApiModel, DbId


class CategoryRead(ApiModel):
    """Schema for reading a category."""

    id: int
    name: str
    description: Optional[str] = None


class CategoryCreate(ApiModel):
    """Schema for creating a category."""

    name: Optional[str] = Field(default=None, description="2-50 characters")
    description: Optional[str] = Field(default=None, description="Up to 500 characters")


class CategoryUpdate(CategoryCreate):
    """Schema for replacing a category; the body carries the id."""

    id: DbId
