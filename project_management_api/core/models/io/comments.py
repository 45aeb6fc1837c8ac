"""
Comment I/O models for API requests and responses.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field

from project_management_api.core.database.entities import Comment

from .base import ApiModel, DbId


class CommentRead(ApiModel):
    """Comment with its project title and author name flattened in."""

    id: int
    content: str
    created_at: datetime
    project_id: int
    project_title: str
    user_id: int
    username: str

    @classmethod
    def from_entity(cls, comment: Comment) -> "CommentRead":
        """Requires ``project`` and ``user`` to be loaded."""
        return cls(
            id=comment.id,
            content=comment.content,
            created_at=comment.created_at,
            project_id=comment.project_id,
            project_title=comment.project.title,
            user_id=comment.user_id,
            username=comment.user.username,
        )


class CommentCreate(ApiModel):
    """Schema for posting a comment. The author is always the caller."""

    content: Optional[str] = Field(default=None, description="1-1000 characters")
    project_id: DbId


class CommentUpdate(ApiModel):
    """Schema for editing a comment's content."""

    content: Optional[str] = Field(default=None, description="1-1000 characters")
