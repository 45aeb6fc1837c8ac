"""
Comment entity models.

A comment belongs to one project and one author. ``created_at`` is set when
the row is first created and never changes afterwards.
"""

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime
from sqlmodel import Field, Relationship

from ..base import Base, utc_now

if TYPE_CHECKING:
    from .projects import Project
    from .users import User


class CommentBase(Base):
    """Base fields for a comment."""

    content: str = Field(max_length=1000, description="Comment text")


class Comment(CommentBase, table=True):
    """Persistent comment.

    Table: comments
    """

    __tablename__ = "comments"
    __table_args__ = ({"extend_existing": True},)

    id: Optional[int] = Field(default=None, primary_key=True)
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime, index=True)
    project_id: int = Field(foreign_key="projects.id", index=True)
    user_id: int = Field(foreign_key="users.id", index=True)

    project: Optional["Project"] = Relationship(back_populates="comments")
    user: Optional["User"] = Relationship(back_populates="comments")

    def __repr__(self) -> str:
        return f"<Comment(id={self.id}, project_id={self.project_id}, user_id={self.user_id})>"
