"""
User entity models.

Users own projects, author comments and hold refresh tokens. Deleting a user
removes everything they own.
"""

from typing import TYPE_CHECKING, List, Optional

from sqlmodel import Field, Relationship

from ..base import Base

if TYPE_CHECKING:
    from .comments import Comment
    from .projects import Project
    from .refresh_tokens import RefreshToken


class UserBase(Base):
    """Base fields for a user account."""

    username: str = Field(max_length=50, unique=True, index=True, description="Unique login name")
    first_name: str = Field(max_length=50, description="Given name")
    last_name: str = Field(max_length=50, description="Family name")
    is_admin: bool = Field(default=False, description="Administrative flag")


class User(UserBase, table=True):
    """Persistent user account.

    Table: users
    """

    __tablename__ = "users"
    __table_args__ = ({"extend_existing": True},)

    id: Optional[int] = Field(default=None, primary_key=True)
    password_hash: str = Field(max_length=255, description="bcrypt hash of the password")

    projects: List["Project"] = Relationship(
        back_populates="owner", sa_relationship_kwargs={"cascade": "all, delete-orphan"}
    )
    comments: List["Comment"] = Relationship(
        back_populates="user", sa_relationship_kwargs={"cascade": "all, delete-orphan"}
    )
    refresh_tokens: List["RefreshToken"] = Relationship(
        back_populates="user", sa_relationship_kwargs={"cascade": "all, delete-orphan"}
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username={self.username!r}, is_admin={self.is_admin})>"
