"""
Refresh token entity models.

Only a SHA-256 digest of each refresh token is stored. A token starts out
``PENDING`` and becomes ``USED`` exactly once; ``USED`` is terminal.
"""

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime
from sqlmodel import Field, Relationship

from ..base import Base, utc_now

if TYPE_CHECKING:
    from .users import User


class TokenStatus(str, Enum):
    """Lifecycle state of a refresh token."""

    PENDING = "pending"
    USED = "used"


class RefreshToken(Base, table=True):
    """Persistent refresh token record.

    Table: refresh_tokens
    """

    __tablename__ = "refresh_tokens"
    __table_args__ = ({"extend_existing": True},)

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    token_hash: str = Field(max_length=64, unique=True, index=True, description="Hex SHA-256 of the token")
    status: TokenStatus = Field(default=TokenStatus.PENDING, index=True)
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime)

    user: Optional["User"] = Relationship(back_populates="refresh_tokens")

    def __repr__(self) -> str:
        return f"<RefreshToken(id={self.id}, user_id={self.user_id}, status={self.status.value})>"
