"""
User repository.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.users import User
from ..query import PageRequest, PageResult, SortKeys, contains_text
from .base import AsyncBaseRepository


class UsernameTakenError(Exception):
    """Another user already holds the username."""

    def __init__(self, username: str):
        super().__init__(f"Username {username!r} is already taken")
        self.username = username


class UserRepository(AsyncBaseRepository[User]):
    """Repository for user accounts."""

    sort_keys = SortKeys(
        {
            "id": User.id,
            "username": User.username,
            "firstName": User.first_name,
            "lastName": User.last_name,
            "isAdmin": User.is_admin,
        },
        tiebreaker=User.id,
    )

    def __init__(self, session: AsyncSession):
        super().__init__(session, User)

    async def create(self, entity: User) -> User:
        """Insert a user; a username clash on the unique index raises ``UsernameTakenError``."""
        username = entity.username
        try:
            return await super().create(entity)
        except IntegrityError as exc:
            await self.session.rollback()
            raise UsernameTakenError(username) from exc

    async def update(self, entity: User) -> User:
        """Write a loaded user; a username clash raises ``UsernameTakenError``."""
        username = entity.username
        try:
            return await super().update(entity)
        except IntegrityError as exc:
            await self.session.rollback()
            raise UsernameTakenError(username) from exc

    async def get_by_username(self, username: str) -> Optional[User]:
        """Exact, case-sensitive username lookup."""
        result = await self.session.execute(select(User).where(User.username == username))
        return result.scalars().first()

    async def username_taken(self, username: str, exclude_id: Optional[int] = None) -> bool:
        stmt = select(User.id).where(User.username == username)
        if exclude_id is not None:
            stmt = stmt.where(User.id != exclude_id)
        result = await self.session.execute(stmt)
        return result.first() is not None

    async def lock(self, user_id: int) -> bool:
        """Lock the user row for the rest of the transaction.

        Backends without row locks (SQLite) ignore ``FOR UPDATE``; writes there are
        serialized by the database lock instead.

        Returns:
            True if the user exists
        """
        result = await self.session.execute(select(User.id).where(User.id == user_id).with_for_update())
        return result.first() is not None

    async def search(
        self,
        page: PageRequest,
        username: Optional[str] = None,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        is_admin: Optional[bool] = None,
    ) -> PageResult[User]:
        criteria = [
            contains_text(User.username, username) if username else None,
            contains_text(User.first_name, first_name) if first_name else None,
            contains_text(User.last_name, last_name) if last_name else None,
            User.is_admin == is_admin if is_admin is not None else None,
        ]
        return await self._search(select(User), criteria, page)
