"""
Refresh token repository.

These methods never commit: token rotation runs several of them inside one
transaction owned by the token service.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.refresh_tokens import RefreshToken, TokenStatus
from .base import AsyncBaseRepository


class RefreshTokenRepository(AsyncBaseRepository[RefreshToken]):
    """Repository for refresh token records."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, RefreshToken)

    async def get_by_hash(self, token_hash: str) -> Optional[RefreshToken]:
        result = await self.session.execute(select(RefreshToken).where(RefreshToken.token_hash == token_hash))
        return result.scalars().first()

    async def claim(self, token_id: int) -> bool:
        """Move one token from PENDING to USED.

        The status check is part of the UPDATE, so of two concurrent claims on the
        same token exactly one succeeds.

        Returns:
            True if this call performed the transition
        """
        stmt = (
            update(RefreshToken)
            .where(RefreshToken.id == token_id, RefreshToken.status == TokenStatus.PENDING)
            .values(status=TokenStatus.USED)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1

    async def invalidate_pending(self, user_id: int) -> int:
        """Mark every PENDING token of ``user_id`` as USED.

        Returns:
            Number of tokens invalidated
        """
        stmt = (
            update(RefreshToken)
            .where(RefreshToken.user_id == user_id, RefreshToken.status == TokenStatus.PENDING)
            .values(status=TokenStatus.USED)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount

    async def add_pending(self, user_id: int, token_hash: str) -> RefreshToken:
        token = RefreshToken(user_id=user_id, token_hash=token_hash, status=TokenStatus.PENDING)
        self.session.add(token)
        await self.session.flush()
        return token

    async def list_for_user(self, user_id: int) -> List[RefreshToken]:
        stmt = (
            select(RefreshToken)
            .where(RefreshToken.user_id == user_id)
            .order_by(RefreshToken.id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
