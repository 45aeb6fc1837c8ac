"""
Category repository.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from ..entities.categories import Category
from .base import AsyncBaseRepository


class CategoryRepository(AsyncBaseRepository[Category]):
    """Repository for categories. Deleting a category also removes its project links."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, Category)
