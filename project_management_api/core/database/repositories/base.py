"""
Base repository and shared CRUD operations.

Repositories wrap an ``AsyncSession`` and one SQLModel entity class. Mutating
methods commit unless documented otherwise; the token repository leaves
transaction control to its caller.
"""

from __future__ import annotations

from typing import Any, Generic, List, Optional, Sequence, Type, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel, select

from ..query import PageRequest, PageResult, QueryBuilder, SortKeys

# Generic type for SQLModel entities
EntityType = TypeVar("EntityType", bound=SQLModel)


class AsyncBaseRepository(Generic[EntityType]):
    """Async repository with the CRUD operations every entity shares."""

    #: Loader options applied whenever an entity is read for an API response.
    detail_options: Sequence[Any] = ()
    #: Sortable keys for ``search``.
    sort_keys: Optional[SortKeys] = None

    def __init__(self, session: AsyncSession, model: Type[EntityType]) -> None:
        """Initialize repository with async database session and SQLModel entity class.

        Args:
            session: Async session for database operations
            model: SQLModel entity class for this repository
        """
        self.session = session
        self.model = model

    async def create(self, entity: EntityType) -> EntityType:
        """Persist a new entity and return it with generated fields populated."""
        self.session.add(entity)
        await self.session.commit()
        await self.session.refresh(entity)
        return entity

    async def get_by_id(self, entity_id: int) -> Optional[EntityType]:
        """Get an entity by primary key, with ``detail_options`` loaded.

        Args:
            entity_id: Primary key value

        Returns:
            Entity instance or None if not found
        """
        stmt = select(self.model).where(self.model.id == entity_id)
        if self.detail_options:
            stmt = stmt.options(*self.detail_options)
        result = await self.session.execute(stmt.execution_options(populate_existing=True))
        return result.scalars().first()

    async def update(self, entity: EntityType) -> EntityType:
        """Write pending changes on an already-loaded entity."""
        self.session.add(entity)
        await self.session.commit()
        await self.session.refresh(entity)
        return entity

    async def delete(self, entity: EntityType) -> None:
        """Delete an entity; ORM cascades remove its dependents."""
        await self.session.delete(entity)
        await self.session.commit()

    async def list(self, limit: Optional[int] = None, offset: Optional[int] = None) -> List[EntityType]:
        """List entities ordered by id, with ``detail_options`` loaded.

        Args:
            limit: Maximum number of records to return
            offset: Number of records to skip

        Returns:
            List of entity instances
        """
        stmt = QueryBuilder.apply_pagination(select(self.model).order_by(self.model.id), limit, offset)
        if self.detail_options:
            stmt = stmt.options(*self.detail_options)
        result = await self.session.execute(stmt.execution_options(populate_existing=True))
        return list(result.scalars().all())

    async def _search(self, stmt, criteria, page: PageRequest) -> PageResult[EntityType]:
        """Filter, sort and page ``stmt`` with this repository's sort keys."""
        stmt = QueryBuilder.apply_filters(stmt, criteria)
        return await QueryBuilder.paginate(
            self.session,
            stmt.execution_options(populate_existing=True),
            page,
            self.sort_keys,
            options=self.detail_options,
        )
