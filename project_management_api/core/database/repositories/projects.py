"""
Project repository, including the project/category association.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sqlmodel import select

from ..entities.categories import Category
from ..entities.project_categories import ProjectCategory
from ..entities.projects import Project
from ..entities.users import User
from ..query import PageRequest, PageResult, SortKeys, contains_text
from .base import AsyncBaseRepository

logger = logging.getLogger(__name__)


class ProjectRepository(AsyncBaseRepository[Project]):
    """Repository for projects."""

    detail_options = (
        selectinload(Project.owner),
        selectinload(Project.categories),
        selectinload(Project.comments),
    )
    sort_keys = SortKeys(
        {
            "id": Project.id,
            "title": Project.title,
            "name": Project.title,
            "description": Project.description,
            "ownerId": Project.owner_id,
            "ownerName": User.username,
        },
        tiebreaker=Project.id,
    )

    def __init__(self, session: AsyncSession):
        super().__init__(session, Project)

    async def find_by_title(self, title: str) -> List[Project]:
        """Projects whose title contains ``title`` (case-sensitive)."""
        stmt = (
            select(Project)
            .where(contains_text(Project.title, title))
            .order_by(Project.id)
            .options(*self.detail_options)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def search(
        self,
        page: PageRequest,
        title: Optional[str] = None,
        description: Optional[str] = None,
        owner_id: Optional[int] = None,
        owner_username: Optional[str] = None,
        category_id: Optional[int] = None,
    ) -> PageResult[Project]:
        linked_to_category = (
            Project.id.in_(select(ProjectCategory.project_id).where(ProjectCategory.category_id == category_id))
            if category_id is not None
            else None
        )
        criteria = [
            contains_text(Project.title, title) if title else None,
            contains_text(Project.description, description) if description else None,
            Project.owner_id == owner_id if owner_id is not None else None,
            contains_text(User.username, owner_username) if owner_username else None,
            linked_to_category,
        ]
        stmt = select(Project).join(User, Project.owner_id == User.id)
        return await self._search(stmt, criteria, page)

    # =====================================================================
    # Category association
    # =====================================================================

    async def add_category(self, project_id: int, category_id: int) -> bool:
        """Link a category to a project. Linking an existing pair is a no-op.

        Returns:
            True if a new link was created
        """
        link = await self.session.get(ProjectCategory, (project_id, category_id))
        if link is not None:
            return False
        self.session.add(ProjectCategory(project_id=project_id, category_id=category_id))
        await self.session.commit()
        logger.debug(f"Linked category {category_id} to project {project_id}")
        return True

    async def remove_category(self, project_id: int, category_id: int) -> bool:
        """Unlink a category from a project.

        Returns:
            False if the pair was not linked
        """
        link = await self.session.get(ProjectCategory, (project_id, category_id))
        if link is None:
            return False
        await self.session.delete(link)
        await self.session.commit()
        logger.debug(f"Unlinked category {category_id} from project {project_id}")
        return True

    async def list_categories(self, project_id: int) -> List[Category]:
        stmt = (
            select(Category)
            .join(ProjectCategory, ProjectCategory.category_id == Category.id)
            .where(ProjectCategory.project_id == project_id)
            .order_by(Category.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
