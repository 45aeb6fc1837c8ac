"""
Comment repository.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sqlmodel import select

from ..base import as_naive_utc
from ..entities.comments import Comment
from ..entities.projects import Project
from ..entities.users import User
from ..query import PageRequest, PageResult, SortKeys, contains_text
from .base import AsyncBaseRepository


class CommentRepository(AsyncBaseRepository[Comment]):
    """Repository for comments."""

    detail_options = (
        selectinload(Comment.project),
        selectinload(Comment.user),
    )
    sort_keys = SortKeys(
        {
            "id": Comment.id,
            "content": Comment.content,
            "createdAt": Comment.created_at,
            "projectId": Comment.project_id,
            "projectTitle": Project.title,
            "userId": Comment.user_id,
            "username": User.username,
        },
        tiebreaker=Comment.id,
    )

    def __init__(self, session: AsyncSession):
        super().__init__(session, Comment)

    async def _fetch(self, stmt) -> List[Comment]:
        stmt = stmt.order_by(Comment.id).options(*self.detail_options).execution_options(populate_existing=True)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def find_by_content(self, content: str) -> List[Comment]:
        """Comments whose content contains ``content`` (case-sensitive)."""
        return await self._fetch(select(Comment).where(contains_text(Comment.content, content)))

    async def list_for_project(self, project_id: int) -> List[Comment]:
        return await self._fetch(select(Comment).where(Comment.project_id == project_id))

    async def search(
        self,
        page: PageRequest,
        content: Optional[str] = None,
        user_id: Optional[int] = None,
        username: Optional[str] = None,
        project_id: Optional[int] = None,
        from_date: Optional[datetime] = None,
        to_date: Optional[datetime] = None,
    ) -> PageResult[Comment]:
        """Page through comments; ``from_date``/``to_date`` bound ``created_at`` inclusively."""
        from_date = as_naive_utc(from_date)
        to_date = as_naive_utc(to_date)
        criteria = [
            contains_text(Comment.content, content) if content else None,
            Comment.user_id == user_id if user_id is not None else None,
            contains_text(User.username, username) if username else None,
            Comment.project_id == project_id if project_id is not None else None,
            Comment.created_at >= from_date if from_date is not None else None,
            Comment.created_at <= to_date if to_date is not None else None,
        ]
        stmt = (
            select(Comment)
            .join(Project, Comment.project_id == Project.id)
            .join(User, Comment.user_id == User.id)
        )
        return await self._search(stmt, criteria, page)
