"""
Project/category association table.

A row links one project to one category; the pair is the primary key, so a
link can exist at most once.
"""

from typing import Optional

from sqlmodel import Field

from ..base import Base


class ProjectCategory(Base, table=True):
    """Many-to-many link between projects and categories.

    Table: project_categories
    """

    __tablename__ = "project_categories"
    __table_args__ = ({"extend_existing": True},)

    project_id: Optional[int] = Field(default=None, foreign_key="projects.id", primary_key=True)
    category_id: Optional[int] = Field(default=None, foreign_key="categories.id", primary_key=True)

    def __repr__(self) -> str:
        return f"<ProjectCategory(project_id={self.project_id}, category_id={self.category_id})>"
