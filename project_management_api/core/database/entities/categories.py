"""
Category entity models.
"""

from typing import TYPE_CHECKING, List, Optional

from sqlmodel import Field, Relationship

from ..base import Base
from .project_categories import ProjectCategory

if TYPE_CHECKING:
    from .projects import Project


class CategoryBase(Base):
    """Base fields for a category."""

    name: str = Field(max_length=50, description="Category name")
    description: Optional[str] = Field(default=None, max_length=500, description="Optional description")


class Category(CategoryBase, table=True):
    """Persistent category. Deleting one removes its project links, not the projects.

    Table: categories
    """

    __tablename__ = "categories"
    __table_args__ = ({"extend_existing": True},)

    id: Optional[int] = Field(default=None, primary_key=True)

    projects: List["Project"] = Relationship(back_populates="categories", link_model=ProjectCategory)

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, name={self.name!r})>"
