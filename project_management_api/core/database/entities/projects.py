"""
Project entity models.

A project belongs to one owner, carries comments and is linked to any number
of categories through ``project_categories``.
"""

from typing import TYPE_CHECKING, List, Optional

from sqlmodel import Field, Relationship

from ..base import Base
from .project_categories import ProjectCategory

if TYPE_CHECKING:
    from .categories import Category
    from .comments import Comment
    from .users import User


class ProjectBase(Base):
    """Base fields for a project."""

    title: str = Field(max_length=100, index=True, description="Project title")
    description: str = Field(max_length=2000, description="Project description")


class Project(ProjectBase, table=True):
    """Persistent project.

    Table: projects
    """

    __tablename__ = "projects"
    __table_args__ = ({"extend_existing": True},)

    id: Optional[int] = Field(default=None, primary_key=True)
    owner_id: int = Field(foreign_key="users.id", index=True, description="Owning user")

    owner: Optional["User"] = Relationship(back_populates="projects")
    comments: List["Comment"] = Relationship(
        back_populates="project", sa_relationship_kwargs={"cascade": "all, delete-orphan"}
    )
    categories: List["Category"] = Relationship(back_populates="projects", link_model=ProjectCategory)

    def __repr__(self) -> str:
        return f"<Project(id={self.id}, title={self.title!r}, owner_id={self.owner_id})>"
