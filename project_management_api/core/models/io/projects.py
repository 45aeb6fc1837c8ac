"""
Project I/O models for API requests and responses.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import Field

from project_management_api.core.database.entities import Project

from .base import ApiModel


class ProjectRead(ApiModel):
    """Project summary: owner, category names and comment texts flattened in."""

    id: int
    name: str = Field(description="Project title")
    owner_name: str
    categories: List[str]
    comments: List[str]

    @classmethod
    def from_entity(cls, project: Project) -> "ProjectRead":
        """Requires ``owner``, ``categories`` and ``comments`` to be loaded."""
        return cls(
            id=project.id,
            name=project.title,
            owner_name=project.owner.username,
            categories=[category.name for category in project.categories],
            comments=[comment.content for comment in project.comments],
        )


class ProjectCreate(ApiModel):
    """Schema for creating a project. The owner is always the caller."""

    title: Optional[str] = Field(default=None, description="3-100 characters")
    description: Optional[str] = Field(default=None, description="Up to 2000 characters")


class ProjectCreated(ApiModel):
    """Echo of a newly created project."""

    id: int
    title: str
    description: str
    owner_id: int
