"""
Database entities.

Importing this package registers every table on ``Base.metadata``.
"""

from .categories import Category, CategoryBase
from .comments import Comment, CommentBase
from .project_categories import ProjectCategory
from .projects import Project, ProjectBase
from .refresh_tokens import RefreshToken, TokenStatus
from .users import User, UserBase

__all__ = [
    "Category",
    "CategoryBase",
    "Comment",
    "CommentBase",
    "Project",
    "ProjectBase",
    "ProjectCategory",
    "RefreshToken",
    "TokenStatus",
    "User",
    "UserBase",
]
