"""
Repositories, one per aggregate.
"""

from .base import AsyncBaseRepository
from .categories import CategoryRepository
from .comments import CommentRepository
from .projects import ProjectRepository
from .refresh_tokens import RefreshTokenRepository
from .users import UserRepository, UsernameTakenError

__all__ = [
    "AsyncBaseRepository",
    "CategoryRepository",
    "CommentRepository",
    "ProjectRepository",
    "RefreshTokenRepository",
    "UserRepository",
    "UsernameTakenError",
]
