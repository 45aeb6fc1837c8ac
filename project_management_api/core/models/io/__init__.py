"""
I/O models for API requests and responses.

These models define the wire contract between the API and its clients. Field
names are camelCase on the wire; request bodies also accept snake_case.

Modules:
- base: Shared model configuration
- paging: Page envelope for search endpoints
- errors: Error response bodies
- users, categories, projects, comments, tokens: Resource schemas
"""

from .base import ApiModel
from .categories import CategoryCreate, CategoryRead, CategoryUpdate
from .comments import CommentCreate, CommentRead, CommentUpdate
from .errors import ErrorResponse, FieldErrorRead, ValidationErrorResponse
from .paging import Page
from .projects import ProjectCreate, ProjectCreated, ProjectRead
from .tokens import RefreshTokenRequest, TokenRequest, TokenResponse
from .users import UserCreate, UserRead, UserUpdate

__all__ = [
    "ApiModel",
    "CategoryCreate",
    "CategoryRead",
    "CategoryUpdate",
    "CommentCreate",
    "CommentRead",
    "CommentUpdate",
    "ErrorResponse",
    "FieldErrorRead",
    "Page",
    "ProjectCreate",
    "ProjectCreated",
    "ProjectRead",
    "RefreshTokenRequest",
    "TokenRequest",
    "TokenResponse",
    "UserCreate",
    "UserRead",
    "UserUpdate",
    "ValidationErrorResponse",
]
