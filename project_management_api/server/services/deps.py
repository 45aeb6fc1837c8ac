"""
Route Dependencies.

Annotated aliases for the session, the repository bundle, the token service
and the authenticated caller.
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from project_management_api.core.database import SqlRepoBundle, build_sql_repos, get_session
from project_management_api.core.database.entities import User
from project_management_api.server.services.authentication import get_current_user
from project_management_api.server.services.tokens import TokenService


def get_repositories(session: AsyncSession = Depends(get_session)) -> SqlRepoBundle:
    return build_sql_repos(session)


def get_token_service(session: AsyncSession = Depends(get_session)) -> TokenService:
    return TokenService(session)


SessionDep = Annotated[AsyncSession, Depends(get_session)]
ReposDep = Annotated[SqlRepoBundle, Depends(get_repositories)]
TokenServiceDep = Annotated[TokenService, Depends(get_token_service)]
CurrentUserDep = Annotated[User, Depends(get_current_user)]
