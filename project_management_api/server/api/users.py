"""
API endpoints for managing users.

Passwords are accepted in requests and stored as bcrypt hashes; no response
ever includes a password or its hash. Usernames are unique.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from project_management_api.core import security
from project_management_api.core.database.entities import User
from project_management_api.core.database.repositories import UsernameTakenError
from project_management_api.core.logging_config import get_logger
from project_management_api.core.models.io import Page, UserCreate, UserRead, UserUpdate
from project_management_api.core.validation import ensure_valid, validate_search_terms, validate_user
from project_management_api.server.services.authentication import get_current_user
from project_management_api.server.services.deps import ReposDep

from .common import AUTH_RESPONSES, NOT_FOUND_RESPONSES, VALIDATION_RESPONSES, IdPath, PageDep

logger = get_logger(__name__)

router = APIRouter(tags=["users"], dependencies=[Depends(get_current_user)], responses=AUTH_RESPONSES)

CONFLICT_RESPONSES = {409: {"description": "Username already taken"}}


def _not_found(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


def _username_taken(username: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=f"Username '{username}' is already taken")


@router.get("", response_model=List[UserRead], summary="List Users")
async def list_users(repos: ReposDep) -> List[UserRead]:
    return [UserRead.model_validate(user) for user in await repos.users.list()]


@router.get(
    "/search",
    response_model=Page[UserRead],
    summary="Search Users",
    description=(
        "Filter users by username, first or last name (case-sensitive substring) and admin flag, "
        "sorted by one of Id, Username, FirstName, LastName, IsAdmin."
    ),
    responses=VALIDATION_RESPONSES,
)
async def search_users(
    repos: ReposDep,
    page: PageDep,
    username: Optional[str] = Query(default=None),
    first_name: Optional[str] = Query(default=None, alias="firstName"),
    last_name: Optional[str] = Query(default=None, alias="lastName"),
    is_admin: Optional[bool] = Query(default=None, alias="isAdmin"),
) -> Page[UserRead]:
    ensure_valid(validate_search_terms(username=username, firstName=first_name, lastName=last_name))
    result = await repos.users.search(
        page, username=username, first_name=first_name, last_name=last_name, is_admin=is_admin
    )
    return Page[UserRead].from_result(result, UserRead.model_validate)


@router.get(
    "/findByUsername/{username}",
    response_model=UserRead,
    summary="Find User by Username",
    description="Exact, case-sensitive username match.",
    responses=NOT_FOUND_RESPONSES,
)
async def find_by_username(username: str, repos: ReposDep) -> UserRead:
    user = await repos.users.get_by_username(username)
    if user is None:
        raise _not_found(f"User '{username}' not found")
    return UserRead.model_validate(user)


@router.get("/{user_id}", response_model=UserRead, summary="Get User", responses=NOT_FOUND_RESPONSES)
async def get_user(user_id: IdPath, repos: ReposDep) -> UserRead:
    user = await repos.users.get_by_id(user_id)
    if user is None:
        raise _not_found(f"User {user_id} not found")
    return UserRead.model_validate(user)


@router.post(
    "",
    response_model=UserRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create User",
    responses={**VALIDATION_RESPONSES, **CONFLICT_RESPONSES},
)
async def create_user(payload: UserCreate, repos: ReposDep) -> UserRead:
    ensure_valid(validate_user(payload.username, payload.password, payload.first_name, payload.last_name))
    if await repos.users.username_taken(payload.username):
        raise _username_taken(payload.username)
    try:
        user = await repos.users.create(
            User(
                username=payload.username,
                first_name=payload.first_name,
                last_name=payload.last_name,
                is_admin=payload.is_admin,
                password_hash=security.hash_password(payload.password),
            )
        )
    except UsernameTakenError:
        raise _username_taken(payload.username) from None
    logger.info(f"Created user {user.id} ({user.username!r})")
    return UserRead.model_validate(user)


@router.put(
    "",
    response_model=UserRead,
    summary="Update User",
    description="Replace a user's fields and password. The body carries the id.",
    responses={**VALIDATION_RESPONSES, **NOT_FOUND_RESPONSES, **CONFLICT_RESPONSES},
)
async def update_user(payload: UserUpdate, repos: ReposDep) -> UserRead:
    ensure_valid(validate_user(payload.username, payload.password, payload.first_name, payload.last_name))
    user = await repos.users.get_by_id(payload.id)
    if user is None:
        raise _not_found(f"User {payload.id} not found")
    if await repos.users.username_taken(payload.username, exclude_id=user.id):
        raise _username_taken(payload.username)

    user.username = payload.username
    user.first_name = payload.first_name
    user.last_name = payload.last_name
    user.is_admin = payload.is_admin
    user.password_hash = security.hash_password(payload.password)
    try:
        user = await repos.users.update(user)
    except UsernameTakenError:
        raise _username_taken(payload.username) from None
    logger.info(f"Updated user {user.id}")
    return UserRead.model_validate(user)


@router.delete(
    "/{user_id}",
    response_model=UserRead,
    summary="Delete User",
    description="Delete a user together with their projects, comments and refresh tokens. Returns the deleted user.",
    responses=NOT_FOUND_RESPONSES,
)
async def delete_user(user_id: IdPath, repos: ReposDep) -> UserRead:
    user = await repos.users.get_by_id(user_id)
    if user is None:
        raise _not_found(f"User {user_id} not found")
    deleted = UserRead.model_validate(user)
    await repos.users.delete(user)
    logger.info(f"Deleted user {user_id}")
    return deleted
