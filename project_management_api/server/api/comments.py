"""
API endpoints for managing comments.

Comments are authored by the caller and attached to an existing project.
Only the author may edit or delete a comment.
"""

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query, Response, status

from project_management_api.core.database.entities import Comment, User
from project_management_api.core.logging_config import get_logger
from project_management_api.core.models.io import CommentCreate, CommentRead, CommentUpdate, Page
from project_management_api.core.validation import MAX_DB_INT, ensure_valid, validate_comment, validate_search_terms
from project_management_api.server.services.deps import CurrentUserDep, ReposDep

from .common import (
    AUTH_RESPONSES,
    FORBIDDEN_RESPONSES,
    NOT_FOUND_RESPONSES,
    VALIDATION_RESPONSES,
    IdPath,
    PageDep,
)

logger = get_logger(__name__)

router = APIRouter(tags=["comments"], responses=AUTH_RESPONSES)


def _not_found(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


def _ensure_author(comment: Comment, user: User) -> None:
    if comment.user_id != user.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Only the author can modify a comment")


@router.get("", response_model=List[CommentRead], summary="List Comments")
async def list_comments(repos: ReposDep, current_user: CurrentUserDep) -> List[CommentRead]:
    return [CommentRead.from_entity(comment) for comment in await repos.comments.list()]


@router.get(
    "/search",
    response_model=Page[CommentRead],
    summary="Search Comments",
    description=(
        "Filter comments by content or author username (case-sensitive substring), author id, project id "
        "and an inclusive creation date range. Sortable by Id, Content, CreatedAt, ProjectId, ProjectTitle, "
        "UserId, Username."
    ),
    responses=VALIDATION_RESPONSES,
)
async def search_comments(
    repos: ReposDep,
    current_user: CurrentUserDep,
    page: PageDep,
    content: Optional[str] = Query(default=None),
    user_id: Optional[int] = Query(default=None, alias="userId", ge=1, le=MAX_DB_INT),
    username: Optional[str] = Query(default=None),
    project_id: Optional[int] = Query(default=None, alias="projectId", ge=1, le=MAX_DB_INT),
    from_date: Optional[datetime] = Query(default=None, alias="fromDate"),
    to_date: Optional[datetime] = Query(default=None, alias="toDate"),
) -> Page[CommentRead]:
    ensure_valid(validate_search_terms(content=content, username=username))
    result = await repos.comments.search(
        page,
        content=content,
        user_id=user_id,
        username=username,
        project_id=project_id,
        from_date=from_date,
        to_date=to_date,
    )
    return Page[CommentRead].from_result(result, CommentRead.from_entity)


@router.get(
    "/findByContent/{content}",
    response_model=List[CommentRead],
    summary="Find Comments by Content",
    description="Comments whose content contains the given text (case-sensitive).",
)
async def find_by_content(content: str, repos: ReposDep, current_user: CurrentUserDep) -> List[CommentRead]:
    return [CommentRead.from_entity(comment) for comment in await repos.comments.find_by_content(content)]


@router.get("/project/{project_id}", response_model=List[CommentRead], summary="List Comments of a Project")
async def list_project_comments(
    project_id: IdPath, repos: ReposDep, current_user: CurrentUserDep
) -> List[CommentRead]:
    return [CommentRead.from_entity(comment) for comment in await repos.comments.list_for_project(project_id)]


@router.get("/{comment_id}", response_model=CommentRead, summary="Get Comment", responses=NOT_FOUND_RESPONSES)
async def get_comment(comment_id: IdPath, repos: ReposDep, current_user: CurrentUserDep) -> CommentRead:
    comment = await repos.comments.get_by_id(comment_id)
    if comment is None:
        raise _not_found(f"Comment {comment_id} not found")
    return CommentRead.from_entity(comment)


@router.post(
    "",
    response_model=CommentRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Comment",
    description="Post a comment as the caller on an existing project. Content: 1-1000 characters.",
    responses={**VALIDATION_RESPONSES, **NOT_FOUND_RESPONSES},
)
async def create_comment(payload: CommentCreate, repos: ReposDep, current_user: CurrentUserDep) -> CommentRead:
    ensure_valid(validate_comment(payload.content))
    if await repos.projects.get_by_id(payload.project_id) is None:
        raise _not_found(f"Project {payload.project_id} not found")
    comment = await repos.comments.create(
        Comment(content=payload.content, project_id=payload.project_id, user_id=current_user.id)
    )
    logger.info(f"User {current_user.id} commented on project {payload.project_id} (comment {comment.id})")
    return CommentRead.from_entity(await repos.comments.get_by_id(comment.id))


@router.put(
    "/{comment_id}",
    response_model=CommentRead,
    summary="Update Comment",
    description="Edit a comment's content. Only the author may do this; the creation time is kept.",
    responses={**VALIDATION_RESPONSES, **NOT_FOUND_RESPONSES, **FORBIDDEN_RESPONSES},
)
async def update_comment(
    comment_id: IdPath, payload: CommentUpdate, repos: ReposDep, current_user: CurrentUserDep
) -> CommentRead:
    comment = await repos.comments.get_by_id(comment_id)
    if comment is None:
        raise _not_found(f"Comment {comment_id} not found")
    _ensure_author(comment, current_user)
    ensure_valid(validate_comment(payload.content))

    comment.content = payload.content
    await repos.comments.update(comment)
    logger.info(f"User {current_user.id} edited comment {comment_id}")
    return CommentRead.from_entity(await repos.comments.get_by_id(comment_id))


@router.delete(
    "/{comment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Comment",
    description="Delete a comment. Only the author may do this.",
    responses={**NOT_FOUND_RESPONSES, **FORBIDDEN_RESPONSES},
)
async def delete_comment(comment_id: IdPath, repos: ReposDep, current_user: CurrentUserDep) -> Response:
    comment = await repos.comments.get_by_id(comment_id)
    if comment is None:
        raise _not_found(f"Comment {comment_id} not found")
    _ensure_author(comment, current_user)
    await repos.comments.delete(comment)
    logger.info(f"User {current_user.id} deleted comment {comment_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
