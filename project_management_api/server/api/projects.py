"""
API endpoints for managing projects and their category links.

Projects are always owned by the caller that creates them. The list, search
and lookup endpoints return a flattened view with the owner's username,
category names and comment texts.
"""

from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query, Response, status

from project_management_api.core.database.entities import Project
from project_management_api.core.logging_config import get_logger
from project_management_api.core.models.io import CategoryRead, Page, ProjectCreate, ProjectCreated, ProjectRead
from project_management_api.core.validation import MAX_DB_INT, ensure_valid, validate_project, validate_search_terms
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

router = APIRouter(tags=["projects"], responses=AUTH_RESPONSES)


def _not_found(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


@router.get("", response_model=List[ProjectRead], summary="List Projects")
async def list_projects(repos: ReposDep, current_user: CurrentUserDep) -> List[ProjectRead]:
    return [ProjectRead.from_entity(project) for project in await repos.projects.list()]


@router.get(
    "/search",
    response_model=Page[ProjectRead],
    summary="Search Projects",
    description=(
        "Filter projects by title, description or owner username (case-sensitive substring), "
        "owner id and linked category id. Sortable by Id, Title (alias Name), Description, OwnerId, OwnerName."
    ),
    responses=VALIDATION_RESPONSES,
)
async def search_projects(
    repos: ReposDep,
    current_user: CurrentUserDep,
    page: PageDep,
    title: Optional[str] = Query(default=None),
    description: Optional[str] = Query(default=None),
    owner_id: Optional[int] = Query(default=None, alias="ownerId", ge=1, le=MAX_DB_INT),
    owner_username: Optional[str] = Query(default=None, alias="ownerUsername"),
    category_id: Optional[int] = Query(default=None, alias="categoryId", ge=1, le=MAX_DB_INT),
) -> Page[ProjectRead]:
    ensure_valid(validate_search_terms(title=title, description=description, ownerUsername=owner_username))
    result = await repos.projects.search(
        page,
        title=title,
        description=description,
        owner_id=owner_id,
        owner_username=owner_username,
        category_id=category_id,
    )
    return Page[ProjectRead].from_result(result, ProjectRead.from_entity)


@router.get(
    "/findByTitle/{title}",
    response_model=List[ProjectRead],
    summary="Find Projects by Title",
    description="Projects whose title contains the given text (case-sensitive).",
)
async def find_by_title(title: str, repos: ReposDep, current_user: CurrentUserDep) -> List[ProjectRead]:
    return [ProjectRead.from_entity(project) for project in await repos.projects.find_by_title(title)]


@router.get(
    "/{project_id}",
    response_model=ProjectRead,
    summary="Get Project",
    responses=NOT_FOUND_RESPONSES,
)
async def get_project(project_id: IdPath, repos: ReposDep, current_user: CurrentUserDep) -> ProjectRead:
    project = await repos.projects.get_by_id(project_id)
    if project is None:
        raise _not_found(f"Project {project_id} not found")
    return ProjectRead.from_entity(project)


@router.post(
    "",
    response_model=ProjectCreated,
    status_code=status.HTTP_201_CREATED,
    summary="Create Project",
    description="Create a project owned by the caller. Title: 3-100 characters; description: up to 2000.",
    responses=VALIDATION_RESPONSES,
)
async def create_project(payload: ProjectCreate, repos: ReposDep, current_user: CurrentUserDep) -> ProjectCreated:
    ensure_valid(validate_project(payload.title, payload.description))
    project = await repos.projects.create(
        Project(title=payload.title, description=payload.description, owner_id=current_user.id)
    )
    logger.info(f"User {current_user.id} created project {project.id}")
    return ProjectCreated(
        id=project.id, title=project.title, description=project.description, owner_id=project.owner_id
    )


@router.delete(
    "/{project_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Project",
    description="Delete a project with its comments and category links. Only the owner may delete it.",
    responses={**NOT_FOUND_RESPONSES, **FORBIDDEN_RESPONSES},
)
async def delete_project(project_id: IdPath, repos: ReposDep, current_user: CurrentUserDep) -> Response:
    project = await repos.projects.get_by_id(project_id)
    if project is None:
        raise _not_found(f"Project {project_id} not found")
    if project.owner_id != current_user.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Only the owner can delete a project")
    await repos.projects.delete(project)
    logger.info(f"User {current_user.id} deleted project {project_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# =====================================================================
# Category links
# =====================================================================


@router.get(
    "/{project_id}/categories",
    response_model=List[CategoryRead],
    summary="List Project Categories",
    responses=NOT_FOUND_RESPONSES,
)
async def list_project_categories(
    project_id: IdPath, repos: ReposDep, current_user: CurrentUserDep
) -> List[CategoryRead]:
    if await repos.projects.get_by_id(project_id) is None:
        raise _not_found(f"Project {project_id} not found")
    return [CategoryRead.model_validate(category) for category in await repos.projects.list_categories(project_id)]


@router.post(
    "/{project_id}/categories/{category_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Add Category to Project",
    description="Link a category to a project. Linking an already linked category is a no-op.",
    responses=NOT_FOUND_RESPONSES,
)
async def add_category(
    project_id: IdPath, category_id: IdPath, repos: ReposDep, current_user: CurrentUserDep
) -> Response:
    if await repos.projects.get_by_id(project_id) is None:
        raise _not_found(f"Project {project_id} not found")
    if await repos.categories.get_by_id(category_id) is None:
        raise _not_found(f"Category {category_id} not found")
    if await repos.projects.add_category(project_id, category_id):
        logger.info(f"Linked category {category_id} to project {project_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "/{project_id}/categories/{category_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove Category from Project",
    responses=NOT_FOUND_RESPONSES,
)
async def remove_category(
    project_id: IdPath, category_id: IdPath, repos: ReposDep, current_user: CurrentUserDep
) -> Response:
    if not await repos.projects.remove_category(project_id, category_id):
        raise _not_found(f"Category {category_id} is not linked to project {project_id}")
    logger.info(f"Unlinked category {category_id} from project {project_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
