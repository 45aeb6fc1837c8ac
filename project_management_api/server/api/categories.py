"""
API endpoints for managing categories.

Categories are tags that projects can be linked to. Deleting a category
removes its project links but leaves the projects alone.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from project_management_api.core.database.entities import Category
from project_management_api.core.logging_config import get_logger
from project_management_api.core.models.io import CategoryCreate, CategoryRead, CategoryUpdate
from project_management_api.core.validation import ensure_valid, validate_category
from project_management_api.server.services.authentication import get_current_user
from project_management_api.server.services.deps import ReposDep

from .common import AUTH_RESPONSES, NOT_FOUND_RESPONSES, VALIDATION_RESPONSES, IdPath

logger = get_logger(__name__)

router = APIRouter(tags=["categories"], dependencies=[Depends(get_current_user)], responses=AUTH_RESPONSES)


def _not_found(category_id: int) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Category {category_id} not found")


@router.get(
    "",
    response_model=List[CategoryRead],
    summary="List Categories",
    description="Return every category ordered by id.",
)
async def list_categories(repos: ReposDep) -> List[CategoryRead]:
    categories = await repos.categories.list()
    return [CategoryRead.model_validate(category) for category in categories]


@router.get(
    "/{category_id}",
    response_model=CategoryRead,
    summary="Get Category",
    responses=NOT_FOUND_RESPONSES,
)
async def get_category(category_id: IdPath, repos: ReposDep) -> CategoryRead:
    category = await repos.categories.get_by_id(category_id)
    if category is None:
        raise _not_found(category_id)
    return CategoryRead.model_validate(category)


@router.post(
    "",
    response_model=CategoryRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Category",
    description="Create a category. Name: 2-50 characters; description: up to 500.",
    responses=VALIDATION_RESPONSES,
)
async def create_category(payload: CategoryCreate, repos: ReposDep) -> CategoryRead:
    ensure_valid(validate_category(payload.name, payload.description))
    category = await repos.categories.create(Category(name=payload.name, description=payload.description))
    logger.info(f"Created category {category.id} ({category.name!r})")
    return CategoryRead.model_validate(category)


@router.put(
    "",
    response_model=CategoryRead,
    summary="Update Category",
    description="Replace a category's name and description. The body carries the id.",
    responses={**VALIDATION_RESPONSES, **NOT_FOUND_RESPONSES},
)
async def update_category(payload: CategoryUpdate, repos: ReposDep) -> CategoryRead:
    ensure_valid(validate_category(payload.name, payload.description))
    category = await repos.categories.get_by_id(payload.id)
    if category is None:
        raise _not_found(payload.id)
    category.name = payload.name
    category.description = payload.description
    category = await repos.categories.update(category)
    logger.info(f"Updated category {category.id}")
    return CategoryRead.model_validate(category)


@router.delete(
    "/{category_id}",
    response_model=CategoryRead,
    summary="Delete Category",
    description="Delete a category and its project links. Returns the deleted category.",
    responses=NOT_FOUND_RESPONSES,
)
async def delete_category(category_id: IdPath, repos: ReposDep) -> CategoryRead:
    category = await repos.categories.get_by_id(category_id)
    if category is None:
        raise _not_found(category_id)
    deleted = CategoryRead.model_validate(category)
    await repos.categories.delete(category)
    logger.info(f"Deleted category {category_id}")
    return deleted
