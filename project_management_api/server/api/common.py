"""
Shared pieces for API routers: paging query parameters and documented error responses.
"""

from typing import Annotated, Any, Dict, Optional

from fastapi import Depends, Path, Query

from project_management_api.core.database.query import MAX_PAGE_SIZE, PageRequest
from project_management_api.core.models.io import ErrorResponse, ValidationErrorResponse
from project_management_api.core.validation import MAX_DB_INT


def page_request(
    page_number: Optional[int] = Query(default=None, alias="pageNumber", description="1-based page index"),
    page_size: Optional[int] = Query(
        default=None, alias="pageSize", description=f"Items per page, clamped to 1..{MAX_PAGE_SIZE}"
    ),
    sort_by: Optional[str] = Query(default=None, alias="sortBy", description="Sort key, e.g. Id or CreatedAt"),
    sort_direction: Optional[str] = Query(default=None, alias="sortDirection", description="asc or desc"),
) -> PageRequest:
    return PageRequest.from_params(page_number, page_size, sort_by, sort_direction)


PageDep = Annotated[PageRequest, Depends(page_request)]

# Path ids must fit the signed 64-bit primary key columns.
IdPath = Annotated[int, Path(ge=1, le=MAX_DB_INT)]

AUTH_RESPONSES: Dict[int | str, Dict[str, Any]] = {
    401: {"model": ErrorResponse, "description": "Missing, invalid or expired access token"},
}
VALIDATION_RESPONSES: Dict[int | str, Dict[str, Any]] = {
    400: {"model": ValidationErrorResponse, "description": "Request failed validation"},
}
NOT_FOUND_RESPONSES: Dict[int | str, Dict[str, Any]] = {
    404: {"model": ErrorResponse, "description": "Resource not found"},
}
FORBIDDEN_RESPONSES: Dict[int | str, Dict[str, Any]] = {
    403: {"model": ErrorResponse, "description": "Caller is not allowed to modify this resource"},
}
