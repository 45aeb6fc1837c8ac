"""
Validation Exception Handlers.

Both our own ``ValidationFailed`` (length rules, unknown sort keys) and
FastAPI's ``RequestValidationError`` (malformed bodies, wrong query types)
are answered with the same 400 body::

    {"detail": "Validation failed", "errors": [{"field": "...", "message": "..."}]}
"""

from typing import Any, Dict, List

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from project_management_api.core.logging_config import get_logger
from project_management_api.core.validation import FieldError, ValidationFailed

logger = get_logger(__name__)

# Leading location parts that name where a value came from rather than the field itself.
_LOCATION_SOURCES = {"body", "query", "path", "header", "cookie"}


def _field_name(loc: Any) -> str:
    parts = [str(part) for part in (loc or ()) if not isinstance(part, int)]
    if parts and parts[0] in _LOCATION_SOURCES:
        parts = parts[1:]
    return ".".join(parts) or "body"


def _response(detail: str, errors: List[FieldError]) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": detail, "errors": [error.to_dict() for error in errors]},
    )


async def validation_failed_handler(request: Request, exc: ValidationFailed) -> JSONResponse:
    logger.info(f"Validation failed for {request.method} {request.url.path}: {exc}")
    return _response(exc.detail, exc.errors)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors: List[FieldError] = []
    for error in exc.errors():
        detail: Dict[str, Any] = error
        errors.append(FieldError(_field_name(detail.get("loc")), str(detail.get("msg", "Invalid value"))))
    logger.info(f"Malformed request for {request.method} {request.url.path}: {len(errors)} error(s)")
    return _response("Validation failed", errors)
