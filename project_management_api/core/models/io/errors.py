"""
Error response bodies, used for OpenAPI documentation of error statuses.
"""

from typing import List

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    detail: str


class FieldErrorRead(BaseModel):
    field: str
    message: str


class ValidationErrorResponse(BaseModel):
    detail: str
    errors: List[FieldErrorRead]
