"""
Exception handlers for the project management API.

This package contains the exception handlers for each error kind and a setup
function to register them with the FastAPI application.
"""

from .global_handler import global_exception_handler, setup_exception_handlers
from .validation_handler import request_validation_handler, validation_failed_handler

__all__ = [
    "global_exception_handler",
    "request_validation_handler",
    "setup_exception_handlers",
    "validation_failed_handler",
]
