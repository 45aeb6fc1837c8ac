"""
Main Application Entry Point.

This module initializes the FastAPI application, configures middleware (CORS,
request logging), registers exception handlers and includes all API routers.
"""

from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from project_management_api import __version__
from project_management_api.core.database import async_session_maker, engine, init_db
from project_management_api.core.logging_config import get_logger, setup_logging
from project_management_api.core.monitoring import initialize_logfire

from .api import categories, comments, health, projects, tokens, users
from .core import constant
from .core.config import settings
from .exception_handlers import setup_exception_handlers
from .middleware import RequestLoggingMiddleware
from .services.bootstrap import ensure_bootstrap_admin

# Initialize logging
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifespan events.

    Creates missing tables (when enabled) and the bootstrap administrator on
    startup, and disposes of the engine's connection pool on shutdown.
    """
    try:
        logger.info("Starting up Project Management API...")
        await init_db()
        await ensure_bootstrap_admin(async_session_maker)
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}", exc_info=True)

    if not settings.jwt.secret_key:
        logger.warning("JWT__SECRET_KEY is not set; logins will fail until it is configured")

    yield

    logger.info("Shutting down Project Management API...")
    await engine.dispose()


app = FastAPI(
    title=constant.PROJECT_NAME,
    description=constant.PROJECT_DESCRIPTION,
    version=__version__,
    openapi_url=f"{constant.API_PREFIX}/openapi.json",
    docs_url=f"{constant.API_PREFIX}/docs",
    redoc_url=f"{constant.API_PREFIX}/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors.allow_origins,
    allow_credentials=settings.cors.allow_credentials,
    allow_methods=settings.cors.allow_methods,
    allow_headers=settings.cors.allow_headers,
)
app.add_middleware(RequestLoggingMiddleware)

setup_exception_handlers(app)
initialize_logfire(app, engine)

app.include_router(health.router, tags=["health"])
app.include_router(tokens.router, prefix=constant.API_PREFIX)
app.include_router(users.router, prefix=f"{constant.API_PREFIX}/users")
app.include_router(categories.router, prefix=f"{constant.API_PREFIX}/categories")
app.include_router(projects.router, prefix=f"{constant.API_PREFIX}/projects")
app.include_router(comments.router, prefix=f"{constant.API_PREFIX}/comments")


def run() -> None:
    """Console entry point: serve the application with uvicorn."""
    uvicorn.run(
        "project_management_api.server.main:app",
        host=settings.server.host,
        port=settings.server.port,
        log_config=None,
    )
