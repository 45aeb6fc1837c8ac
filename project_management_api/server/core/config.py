"""
Configuration Settings.

This module defines the application configuration using Pydantic's BaseSettings.
Values are bound from environment variables and the ``.env`` file. Grouped
settings use ``__`` as the nesting delimiter, e.g. ``JWT__SECRET_KEY`` or
``DATABASE__URL``.
"""

from typing import Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# =====================================================================
# Grouped Configuration Models
# =====================================================================


class ServerConfig(BaseModel):
    """HTTP server configuration."""

    host: str = Field(default="0.0.0.0", description="Server host address to bind to")
    port: int = Field(default=8000, description="Server port number")

    model_config = {"populate_by_name": True}


class LoggingConfig(BaseModel):
    """Logging output configuration."""

    format: str = Field(default="detailed", description="Log line format (simple, detailed, json)")
    enable_file: bool = Field(default=False, description="Also write logs to a file under file_dir")
    file_dir: str = Field(default="logs", description="Directory for log files")

    model_config = {"populate_by_name": True}


class DatabaseConfig(BaseModel):
    """Database configuration."""

    url: str = Field(
        default="sqlite+aiosqlite:///./project_management.db",
        description="Async SQLAlchemy connection URL (sqlite+aiosqlite or postgresql+asyncpg)",
    )
    auto_create: bool = Field(default=True, description="Create missing tables on application startup")
    echo: bool = Field(default=False, description="Echo emitted SQL statements")

    model_config = {"populate_by_name": True}


class JWTConfig(BaseModel):
    """Access token signing configuration."""

    secret_key: Optional[str] = Field(
        default=None, description="HMAC secret used to sign access tokens (at least 32 bytes)"
    )
    algorithm: str = Field(default="HS256", description="JWT signing algorithm")
    issuer: str = Field(default="fmi", description="Value of the iss claim")
    audience: str = Field(default="project-management-app", description="Value of the aud claim")
    access_token_expire_minutes: int = Field(
        default=5, description="Lifetime of access tokens issued by a password login"
    )
    refreshed_access_token_expire_minutes: int = Field(
        default=2, description="Lifetime of access tokens issued by a refresh-token exchange"
    )

    model_config = {"populate_by_name": True}


class SecurityConfig(BaseModel):
    """Password hashing configuration."""

    bcrypt_rounds: int = Field(default=12, ge=4, le=31, description="bcrypt cost factor")

    model_config = {"populate_by_name": True}


class BootstrapConfig(BaseModel):
    """First administrator, created on startup when the users table is empty."""

    admin_username: Optional[str] = Field(default=None, description="Username of the bootstrap administrator")
    admin_password: Optional[str] = Field(default=None, description="Password of the bootstrap administrator")
    admin_first_name: str = Field(default="Admin", description="First name of the bootstrap administrator")
    admin_last_name: str = Field(default="User", description="Last name of the bootstrap administrator")

    model_config = {"populate_by_name": True}


class CORSConfig(BaseModel):
    """CORS configuration."""

    allow_origins: list[str] = Field(default=["*"], description="Allowed CORS origins (use * for all)")
    allow_credentials: bool = Field(default=True, description="Allow credentials in CORS requests")
    allow_methods: list[str] = Field(default=["*"], description="Allowed HTTP methods (use * for all)")
    allow_headers: list[str] = Field(default=["*"], description="Allowed HTTP headers (use * for all)")

    model_config = {"populate_by_name": True}


# =====================================================================
# Main Settings Class
# =====================================================================


class Settings(BaseSettings):
    """
    Application settings model.

    All properties are automatically bound from environment variables and .env file.
    Pydantic's BaseSettings handles dotenv loading automatically via model_config.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        case_sensitive=False,
    )

    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    server: ServerConfig = Field(default_factory=ServerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    jwt: JWTConfig = Field(default_factory=JWTConfig)
    security: SecurityConfig = Field(default_factory=SecurityConfig)
    cors: CORSConfig = Field(default_factory=CORSConfig)
    bootstrap: BootstrapConfig = Field(default_factory=BootstrapConfig)


settings = Settings()
