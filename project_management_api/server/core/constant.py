"""Application-wide constants."""

PROJECT_NAME = "Project Management API"
PROJECT_DESCRIPTION = (
    "Manage projects, categories, comments and users. "
    "Access is granted through short-lived JWT access tokens and rotated refresh tokens."
)
API_PREFIX = "/api"

# Version reported by the ``/version`` endpoint for the wire schema.
SCHEMA_VERSION = "v1"
