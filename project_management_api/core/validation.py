"""
Request validation rules.

Each ``validate_*`` function inspects incoming values and returns the list of
field errors it found; an empty list means the input is acceptable. Callers
turn a non-empty list into a ``ValidationFailed`` with ``ensure_valid``, which
the API maps to a 400 response listing every error.

Field names in errors are the camelCase names used on the wire.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Iterable, List, Optional

SORT_DIRECTIONS = ("asc", "desc")

# Ids and row offsets are signed 64-bit integers in the database.
MAX_DB_INT = 2**63 - 1
MAX_PAGE_SIZE = 50
MAX_PAGE_NUMBER = MAX_DB_INT // MAX_PAGE_SIZE


@dataclass(frozen=True)
class FieldError:
    """A single rejected field."""

    field: str
    message: str

    def to_dict(self) -> dict:
        return asdict(self)


class ValidationFailed(Exception):
    """Raised when one or more request fields break a validation rule."""

    def __init__(self, errors: Iterable[FieldError], detail: str = "Validation failed"):
        self.errors: List[FieldError] = list(errors)
        self.detail = detail
        super().__init__(f"{detail}: " + "; ".join(f"{e.field}: {e.message}" for e in self.errors))


def ensure_valid(errors: List[FieldError]) -> None:
    """Raise ``ValidationFailed`` if ``errors`` is not empty."""
    if errors:
        raise ValidationFailed(errors)


def check_length(
    field: str,
    value: Optional[str],
    label: str,
    *,
    min_length: int = 0,
    max_length: int,
    required: bool = True,
) -> List[FieldError]:
    """Check that ``value`` is present (when required) and within the length bounds.

    The message names both bounds when a minimum applies, otherwise only the maximum,
    e.g. "Username must be between 3 and 50 characters".
    """
    if value is None or (required and value == ""):
        return [FieldError(field, f"{label} is required")] if required else []
    if len(value) < min_length or len(value) > max_length:
        if min_length > 0:
            message = f"{label} must be between {min_length} and {max_length} characters"
        else:
            message = f"{label} cannot exceed {max_length} characters"
        return [FieldError(field, message)]
    return []


# =====================================================================
# Authentication
# =====================================================================


def validate_credentials(username: Optional[str], password: Optional[str]) -> List[FieldError]:
    return [
        *check_length("username", username, "Username", min_length=3, max_length=50),
        *check_length("password", password, "Password", min_length=6, max_length=100),
    ]


def validate_refresh_token(refresh_token: Optional[str]) -> List[FieldError]:
    return check_length("refreshToken", refresh_token, "Refresh token", max_length=255)


# =====================================================================
# Resources
# =====================================================================


def validate_user(
    username: Optional[str],
    password: Optional[str],
    first_name: Optional[str],
    last_name: Optional[str],
) -> List[FieldError]:
    """Rules shared by user creation and full update."""
    return [
        *validate_credentials(username, password),
        *check_length("firstName", first_name, "First name", max_length=50),
        *check_length("lastName", last_name, "Last name", max_length=50),
    ]


def validate_category(name: Optional[str], description: Optional[str]) -> List[FieldError]:
    return [
        *check_length("name", name, "Category name", min_length=2, max_length=50),
        *check_length("description", description, "Description", max_length=500, required=False),
    ]


def validate_project(title: Optional[str], description: Optional[str]) -> List[FieldError]:
    return [
        *check_length("title", title, "Project title", min_length=3, max_length=100),
        *check_length("description", description, "Description", max_length=2000),
    ]


def validate_comment(content: Optional[str]) -> List[FieldError]:
    return check_length("content", content, "Comment content", min_length=1, max_length=1000)


def validate_search_terms(**terms: Optional[str]) -> List[FieldError]:
    """Search text filters are optional and capped at 100 characters.

    Keyword names are the wire names of the filters, e.g. ``title`` or ``ownerUsername``.
    """
    errors: List[FieldError] = []
    for field, value in terms.items():
        errors.extend(check_length(field, value, field, max_length=100, required=False))
    return errors


# =====================================================================
# Paging
# =====================================================================


def validate_page_request(
    page_number: Optional[int],
    sort_by: Optional[str],
    sort_direction: Optional[str],
) -> List[FieldError]:
    """Page size is clamped rather than rejected, so it is not checked here."""
    errors: List[FieldError] = []
    if page_number is not None and not 1 <= page_number <= MAX_PAGE_NUMBER:
        errors.append(FieldError("pageNumber", f"Page number must be between 1 and {MAX_PAGE_NUMBER}"))
    if sort_by is not None and (sort_by == "" or len(sort_by) > 50):
        errors.append(FieldError("sortBy", "Sort field must be between 1 and 50 characters"))
    if sort_direction is not None and sort_direction.lower() not in SORT_DIRECTIONS:
        errors.append(FieldError("sortDirection", "Sort direction must be 'asc' or 'desc'"))
    return errors
