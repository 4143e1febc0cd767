"""
Utilities module: exceptions, validators, schemas.
"""

from shared.utils.exceptions import (
    AppException,
    NotFoundError,
    UnauthorizedError,
    ForbiddenError,
    InsufficientRoleError,
    ValidationError,
    InvalidTransitionError,
    DuplicateEntityError,
    InternalError,
)
from shared.utils.validators import (
    validate_relative_url,
    escape_like_pattern,
    sanitize_search_term,
    like_contains,
    safe_filename,
)

__all__ = [
    # exceptions
    "AppException",
    "NotFoundError",
    "UnauthorizedError",
    "ForbiddenError",
    "InsufficientRoleError",
    "ValidationError",
    "InvalidTransitionError",
    "DuplicateEntityError",
    "InternalError",
    # validators
    "validate_relative_url",
    "escape_like_pattern",
    "sanitize_search_term",
    "like_contains",
    "safe_filename",
]
