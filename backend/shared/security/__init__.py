"""
Security module: authentication, password hashing, rate limiting.
"""

from shared.security.auth import (
    sign_jwt,
    sign_user_token,
    verify_jwt,
    get_bearer_token,
    current_user_context,
    optional_user_context,
    require_roles,
    role_guard,
    level_guard,
    role_level,
    has_min_level,
    get_user_id,
    verify_ws_token,
)
from shared.security.password import hash_password, verify_password
from shared.security.rate_limit import limiter, rate_limit_exceeded_handler

__all__ = [
    "sign_jwt",
    "sign_user_token",
    "verify_jwt",
    "get_bearer_token",
    "current_user_context",
    "optional_user_context",
    "require_roles",
    "role_guard",
    "level_guard",
    "role_level",
    "has_min_level",
    "get_user_id",
    "verify_ws_token",
    "hash_password",
    "verify_password",
    "limiter",
    "rate_limit_exceeded_handler",
]
