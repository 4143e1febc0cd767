"""
Authentication and authorization utilities.
Handles JWT access tokens for staff (POS and FlowTrak share one user table).
"""

from __future__ import annotations

import time
import uuid
from typing import Any, Callable

import jwt
from fastapi import Depends, Header

from shared.config.settings import (
    JWT_SECRET,
    JWT_ISSUER,
    JWT_AUDIENCE,
    settings,
)
from shared.config.logging import get_logger
from shared.utils.exceptions import InsufficientRoleError, UnauthorizedError

logger = get_logger(__name__)

# FlowTrak permission levels; every role not listed ranks as a regular member.
ROLE_LEVELS = {"ADMIN": 3, "MANAGER": 2}
MEMBER_LEVEL = 1


# =============================================================================
# JWT Functions
# =============================================================================


def sign_jwt(
    payload: dict[str, Any],
    ttl_seconds: int | None = None,
    token_type: str = "access",
) -> str:
    """
    Sign a JWT token with the given payload.

    Args:
        payload: Claims to include in the token (sub, username, role, ...)
        ttl_seconds: Token lifetime in seconds. Defaults to access token expiry.
        token_type: Type of token.

    Returns:
        Signed JWT token string.
    """
    if ttl_seconds is None:
        ttl_seconds = settings.jwt_access_token_expire_minutes * 60

    now = int(time.time())
    data = {
        **payload,
        "iss": JWT_ISSUER,
        "aud": JWT_AUDIENCE,
        "iat": now,
        "exp": now + ttl_seconds,
        "type": token_type,
        "jti": str(uuid.uuid4()),
    }
    return jwt.encode(data, JWT_SECRET, algorithm="HS256")


def sign_user_token(user: Any) -> str:
    """Issue an access token for a User row."""
    return sign_jwt(
        {
            "sub": str(user.id),
            "username": user.username,
            "name": user.name,
            "role": user.role,
            "roles": [user.role],
            "department_id": user.department_id,
        }
    )


def verify_jwt(token: str) -> dict[str, Any]:
    """
    Verify and decode a JWT token.

    Returns:
        Decoded token claims.

    Raises:
        UnauthorizedError: If token is invalid, expired or lacks required claims.
    """
    try:
        payload = jwt.decode(
            token,
            JWT_SECRET,
            algorithms=["HS256"],
            audience=JWT_AUDIENCE,
            issuer=JWT_ISSUER,
        )
    except jwt.ExpiredSignatureError:
        raise UnauthorizedError("token_expired")
    except jwt.InvalidTokenError as e:
        # Log the actual error, return a generic message
        logger.warning("JWT validation failed", error=str(e))
        raise UnauthorizedError("invalid_token")

    if "sub" not in payload or "role" not in payload:
        raise UnauthorizedError("invalid_token", missing_claims=True)

    if payload.get("type") != "access":
        raise UnauthorizedError("invalid_token", token_type=payload.get("type"))

    try:
        int(payload["sub"])
    except (ValueError, TypeError):
        raise UnauthorizedError("invalid_token", malformed_sub=True)

    return payload


def get_bearer_token(authorization: str | None) -> str:
    """
    Extract bearer token from Authorization header.

    Raises:
        UnauthorizedError: If header is missing or malformed.
    """
    if not authorization:
        raise UnauthorizedError("missing_token")
    if not authorization.startswith("Bearer "):
        raise UnauthorizedError("invalid_header")
    return authorization.split(" ", 1)[1].strip()


def current_user_context(
    authorization: str | None = Header(default=None, alias="Authorization"),
) -> dict[str, Any]:
    """
    FastAPI dependency to get the current user context from JWT.

    Usage:
        @router.get("/protected")
        def protected_endpoint(ctx = Depends(current_user_context)):
            user_id = int(ctx["sub"])
            ...

    Returns:
        Dict with: sub (user_id), username, name, role, roles, department_id
    """
    token = get_bearer_token(authorization)
    return verify_jwt(token)


def optional_user_context(
    authorization: str | None = Header(default=None, alias="Authorization"),
) -> dict[str, Any] | None:
    """
    Like current_user_context, but anonymous callers get None.

    Used on customer-facing endpoints that record the acting staff
    member when one is signed in.
    """
    if not authorization:
        return None
    return verify_jwt(get_bearer_token(authorization))


def require_roles(ctx: dict[str, Any], allowed: list[str]) -> None:
    """
    Verify that the user has at least one of the allowed roles.

    Raises:
        InsufficientRoleError: If user lacks required role.
    """
    user_roles = set(ctx.get("roles", []))
    if not user_roles.intersection(set(allowed)):
        raise InsufficientRoleError(list(allowed), user_id=ctx.get("sub"))


def role_guard(*allowed: str) -> Callable[..., dict[str, Any]]:
    """
    Build a dependency that authenticates and enforces a role set.

    Usage:
        require_manager = role_guard("ADMIN", "MANAGER")

        @router.delete("/{id}")
        def delete(user: dict = Depends(require_manager)): ...
    """

    def dependency(ctx: dict[str, Any] = Depends(current_user_context)) -> dict[str, Any]:
        require_roles(ctx, list(allowed))
        return ctx

    return dependency


def role_level(role: str | None) -> int:
    """FlowTrak hierarchy: ADMIN 3, MANAGER 2, everyone else 1."""
    return ROLE_LEVELS.get(role or "", MEMBER_LEVEL)


def has_min_level(ctx: dict[str, Any], required: str) -> bool:
    """True when the user's role ranks at least as high as ``required``."""
    return role_level(ctx.get("role")) >= role_level(required)


def level_guard(required: str) -> Callable[..., dict[str, Any]]:
    """Dependency enforcing a minimum FlowTrak role level."""

    def dependency(ctx: dict[str, Any] = Depends(current_user_context)) -> dict[str, Any]:
        if not has_min_level(ctx, required):
            raise InsufficientRoleError([required], user_id=ctx.get("sub"))
        return ctx

    return dependency


def get_user_id(ctx: dict[str, Any] | None) -> int | None:
    """User id from a context, or None for anonymous callers."""
    if not ctx:
        return None
    return int(ctx["sub"])


def verify_ws_token(token: str | None) -> dict[str, Any] | None:
    """
    Verify the optional ``token`` query parameter of the event socket.

    Returns None when no token is given; raises UnauthorizedError when
    a token is given but invalid.
    """
    if not token:
        return None
    return verify_jwt(token)
