"""
Centralized HTTP exceptions for consistent error handling.

Every exception carries a message key from the i18n catalog plus its
parameters. ``detail`` is pre-rendered in the default locale; the API's
exception handler re-renders it in the caller's language.

Usage:
    from shared.utils.exceptions import NotFoundError, ValidationError

    raise NotFoundError("table", table_id)
    raise ValidationError("tables.duplicate_name", name=name)
"""

from fastapi import HTTPException, status
from typing import Any

from shared.config.logging import get_logger
from shared.i18n import translate

logger = get_logger(__name__)


class AppException(HTTPException):
    """
    Base exception with automatic logging.

    All custom exceptions should inherit from this class
    to ensure consistent logging and response format.
    """

    def __init__(
        self,
        status_code: int,
        message_key: str,
        params: dict[str, Any] | None = None,
        log_level: str = "warning",
        headers: dict[str, str] | None = None,
        **log_context: Any,
    ):
        self.message_key = message_key
        self.params = params or {}
        detail = translate(message_key, **self.params)

        log_fn = getattr(logger, log_level, logger.warning)
        log_fn(detail, status_code=status_code, message_key=message_key, **log_context)

        super().__init__(status_code=status_code, detail=detail, headers=headers)

    def localized(self, locale: str | None) -> str:
        """Render the message in another locale."""
        return translate(self.message_key, locale, **self.params)


# =============================================================================
# 404 Not Found Errors
# =============================================================================


class NotFoundError(AppException):
    """
    Entity not found error (404).

    Usage:
        raise NotFoundError("table", 12)
        raise NotFoundError("session", session_id, table_name=name)
    """

    def __init__(self, entity: str, entity_id: int | str | None = None, **log_context: Any):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            message_key=f"errors.not_found.{entity}",
            params={"id": entity_id},
            log_level="warning",
            entity=entity,
            entity_id=entity_id,
            **log_context,
        )


# =============================================================================
# 401 / 403 Errors
# =============================================================================


class UnauthorizedError(AppException):
    """Missing or invalid credentials (401)."""

    def __init__(self, reason: str = "invalid_token", **log_context: Any):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            message_key=f"errors.auth.{reason}",
            log_level="warning",
            headers={"WWW-Authenticate": "Bearer"},
            reason=reason,
            **log_context,
        )


class ForbiddenError(AppException):
    """
    Authorization/permission error (403).

    Usage:
        raise ForbiddenError("manage_departments")
        raise ForbiddenError("checkpoint_action", user_id=user_id)
    """

    def __init__(self, action: str | None = None, **log_context: Any):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            message_key=f"errors.forbidden.{action}" if action else "errors.forbidden.default",
            log_level="warning",
            action=action,
            **log_context,
        )


class InsufficientRoleError(AppException):
    """User doesn't have the required role."""

    def __init__(self, required_roles: list[str], **log_context: Any):
        roles_str = ", ".join(sorted(required_roles))
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            message_key="errors.forbidden.role",
            params={"roles": roles_str},
            log_level="warning",
            required_roles=required_roles,
            **log_context,
        )


# =============================================================================
# 400 Bad Request Errors
# =============================================================================


class ValidationError(AppException):
    """
    Input or business-rule violation (400).

    Keyword arguments fill the message placeholders and are logged.

    Usage:
        raise ValidationError("sessions.open_orders", session_id=12)
    """

    def __init__(self, message_key: str, **params: Any):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            message_key=message_key,
            params=params,
            log_level="warning",
            **params,
        )


class InvalidTransitionError(ValidationError):
    """Invalid status transition."""

    def __init__(self, entity: str, from_status: str, to_status: str):
        super().__init__(
            "errors.invalid_transition",
            entity=entity,
            from_status=from_status,
            to_status=to_status,
        )


class DuplicateEntityError(ValidationError):
    """Entity already exists (unique name, username, ...)."""

    def __init__(self, entity: str, identifier: str | None = None):
        self.entity = entity
        super().__init__(f"errors.duplicate.{entity}", identifier=identifier)


# =============================================================================
# 500 Internal Server Errors
# =============================================================================


class InternalError(AppException):
    """
    Internal server error (500).

    Usage:
        raise InternalError(operation="render_ticket", session_id=3)
    """

    def __init__(self, **log_context: Any):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            message_key="errors.internal",
            log_level="error",
            **log_context,
        )
