"""
Business action log.
Records who opened a table, closed a bill, edited the menu, ...
"""

from typing import Any, Optional

from fastapi import Request
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from mooprompt_api.models import SystemLog
from shared.config.constants import Limits
from shared.config.logging import get_logger

logger = get_logger(__name__)


def client_ip(request: Optional[Request]) -> Optional[str]:
    """Client address, preferring the first X-Forwarded-For hop."""
    if request is None:
        return None
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.headers.get("x-real-ip") or (request.client.host if request.client else None)


def log_action(
    db: Session,
    action: str,
    detail: Optional[dict[str, Any]] = None,
    *,
    user_id: Optional[int] = None,
    request: Optional[Request] = None,
) -> Optional[SystemLog]:
    """
    Record a business action in system_log.

    The row is written in a savepoint so a failing insert never takes
    the caller's transaction down with it; the failure is only logged.
    Don't commit here - let the caller handle the transaction.

    Args:
        db: Database session
        action: Action name (see SystemAction)
        detail: JSON-serializable context (ids, names, amounts)
        user_id: Acting staff member, None for customers
        request: Incoming request, for IP address and user agent

    Returns:
        The SystemLog row, or None when writing it failed
    """
    entry = SystemLog(
        user_id=user_id,
        action=action,
        detail=detail,
        ip_address=client_ip(request),
        user_agent=request.headers.get("user-agent") if request is not None else None,
    )
    try:
        with db.begin_nested():
            db.add(entry)
    except SQLAlchemyError as e:
        logger.error("Failed to write system log", action=action, error=str(e))
        return None
    return entry


def list_actions(
    db: Session,
    action: Optional[str] = None,
    limit: int = 100,
) -> list[SystemLog]:
    """Newest log rows first, optionally for one action."""
    limit = max(1, min(limit, Limits.MAX_LOG_LIMIT))
    query = select(SystemLog)
    if action:
        query = query.where(SystemLog.action == action)
    query = query.order_by(SystemLog.created_at.desc(), SystemLog.id.desc()).limit(limit)
    return list(db.scalars(query).all())
