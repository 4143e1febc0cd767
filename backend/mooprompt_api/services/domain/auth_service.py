"""
Staff sign-in shared by the POS and FlowTrak login endpoints.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from mooprompt_api.models import User
from shared.security.password import verify_password
from shared.utils.exceptions import UnauthorizedError


def authenticate(db: Session, username: str, password: str) -> tuple[User | None, str | None]:
    """
    Check a username and password.

    Returns:
        (user, None) on success, or (None, reason) where reason is one of
        ``unknown_user``, ``inactive`` or ``bad_password``. Callers answer
        every failure the same way so accounts cannot be probed.
    """
    user = db.scalar(select(User).where(User.username == username.strip()))
    if user is None:
        return None, "unknown_user"
    if not user.is_active:
        return None, "inactive"
    if not verify_password(password, user.password_hash):
        return None, "bad_password"
    return user, None


def current_user_row(db: Session, user_id: int) -> User:
    """
    The signed-in user's row.

    Raises:
        UnauthorizedError: When the account was deleted after the token was issued.
    """
    user = db.scalar(
        select(User)
        .where(User.id == user_id, User.is_active.is_(True))
        .options(selectinload(User.department))
    )
    if user is None:
        raise UnauthorizedError("invalid_token", user_id=user_id)
    return user
