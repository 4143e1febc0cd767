"""
User Service.

Staff accounts for both applications. Deleting a user deactivates it
(``is_active = False``); inactive users cannot sign in but keep their
history.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session, selectinload

from mooprompt_api.models import Department, User
from mooprompt_api.services.base_service import Actor, BaseService, actor_id, actor_name
from shared.config.constants import Limits
from shared.utils.exceptions import DuplicateEntityError, NotFoundError, ValidationError
from shared.utils.validators import like_contains, sanitize_search_term
from shared.security.password import hash_password

SORTABLE_FIELDS = {
    "name": User.name,
    "username": User.username,
    "role": User.role,
    "created_at": User.created_at,
}

ACTIVE_FILTERS = ("active", "inactive", "all")


class UserService(BaseService[User]):
    """Service for staff account administration."""

    def __init__(self, db: Session):
        super().__init__(db, User)

    def _filters(
        self,
        search: str | None,
        role: str | None,
        active: str | None,
        department_id: int | None = None,
    ) -> list[Any]:
        filters: list[Any] = []
        term = sanitize_search_term(search)
        if term:
            pattern = like_contains(term)
            filters.append(
                or_(
                    User.name.ilike(pattern, escape="\\"),
                    User.username.ilike(pattern, escape="\\"),
                )
            )
        if role and role != "all":
            filters.append(User.role == role)
        if active == "active":
            filters.append(User.is_active.is_(True))
        elif active == "inactive":
            filters.append(User.is_active.is_(False))
        if department_id is not None:
            filters.append(User.department_id == department_id)
        return filters

    def list_users(
        self,
        search: str | None = None,
        role: str | None = None,
        active: str | None = "all",
        sort_by: str = "created_at",
        sort_order: str = "desc",
        department_id: int | None = None,
        page: int | None = None,
        limit: int | None = None,
    ) -> tuple[list[User], int]:
        """
        Filtered, sorted user list.

        Returns:
            (users on the requested page, total matching users)
        """
        filters = self._filters(search, role, active, department_id)
        column = SORTABLE_FIELDS.get(sort_by, User.created_at)
        ordering = column.asc() if sort_order == "asc" else column.desc()

        offset = None
        if page is not None and limit is not None:
            limit = max(1, min(limit, Limits.MAX_PAGE_SIZE))
            offset = (max(page, 1) - 1) * limit

        users = self._repo.find_all(
            filters=filters,
            options=[selectinload(User.department)],
            include_inactive=True,
            order_by=(ordering, User.id.desc()),
            limit=limit,
            offset=offset,
        )
        total = self._repo.count(filters=filters, include_inactive=True)
        return list(users), total

    def mention_candidates(self, search: str | None = None) -> list[User]:
        """Active users for the @mention picker."""
        filters = self._filters(search, None, "active")
        return list(
            self._repo.find_all(
                filters=filters,
                options=[selectinload(User.department)],
                order_by=(User.name, User.id),
                limit=Limits.MAX_MENTION_USERS,
            )
        )

    def get(self, user_id: int) -> User:
        user = self._repo.find_by_id(
            user_id, options=[selectinload(User.department)], include_inactive=True
        )
        if user is None:
            raise NotFoundError("user", user_id)
        return user

    def _ensure_unique_username(self, username: str, exclude_id: int | None = None) -> None:
        query = select(User.id).where(func.lower(User.username) == username.lower())
        if exclude_id is not None:
            query = query.where(User.id != exclude_id)
        if self._db.scalar(query.limit(1)) is not None:
            raise DuplicateEntityError("username", username)

    def _ensure_department(self, department_id: int | None) -> None:
        if department_id is None:
            return
        found = self._db.scalar(
            select(Department.id).where(
                Department.id == department_id, Department.is_active.is_(True)
            )
        )
        if found is None:
            raise NotFoundError("department", department_id)

    def create(self, data: Any, actor: Actor) -> User:
        """Create from a UserCreate / FlowUserCreate payload."""
        self._ensure_unique_username(data.username)
        self._ensure_department(data.department_id)
        user = User(
            username=data.username,
            name=data.name,
            email=data.email,
            password_hash=hash_password(data.password),
            role=data.role,
            department_id=data.department_id,
            is_active=getattr(data, "is_active", True),
        )
        self._stamp_created(user, actor)
        return self._repo.add(user)

    def update(self, user_id: int, data: Any, actor: Actor) -> User:
        user = self.get(user_id)
        changes = data.model_dump(exclude_unset=True)

        password = changes.pop("password", None)
        if password:
            user.password_hash = hash_password(password)

        # department_id and email may be cleared; everything else ignores null
        changes = {
            k: v for k, v in changes.items() if v is not None or k in ("department_id", "email")
        }
        if "username" in changes:
            self._ensure_unique_username(changes["username"], exclude_id=user.id)
        if "department_id" in changes:
            self._ensure_department(changes["department_id"])
        if changes.get("is_active") is False and user.id == actor_id(actor):
            raise ValidationError("users.cannot_deactivate_self")

        reactivate = changes.pop("is_active", None)
        self._apply_changes(user, changes)
        if reactivate is True and not user.is_active:
            user.restore(actor_id(actor), actor_name(actor))
        elif reactivate is False and user.is_active:
            self._soft_delete(user, actor)
        self._stamp_updated(user, actor)
        self._db.flush()
        return user

    def delete(self, user_id: int, actor: Actor) -> User:
        user = self.get(user_id)
        if user.id == actor_id(actor):
            raise ValidationError("users.cannot_delete_self")
        if user.is_active:
            self._soft_delete(user, actor)
            self._db.flush()
        return user
