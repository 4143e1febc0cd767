"""
Base Service Classes.

Architecture:
    Router (thin) → Service (business logic) → Repository (data access) → Model

Services take the authenticated user context (the decoded JWT claims,
or None for anonymous customer requests) as ``actor`` and stamp it on
the audit fields of the rows they write.

Usage:
    from mooprompt_api.services.base_service import BaseService

    class TableService(BaseService[Table]):
        def __init__(self, db: Session):
            super().__init__(db, Table)
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from sqlalchemy.orm import Session

from mooprompt_api.models import AuditMixin, Base
from mooprompt_api.services.crud.repository import BaseRepository

ModelT = TypeVar("ModelT", bound=Base)

Actor = dict[str, Any] | None


def actor_id(actor: Actor) -> int | None:
    if not actor:
        return None
    return int(actor["sub"])


def actor_name(actor: Actor) -> str | None:
    if not actor:
        return None
    return actor.get("username")


class BaseService(Generic[ModelT]):
    """
    Common infrastructure for domain services: a session, a repository
    for the primary model and audit stamping.
    """

    def __init__(self, db: Session, model: type[ModelT]):
        self._db = db
        self._model = model
        self._repo = BaseRepository(model, db)

    @property
    def db(self) -> Session:
        return self._db

    @property
    def repo(self) -> BaseRepository[ModelT]:
        return self._repo

    def _stamp_created(self, entity: AuditMixin, actor: Actor) -> None:
        entity.set_created_by(actor_id(actor), actor_name(actor))

    def _stamp_updated(self, entity: AuditMixin, actor: Actor) -> None:
        entity.set_updated_by(actor_id(actor), actor_name(actor))

    def _soft_delete(self, entity: AuditMixin, actor: Actor) -> None:
        entity.soft_delete(actor_id(actor), actor_name(actor))

    @staticmethod
    def _apply_changes(entity: Any, changes: dict[str, Any]) -> None:
        """Copy a partial update (``model_dump(exclude_unset=True)``) onto an entity."""
        for field, value in changes.items():
            setattr(entity, field, value)
