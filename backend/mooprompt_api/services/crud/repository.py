"""
Repository Pattern for database access.

Provides a thin abstraction between business logic and data access.
Soft-deleted rows (``is_active = False``) are hidden unless asked for.

Usage:
    from mooprompt_api.services.crud.repository import BaseRepository

    table_repo = BaseRepository(Table, db)
    tables = table_repo.find_all(order_by=Table.name)
    table = table_repo.get_or_404(42, "table")
"""

from __future__ import annotations

from typing import Any, Generic, Sequence, TypeVar

from sqlalchemy import select, func
from sqlalchemy.orm import Session
from sqlalchemy.sql import Select

from mooprompt_api.models import Base
from shared.utils.exceptions import NotFoundError

ModelT = TypeVar("ModelT", bound=Base)


class BaseRepository(Generic[ModelT]):
    """Common database operations for one model."""

    def __init__(self, model: type[ModelT], session: Session):
        self._model = model
        self._session = session

    def _base_query(self) -> Select:
        return select(self._model)

    def _apply_active_filter(self, query: Select, include_inactive: bool) -> Select:
        """Apply is_active filter if model has it."""
        if hasattr(self._model, "is_active") and not include_inactive:
            query = query.where(self._model.is_active.is_(True))
        return query

    def find_by_id(
        self,
        entity_id: int,
        *,
        options: list[Any] | None = None,
        include_inactive: bool = False,
    ) -> ModelT | None:
        """
        Find entity by primary key.

        Args:
            entity_id: The primary key value.
            options: SQLAlchemy loader options (selectinload, joinedload).
            include_inactive: Include soft-deleted entities.

        Returns:
            Entity or None if not found.
        """
        query = self._base_query().where(self._model.id == entity_id)
        query = self._apply_active_filter(query, include_inactive)
        if options:
            query = query.options(*options)
        return self._session.scalar(query)

    def get_or_404(
        self,
        entity_id: int,
        entity: str,
        *,
        options: list[Any] | None = None,
    ) -> ModelT:
        """Like find_by_id, raising NotFoundError(entity) when missing."""
        found = self.find_by_id(entity_id, options=options)
        if found is None:
            raise NotFoundError(entity, entity_id)
        return found

    def find_all(
        self,
        *,
        filters: Sequence[Any] = (),
        options: list[Any] | None = None,
        include_inactive: bool = False,
        limit: int | None = None,
        offset: int | None = None,
        order_by: Any | None = None,
    ) -> Sequence[ModelT]:
        """
        Find entities matching optional WHERE clauses.

        Args:
            filters: Extra SQLAlchemy conditions.
            options: SQLAlchemy loader options.
            include_inactive: Include soft-deleted entities.
            limit: Maximum number of results.
            offset: Number of results to skip.
            order_by: Column, expression or tuple of them to order by.

        Returns:
            Sequence of entities.
        """
        query = self._base_query().where(*filters)
        query = self._apply_active_filter(query, include_inactive)
        if options:
            query = query.options(*options)

        if order_by is not None:
            if isinstance(order_by, (list, tuple)):
                query = query.order_by(*order_by)
            else:
                query = query.order_by(order_by)
        if offset is not None:
            query = query.offset(offset)
        if limit is not None:
            query = query.limit(limit)

        return self._session.scalars(query).all()

    def count(self, *, filters: Sequence[Any] = (), include_inactive: bool = False) -> int:
        """Count entities matching optional WHERE clauses."""
        query = select(func.count()).select_from(self._model).where(*filters)
        if hasattr(self._model, "is_active") and not include_inactive:
            query = query.where(self._model.is_active.is_(True))
        return self._session.scalar(query) or 0

    def exists(self, *filters: Any) -> bool:
        """True when at least one active row matches."""
        return self.count(filters=filters) > 0

    def add(self, entity: ModelT) -> ModelT:
        """Add entity to session and flush to assign its id (not committed)."""
        self._session.add(entity)
        self._session.flush()
        return entity

    def delete(self, entity: ModelT) -> None:
        """Hard delete (not committed)."""
        self._session.delete(entity)

    def refresh(self, entity: ModelT) -> ModelT:
        """Refresh entity from database."""
        self._session.refresh(entity)
        return entity
