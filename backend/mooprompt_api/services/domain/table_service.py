"""
Table Service.
Floor plan management: create, rename, delete tables and show which
ones are seated.
"""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from mooprompt_api.models import Table, TableSession
from mooprompt_api.services.base_service import Actor, BaseService
from shared.config.constants import SessionStatus, TableStatus
from shared.utils.exceptions import DuplicateEntityError, ValidationError
from shared.utils.pos_schemas import (
    ActiveSessionBrief,
    TableCreate,
    TableOutput,
    TableUpdate,
)


class TableService(BaseService[Table]):
    """Service for table management."""

    def __init__(self, db: Session):
        super().__init__(db, Table)

    def _active_session(self, table_id: int) -> TableSession | None:
        return self._db.scalar(
            select(TableSession)
            .where(
                TableSession.table_id == table_id,
                TableSession.status == SessionStatus.ACTIVE,
                TableSession.is_active.is_(True),
            )
            .order_by(TableSession.start_time.desc(), TableSession.id.desc())
            .limit(1)
        )

    def to_output(self, table: Table) -> TableOutput:
        session = self._active_session(table.id)
        return TableOutput(
            id=table.id,
            name=table.name,
            status=table.status,
            created_at=table.created_at,
            active_session=ActiveSessionBrief.model_validate(session) if session else None,
        )

    def _ensure_unique_name(self, name: str, exclude_id: int | None = None) -> None:
        filters = [func.lower(Table.name) == name.lower()]
        if exclude_id is not None:
            filters.append(Table.id != exclude_id)
        if self._repo.exists(*filters):
            raise DuplicateEntityError("table", name)

    def list_tables(self, status: str | None = None) -> list[TableOutput]:
        filters = [Table.status == status] if status else []
        tables = self._repo.find_all(filters=filters, order_by=Table.name)
        return [self.to_output(t) for t in tables]

    def get(self, table_id: int) -> Table:
        return self._repo.get_or_404(table_id, "table")

    def create(self, data: TableCreate, actor: Actor) -> Table:
        self._ensure_unique_name(data.name)
        table = Table(name=data.name, status=TableStatus.AVAILABLE)
        self._stamp_created(table, actor)
        return self._repo.add(table)

    def update(self, table_id: int, data: TableUpdate, actor: Actor) -> Table:
        table = self.get(table_id)
        changes = data.model_dump(exclude_unset=True, exclude_none=True)

        if "name" in changes:
            self._ensure_unique_name(changes["name"], exclude_id=table.id)

        if changes.get("status") == TableStatus.OCCUPIED and self._active_session(table.id) is None:
            raise ValidationError("tables.occupied_without_session", name=table.name)

        self._apply_changes(table, changes)
        self._stamp_updated(table, actor)
        self._db.flush()
        return table

    def delete(self, table_id: int, actor: Actor) -> Table:
        table = self.get(table_id)
        if self._active_session(table.id) is not None:
            raise ValidationError("tables.has_active_session", name=table.name)
        if table.status == TableStatus.OCCUPIED:
            raise ValidationError("tables.occupied", name=table.name)
        self._soft_delete(table, actor)
        self._db.flush()
        return table
