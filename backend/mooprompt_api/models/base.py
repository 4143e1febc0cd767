"""
Base class and AuditMixin for all SQLAlchemy ORM models.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import BigInteger, Boolean, DateTime, Integer, String, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# BIGINT primary keys on PostgreSQL; SQLite only autoincrements INTEGER keys.
IdType = BigInteger().with_variant(Integer, "sqlite")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime | None) -> datetime | None:
    """
    Attach UTC to naive datetimes.

    SQLite hands back naive values even for timezone-aware columns;
    everything this app writes is UTC.
    """
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class AuditMixin:
    """
    Mixin providing soft delete and audit trail fields.

    Fields added:
    - is_active: Soft delete flag (False = deleted, True = active)
    - created_at, updated_at, deleted_at: Audit timestamps
    - created_by_id/name, updated_by_id/name, deleted_by_id/name: User tracking

    Methods:
    - soft_delete(user_id, username): Mark entity as deleted
    - restore(user_id, username): Restore a soft-deleted entity
    """

    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False, index=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), onupdate=utcnow, nullable=True
    )
    deleted_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    # No FK to app_user: the mixin is also applied to app_user itself
    created_by_id: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True)
    created_by_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    updated_by_id: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True)
    updated_by_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    deleted_by_id: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True)
    deleted_by_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    def soft_delete(self, user_id: int | None, username: str | None) -> None:
        self.is_active = False
        self.deleted_at = utcnow()
        self.deleted_by_id = user_id
        self.deleted_by_name = username

    def restore(self, user_id: int | None, username: str | None) -> None:
        self.is_active = True
        self.deleted_at = None
        self.deleted_by_id = None
        self.deleted_by_name = None
        self.set_updated_by(user_id, username)

    def set_created_by(self, user_id: int | None, username: str | None) -> None:
        self.created_by_id = user_id
        self.created_by_name = username

    def set_updated_by(self, user_id: int | None, username: str | None) -> None:
        self.updated_by_id = user_id
        self.updated_by_name = username
        self.updated_at = utcnow()

    def __repr__(self) -> str:
        class_name = self.__class__.__name__
        id_val = getattr(self, "id", None)
        active = "active" if self.is_active else "deleted"
        return f"<{class_name}(id={id_val}, {active})>"
