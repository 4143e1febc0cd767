"""
Table and Session Models: Table, TableSession.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any, Optional

from sqlalchemy import JSON, BigInteger, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import AuditMixin, Base, IdType, as_utc, utcnow

if TYPE_CHECKING:
    from .order import Order
    from .package import Package
    from .billing import BillingSummary


class Table(AuditMixin, Base):
    """
    Physical table in the restaurant.
    OCCUPIED while a session is ACTIVE, AVAILABLE otherwise.
    Inherits: is_active, created_at, updated_at, deleted_at, *_by_id/name from AuditMixin.
    """

    # "table" is a reserved SQL keyword
    __tablename__ = "restaurant_table"

    id: Mapped[int] = mapped_column(IdType, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), default="AVAILABLE", nullable=False, index=True
    )  # AVAILABLE, OCCUPIED

    __table_args__ = (
        Index("ix_table_name", "name"),
    )

    sessions: Mapped[list["TableSession"]] = relationship(back_populates="table")


class TableSession(AuditMixin, Base):
    """
    A party seated at a table, from opening until the bill is closed.
    A session with a package is a buffet session.
    Inherits: is_active, created_at, updated_at, deleted_at, *_by_id/name from AuditMixin.
    """

    __tablename__ = "table_session"

    id: Mapped[int] = mapped_column(IdType, primary_key=True)
    table_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("restaurant_table.id"), nullable=False, index=True
    )
    package_id: Mapped[Optional[int]] = mapped_column(
        BigInteger, ForeignKey("package.id"), nullable=True, index=True
    )
    people_count: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), default="ACTIVE", nullable=False, index=True
    )  # ACTIVE, CLOSED
    start_time: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
    expire_time: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    end_time: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    # Extra charges chosen when the table was opened (ids into extra_charge)
    extra_charge_ids: Mapped[Optional[list[int]]] = mapped_column(JSON, nullable=True)

    __table_args__ = (
        Index("ix_session_table_status", "table_id", "status"),
    )

    table: Mapped["Table"] = relationship(back_populates="sessions")
    package: Mapped[Optional["Package"]] = relationship(back_populates="sessions")
    orders: Mapped[list["Order"]] = relationship(
        back_populates="table_session", order_by="Order.id"
    )
    billing: Mapped[Optional["BillingSummary"]] = relationship(back_populates="table_session")

    @property
    def is_buffet(self) -> bool:
        return self.package_id is not None

    def is_expired(self, now: datetime | None = None) -> bool:
        """True once a timed package has run out."""
        if self.expire_time is None:
            return False
        return (now or utcnow()) > as_utc(self.expire_time)
