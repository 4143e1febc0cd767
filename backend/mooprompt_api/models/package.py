"""
Pricing Models: Package (buffet), ExtraCharge.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from sqlalchemy import Boolean, Float, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import AuditMixin, Base, IdType

if TYPE_CHECKING:
    from .table import TableSession


class Package(AuditMixin, Base):
    """
    Buffet package priced per person, optionally time-limited.
    Inherits: is_active, created_at, updated_at, deleted_at, *_by_id/name from AuditMixin.
    """

    __tablename__ = "package"

    id: Mapped[int] = mapped_column(IdType, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    price_per_person: Mapped[float] = mapped_column(Float, nullable=False)
    duration_minutes: Mapped[Optional[int]] = mapped_column(Integer)

    sessions: Mapped[list["TableSession"]] = relationship(back_populates="package")


class ExtraCharge(AuditMixin, Base):
    """
    Service charge added to a bill, per person or once per session.
    ``active`` switches the charge off without deleting it.
    Inherits: is_active, created_at, updated_at, deleted_at, *_by_id/name from AuditMixin.
    """

    __tablename__ = "extra_charge"

    id: Mapped[int] = mapped_column(IdType, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    price: Mapped[float] = mapped_column(Float, nullable=False)
    charge_type: Mapped[str] = mapped_column(String(20), nullable=False)  # PER_PERSON, PER_SESSION
    active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
