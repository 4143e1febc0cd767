"""
Billing Models: BillingSummary, BillingItem.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

from sqlalchemy import JSON, BigInteger, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import AuditMixin, Base, IdType

if TYPE_CHECKING:
    from .promotion import Promotion
    from .table import TableSession


class BillingSummary(AuditMixin, Base):
    """
    The closed bill of a session. Amounts are frozen at close time so
    later menu or price edits never change a settled bill.
    Inherits: is_active, created_at, updated_at, deleted_at, *_by_id/name from AuditMixin.
    """

    __tablename__ = "billing_summary"

    id: Mapped[int] = mapped_column(IdType, primary_key=True)
    table_session_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("table_session.id"), nullable=False, unique=True
    )
    subtotal: Mapped[float] = mapped_column(Float, nullable=False)
    extra_charge: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    discount: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    vat: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    vat_rate: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    grand_total: Mapped[float] = mapped_column(Float, nullable=False)
    payment_method: Mapped[str] = mapped_column(String(10), nullable=False)  # CASH, QR
    received_amount: Mapped[Optional[float]] = mapped_column(Float)
    change: Mapped[Optional[float]] = mapped_column(Float)
    discount_type: Mapped[Optional[str]] = mapped_column(String(20))  # PERCENT, FIXED, PROMOTION
    discount_value: Mapped[Optional[float]] = mapped_column(Float)
    promotion_id: Mapped[Optional[int]] = mapped_column(
        BigInteger, ForeignKey("promotion.id"), nullable=True
    )
    extra_charge_ids: Mapped[Optional[list[int]]] = mapped_column(JSON, nullable=True)

    table_session: Mapped["TableSession"] = relationship(back_populates="billing")
    promotion: Mapped[Optional["Promotion"]] = relationship()
    items: Mapped[list["BillingItem"]] = relationship(
        back_populates="billing", order_by="BillingItem.id"
    )


class BillingItem(Base):
    """A printed bill line (menu line or extra charge)."""

    __tablename__ = "billing_item"

    id: Mapped[int] = mapped_column(IdType, primary_key=True)
    billing_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("billing_summary.id"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
    qty: Mapped[int] = mapped_column(Integer, nullable=False)
    unit_price: Mapped[float] = mapped_column(Float, nullable=False)
    total_price: Mapped[float] = mapped_column(Float, nullable=False)
    type: Mapped[str] = mapped_column(String(10), nullable=False)  # MENU, EXTRA

    billing: Mapped["BillingSummary"] = relationship(back_populates="items")
