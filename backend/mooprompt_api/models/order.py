"""
Order Models: Order, OrderItem.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from sqlalchemy import BigInteger, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import AuditMixin, Base, IdType

if TYPE_CHECKING:
    from .catalog import MenuItem
    from .table import TableSession


class Order(AuditMixin, Base):
    """
    One submission from a table. OPEN until the bill is closed.
    Inherits: is_active, created_at, updated_at, deleted_at, *_by_id/name from AuditMixin.
    """

    __tablename__ = "customer_order"

    id: Mapped[int] = mapped_column(IdType, primary_key=True)
    table_session_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("table_session.id"), nullable=False, index=True
    )
    status: Mapped[str] = mapped_column(
        String(20), default="OPEN", nullable=False, index=True
    )  # OPEN, SERVED, CANCELLED
    note: Mapped[Optional[str]] = mapped_column(Text)

    table_session: Mapped["TableSession"] = relationship(back_populates="orders")
    items: Mapped[list["OrderItem"]] = relationship(
        back_populates="order", order_by="OrderItem.id"
    )


class OrderItem(AuditMixin, Base):
    """
    A line in an order, tracked individually through the kitchen.
    Inherits: is_active, created_at, updated_at, deleted_at, *_by_id/name from AuditMixin.
    """

    __tablename__ = "order_item"

    id: Mapped[int] = mapped_column(IdType, primary_key=True)
    order_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("customer_order.id"), nullable=False, index=True
    )
    menu_item_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("menu_item.id"), nullable=False, index=True
    )
    qty: Mapped[int] = mapped_column(Integer, nullable=False)
    note: Mapped[Optional[str]] = mapped_column(Text)
    item_type: Mapped[str] = mapped_column(
        String(20), default="A_LA_CARTE", nullable=False
    )  # BUFFET_INCLUDED, A_LA_CARTE
    status: Mapped[str] = mapped_column(
        String(20), default="WAITING", nullable=False, index=True
    )  # WAITING, COOKING, DONE, SERVED

    __table_args__ = (
        Index("ix_order_item_order_status", "order_id", "status"),
    )

    order: Mapped["Order"] = relationship(back_populates="items")
    menu_item: Mapped["MenuItem"] = relationship(back_populates="order_items")
