"""
Menu Models: MenuCategory, MenuItem.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from sqlalchemy import BigInteger, Boolean, Float, ForeignKey, Index, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import AuditMixin, Base, IdType

if TYPE_CHECKING:
    from .order import OrderItem


class MenuCategory(AuditMixin, Base):
    """
    Menu section (appetizers, grill, drinks, ...).
    Inherits: is_active, created_at, updated_at, deleted_at, *_by_id/name from AuditMixin.
    """

    __tablename__ = "menu_category"

    id: Mapped[int] = mapped_column(IdType, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)

    items: Mapped[list["MenuItem"]] = relationship(
        back_populates="category", order_by="MenuItem.name"
    )


class MenuItem(AuditMixin, Base):
    """
    A dish or drink.

    Availability flags decide which session types see it: buffet
    sessions see buffet and a-la-carte items, other sessions only
    a-la-carte ones. ``is_free_in_buffet`` items are included in the
    buffet price.
    Inherits: is_active, created_at, updated_at, deleted_at, *_by_id/name from AuditMixin.
    """

    __tablename__ = "menu_item"

    id: Mapped[int] = mapped_column(IdType, primary_key=True)
    category_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("menu_category.id"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    price: Mapped[float] = mapped_column(Float, nullable=False)
    image_url: Mapped[Optional[str]] = mapped_column(Text)
    is_available: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    is_buffet_item: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    is_a_la_carte_item: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    is_free_in_buffet: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    is_featured: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_popular: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    __table_args__ = (
        Index("ix_menu_item_category_available", "category_id", "is_available"),
    )

    category: Mapped["MenuCategory"] = relationship(back_populates="items")
    order_items: Mapped[list["OrderItem"]] = relationship(back_populates="menu_item")
