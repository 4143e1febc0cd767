"""
Restaurant Info Model (single row).
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import AuditMixin, Base, IdType

DEFAULT_RESTAURANT_NAME = "Mooprompt Restaurant"


class RestaurantInfo(AuditMixin, Base):
    """
    Name, contact and Wi-Fi details printed on table tickets.
    Inherits: is_active, created_at, updated_at, deleted_at, *_by_id/name from AuditMixin.
    """

    __tablename__ = "restaurant_info"

    id: Mapped[int] = mapped_column(IdType, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False, default=DEFAULT_RESTAURANT_NAME)
    address: Mapped[Optional[str]] = mapped_column(Text)
    phone: Mapped[Optional[str]] = mapped_column(String(50))
    logo_url: Mapped[Optional[str]] = mapped_column(Text)
    wifi_name: Mapped[Optional[str]] = mapped_column(Text)
    wifi_password: Mapped[Optional[str]] = mapped_column(Text)
    open_time: Mapped[Optional[str]] = mapped_column(String(5))  # "HH:MM"
    close_time: Mapped[Optional[str]] = mapped_column(String(5))
