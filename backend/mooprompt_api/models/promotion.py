"""
Promotion Model.
"""

from __future__ import annotations

from typing import Any, Optional

from sqlalchemy import JSON, Boolean, Float, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import AuditMixin, Base, IdType


class Promotion(AuditMixin, Base):
    """
    Bill-level discount.

    ``condition`` holds the type-specific parameters:
    PER_PERSON {"buy", "pay"}, MIN_PEOPLE {"min_people"},
    MIN_AMOUNT {"min_amount"}.
    Inherits: is_active, created_at, updated_at, deleted_at, *_by_id/name from AuditMixin.
    """

    __tablename__ = "promotion"

    id: Mapped[int] = mapped_column(IdType, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    value: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    condition: Mapped[Optional[dict[str, Any]]] = mapped_column(JSON, nullable=True)
    active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
