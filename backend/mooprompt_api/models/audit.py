"""
System Log Model.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from sqlalchemy import JSON, BigInteger, DateTime, ForeignKey, Index, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, IdType, utcnow


class SystemLog(Base):
    """
    Business action trail (table opened, bill closed, menu edited, ...).
    Append-only, so no soft delete.
    """

    __tablename__ = "system_log"

    id: Mapped[int] = mapped_column(IdType, primary_key=True)
    user_id: Mapped[Optional[int]] = mapped_column(
        BigInteger, ForeignKey("app_user.id"), nullable=True, index=True
    )
    action: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    detail: Mapped[Optional[dict[str, Any]]] = mapped_column(JSON, nullable=True)
    ip_address: Mapped[Optional[str]] = mapped_column(String(64))
    user_agent: Mapped[Optional[str]] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )

    __table_args__ = (
        Index("ix_system_log_action_created", "action", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<SystemLog(id={self.id}, action='{self.action}')>"
