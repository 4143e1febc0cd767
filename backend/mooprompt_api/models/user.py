"""
User and Authentication Models.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from sqlalchemy import BigInteger, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import AuditMixin, Base, IdType

if TYPE_CHECKING:
    from .workflow import Department


class User(AuditMixin, Base):
    """
    A staff member. POS roles (cashier, kitchen, runner) and FlowTrak
    members share this table; FlowTrak members belong to a department.
    Inherits: is_active, created_at, updated_at, deleted_at, *_by_id/name from AuditMixin.
    """

    __tablename__ = "app_user"

    id: Mapped[int] = mapped_column(IdType, primary_key=True)
    username: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)
    role: Mapped[str] = mapped_column(String(20), nullable=False, default="STAFF", index=True)
    department_id: Mapped[Optional[int]] = mapped_column(
        BigInteger, ForeignKey("department.id"), nullable=True, index=True
    )

    __table_args__ = (
        Index("ix_user_role_active", "role", "is_active"),
    )

    department: Mapped[Optional["Department"]] = relationship(back_populates="users")

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}', role='{self.role}')>"
