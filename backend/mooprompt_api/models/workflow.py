"""
FlowTrak Models: Department, Template, TemplateCheckpoint, WorkOrder,
Checkpoint, Comment, ActivityLog.

A work order is created from a template: the template's checkpoints are
copied onto the work order and each one is owned by a department, which
moves it through PENDING -> PROCESSING -> COMPLETED (or RETURNED/PROBLEM).
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any, Optional

from sqlalchemy import (
    JSON,
    BigInteger,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import AuditMixin, Base, IdType, utcnow

if TYPE_CHECKING:
    from .user import User


class Department(AuditMixin, Base):
    """
    Organisational unit that owns checkpoints.
    Inherits: is_active, created_at, updated_at, deleted_at, *_by_id/name from AuditMixin.
    """

    __tablename__ = "department"

    id: Mapped[int] = mapped_column(IdType, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)

    users: Mapped[list["User"]] = relationship(back_populates="department")
    checkpoints: Mapped[list["Checkpoint"]] = relationship(back_populates="owner_dept")


class Template(AuditMixin, Base):
    """
    Reusable sequence of checkpoints.
    Inherits: is_active, created_at, updated_at, deleted_at, *_by_id/name from AuditMixin.
    """

    __tablename__ = "work_template"

    id: Mapped[int] = mapped_column(IdType, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)

    checkpoints: Mapped[list["TemplateCheckpoint"]] = relationship(
        back_populates="template",
        order_by="TemplateCheckpoint.order",
        cascade="all, delete-orphan",
    )


class TemplateCheckpoint(Base):
    """One step of a template."""

    __tablename__ = "template_checkpoint"

    id: Mapped[int] = mapped_column(IdType, primary_key=True)
    template_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("work_template.id"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
    owner_dept_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("department.id"), nullable=False, index=True
    )
    order: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )

    template: Mapped["Template"] = relationship(back_populates="checkpoints")
    owner_dept: Mapped["Department"] = relationship()


class WorkOrder(AuditMixin, Base):
    """
    A job for a customer company, tracked checkpoint by checkpoint.
    Inherits: is_active, created_at, updated_at, deleted_at, *_by_id/name from AuditMixin.
    """

    __tablename__ = "work_order"

    id: Mapped[int] = mapped_column(IdType, primary_key=True)
    company: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    priority: Mapped[str] = mapped_column(String(10), default="MEDIUM", nullable=False)
    deadline: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    template_id: Mapped[Optional[int]] = mapped_column(
        BigInteger, ForeignKey("work_template.id"), nullable=True
    )

    template: Mapped[Optional["Template"]] = relationship()
    checkpoints: Mapped[list["Checkpoint"]] = relationship(
        back_populates="work_order", order_by="Checkpoint.order"
    )
    activity: Mapped[list["ActivityLog"]] = relationship(
        back_populates="work_order", order_by="ActivityLog.id.desc()"
    )


class Checkpoint(Base):
    """A template step copied onto a work order."""

    __tablename__ = "checkpoint"

    id: Mapped[int] = mapped_column(IdType, primary_key=True)
    work_order_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("work_order.id"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
    owner_dept_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("department.id"), nullable=False, index=True
    )
    order: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), default="PENDING", nullable=False, index=True
    )  # PENDING, PROCESSING, COMPLETED, RETURNED, PROBLEM
    started_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    ended_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), onupdate=utcnow
    )

    __table_args__ = (
        Index("ix_checkpoint_work_order_order", "work_order_id", "order"),
    )

    work_order: Mapped["WorkOrder"] = relationship(back_populates="checkpoints")
    owner_dept: Mapped["Department"] = relationship(back_populates="checkpoints")
    comments: Mapped[list["Comment"]] = relationship(
        back_populates="checkpoint", order_by="Comment.id"
    )


class Comment(Base):
    """
    Discussion entry on a work order or one of its checkpoints.
    Replies point at their parent and inherit its targets.
    """

    __tablename__ = "comment"

    id: Mapped[int] = mapped_column(IdType, primary_key=True)
    work_order_id: Mapped[Optional[int]] = mapped_column(
        BigInteger, ForeignKey("work_order.id"), nullable=True, index=True
    )
    checkpoint_id: Mapped[Optional[int]] = mapped_column(
        BigInteger, ForeignKey("checkpoint.id"), nullable=True, index=True
    )
    parent_id: Mapped[Optional[int]] = mapped_column(
        BigInteger, ForeignKey("comment.id"), nullable=True, index=True
    )
    user_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("app_user.id"), nullable=False, index=True
    )
    message: Mapped[Optional[str]] = mapped_column(Text)
    file_url: Mapped[Optional[str]] = mapped_column(Text)
    file_name: Mapped[Optional[str]] = mapped_column(Text)
    mentioned_user_ids: Mapped[Optional[list[int]]] = mapped_column(JSON, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )

    user: Mapped["User"] = relationship()
    checkpoint: Mapped[Optional["Checkpoint"]] = relationship(back_populates="comments")
    replies: Mapped[list["Comment"]] = relationship(
        back_populates="parent", order_by="Comment.id"
    )
    parent: Mapped[Optional["Comment"]] = relationship(
        back_populates="replies", remote_side="Comment.id"
    )


class ActivityLog(Base):
    """Timeline entry shown on a work order."""

    __tablename__ = "activity_log"

    id: Mapped[int] = mapped_column(IdType, primary_key=True)
    work_order_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("work_order.id"), nullable=False, index=True
    )
    user_id: Mapped[Optional[int]] = mapped_column(
        BigInteger, ForeignKey("app_user.id"), nullable=True
    )
    action: Mapped[str] = mapped_column(String(50), nullable=False)
    detail: Mapped[Optional[str]] = mapped_column(Text)
    data: Mapped[Optional[dict[str, Any]]] = mapped_column(JSON, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )

    work_order: Mapped["WorkOrder"] = relationship(back_populates="activity")
    user: Mapped[Optional["User"]] = relationship()
