"""
Comment Service.

A comment targets a work order, one of its checkpoints, or both. A
reply takes its targets from its parent, so a thread never spans
targets.
"""

from __future__ import annotations

import json
from typing import Any

from fastapi import UploadFile
from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from mooprompt_api.models import Checkpoint, Comment, WorkOrder
from mooprompt_api.services.base_service import Actor, actor_id
from mooprompt_api.services.flow.activity import record_activity, thread_comments
from mooprompt_api.services.storage import save_attachment
from shared.config.constants import ActivityAction
from shared.utils.exceptions import NotFoundError, ValidationError
from shared.utils.flow_schemas import CommentOutput


def parse_mentions(raw: str | None) -> list[int]:
    """
    Decode the ``mentioned_user_ids`` form field (a JSON array of ids).

    Raises:
        ValidationError: When the value is not a JSON array of integers.
    """
    if raw is None or not raw.strip():
        return []
    try:
        value: Any = json.loads(raw)
    except json.JSONDecodeError:
        raise ValidationError("comments.invalid_mentions")
    if not isinstance(value, list):
        raise ValidationError("comments.invalid_mentions")
    ids: list[int] = []
    for item in value:
        try:
            user_id = int(item)
        except (TypeError, ValueError):
            raise ValidationError("comments.invalid_mentions")
        if user_id not in ids:
            ids.append(user_id)
    return ids


class CommentService:
    def __init__(self, db: Session):
        self._db = db

    def list_threads(
        self, checkpoint_id: int | None = None, work_id: int | None = None
    ) -> list[CommentOutput]:
        """Top-level comments of a target, oldest first, with nested replies."""
        if checkpoint_id is None and work_id is None:
            raise ValidationError("comments.target_required")
        query = select(Comment).options(selectinload(Comment.user))
        if checkpoint_id is not None:
            query = query.where(Comment.checkpoint_id == checkpoint_id)
        if work_id is not None:
            query = query.where(Comment.work_order_id == work_id)
        return thread_comments(list(self._db.scalars(query).all()))

    def _work_order(self, work_id: int) -> WorkOrder:
        work = self._db.scalar(
            select(WorkOrder).where(WorkOrder.id == work_id, WorkOrder.is_active.is_(True))
        )
        if work is None:
            raise NotFoundError("work_order", work_id)
        return work

    def _checkpoint(self, checkpoint_id: int) -> Checkpoint:
        checkpoint = self._db.scalar(
            select(Checkpoint)
            .join(WorkOrder, WorkOrder.id == Checkpoint.work_order_id)
            .where(Checkpoint.id == checkpoint_id, WorkOrder.is_active.is_(True))
            .options(selectinload(Checkpoint.work_order))
        )
        if checkpoint is None:
            raise NotFoundError("checkpoint", checkpoint_id)
        return checkpoint

    def create(
        self,
        actor: Actor,
        *,
        checkpoint_id: int | None = None,
        work_id: int | None = None,
        parent_id: int | None = None,
        message: str | None = None,
        file: UploadFile | None = None,
        mentioned_user_ids: list[int] | None = None,
    ) -> tuple[Comment, int]:
        """
        Post a comment or reply, with an optional attachment.

        Returns:
            (comment, id of the work order whose room should hear about it)
        """
        if checkpoint_id is None and work_id is None and parent_id is None:
            raise ValidationError("comments.target_required")
        message = (message or "").strip() or None
        has_file = file is not None and bool(file.filename)
        if message is None and not has_file:
            raise ValidationError("comments.empty")

        if parent_id is not None:
            parent = self._db.get(Comment, parent_id)
            if parent is None:
                raise NotFoundError("comment", parent_id)
            work_id = parent.work_order_id or work_id
            checkpoint_id = parent.checkpoint_id or checkpoint_id

        checkpoint = self._checkpoint(checkpoint_id) if checkpoint_id is not None else None
        work = self._work_order(work_id) if work_id is not None else checkpoint.work_order

        file_url = file_name = None
        if has_file:
            file_url, file_name = save_attachment(file)

        comment = Comment(
            work_order_id=work_id,
            checkpoint_id=checkpoint_id,
            parent_id=parent_id,
            user_id=actor_id(actor),
            message=message,
            file_url=file_url,
            file_name=file_name,
            mentioned_user_ids=mentioned_user_ids or [],
        )
        self._db.add(comment)
        self._db.flush()

        if checkpoint is not None:
            detail = f"คอมเมนต์ใน: {work.title} - {checkpoint.name}"
        else:
            detail = f"คอมเมนต์ในงาน: {work.title}"
        record_activity(
            self._db,
            work.id,
            actor,
            ActivityAction.ADD_COMMENT,
            detail,
            data={"comment_id": comment.id},
        )

        comment = self._db.scalar(
            select(Comment).where(Comment.id == comment.id).options(selectinload(Comment.user))
        )
        return comment, work.id
