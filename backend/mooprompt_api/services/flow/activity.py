"""
Work order activity timeline and comment threading helpers.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from mooprompt_api.models import ActivityLog, Comment
from mooprompt_api.services.base_service import Actor, actor_id
from shared.utils.flow_schemas import ActivityOutput, CommentOutput, UserBrief


def record_activity(
    db: Session,
    work_order_id: int,
    actor: Actor,
    action: str,
    detail: str | None = None,
    data: dict[str, Any] | None = None,
) -> ActivityLog:
    """Append a timeline entry (flushed, not committed)."""
    entry = ActivityLog(
        work_order_id=work_order_id,
        user_id=actor_id(actor),
        action=action,
        detail=detail,
        data=data,
    )
    db.add(entry)
    db.flush()
    return entry


def activity_output(entry: ActivityLog) -> ActivityOutput:
    return ActivityOutput(
        id=entry.id,
        work_order_id=entry.work_order_id,
        user=UserBrief.model_validate(entry.user) if entry.user is not None else None,
        action=entry.action,
        detail=entry.detail,
        data=entry.data,
        created_at=entry.created_at,
    )


def comment_output(comment: Comment, replies: list[CommentOutput] | None = None) -> CommentOutput:
    return CommentOutput(
        id=comment.id,
        work_order_id=comment.work_order_id,
        checkpoint_id=comment.checkpoint_id,
        parent_id=comment.parent_id,
        user=UserBrief.model_validate(comment.user),
        message=comment.message,
        file_url=comment.file_url,
        file_name=comment.file_name,
        mentioned_user_ids=comment.mentioned_user_ids or [],
        created_at=comment.created_at,
        replies=replies or [],
    )


def thread_comments(comments: list[Comment]) -> list[CommentOutput]:
    """
    Nest a flat comment list into threads.

    Top-level comments and every reply level are ordered oldest first.
    Replies whose parent is not in the list are dropped.
    """
    children: dict[int | None, list[Comment]] = {}
    for comment in sorted(comments, key=lambda c: c.id):
        children.setdefault(comment.parent_id, []).append(comment)

    def build(comment: Comment) -> CommentOutput:
        return comment_output(comment, [build(r) for r in children.get(comment.id, [])])

    return [build(c) for c in children.get(None, [])]
