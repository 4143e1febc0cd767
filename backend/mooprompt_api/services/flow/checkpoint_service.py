"""
Checkpoint Service.

Moves one work order step through its status flow:

    PENDING ──start──▶ PROCESSING ──complete──▶ COMPLETED
    RETURNED ─start──▶     │
                           ├──return──▶ RETURNED
                           └──problem─▶ PROBLEM

Only ADMIN users and members of the owning department may act on a
checkpoint. A step can only start once every earlier step is COMPLETED.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from mooprompt_api.models import ActivityLog, Checkpoint, User, WorkOrder, utcnow
from mooprompt_api.services.base_service import Actor, actor_id
from mooprompt_api.services.flow.activity import record_activity
from shared.config.constants import (
    CHECKPOINT_TRANSITIONS,
    ActivityAction,
    CheckpointAction,
    CheckpointStatus,
    Roles,
)
from shared.config.logging import get_logger
from shared.utils.exceptions import (
    ForbiddenError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)

logger = get_logger(__name__)


class CheckpointService:
    def __init__(self, db: Session):
        self._db = db

    def get(self, checkpoint_id: int) -> Checkpoint:
        checkpoint = self._db.scalar(
            select(Checkpoint)
            .join(WorkOrder, WorkOrder.id == Checkpoint.work_order_id)
            .where(Checkpoint.id == checkpoint_id, WorkOrder.is_active.is_(True))
            .options(
                selectinload(Checkpoint.owner_dept),
                selectinload(Checkpoint.work_order).selectinload(WorkOrder.checkpoints),
            )
        )
        if checkpoint is None:
            raise NotFoundError("checkpoint", checkpoint_id)
        return checkpoint

    def _ensure_can_act(self, checkpoint: Checkpoint, actor: Actor) -> None:
        if actor and actor.get("role") == Roles.ADMIN:
            return
        # Department membership is read fresh; a token may predate a transfer
        user = self._db.get(User, actor_id(actor)) if actor else None
        if user is None or not user.is_active or user.department_id != checkpoint.owner_dept_id:
            raise ForbiddenError(
                "checkpoint_action",
                checkpoint_id=checkpoint.id,
                user_id=actor_id(actor),
            )

    @staticmethod
    def _ensure_previous_completed(checkpoint: Checkpoint) -> None:
        for earlier in sorted(checkpoint.work_order.checkpoints, key=lambda c: c.order):
            if earlier.order >= checkpoint.order or earlier.id == checkpoint.id:
                break
            if earlier.status != CheckpointStatus.COMPLETED:
                raise ValidationError("checkpoints.previous_incomplete", name=earlier.name)

    def apply_action(
        self,
        checkpoint_id: int,
        action: str,
        actor: Actor,
        note: str | None = None,
    ) -> tuple[Checkpoint, ActivityLog]:
        """
        Apply start / complete / return / problem.

        Returns:
            (updated checkpoint, timeline entry)

        Raises:
            NotFoundError: Unknown checkpoint or deleted work order.
            ForbiddenError: Actor is neither ADMIN nor in the owning department.
            InvalidTransitionError: The action does not apply to the current status.
            ValidationError: Starting before earlier checkpoints are completed.
        """
        checkpoint = self.get(checkpoint_id)
        self._ensure_can_act(checkpoint, actor)

        allowed_from, new_status = CHECKPOINT_TRANSITIONS[action]
        if checkpoint.status not in allowed_from:
            raise InvalidTransitionError("checkpoint", checkpoint.status, new_status)
        if action == CheckpointAction.START:
            self._ensure_previous_completed(checkpoint)

        now = utcnow()
        if action == CheckpointAction.START:
            checkpoint.started_at = now
            checkpoint.ended_at = None
        elif action == CheckpointAction.COMPLETE:
            checkpoint.ended_at = now
            if checkpoint.started_at is None:
                checkpoint.started_at = now
        previous_status = checkpoint.status
        checkpoint.status = new_status

        work = checkpoint.work_order
        detail = f"{work.title} - {checkpoint.name}: {action}"
        entry = record_activity(
            self._db,
            work.id,
            actor,
            ActivityAction.checkpoint(action),
            detail,
            data={
                "checkpoint_id": checkpoint.id,
                "from": previous_status,
                "to": new_status,
                "note": note,
            },
        )
        logger.info(
            "Checkpoint action",
            checkpoint_id=checkpoint.id,
            work_order_id=work.id,
            action=action,
            status=new_status,
        )
        return checkpoint, entry
