"""
Work Order Service.

Creating a work order copies the template's checkpoints onto it as
PENDING steps. Progress is the share of COMPLETED steps; the current
checkpoint is the first step, by order, that is not COMPLETED.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import or_, select
from sqlalchemy.orm import Session, selectinload

from mooprompt_api.models import ActivityLog, Checkpoint, Comment, WorkOrder
from mooprompt_api.services.base_service import Actor, BaseService
from mooprompt_api.services.flow.activity import activity_output, record_activity, thread_comments
from mooprompt_api.services.flow.deadline import deadline_info
from mooprompt_api.services.flow.template_service import TemplateService
from shared.config.constants import ActivityAction, CheckpointStatus
from shared.config.logging import get_logger
from shared.utils.flow_schemas import (
    CheckpointOutput,
    WorkOrderCreate,
    WorkOrderDetail,
    WorkOrderSummary,
    WorkOrderUpdate,
)
from shared.utils.validators import like_contains, sanitize_search_term

logger = get_logger(__name__)

_WORK_LOAD = [
    selectinload(WorkOrder.checkpoints).selectinload(Checkpoint.owner_dept),
]


def progress_percent(checkpoints: list[Checkpoint]) -> int:
    if not checkpoints:
        return 0
    done = sum(1 for cp in checkpoints if cp.status == CheckpointStatus.COMPLETED)
    return round(done * 100 / len(checkpoints))


def current_checkpoint(checkpoints: list[Checkpoint]) -> Checkpoint | None:
    for cp in sorted(checkpoints, key=lambda c: c.order):
        if cp.status != CheckpointStatus.COMPLETED:
            return cp
    return None


def work_order_summary(work: WorkOrder, now: datetime | None = None) -> WorkOrderSummary:
    checkpoints = sorted(work.checkpoints, key=lambda c: c.order)
    current = current_checkpoint(checkpoints)
    return WorkOrderSummary(
        id=work.id,
        company=work.company,
        title=work.title,
        description=work.description,
        priority=work.priority,
        deadline=work.deadline,
        template_id=work.template_id,
        created_at=work.created_at,
        checkpoints=[CheckpointOutput.model_validate(cp) for cp in checkpoints],
        current_checkpoint=CheckpointOutput.model_validate(current) if current else None,
        progress=progress_percent(checkpoints),
        deadline_info=deadline_info(work.deadline, now),
    )


class WorkOrderService(BaseService[WorkOrder]):
    def __init__(self, db: Session):
        super().__init__(db, WorkOrder)

    def list_work_orders(
        self,
        department_id: int | None = None,
        status: str | None = None,
        company: str | None = None,
        priority: str | None = None,
    ) -> list[WorkOrderSummary]:
        """Newest first. Department and status match any checkpoint of the work order."""
        filters: list[Any] = []
        if department_id is not None:
            filters.append(WorkOrder.checkpoints.any(Checkpoint.owner_dept_id == department_id))
        if status:
            filters.append(WorkOrder.checkpoints.any(Checkpoint.status == status))
        term = sanitize_search_term(company)
        if term:
            filters.append(WorkOrder.company.ilike(like_contains(term), escape="\\"))
        if priority:
            filters.append(WorkOrder.priority == priority)

        works = self._repo.find_all(
            filters=filters,
            options=_WORK_LOAD,
            order_by=(WorkOrder.created_at.desc(), WorkOrder.id.desc()),
        )
        return [work_order_summary(w) for w in works]

    def get(self, work_id: int) -> WorkOrder:
        return self._repo.get_or_404(work_id, "work_order", options=_WORK_LOAD)

    def detail(self, work_id: int) -> WorkOrderDetail:
        """Work order with its comment threads and activity timeline."""
        work = self.get(work_id)
        checkpoint_ids = [cp.id for cp in work.checkpoints]

        target = Comment.work_order_id == work.id
        if checkpoint_ids:
            target = or_(target, Comment.checkpoint_id.in_(checkpoint_ids))
        comments = self._db.scalars(
            select(Comment).where(target).options(selectinload(Comment.user))
        ).all()

        activity = self._db.scalars(
            select(ActivityLog)
            .where(ActivityLog.work_order_id == work.id)
            .options(selectinload(ActivityLog.user))
            .order_by(ActivityLog.id.desc())
        ).all()

        summary = work_order_summary(work)
        return WorkOrderDetail(
            **summary.model_dump(),
            comments=thread_comments(list(comments)),
            activity=[activity_output(a) for a in activity],
        )

    def create(self, data: WorkOrderCreate, actor: Actor) -> WorkOrder:
        template = TemplateService(self._db).get(data.template_id)

        work = WorkOrder(
            company=data.company,
            title=data.title,
            description=data.description,
            priority=data.priority,
            deadline=data.deadline,
            template_id=template.id,
        )
        self._stamp_created(work, actor)
        self._repo.add(work)

        for step in template.checkpoints:
            self._db.add(
                Checkpoint(
                    work_order_id=work.id,
                    name=step.name,
                    owner_dept_id=step.owner_dept_id,
                    order=step.order,
                    status=CheckpointStatus.PENDING,
                )
            )
        record_activity(
            self._db,
            work.id,
            actor,
            ActivityAction.CREATE_WORK_ORDER,
            f"สร้างงาน: {work.title}",
        )
        logger.info(
            "Work order created",
            work_order_id=work.id,
            template_id=template.id,
            checkpoints=len(template.checkpoints),
        )
        self._db.expire(work, ["checkpoints"])
        return self.get(work.id)

    def update(self, work_id: int, data: WorkOrderUpdate, actor: Actor) -> WorkOrder:
        work = self.get(work_id)
        changes = data.model_dump(exclude_unset=True)
        # deadline and description may be cleared; the rest ignore null
        changes = {
            k: v for k, v in changes.items() if v is not None or k in ("deadline", "description")
        }
        self._apply_changes(work, changes)
        self._stamp_updated(work, actor)
        record_activity(
            self._db,
            work.id,
            actor,
            ActivityAction.UPDATE_WORK_ORDER,
            f"แก้ไขงาน: {work.title}",
            data={"fields": sorted(changes)},
        )
        return work

    def delete(self, work_id: int, actor: Actor) -> WorkOrder:
        work = self.get(work_id)
        self._soft_delete(work, actor)
        record_activity(
            self._db,
            work.id,
            actor,
            ActivityAction.DELETE_WORK_ORDER,
            f"ลบงาน: {work.title}",
        )
        return work
