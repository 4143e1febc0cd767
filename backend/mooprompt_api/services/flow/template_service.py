"""
Template Service.

A template is an ordered list of checkpoints, each owned by a
department. Work orders copy the list when they are created, so
editing a template never changes existing work orders.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from mooprompt_api.models import Template, TemplateCheckpoint
from mooprompt_api.services.base_service import Actor, BaseService
from mooprompt_api.services.flow.department_service import DepartmentService
from shared.utils.exceptions import NotFoundError, ValidationError
from shared.utils.flow_schemas import (
    TemplateCheckpointCreate,
    TemplateCheckpointInput,
    TemplateCheckpointUpdate,
    TemplateCreate,
    TemplateUpdate,
)

_TEMPLATE_LOAD = [
    selectinload(Template.checkpoints).selectinload(TemplateCheckpoint.owner_dept),
]


def _ensure_distinct_orders(steps: list[TemplateCheckpointInput]) -> None:
    seen: set[int] = set()
    for step in steps:
        if step.order in seen:
            raise ValidationError("templates.duplicate_order", order=step.order)
        seen.add(step.order)


class TemplateService(BaseService[Template]):
    def __init__(self, db: Session):
        super().__init__(db, Template)
        self._departments = DepartmentService(db)

    def list_all(self) -> list[Template]:
        return list(self._repo.find_all(options=_TEMPLATE_LOAD, order_by=(Template.name, Template.id)))

    def get(self, template_id: int) -> Template:
        return self._repo.get_or_404(template_id, "template", options=_TEMPLATE_LOAD)

    def _add_steps(self, template: Template, steps: list[TemplateCheckpointInput]) -> None:
        _ensure_distinct_orders(steps)
        self._departments.ensure_exists({s.owner_dept_id for s in steps})
        for step in steps:
            self._db.add(
                TemplateCheckpoint(
                    template_id=template.id,
                    name=step.name,
                    owner_dept_id=step.owner_dept_id,
                    order=step.order,
                )
            )

    def create(self, data: TemplateCreate, actor: Actor) -> Template:
        template = Template(name=data.name, description=data.description)
        self._stamp_created(template, actor)
        self._repo.add(template)
        self._add_steps(template, data.checkpoints)
        self._db.flush()
        self._db.expire(template, ["checkpoints"])
        return self.get(template.id)

    def update(self, template_id: int, data: TemplateUpdate, actor: Actor) -> Template:
        template = self.get(template_id)
        changes = data.model_dump(exclude_unset=True, exclude={"checkpoints"})
        if changes.get("name", "") is None:
            del changes["name"]
        self._apply_changes(template, changes)

        if data.checkpoints is not None:
            template.checkpoints.clear()
            self._db.flush()
            self._add_steps(template, data.checkpoints)

        self._stamp_updated(template, actor)
        self._db.flush()
        self._db.expire(template, ["checkpoints"])
        return self.get(template.id)

    def delete(self, template_id: int, actor: Actor) -> Template:
        template = self.get(template_id)
        self._soft_delete(template, actor)
        self._db.flush()
        return template

    # =========================================================================
    # Template checkpoints
    # =========================================================================

    def _step(self, step_id: int) -> TemplateCheckpoint:
        step = self._db.scalar(
            select(TemplateCheckpoint)
            .join(Template, Template.id == TemplateCheckpoint.template_id)
            .where(TemplateCheckpoint.id == step_id, Template.is_active.is_(True))
            .options(selectinload(TemplateCheckpoint.owner_dept))
        )
        if step is None:
            raise NotFoundError("template_checkpoint", step_id)
        return step

    def _ensure_order_free(self, template_id: int, order: int, exclude_id: int | None = None) -> None:
        query = select(TemplateCheckpoint.id).where(
            TemplateCheckpoint.template_id == template_id,
            TemplateCheckpoint.order == order,
        )
        if exclude_id is not None:
            query = query.where(TemplateCheckpoint.id != exclude_id)
        if self._db.scalar(query.limit(1)) is not None:
            raise ValidationError("templates.duplicate_order", order=order)

    def add_checkpoint(self, data: TemplateCheckpointCreate, actor: Actor) -> TemplateCheckpoint:
        template = self.get(data.template_id)
        self._departments.ensure_exists({data.owner_dept_id})
        self._ensure_order_free(template.id, data.order)
        step = TemplateCheckpoint(
            template_id=template.id,
            name=data.name,
            owner_dept_id=data.owner_dept_id,
            order=data.order,
        )
        self._db.add(step)
        self._stamp_updated(template, actor)
        self._db.flush()
        return self._step(step.id)

    def update_checkpoint(
        self, step_id: int, data: TemplateCheckpointUpdate, actor: Actor
    ) -> TemplateCheckpoint:
        step = self._step(step_id)
        changes = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}
        if "owner_dept_id" in changes:
            self._departments.ensure_exists({changes["owner_dept_id"]})
        if "order" in changes:
            self._ensure_order_free(step.template_id, changes["order"], exclude_id=step.id)
        self._apply_changes(step, changes)
        self._stamp_updated(step.template, actor)
        self._db.flush()
        self._db.expire(step, ["owner_dept"])
        return step

    def delete_checkpoint(self, step_id: int, actor: Actor) -> None:
        step = self._step(step_id)
        self._stamp_updated(step.template, actor)
        self._db.delete(step)
        self._db.flush()
