"""
Department Service.
"""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from mooprompt_api.models import Checkpoint, Department, TemplateCheckpoint, User
from mooprompt_api.services.base_service import Actor, BaseService
from shared.utils.exceptions import DuplicateEntityError, NotFoundError, ValidationError
from shared.utils.flow_schemas import DepartmentCreate, DepartmentOutput, DepartmentUpdate


class DepartmentService(BaseService[Department]):
    """Departments with their member and checkpoint counts."""

    def __init__(self, db: Session):
        super().__init__(db, Department)

    def _counts(self, department_ids: list[int]) -> tuple[dict[int, int], dict[int, int]]:
        if not department_ids:
            return {}, {}
        users = dict(
            self._db.execute(
                select(User.department_id, func.count(User.id))
                .where(User.department_id.in_(department_ids), User.is_active.is_(True))
                .group_by(User.department_id)
            ).all()
        )
        checkpoints = dict(
            self._db.execute(
                select(Checkpoint.owner_dept_id, func.count(Checkpoint.id))
                .where(Checkpoint.owner_dept_id.in_(department_ids))
                .group_by(Checkpoint.owner_dept_id)
            ).all()
        )
        return users, checkpoints

    def to_output(self, department: Department) -> DepartmentOutput:
        users, checkpoints = self._counts([department.id])
        return DepartmentOutput(
            id=department.id,
            name=department.name,
            user_count=users.get(department.id, 0),
            checkpoint_count=checkpoints.get(department.id, 0),
            created_at=department.created_at,
        )

    def list_all(self) -> list[DepartmentOutput]:
        departments = self._repo.find_all(order_by=(Department.name, Department.id))
        users, checkpoints = self._counts([d.id for d in departments])
        return [
            DepartmentOutput(
                id=d.id,
                name=d.name,
                user_count=users.get(d.id, 0),
                checkpoint_count=checkpoints.get(d.id, 0),
                created_at=d.created_at,
            )
            for d in departments
        ]

    def get(self, department_id: int) -> Department:
        return self._repo.get_or_404(department_id, "department")

    def _ensure_unique_name(self, name: str, exclude_id: int | None = None) -> None:
        filters = [func.lower(Department.name) == name.lower()]
        if exclude_id is not None:
            filters.append(Department.id != exclude_id)
        if self._repo.exists(*filters):
            raise DuplicateEntityError("department", name)

    def create(self, data: DepartmentCreate, actor: Actor) -> Department:
        self._ensure_unique_name(data.name)
        department = Department(name=data.name)
        self._stamp_created(department, actor)
        return self._repo.add(department)

    def update(self, department_id: int, data: DepartmentUpdate, actor: Actor) -> Department:
        department = self.get(department_id)
        self._ensure_unique_name(data.name, exclude_id=department.id)
        department.name = data.name
        self._stamp_updated(department, actor)
        self._db.flush()
        return department

    def delete(self, department_id: int, actor: Actor) -> Department:
        """
        Soft delete a department.

        Raises:
            ValidationError: While active users or template steps still
                point at the department.
        """
        department = self.get(department_id)
        in_use = self._db.scalar(
            select(func.count(User.id)).where(
                User.department_id == department.id, User.is_active.is_(True)
            )
        ) or self._db.scalar(
            select(func.count(TemplateCheckpoint.id)).where(
                TemplateCheckpoint.owner_dept_id == department.id
            )
        )
        if in_use:
            raise ValidationError("departments.in_use", department_id=department.id)
        self._soft_delete(department, actor)
        self._db.flush()
        return department

    def ensure_exists(self, department_ids: set[int]) -> None:
        """Raise NotFoundError for the first unknown or deleted department id."""
        if not department_ids:
            return
        found = set(
            self._db.scalars(
                select(Department.id).where(
                    Department.id.in_(department_ids), Department.is_active.is_(True)
                )
            ).all()
        )
        for department_id in sorted(department_ids - found):
            raise NotFoundError("department", department_id)
