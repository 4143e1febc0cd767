"""
Department endpoints.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from mooprompt_api.routers._common import current_user, require_flow_admin
from mooprompt_api.services.flow import DepartmentService
from shared.infrastructure.db import get_db, safe_commit
from shared.utils.flow_schemas import DepartmentCreate, DepartmentOutput, DepartmentUpdate
from shared.utils.schemas import SuccessResponse


router = APIRouter(prefix="/departments", tags=["flow-departments"])


@router.get("", response_model=list[DepartmentOutput])
def list_departments(
    db: Session = Depends(get_db),
    user: dict = Depends(current_user),
) -> list[DepartmentOutput]:
    """Departments ordered by name, with user and checkpoint counts."""
    return DepartmentService(db).list_all()


@router.get("/{department_id}", response_model=DepartmentOutput)
def get_department(
    department_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(current_user),
) -> DepartmentOutput:
    service = DepartmentService(db)
    return service.to_output(service.get(department_id))


@router.post("", response_model=DepartmentOutput, status_code=status.HTTP_201_CREATED)
def create_department(
    body: DepartmentCreate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_flow_admin),
) -> DepartmentOutput:
    service = DepartmentService(db)
    department = service.create(body, user)
    safe_commit(db)
    return service.to_output(department)


@router.put("/{department_id}", response_model=DepartmentOutput)
def update_department(
    department_id: int,
    body: DepartmentUpdate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_flow_admin),
) -> DepartmentOutput:
    service = DepartmentService(db)
    department = service.update(department_id, body, user)
    safe_commit(db)
    return service.to_output(department)


@router.delete("/{department_id}", response_model=SuccessResponse)
def delete_department(
    department_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_flow_admin),
) -> SuccessResponse:
    """Refused while users or template steps still belong to the department."""
    DepartmentService(db).delete(department_id, user)
    safe_commit(db)
    return SuccessResponse()
