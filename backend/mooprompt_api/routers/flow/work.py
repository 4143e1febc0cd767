"""
Work order endpoints.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from mooprompt_api.routers._common import current_user, require_flow_admin, require_flow_manager
from mooprompt_api.services.flow import WorkOrderService, work_order_summary
from shared.config.constants import Limits
from shared.infrastructure.db import get_db, safe_commit
from shared.utils.flow_schemas import (
    WorkOrderCreate,
    WorkOrderDetail,
    WorkOrderSummary,
    WorkOrderUpdate,
)
from shared.utils.schemas import CheckpointStatus, Priority, SuccessResponse


router = APIRouter(prefix="/work", tags=["flow-work"])


@router.get("", response_model=list[WorkOrderSummary])
def list_work_orders(
    department_id: int | None = None,
    status: CheckpointStatus | None = None,
    company: str | None = Query(default=None, max_length=Limits.MAX_SEARCH_TERM_LENGTH),
    priority: Priority | None = None,
    db: Session = Depends(get_db),
    user: dict = Depends(current_user),
) -> list[WorkOrderSummary]:
    """
    Work orders, newest first.

    ``department_id`` and ``status`` match work orders with at least one
    checkpoint owned by that department or in that status.
    """
    return WorkOrderService(db).list_work_orders(department_id, status, company, priority)


@router.post("", response_model=WorkOrderSummary, status_code=status.HTTP_201_CREATED)
def create_work_order(
    body: WorkOrderCreate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_flow_manager),
) -> WorkOrderSummary:
    work = WorkOrderService(db).create(body, user)
    safe_commit(db)
    return work_order_summary(work)


@router.get("/{work_id}", response_model=WorkOrderDetail)
def get_work_order(
    work_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(current_user),
) -> WorkOrderDetail:
    return WorkOrderService(db).detail(work_id)


@router.put("/{work_id}", response_model=WorkOrderSummary)
def update_work_order(
    work_id: int,
    body: WorkOrderUpdate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_flow_manager),
) -> WorkOrderSummary:
    work = WorkOrderService(db).update(work_id, body, user)
    safe_commit(db)
    return work_order_summary(work)


@router.delete("/{work_id}", response_model=SuccessResponse)
def delete_work_order(
    work_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_flow_admin),
) -> SuccessResponse:
    WorkOrderService(db).delete(work_id, user)
    safe_commit(db)
    return SuccessResponse()
