"""
Order endpoints: customer submission, kitchen and runner queues.
"""

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from mooprompt_api.routers._common import require_kitchen
from mooprompt_api.services.domain.order_service import (
    OrderService,
    order_item_output,
    order_output,
)
from mooprompt_api.services.system_log import log_action
from shared.config.constants import SystemAction
from shared.infrastructure.db import get_db, safe_commit
from shared.infrastructure.events import ORDER_NEW, ORDER_STATUS_EVENTS, emit
from shared.security.auth import get_user_id, optional_user_context
from shared.utils.pos_schemas import (
    OrderCreate,
    OrderItemOutput,
    OrderItemStatusUpdate,
    OrderOutput,
    RunnerItemOutput,
)


router = APIRouter(prefix="/api/orders", tags=["orders"])


@router.post("", response_model=OrderOutput, status_code=status.HTTP_201_CREATED)
def create_order(
    body: OrderCreate,
    request: Request,
    db: Session = Depends(get_db),
    user: dict | None = Depends(optional_user_context),
) -> OrderOutput:
    """
    Submit an order for a table session.

    Open to customers; a signed-in staff member ordering on a table's
    behalf is recorded as the creator.
    """
    order = OrderService(db).create(body, user)
    output = order_output(order)
    log_action(
        db,
        SystemAction.ORDER_CREATE,
        {
            "order_id": order.id,
            "session_id": order.table_session_id,
            "table_name": output.table_name,
            "items": [{"menu_item_id": i.menu_item_id, "qty": i.qty} for i in output.items],
        },
        user_id=get_user_id(user),
        request=request,
    )
    safe_commit(db)

    emit(ORDER_NEW, output.model_dump(mode="json"))
    return output


@router.patch("/items/status", response_model=OrderItemOutput)
def update_item_status(
    body: OrderItemStatusUpdate,
    request: Request,
    db: Session = Depends(get_db),
    user: dict = Depends(require_kitchen),
) -> OrderItemOutput:
    """Move one order line forward through WAITING, COOKING, DONE, SERVED."""
    item = OrderService(db).update_item_status(body.order_item_id, body.status, user)
    output = order_item_output(item)
    table_name = item.order.table_session.table.name
    log_action(
        db,
        SystemAction.order_status(body.status),
        {"order_item_id": item.id, "order_id": item.order_id, "table_name": table_name},
        user_id=get_user_id(user),
        request=request,
    )
    safe_commit(db)

    emit(
        ORDER_STATUS_EVENTS[body.status],
        {
            **output.model_dump(mode="json"),
            "table_name": table_name,
            "table_session_id": item.order.table_session_id,
        },
    )
    return output


@router.get("/kitchen", response_model=list[OrderOutput])
def kitchen_orders(
    db: Session = Depends(get_db),
    user: dict = Depends(require_kitchen),
) -> list[OrderOutput]:
    """Open orders with lines still WAITING, COOKING or DONE, newest first."""
    return OrderService(db).kitchen_queue()


@router.get("/runner", response_model=list[RunnerItemOutput])
def runner_items(
    db: Session = Depends(get_db),
    user: dict = Depends(require_kitchen),
) -> list[RunnerItemOutput]:
    return OrderService(db).runner_queue()


@router.get("/session/{session_id}", response_model=list[OrderOutput])
def session_orders(session_id: int, db: Session = Depends(get_db)) -> list[OrderOutput]:
    """Public: a table's own order history."""
    return OrderService(db).for_session(session_id)


@router.get("/{order_id}", response_model=OrderOutput)
def get_order(
    order_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_kitchen),
) -> OrderOutput:
    return order_output(OrderService(db).get(order_id))
