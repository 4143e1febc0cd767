"""
Billing endpoints: preview a bill, take payment, look up closed bills.
"""

from datetime import date

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from mooprompt_api.routers._common import require_front_of_house
from mooprompt_api.services.domain.billing_service import BillingService, billing_output
from mooprompt_api.services.system_log import log_action
from shared.config.constants import SystemAction
from shared.infrastructure.db import get_db, safe_commit
from shared.infrastructure.events import BILLING_CLOSED, emit
from shared.security.auth import get_user_id
from shared.utils.pos_schemas import (
    BillingCloseRequest,
    BillingCloseResponse,
    BillingOutput,
    BillingPreviewOutput,
    BillingRequest,
)


router = APIRouter(prefix="/api/billing", tags=["billing"])


@router.post("/preview", response_model=BillingPreviewOutput)
def preview_bill(
    body: BillingRequest,
    db: Session = Depends(get_db),
    user: dict = Depends(require_front_of_house),
) -> BillingPreviewOutput:
    """Price a session without closing it."""
    return BillingService(db).preview(body)


@router.post("/close", response_model=BillingCloseResponse, status_code=status.HTTP_201_CREATED)
def close_bill(
    body: BillingCloseRequest,
    request: Request,
    db: Session = Depends(get_db),
    user: dict = Depends(require_front_of_house),
) -> BillingCloseResponse:
    """
    Take payment and close the session.

    Every order and order line is marked SERVED, the session is closed
    and the table becomes available again.
    """
    billing = BillingService(db).close(body, user)
    output = billing_output(billing)
    log_action(
        db,
        SystemAction.CLOSE_BILLING,
        {
            "billing_id": billing.id,
            "session_id": billing.table_session_id,
            "table_name": output.table_name,
            "grand_total": output.grand_total,
            "payment_method": output.payment_method,
        },
        user_id=get_user_id(user),
        request=request,
    )
    safe_commit(db)

    emit(
        BILLING_CLOSED,
        {
            "billing_id": billing.id,
            "session_id": billing.table_session_id,
            "table_id": billing.table_session.table_id,
            "table_name": output.table_name,
            "grand_total": output.grand_total,
        },
    )
    return BillingCloseResponse(billing=output)


@router.get("", response_model=list[BillingOutput])
def list_bills(
    day: date | None = Query(default=None, alias="date"),
    db: Session = Depends(get_db),
    user: dict = Depends(require_front_of_house),
) -> list[BillingOutput]:
    """Bills closed on a day (UTC), today by default."""
    return [billing_output(b) for b in BillingService(db).list_for_day(day)]


@router.get("/{billing_id}", response_model=BillingOutput)
def get_bill(
    billing_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_front_of_house),
) -> BillingOutput:
    return billing_output(BillingService(db).get(billing_id))
