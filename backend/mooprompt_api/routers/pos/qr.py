"""
Table QR codes and printable tickets.
"""

from fastapi import APIRouter, Depends, Query, Request, Response
from sqlalchemy.orm import Session

from mooprompt_api.routers._common import require_front_of_house
from mooprompt_api.services.domain.qr_service import (
    public_base_url,
    qr_data_url,
    render_ticket_pdf,
    session_url,
)
from mooprompt_api.services.domain.restaurant_service import RestaurantService
from mooprompt_api.services.domain.session_service import SessionService
from shared.config.constants import SessionStatus
from shared.infrastructure.db import get_db, safe_commit
from shared.utils.exceptions import ValidationError
from shared.utils.pos_schemas import QrCodeOutput


router = APIRouter(prefix="/api/qr", tags=["qr"])


def _require_session_id(session_id: int | None) -> int:
    if session_id is None:
        raise ValidationError("qr.session_id_required")
    return session_id


@router.get("/generate", response_model=QrCodeOutput)
def generate_qr(
    request: Request,
    session_id: int | None = Query(default=None),
    db: Session = Depends(get_db),
    user: dict = Depends(require_front_of_house),
) -> QrCodeOutput:
    session = SessionService(db).get(_require_session_id(session_id))
    url = session_url(public_base_url(request), session.id)
    return QrCodeOutput(session_id=session.id, session_url=url, qr_code_url=qr_data_url(url))


@router.get("/pdf")
def ticket_pdf(
    request: Request,
    session_id: int | None = Query(default=None),
    db: Session = Depends(get_db),
    user: dict = Depends(require_front_of_house),
) -> Response:
    """80 mm thermal ticket for a seated table."""
    sessions = SessionService(db)
    session = sessions.get(_require_session_id(session_id))
    if session.status != SessionStatus.ACTIVE:
        raise ValidationError("qr.session_not_active", session_id=session.id)

    restaurant = RestaurantService(db).get_or_create()
    safe_commit(db)
    charges = sessions._charges(session.extra_charge_ids, active_only=False)
    url = session_url(public_base_url(request), session.id)
    pdf = render_ticket_pdf(session, restaurant, charges, url)
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'inline; filename="table-{session.table.name}-qr.pdf"'},
    )
