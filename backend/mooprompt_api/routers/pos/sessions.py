"""
Table session endpoints: seat a table, cancel a sitting, look sessions up.
"""

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from mooprompt_api.routers._common import current_user, require_front_of_house
from mooprompt_api.services.domain.session_service import SessionService, session_output
from mooprompt_api.services.system_log import log_action
from shared.config.constants import SystemAction
from shared.infrastructure.db import get_db, safe_commit
from shared.infrastructure.events import SESSION_CANCELLED, SESSION_OPENED, emit
from shared.security.auth import get_user_id
from shared.utils.pos_schemas import (
    ActiveSessionOutput,
    SessionClose,
    SessionDetail,
    SessionOpen,
    SessionResponse,
)
from shared.utils.schemas import SuccessResponse


router = APIRouter(prefix="/api/sessions", tags=["sessions"])


@router.post("/open", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
def open_session(
    body: SessionOpen,
    request: Request,
    db: Session = Depends(get_db),
    user: dict = Depends(require_front_of_house),
) -> SessionResponse:
    """Seat a table: the table turns OCCUPIED and a session starts."""
    session = SessionService(db).open(body, user)
    output = session_output(session)
    log_action(
        db,
        SystemAction.OPEN_TABLE,
        {
            "session_id": session.id,
            "table_id": session.table_id,
            "table_name": session.table.name,
            "people_count": session.people_count,
            "package_id": session.package_id,
        },
        user_id=get_user_id(user),
        request=request,
    )
    safe_commit(db)

    emit(
        SESSION_OPENED,
        {
            "session_id": session.id,
            "table_id": session.table_id,
            "table_name": output.table.name,
            "people_count": session.people_count,
        },
    )
    return SessionResponse(session=output)


@router.post("/close", response_model=SuccessResponse)
def close_session(
    body: SessionClose,
    request: Request,
    db: Session = Depends(get_db),
    user: dict = Depends(require_front_of_house),
) -> SuccessResponse:
    """Cancel a sitting without billing. Refused while any order is open."""
    session = SessionService(db).close(body.session_id, user)
    table_name = session.table.name
    log_action(
        db,
        SystemAction.CANCEL_SESSION,
        {"session_id": session.id, "table_id": session.table_id, "table_name": table_name},
        user_id=get_user_id(user),
        request=request,
    )
    safe_commit(db)

    emit(
        SESSION_CANCELLED,
        {"session_id": session.id, "table_id": session.table_id, "table_name": table_name},
    )
    return SuccessResponse()


@router.get("/active", response_model=list[ActiveSessionOutput])
def list_active_sessions(
    db: Session = Depends(get_db),
    user: dict = Depends(current_user),
) -> list[ActiveSessionOutput]:
    return SessionService(db).list_active()


@router.get("/find", response_model=SessionResponse)
def find_session(
    table_name: str | None = Query(default=None),
    db: Session = Depends(get_db),
) -> SessionResponse:
    """Newest active session of the table whose name contains ``table_name``."""
    session = SessionService(db).find_by_table_name(table_name)
    return SessionResponse(session=session_output(session))


@router.get("/{session_id}", response_model=SessionDetail)
def get_session(
    session_id: int,
    db: Session = Depends(get_db),
) -> SessionDetail:
    """Public: the customer's phone loads this after scanning the table QR code."""
    return SessionService(db).detail(session_id)
