"""
Table management endpoints.
"""

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from mooprompt_api.routers._common import current_user, require_front_of_house
from mooprompt_api.services.domain.table_service import TableService
from mooprompt_api.services.system_log import log_action
from shared.config.constants import SystemAction
from shared.infrastructure.db import get_db, safe_commit
from shared.security.auth import get_user_id
from shared.utils.pos_schemas import TableCreate, TableOutput, TableUpdate
from shared.utils.schemas import SuccessResponse, TableStatus


router = APIRouter(prefix="/api/tables", tags=["tables"])


@router.get("", response_model=list[TableOutput])
def list_tables(
    status: TableStatus | None = None,
    db: Session = Depends(get_db),
    user: dict = Depends(current_user),
) -> list[TableOutput]:
    """Tables ordered by name, each with its current session if seated."""
    return TableService(db).list_tables(status)


@router.get("/{table_id}", response_model=TableOutput)
def get_table(
    table_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(current_user),
) -> TableOutput:
    service = TableService(db)
    return service.to_output(service.get(table_id))


@router.post("", response_model=TableOutput, status_code=status.HTTP_201_CREATED)
def create_table(
    body: TableCreate,
    request: Request,
    db: Session = Depends(get_db),
    user: dict = Depends(require_front_of_house),
) -> TableOutput:
    service = TableService(db)
    table = service.create(body, user)
    log_action(
        db,
        SystemAction.CREATE_TABLE,
        {"table_id": table.id, "name": table.name},
        user_id=get_user_id(user),
        request=request,
    )
    safe_commit(db)
    return service.to_output(table)


@router.patch("/{table_id}", response_model=TableOutput)
def update_table(
    table_id: int,
    body: TableUpdate,
    request: Request,
    db: Session = Depends(get_db),
    user: dict = Depends(require_front_of_house),
) -> TableOutput:
    service = TableService(db)
    table = service.update(table_id, body, user)
    log_action(
        db,
        SystemAction.UPDATE_TABLE,
        {"table_id": table.id, "changes": body.model_dump(exclude_unset=True)},
        user_id=get_user_id(user),
        request=request,
    )
    safe_commit(db)
    return service.to_output(table)


@router.delete("/{table_id}", response_model=SuccessResponse)
def delete_table(
    table_id: int,
    request: Request,
    db: Session = Depends(get_db),
    user: dict = Depends(require_front_of_house),
) -> SuccessResponse:
    """Soft delete. Refused while the table is seated."""
    table = TableService(db).delete(table_id, user)
    log_action(
        db,
        SystemAction.DELETE_TABLE,
        {"table_id": table.id, "name": table.name},
        user_id=get_user_id(user),
        request=request,
    )
    safe_commit(db)
    return SuccessResponse()
