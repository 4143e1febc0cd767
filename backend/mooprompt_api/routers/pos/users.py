"""
Staff account administration (ADMIN only).
"""

from typing import Literal

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from mooprompt_api.routers._common import require_admin
from mooprompt_api.services.domain.user_service import UserService
from mooprompt_api.services.system_log import log_action
from shared.config.constants import Limits, SystemAction
from shared.infrastructure.db import get_db, safe_commit
from shared.security.auth import get_user_id
from shared.utils.pos_schemas import UserCreate, UserListOutput, UserOutput, UserUpdate
from shared.utils.schemas import SuccessResponse


router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("", response_model=UserListOutput)
def list_users(
    search: str | None = Query(default=None, max_length=Limits.MAX_SEARCH_TERM_LENGTH),
    role: str | None = None,
    active: Literal["active", "inactive", "all"] = "all",
    sort_by: Literal["name", "username", "role", "created_at"] = "created_at",
    sort_order: Literal["asc", "desc"] = "desc",
    db: Session = Depends(get_db),
    user: dict = Depends(require_admin),
) -> UserListOutput:
    users, total = UserService(db).list_users(
        search=search, role=role, active=active, sort_by=sort_by, sort_order=sort_order
    )
    return UserListOutput(users=[UserOutput.model_validate(u) for u in users], total=total)


@router.post("", response_model=UserOutput, status_code=status.HTTP_201_CREATED)
def create_user(
    body: UserCreate,
    request: Request,
    db: Session = Depends(get_db),
    user: dict = Depends(require_admin),
) -> UserOutput:
    created = UserService(db).create(body, user)
    log_action(
        db,
        SystemAction.CREATE_USER,
        {"target_user_id": created.id, "username": created.username, "role": created.role},
        user_id=get_user_id(user),
        request=request,
    )
    safe_commit(db)
    return UserOutput.model_validate(created)


@router.patch("/{user_id}", response_model=UserOutput)
def update_user(
    user_id: int,
    body: UserUpdate,
    request: Request,
    db: Session = Depends(get_db),
    user: dict = Depends(require_admin),
) -> UserOutput:
    updated = UserService(db).update(user_id, body, user)
    changes = body.model_dump(exclude_unset=True)
    if "password" in changes:
        changes["password"] = "***"
    log_action(
        db,
        SystemAction.UPDATE_USER,
        {"target_user_id": updated.id, "changes": changes},
        user_id=get_user_id(user),
        request=request,
    )
    safe_commit(db)
    return UserOutput.model_validate(updated)


@router.delete("/{user_id}", response_model=SuccessResponse)
def delete_user(
    user_id: int,
    request: Request,
    db: Session = Depends(get_db),
    user: dict = Depends(require_admin),
) -> SuccessResponse:
    """Deactivates the account; an admin cannot remove their own."""
    removed = UserService(db).delete(user_id, user)
    log_action(
        db,
        SystemAction.DELETE_USER,
        {"target_user_id": removed.id, "username": removed.username},
        user_id=get_user_id(user),
        request=request,
    )
    safe_commit(db)
    return SuccessResponse()
