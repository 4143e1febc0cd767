"""
FlowTrak user endpoints: the @mention picker and user administration.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from mooprompt_api.routers._common import (
    PageParams,
    current_user,
    get_page_params,
    require_flow_admin,
)
from mooprompt_api.services.domain.user_service import UserService
from shared.config.constants import Limits
from shared.infrastructure.db import get_db, safe_commit
from shared.utils.flow_schemas import (
    FlowUserCreate,
    FlowUserOutput,
    FlowUserPage,
    FlowUserUpdate,
)
from shared.utils.schemas import SuccessResponse


router = APIRouter(tags=["flow-users"])


@router.get("/users", response_model=list[FlowUserOutput])
def mention_users(
    search: str | None = Query(default=None, max_length=Limits.MAX_SEARCH_TERM_LENGTH),
    db: Session = Depends(get_db),
    user: dict = Depends(current_user),
) -> list[FlowUserOutput]:
    return [FlowUserOutput.model_validate(u) for u in UserService(db).mention_candidates(search)]


@router.get("/admin/users", response_model=FlowUserPage)
def list_users(
    search: str | None = Query(default=None, max_length=Limits.MAX_SEARCH_TERM_LENGTH),
    role: str | None = None,
    department_id: int | None = None,
    paging: PageParams = Depends(get_page_params),
    db: Session = Depends(get_db),
    user: dict = Depends(require_flow_admin),
) -> FlowUserPage:
    users, total = UserService(db).list_users(
        search=search,
        role=role,
        department_id=department_id,
        page=paging.page,
        limit=paging.limit,
    )
    return FlowUserPage(
        users=[FlowUserOutput.model_validate(u) for u in users],
        pagination=paging.to_pagination(total),
    )


@router.get("/admin/users/{user_id}", response_model=FlowUserOutput)
def get_user(
    user_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_flow_admin),
) -> FlowUserOutput:
    return FlowUserOutput.model_validate(UserService(db).get(user_id))


@router.post("/admin/users", response_model=FlowUserOutput, status_code=status.HTTP_201_CREATED)
def create_user(
    body: FlowUserCreate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_flow_admin),
) -> FlowUserOutput:
    service = UserService(db)
    created = service.create(body, user)
    safe_commit(db)
    return FlowUserOutput.model_validate(service.get(created.id))


@router.put("/admin/users/{user_id}", response_model=FlowUserOutput)
def update_user(
    user_id: int,
    body: FlowUserUpdate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_flow_admin),
) -> FlowUserOutput:
    service = UserService(db)
    service.update(user_id, body, user)
    safe_commit(db)
    return FlowUserOutput.model_validate(service.get(user_id))


@router.delete("/admin/users/{user_id}", response_model=SuccessResponse)
def delete_user(
    user_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_flow_admin),
) -> SuccessResponse:
    UserService(db).delete(user_id, user)
    safe_commit(db)
    return SuccessResponse()
