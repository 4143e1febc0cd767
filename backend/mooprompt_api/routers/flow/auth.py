"""
FlowTrak sign-in.

Shares the POS login flow but with a stricter per-client rate limit.
"""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from mooprompt_api.routers._common import current_user
from mooprompt_api.routers.auth.routes import login_response
from mooprompt_api.services.domain.auth_service import current_user_row
from shared.config.logging import audit_auth_event
from shared.config.settings import settings
from shared.infrastructure.db import get_db
from shared.security.auth import get_user_id
from shared.security.rate_limit import limiter
from shared.utils.schemas import LoginRequest, LoginResponse, SuccessResponse, UserInfo


router = APIRouter(prefix="/auth", tags=["flow-auth"])


@router.post("/login", response_model=LoginResponse)
@limiter.limit(settings.flow_login_rate_limit)
def login(request: Request, body: LoginRequest, db: Session = Depends(get_db)) -> LoginResponse:
    return login_response(db, request, body)


@router.post("/logout", response_model=SuccessResponse)
def logout(user: dict = Depends(current_user)) -> SuccessResponse:
    """Tokens are stateless; the client drops its copy."""
    audit_auth_event("LOGOUT", user_id=get_user_id(user), username=user.get("username"))
    return SuccessResponse()


@router.get("/me", response_model=UserInfo)
def me(db: Session = Depends(get_db), user: dict = Depends(current_user)) -> UserInfo:
    return UserInfo.model_validate(current_user_row(db, get_user_id(user)))
