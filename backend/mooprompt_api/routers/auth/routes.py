"""
Authentication router.
Handles staff login and the current-user lookup.
"""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from mooprompt_api.routers._common import current_user
from mooprompt_api.services.domain.auth_service import authenticate, current_user_row
from mooprompt_api.services.system_log import client_ip, log_action
from shared.config.constants import SystemAction
from shared.config.logging import audit_auth_event
from shared.config.settings import settings
from shared.infrastructure.db import get_db, safe_commit
from shared.security.auth import get_user_id, sign_user_token
from shared.security.rate_limit import limiter
from shared.utils.exceptions import UnauthorizedError
from shared.utils.schemas import LoginRequest, LoginResponse, UserInfo


router = APIRouter(prefix="/api/auth", tags=["auth"])


def login_response(db: Session, request: Request, body: LoginRequest) -> LoginResponse:
    """
    Shared sign-in flow for the POS and FlowTrak login endpoints.

    Failed attempts are recorded (and committed) before the 401 is raised.
    """
    ip_address = client_ip(request)
    user, reason = authenticate(db, body.username, body.password)

    if user is None:
        log_action(
            db,
            SystemAction.LOGIN_FAILED,
            {"username": body.username, "reason": reason},
            request=request,
        )
        safe_commit(db)
        audit_auth_event("LOGIN", username=body.username, success=False, reason=reason, ip_address=ip_address)
        raise UnauthorizedError("invalid_credentials")

    log_action(db, SystemAction.LOGIN, {"username": user.username}, user_id=user.id, request=request)
    safe_commit(db)
    audit_auth_event("LOGIN", user_id=user.id, username=user.username, ip_address=ip_address)

    return LoginResponse(
        access_token=sign_user_token(user),
        token_type="Bearer",
        expires_in=settings.jwt_access_token_expire_minutes * 60,
        user=UserInfo.model_validate(user),
    )


@router.post("/login", response_model=LoginResponse)
@limiter.limit(settings.login_rate_limit)
def login(request: Request, body: LoginRequest, db: Session = Depends(get_db)) -> LoginResponse:
    """
    Authenticate a staff member and return an access token.

    Unknown users, deactivated users and wrong passwords all get the
    same 401 so accounts cannot be probed.
    """
    return login_response(db, request, body)


@router.get("/me", response_model=UserInfo)
def me(
    db: Session = Depends(get_db),
    user: dict = Depends(current_user),
) -> UserInfo:
    """The signed-in staff member."""
    return UserInfo.model_validate(current_user_row(db, get_user_id(user)))
