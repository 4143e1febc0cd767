"""
Restaurant profile shown on the customer screen and printed tickets.
"""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from mooprompt_api.routers._common import require_management
from mooprompt_api.services.domain.restaurant_service import RestaurantService
from mooprompt_api.services.system_log import log_action
from shared.config.constants import SystemAction
from shared.infrastructure.db import get_db, safe_commit
from shared.security.auth import get_user_id
from shared.utils.pos_schemas import RestaurantInfoOutput, RestaurantInfoUpdate


router = APIRouter(prefix="/api/restaurant-info", tags=["restaurant"])


@router.get("", response_model=RestaurantInfoOutput)
def get_restaurant_info(db: Session = Depends(get_db)) -> RestaurantInfoOutput:
    """Public. The record is created with defaults on first read."""
    info = RestaurantService(db).get_or_create()
    safe_commit(db)
    return RestaurantInfoOutput.model_validate(info)


@router.patch("", response_model=RestaurantInfoOutput)
def update_restaurant_info(
    body: RestaurantInfoUpdate,
    request: Request,
    db: Session = Depends(get_db),
    user: dict = Depends(require_management),
) -> RestaurantInfoOutput:
    info = RestaurantService(db).update(body, user)
    log_action(
        db,
        SystemAction.UPDATE_RESTAURANT_INFO,
        {"changes": body.model_dump(exclude_unset=True)},
        user_id=get_user_id(user),
        request=request,
    )
    safe_commit(db)
    return RestaurantInfoOutput.model_validate(info)
