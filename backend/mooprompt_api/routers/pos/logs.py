"""
System log viewer.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from mooprompt_api.routers._common import require_management
from mooprompt_api.services.system_log import list_actions
from shared.config.constants import Limits
from shared.infrastructure.db import get_db
from shared.utils.schemas import SystemLogOutput


router = APIRouter(prefix="/api/logs", tags=["logs"])


@router.get("", response_model=list[SystemLogOutput])
def list_logs(
    action: str | None = None,
    limit: int = Query(default=100, ge=1, le=Limits.MAX_LOG_LIMIT),
    db: Session = Depends(get_db),
    user: dict = Depends(require_management),
) -> list[SystemLogOutput]:
    return [SystemLogOutput.model_validate(entry) for entry in list_actions(db, action, limit)]
