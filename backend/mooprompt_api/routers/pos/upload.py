"""
Image upload for menu items and the restaurant logo.
"""

from fastapi import APIRouter, Depends, File, Request, UploadFile
from sqlalchemy.orm import Session

from mooprompt_api.routers._common import require_management
from mooprompt_api.services.storage import save_restaurant_image
from mooprompt_api.services.system_log import log_action
from shared.config.constants import SystemAction
from shared.infrastructure.db import get_db, safe_commit
from shared.security.auth import get_user_id
from shared.utils.pos_schemas import UploadOutput


router = APIRouter(prefix="/api/upload", tags=["upload"])


@router.post("/image", response_model=UploadOutput)
def upload_image(
    request: Request,
    file: UploadFile | None = File(default=None),
    db: Session = Depends(get_db),
    user: dict = Depends(require_management),
) -> UploadOutput:
    """JPEG, PNG or WebP up to the configured size limit."""
    url = save_restaurant_image(file)
    log_action(
        db,
        SystemAction.UPLOAD_IMAGE,
        {"url": url, "original_name": file.filename if file else None},
        user_id=get_user_id(user),
        request=request,
    )
    safe_commit(db)
    return UploadOutput(url=url)
