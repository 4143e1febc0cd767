"""
Comment threads on work orders and checkpoints, with attachments.
"""

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session

from mooprompt_api.routers._common import current_user
from mooprompt_api.services.flow import CommentService, parse_mentions
from mooprompt_api.services.flow.activity import comment_output
from mooprompt_api.services.storage import attachment_path, content_type_for
from shared.infrastructure.db import get_db, safe_commit
from shared.infrastructure.events import COMMENT_NEW, emit, work_room
from shared.utils.flow_schemas import CommentOutput


router = APIRouter(tags=["flow-comments"])


@router.get("/comments", response_model=list[CommentOutput])
def list_comments(
    checkpoint_id: int | None = None,
    work_id: int | None = None,
    db: Session = Depends(get_db),
    user: dict = Depends(current_user),
) -> list[CommentOutput]:
    """Top-level comments, oldest first, each with its replies."""
    return CommentService(db).list_threads(checkpoint_id, work_id)


@router.post("/comments", response_model=CommentOutput, status_code=status.HTTP_201_CREATED)
def create_comment(
    checkpoint_id: int | None = Form(default=None),
    work_id: int | None = Form(default=None),
    parent_id: int | None = Form(default=None),
    message: str | None = Form(default=None),
    mentioned_user_ids: str | None = Form(default=None),
    file: UploadFile | None = File(default=None),
    db: Session = Depends(get_db),
    user: dict = Depends(current_user),
) -> CommentOutput:
    """
    Post a comment or a reply (multipart form).

    ``mentioned_user_ids`` is a JSON array of user ids. Either a message
    or a file is required.
    """
    comment, work_order_id = CommentService(db).create(
        user,
        checkpoint_id=checkpoint_id,
        work_id=work_id,
        parent_id=parent_id,
        message=message,
        file=file,
        mentioned_user_ids=parse_mentions(mentioned_user_ids),
    )
    safe_commit(db)

    output = comment_output(comment)
    emit(COMMENT_NEW, output.model_dump(mode="json"), room=work_room(work_order_id))
    return output


@router.get("/uploads/{name}")
def download_attachment(name: str, user: dict = Depends(current_user)) -> FileResponse:
    path = attachment_path(name)
    return FileResponse(path, media_type=content_type_for(path.name), filename=path.name)
