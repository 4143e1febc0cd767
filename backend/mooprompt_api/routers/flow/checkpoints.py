"""
Checkpoint actions.

Members of the owning department (or an ADMIN) move a checkpoint
through PENDING, PROCESSING and COMPLETED, or send it back.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from mooprompt_api.routers._common import current_user
from mooprompt_api.services.flow import CheckpointService
from mooprompt_api.services.flow.activity import activity_output
from shared.infrastructure.db import get_db, safe_commit
from shared.infrastructure.events import ACTIVITY_NEW, CHECKPOINT_UPDATED, emit, work_room
from shared.utils.flow_schemas import (
    CheckpointActionRequest,
    CheckpointActionResponse,
    CheckpointOutput,
)


router = APIRouter(prefix="/checkpoints", tags=["flow-checkpoints"])


@router.post("/{checkpoint_id}/action", response_model=CheckpointActionResponse)
def checkpoint_action(
    checkpoint_id: int,
    body: CheckpointActionRequest,
    db: Session = Depends(get_db),
    user: dict = Depends(current_user),
) -> CheckpointActionResponse:
    """
    Apply ``start``, ``complete``, ``return`` or ``problem``.

    Starting requires every earlier checkpoint to be COMPLETED.
    """
    checkpoint, entry = CheckpointService(db).apply_action(
        checkpoint_id, body.action, user, body.note
    )
    safe_commit(db)

    response = CheckpointActionResponse(
        checkpoint=CheckpointOutput.model_validate(checkpoint),
        activity=activity_output(entry),
    )
    room = work_room(checkpoint.work_order_id)
    emit(CHECKPOINT_UPDATED, response.checkpoint.model_dump(mode="json"), room=room)
    emit(ACTIVITY_NEW, response.activity.model_dump(mode="json"), room=room)
    return response
