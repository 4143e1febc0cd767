"""
Workflow template endpoints.

A template is an ordered list of checkpoints, each owned by a
department. Work orders copy the list when they are created.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from mooprompt_api.routers._common import current_user, require_flow_admin
from mooprompt_api.services.flow import TemplateService
from shared.infrastructure.db import get_db, safe_commit
from shared.utils.flow_schemas import (
    TemplateCheckpointCreate,
    TemplateCheckpointOutput,
    TemplateCheckpointUpdate,
    TemplateCreate,
    TemplateOutput,
    TemplateUpdate,
)
from shared.utils.schemas import SuccessResponse


router = APIRouter(prefix="/templates", tags=["flow-templates"])


# Step routes are declared before /{template_id} so "checkpoints" is not read as an id
@router.post(
    "/checkpoints",
    response_model=TemplateCheckpointOutput,
    status_code=status.HTTP_201_CREATED,
)
def add_template_checkpoint(
    body: TemplateCheckpointCreate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_flow_admin),
) -> TemplateCheckpointOutput:
    step = TemplateService(db).add_checkpoint(body, user)
    safe_commit(db)
    return TemplateCheckpointOutput.model_validate(step)


@router.put("/checkpoints/{step_id}", response_model=TemplateCheckpointOutput)
def update_template_checkpoint(
    step_id: int,
    body: TemplateCheckpointUpdate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_flow_admin),
) -> TemplateCheckpointOutput:
    step = TemplateService(db).update_checkpoint(step_id, body, user)
    safe_commit(db)
    return TemplateCheckpointOutput.model_validate(step)


@router.delete("/checkpoints/{step_id}", response_model=SuccessResponse)
def delete_template_checkpoint(
    step_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_flow_admin),
) -> SuccessResponse:
    TemplateService(db).delete_checkpoint(step_id, user)
    safe_commit(db)
    return SuccessResponse()


@router.get("", response_model=list[TemplateOutput])
def list_templates(
    db: Session = Depends(get_db),
    user: dict = Depends(current_user),
) -> list[TemplateOutput]:
    return [TemplateOutput.model_validate(t) for t in TemplateService(db).list_all()]


@router.get("/{template_id}", response_model=TemplateOutput)
def get_template(
    template_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(current_user),
) -> TemplateOutput:
    return TemplateOutput.model_validate(TemplateService(db).get(template_id))


@router.post("", response_model=TemplateOutput, status_code=status.HTTP_201_CREATED)
def create_template(
    body: TemplateCreate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_flow_admin),
) -> TemplateOutput:
    template = TemplateService(db).create(body, user)
    safe_commit(db)
    return TemplateOutput.model_validate(template)


@router.put("/{template_id}", response_model=TemplateOutput)
def update_template(
    template_id: int,
    body: TemplateUpdate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_flow_admin),
) -> TemplateOutput:
    """Partial update; a ``checkpoints`` list replaces every step."""
    template = TemplateService(db).update(template_id, body, user)
    safe_commit(db)
    return TemplateOutput.model_validate(template)


@router.delete("/{template_id}", response_model=SuccessResponse)
def delete_template(
    template_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_flow_admin),
) -> SuccessResponse:
    TemplateService(db).delete(template_id, user)
    safe_commit(db)
    return SuccessResponse()
