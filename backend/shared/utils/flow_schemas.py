"""
Pydantic schemas for the FlowTrak (work tracking) endpoints.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from shared.config.constants import Limits
from shared.utils.schemas import CheckpointAction, CheckpointStatus, Priority, Role


def _strip_required(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("must not be blank")
    return value


def _strip_optional(value: str | None) -> str | None:
    if value is None:
        return None
    return _strip_required(value)


# =============================================================================
# Departments
# =============================================================================


class DepartmentCreate(BaseModel):
    name: str = Field(min_length=1, max_length=Limits.MAX_NAME_LENGTH)

    normalize_name = field_validator("name")(_strip_required)


class DepartmentUpdate(DepartmentCreate):
    pass


class DepartmentOutput(BaseModel):
    id: int
    name: str
    user_count: int = 0
    checkpoint_count: int = 0
    created_at: datetime


class DepartmentBrief(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True


# =============================================================================
# Templates
# =============================================================================


class TemplateCheckpointInput(BaseModel):
    name: str = Field(min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    owner_dept_id: int
    order: int = Field(ge=1)

    normalize_name = field_validator("name")(_strip_required)


class TemplateCheckpointUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    owner_dept_id: int | None = None
    order: int | None = Field(default=None, ge=1)

    normalize_name = field_validator("name")(_strip_optional)


class TemplateCheckpointCreate(TemplateCheckpointInput):
    template_id: int


class TemplateCheckpointOutput(BaseModel):
    id: int
    template_id: int
    name: str
    owner_dept_id: int
    order: int
    owner_dept: DepartmentBrief | None = None

    class Config:
        from_attributes = True


class TemplateCreate(BaseModel):
    name: str = Field(min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    description: str | None = Field(default=None, max_length=Limits.MAX_DESCRIPTION_LENGTH)
    checkpoints: list[TemplateCheckpointInput] = Field(default_factory=list)

    normalize_name = field_validator("name")(_strip_required)


class TemplateUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    description: str | None = Field(default=None, max_length=Limits.MAX_DESCRIPTION_LENGTH)
    # When given, replaces the whole checkpoint list
    checkpoints: list[TemplateCheckpointInput] | None = None

    normalize_name = field_validator("name")(_strip_optional)


class TemplateOutput(BaseModel):
    id: int
    name: str
    description: str | None = None
    created_at: datetime
    checkpoints: list[TemplateCheckpointOutput] = Field(default_factory=list)

    class Config:
        from_attributes = True


# =============================================================================
# Work orders and checkpoints
# =============================================================================


DeadlineStatus = Literal["normal", "warning", "urgent"]


class DeadlineInfo(BaseModel):
    status: DeadlineStatus
    text: str
    is_overdue: bool


class UserBrief(BaseModel):
    id: int
    name: str
    username: str

    class Config:
        from_attributes = True


class WorkOrderCreate(BaseModel):
    company: str = Field(min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    title: str = Field(min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    description: str | None = Field(default=None, max_length=Limits.MAX_DESCRIPTION_LENGTH)
    priority: Priority = "MEDIUM"
    deadline: datetime | None = None
    template_id: int

    normalize_company = field_validator("company")(_strip_required)
    normalize_title = field_validator("title")(_strip_required)


class WorkOrderUpdate(BaseModel):
    company: str | None = Field(default=None, min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    title: str | None = Field(default=None, min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    description: str | None = Field(default=None, max_length=Limits.MAX_DESCRIPTION_LENGTH)
    priority: Priority | None = None
    deadline: datetime | None = None

    normalize_company = field_validator("company")(_strip_optional)
    normalize_title = field_validator("title")(_strip_optional)


class CheckpointOutput(BaseModel):
    id: int
    work_order_id: int
    name: str
    owner_dept_id: int
    owner_dept: DepartmentBrief | None = None
    order: int
    status: CheckpointStatus
    started_at: datetime | None = None
    ended_at: datetime | None = None

    class Config:
        from_attributes = True


class WorkOrderSummary(BaseModel):
    id: int
    company: str
    title: str
    description: str | None = None
    priority: Priority
    deadline: datetime | None = None
    template_id: int | None = None
    created_at: datetime
    checkpoints: list[CheckpointOutput]
    current_checkpoint: CheckpointOutput | None = None
    progress: int  # percent of COMPLETED checkpoints
    deadline_info: DeadlineInfo | None = None


class CommentOutput(BaseModel):
    id: int
    work_order_id: int | None = None
    checkpoint_id: int | None = None
    parent_id: int | None = None
    user: UserBrief
    message: str | None = None
    file_url: str | None = None
    file_name: str | None = None
    mentioned_user_ids: list[int] = Field(default_factory=list)
    created_at: datetime
    replies: list["CommentOutput"] = Field(default_factory=list)


class ActivityOutput(BaseModel):
    id: int
    work_order_id: int
    user: UserBrief | None = None
    action: str
    detail: str | None = None
    data: dict | None = None
    created_at: datetime

    class Config:
        from_attributes = True


class WorkOrderDetail(WorkOrderSummary):
    comments: list[CommentOutput] = Field(default_factory=list)
    activity: list[ActivityOutput] = Field(default_factory=list)


class CheckpointActionRequest(BaseModel):
    action: CheckpointAction
    note: str | None = Field(default=None, max_length=Limits.MAX_NOTE_LENGTH)


class CheckpointActionResponse(BaseModel):
    checkpoint: CheckpointOutput
    activity: ActivityOutput


# =============================================================================
# Users
# =============================================================================


class FlowUserOutput(BaseModel):
    id: int
    username: str
    name: str
    email: str | None = None
    role: str
    department_id: int | None = None
    department: DepartmentBrief | None = None
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int


class FlowUserPage(BaseModel):
    users: list[FlowUserOutput]
    pagination: Pagination


class FlowUserCreate(BaseModel):
    name: str = Field(min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    username: str = Field(min_length=3, max_length=100, pattern=r"^[A-Za-z0-9._-]+$")
    password: str = Field(min_length=Limits.MIN_PASSWORD_LENGTH, max_length=200)
    email: str | None = Field(default=None, max_length=255)
    role: Role = "STAFF"
    department_id: int | None = None

    normalize_name = field_validator("name")(_strip_required)


class FlowUserUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    password: str | None = Field(default=None, min_length=Limits.MIN_PASSWORD_LENGTH, max_length=200)
    email: str | None = Field(default=None, max_length=255)
    role: Role | None = None
    department_id: int | None = None
    is_active: bool | None = None

    normalize_name = field_validator("name")(_strip_optional)
