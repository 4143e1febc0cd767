"""
Shared Pydantic schemas used across the application.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


# =============================================================================
# Common Types
# =============================================================================

Role = Literal["ADMIN", "MANAGER", "CASHIER", "KITCHEN", "RUNNER", "STAFF"]
TableStatus = Literal["AVAILABLE", "OCCUPIED"]
SessionStatus = Literal["ACTIVE", "CLOSED"]
OrderItemStatus = Literal["WAITING", "COOKING", "DONE", "SERVED"]
ItemType = Literal["BUFFET_INCLUDED", "A_LA_CARTE"]
SessionType = Literal["BUFFET", "A_LA_CARTE"]
PromotionType = Literal["PERCENT", "FIXED", "PER_PERSON", "MIN_PEOPLE", "MIN_AMOUNT"]
ChargeType = Literal["PER_PERSON", "PER_SESSION"]
DiscountType = Literal["PERCENT", "FIXED", "PROMOTION"]
PaymentMethod = Literal["CASH", "QR"]
Priority = Literal["LOW", "MEDIUM", "HIGH", "URGENT"]
CheckpointStatus = Literal["PENDING", "PROCESSING", "COMPLETED", "RETURNED", "PROBLEM"]
CheckpointAction = Literal["start", "complete", "return", "problem"]


# =============================================================================
# Generic Responses
# =============================================================================


class SuccessResponse(BaseModel):
    success: bool = True


class FieldError(BaseModel):
    field: str
    message: str


class ErrorResponse(BaseModel):
    """Error envelope produced by the exception handlers."""

    detail: str
    errors: list[FieldError] | None = None


# =============================================================================
# Authentication Schemas
# =============================================================================


class LoginRequest(BaseModel):
    """Login request body."""

    username: str = Field(min_length=1, max_length=100)
    password: str = Field(min_length=1, max_length=200)


class UserInfo(BaseModel):
    """Basic user information included in auth responses."""

    id: int
    username: str
    name: str
    role: str
    department_id: int | None = None

    class Config:
        from_attributes = True


class LoginResponse(BaseModel):
    """Login response with JWT token."""

    access_token: str
    token_type: str = "Bearer"
    expires_in: int  # seconds
    user: UserInfo


class SystemLogOutput(BaseModel):
    id: int
    user_id: int | None = None
    action: str
    detail: dict | None = None
    ip_address: str | None = None
    user_agent: str | None = None
    created_at: datetime

    class Config:
        from_attributes = True
