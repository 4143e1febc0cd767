"""
Pydantic schemas for the restaurant POS endpoints.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from shared.config.constants import Limits
from shared.utils.schemas import (
    ChargeType,
    DiscountType,
    ItemType,
    OrderItemStatus,
    PaymentMethod,
    PromotionType,
    Role,
    SessionStatus,
    SessionType,
    TableStatus,
)
from shared.utils.validators import validate_relative_url


def _strip_required(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("must not be blank")
    return value


def _strip_optional(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return _strip_required(value)


# =============================================================================
# Table Schemas
# =============================================================================


class TableCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)

    normalize_name = field_validator("name")(_strip_required)


class TableUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    status: TableStatus | None = None

    normalize_name = field_validator("name")(_strip_optional)


class ActiveSessionBrief(BaseModel):
    id: int
    people_count: int
    start_time: datetime

    class Config:
        from_attributes = True


class TableOutput(BaseModel):
    id: int
    name: str
    status: str
    created_at: datetime
    active_session: ActiveSessionBrief | None = None


class TableBrief(BaseModel):
    id: int
    name: str
    status: str

    class Config:
        from_attributes = True


# =============================================================================
# Package / Extra charge / Promotion Schemas
# =============================================================================


class PackageOutput(BaseModel):
    id: int
    name: str
    price_per_person: float
    duration_minutes: int | None = None

    class Config:
        from_attributes = True


class PackageCreate(BaseModel):
    name: str = Field(min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    price_per_person: float = Field(gt=0)
    duration_minutes: int | None = Field(default=None, gt=0)

    normalize_name = field_validator("name")(_strip_required)


class PackageUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    price_per_person: float | None = Field(default=None, gt=0)
    duration_minutes: int | None = Field(default=None, gt=0)

    normalize_name = field_validator("name")(_strip_optional)


class ExtraChargeOutput(BaseModel):
    id: int
    name: str
    price: float
    charge_type: str
    active: bool

    class Config:
        from_attributes = True


class ExtraChargeCreate(BaseModel):
    name: str = Field(min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    price: float = Field(gt=0)
    charge_type: ChargeType
    active: bool = True

    normalize_name = field_validator("name")(_strip_required)


class ExtraChargeUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    price: float | None = Field(default=None, gt=0)
    charge_type: ChargeType | None = None
    active: bool | None = None

    normalize_name = field_validator("name")(_strip_optional)


class PromotionCondition(BaseModel):
    buy: int | None = Field(default=None, ge=1)
    pay: int | None = Field(default=None, ge=0)
    min_people: int | None = Field(default=None, ge=1)
    min_amount: float | None = Field(default=None, gt=0)


class PromotionOutput(BaseModel):
    id: int
    name: str
    type: str
    value: float
    condition: dict | None = None
    active: bool
    created_at: datetime

    class Config:
        from_attributes = True


class PromotionCreate(BaseModel):
    name: str = Field(min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    type: PromotionType
    value: float = Field(default=0, ge=0)
    condition: PromotionCondition | None = None
    active: bool = True

    normalize_name = field_validator("name")(_strip_required)


class PromotionUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    type: PromotionType | None = None
    value: float | None = Field(default=None, ge=0)
    condition: PromotionCondition | None = None
    active: bool | None = None

    normalize_name = field_validator("name")(_strip_optional)


# =============================================================================
# Session Schemas
# =============================================================================


class SessionOpen(BaseModel):
    table_id: int
    people_count: int = Field(gt=0, le=Limits.MAX_PEOPLE_COUNT)
    package_id: int | None = None
    extra_charge_ids: list[int] = Field(default_factory=list)


class SessionClose(BaseModel):
    session_id: int


class SessionOutput(BaseModel):
    id: int
    table_id: int
    package_id: int | None = None
    people_count: int
    status: SessionStatus
    start_time: datetime
    expire_time: datetime | None = None
    end_time: datetime | None = None
    extra_charge_ids: list[int] = Field(default_factory=list)
    session_type: SessionType
    table: TableBrief
    package: PackageOutput | None = None


class SessionDetail(SessionOutput):
    extra_charges: list[ExtraChargeOutput] = Field(default_factory=list)
    is_active: bool
    is_expired: bool


class ActiveSessionOutput(SessionOutput):
    order_count: int
    open_order_ids: list[int]
    is_expired: bool


class SessionResponse(BaseModel):
    session: SessionOutput


# =============================================================================
# Menu Schemas
# =============================================================================


class MenuItemOutput(BaseModel):
    id: int
    category_id: int
    name: str
    description: str | None = None
    price: float
    image_url: str | None = None
    is_available: bool
    is_buffet_item: bool
    is_a_la_carte_item: bool
    is_free_in_buffet: bool
    is_featured: bool
    is_popular: bool

    class Config:
        from_attributes = True


class MenuCategoryOutput(BaseModel):
    id: int
    name: str
    items: list[MenuItemOutput] = Field(default_factory=list)


class MenuCategoryCreate(BaseModel):
    name: str = Field(min_length=1, max_length=Limits.MAX_NAME_LENGTH)

    normalize_name = field_validator("name")(_strip_required)


class MenuCategoryUpdate(BaseModel):
    name: str = Field(min_length=1, max_length=Limits.MAX_NAME_LENGTH)

    normalize_name = field_validator("name")(_strip_required)


class MenuItemCreate(BaseModel):
    category_id: int
    name: str = Field(min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    description: str | None = Field(default=None, max_length=Limits.MAX_DESCRIPTION_LENGTH)
    price: float = Field(gt=0)
    image_url: str | None = None
    is_available: bool = True
    is_buffet_item: bool = True
    is_a_la_carte_item: bool = True
    is_free_in_buffet: bool = True
    is_featured: bool = False
    is_popular: bool = False

    normalize_name = field_validator("name")(_strip_required)

    @field_validator("image_url")
    @classmethod
    def check_image_url(cls, v: str | None) -> str | None:
        return validate_relative_url(v)


class MenuItemUpdate(BaseModel):
    category_id: int | None = None
    name: str | None = Field(default=None, min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    description: str | None = Field(default=None, max_length=Limits.MAX_DESCRIPTION_LENGTH)
    price: float | None = Field(default=None, gt=0)
    image_url: str | None = None
    is_available: bool | None = None
    is_buffet_item: bool | None = None
    is_a_la_carte_item: bool | None = None
    is_free_in_buffet: bool | None = None
    is_featured: bool | None = None
    is_popular: bool | None = None

    normalize_name = field_validator("name")(_strip_optional)

    @field_validator("image_url")
    @classmethod
    def check_image_url(cls, v: str | None) -> str | None:
        return validate_relative_url(v)


class SessionMenuOutput(BaseModel):
    categories: list[MenuCategoryOutput]
    session_type: SessionType
    is_expired: bool


# =============================================================================
# Cart Schemas
# =============================================================================


class CartLineInput(BaseModel):
    menu_item_id: int
    qty: int = Field(ge=Limits.MIN_QUANTITY, le=Limits.MAX_QUANTITY)
    note: str | None = Field(default=None, max_length=Limits.MAX_NOTE_LENGTH)
    item_type: ItemType | None = None


class CartQuoteRequest(BaseModel):
    session_id: int
    items: list[CartLineInput] = Field(default_factory=list)


class CartLineOutput(BaseModel):
    menu_item_id: int
    name: str
    qty: int
    note: str | None = None
    item_type: ItemType
    unit_price: float
    line_total: float


class CartQuoteOutput(BaseModel):
    lines: list[CartLineOutput]
    total: float
    item_count: int


# =============================================================================
# Order Schemas
# =============================================================================


class OrderItemInput(CartLineInput):
    pass


class OrderCreate(BaseModel):
    table_session_id: int
    items: list[OrderItemInput] = Field(min_length=1)
    note: str | None = Field(default=None, max_length=Limits.MAX_NOTE_LENGTH)


class OrderItemOutput(BaseModel):
    id: int
    order_id: int
    menu_item_id: int
    name: str
    qty: int
    note: str | None = None
    item_type: ItemType
    status: OrderItemStatus
    unit_price: float


class OrderOutput(BaseModel):
    id: int
    table_session_id: int
    table_name: str
    status: str
    note: str | None = None
    created_at: datetime
    items: list[OrderItemOutput]


class OrderItemStatusUpdate(BaseModel):
    order_item_id: int
    status: OrderItemStatus


class RunnerItemOutput(OrderItemOutput):
    table_name: str
    table_session_id: int
    ordered_at: datetime


# =============================================================================
# Billing Schemas
# =============================================================================


class BillingRequest(BaseModel):
    session_id: int
    extra_charge_ids: list[int] | None = None
    promotion_id: int | None = None
    discount_type: DiscountType | None = None
    discount_value: float | None = Field(default=None, ge=0)
    vat_rate: float = Field(default=0, ge=0, le=100)


class BillingCloseRequest(BillingRequest):
    payment_method: PaymentMethod
    received_amount: float | None = Field(default=None, ge=0)


class BillingLine(BaseModel):
    name: str
    qty: int
    unit_price: float
    total_price: float
    type: str


class BillingPreviewOutput(BaseModel):
    subtotal: float
    extra_charge: float
    discount: float
    vat: float
    vat_rate: float
    grand_total: float
    lines: list[BillingLine]


class BillingOutput(BaseModel):
    id: int
    table_session_id: int
    table_name: str
    subtotal: float
    extra_charge: float
    discount: float
    vat: float
    vat_rate: float
    grand_total: float
    payment_method: PaymentMethod
    received_amount: float | None = None
    change: float | None = None
    discount_type: str | None = None
    discount_value: float | None = None
    promotion_id: int | None = None
    created_at: datetime
    items: list[BillingLine]


class BillingCloseResponse(BaseModel):
    billing: BillingOutput


# =============================================================================
# QR / Restaurant / Upload Schemas
# =============================================================================


class QrCodeOutput(BaseModel):
    session_id: int
    session_url: str
    qr_code_url: str  # data:image/png;base64,...


_TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class RestaurantInfoOutput(BaseModel):
    id: int
    name: str
    address: str | None = None
    phone: str | None = None
    logo_url: str | None = None
    wifi_name: str | None = None
    wifi_password: str | None = None
    open_time: str | None = None
    close_time: str | None = None

    class Config:
        from_attributes = True


class RestaurantInfoUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    address: str | None = Field(default=None, max_length=500)
    phone: str | None = Field(default=None, max_length=50)
    logo_url: str | None = None
    wifi_name: str | None = Field(default=None, max_length=100)
    wifi_password: str | None = Field(default=None, max_length=100)
    open_time: str | None = Field(default=None, pattern=_TIME_PATTERN)
    close_time: str | None = Field(default=None, pattern=_TIME_PATTERN)

    normalize_name = field_validator("name")(_strip_optional)

    @field_validator("logo_url")
    @classmethod
    def check_logo_url(cls, v: str | None) -> str | None:
        return validate_relative_url(v)


class UploadOutput(BaseModel):
    url: str


# =============================================================================
# User (staff admin) Schemas
# =============================================================================


class UserOutput(BaseModel):
    id: int
    username: str
    name: str
    email: str | None = None
    role: str
    department_id: int | None = None
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True


class UserListOutput(BaseModel):
    users: list[UserOutput]
    total: int


class UserCreate(BaseModel):
    name: str = Field(min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    username: str = Field(min_length=3, max_length=100, pattern=r"^[A-Za-z0-9._-]+$")
    password: str = Field(min_length=Limits.MIN_PASSWORD_LENGTH, max_length=200)
    role: Role = "STAFF"
    email: str | None = Field(default=None, max_length=255)
    department_id: int | None = None
    is_active: bool = True

    normalize_name = field_validator("name")(_strip_required)


class UserUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    username: str | None = Field(default=None, min_length=3, max_length=100, pattern=r"^[A-Za-z0-9._-]+$")
    password: str | None = Field(default=None, min_length=Limits.MIN_PASSWORD_LENGTH, max_length=200)
    role: Role | None = None
    email: str | None = Field(default=None, max_length=255)
    department_id: int | None = None
    is_active: bool | None = None

    normalize_name = field_validator("name")(_strip_optional)
