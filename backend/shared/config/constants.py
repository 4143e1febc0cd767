"""
Centralized constants for the backend application.
Avoids magic strings for roles, statuses and action names.

Usage:
    from shared.config.constants import Roles, MANAGEMENT_ROLES, OrderItemStatus

    if role in MANAGEMENT_ROLES:
        ...

    if item.status == OrderItemStatus.DONE:
        ...
"""

from typing import Final


# =============================================================================
# User Roles
# =============================================================================


class Roles:
    """User role constants (POS and FlowTrak share one user table)."""

    ADMIN: Final[str] = "ADMIN"
    MANAGER: Final[str] = "MANAGER"
    CASHIER: Final[str] = "CASHIER"
    KITCHEN: Final[str] = "KITCHEN"
    RUNNER: Final[str] = "RUNNER"
    STAFF: Final[str] = "STAFF"

    ALL: Final[list[str]] = [ADMIN, MANAGER, CASHIER, KITCHEN, RUNNER, STAFF]


# Role groups for common access patterns
MANAGEMENT_ROLES: Final[frozenset[str]] = frozenset({Roles.ADMIN, Roles.MANAGER})
FRONT_OF_HOUSE_ROLES: Final[frozenset[str]] = frozenset({Roles.ADMIN, Roles.MANAGER, Roles.CASHIER})
KITCHEN_ACCESS_ROLES: Final[frozenset[str]] = frozenset(
    {Roles.ADMIN, Roles.MANAGER, Roles.CASHIER, Roles.KITCHEN, Roles.RUNNER}
)


# =============================================================================
# POS Status Constants
# =============================================================================


class TableStatus:
    AVAILABLE: Final[str] = "AVAILABLE"
    OCCUPIED: Final[str] = "OCCUPIED"

    ALL: Final[list[str]] = [AVAILABLE, OCCUPIED]


class SessionStatus:
    ACTIVE: Final[str] = "ACTIVE"
    CLOSED: Final[str] = "CLOSED"

    ALL: Final[list[str]] = [ACTIVE, CLOSED]


class OrderStatus:
    OPEN: Final[str] = "OPEN"
    SERVED: Final[str] = "SERVED"
    CANCELLED: Final[str] = "CANCELLED"


class OrderItemStatus:
    """Kitchen flow: WAITING -> COOKING -> DONE -> SERVED."""

    WAITING: Final[str] = "WAITING"
    COOKING: Final[str] = "COOKING"
    DONE: Final[str] = "DONE"
    SERVED: Final[str] = "SERVED"

    ALL: Final[list[str]] = [WAITING, COOKING, DONE, SERVED]
    KITCHEN_VISIBLE: Final[list[str]] = [WAITING, COOKING, DONE]


class ItemType:
    BUFFET_INCLUDED: Final[str] = "BUFFET_INCLUDED"
    A_LA_CARTE: Final[str] = "A_LA_CARTE"

    ALL: Final[list[str]] = [BUFFET_INCLUDED, A_LA_CARTE]


class SessionType:
    """Derived from whether a session has a buffet package."""

    BUFFET: Final[str] = "BUFFET"
    A_LA_CARTE: Final[str] = "A_LA_CARTE"


class PromotionType:
    PERCENT: Final[str] = "PERCENT"
    FIXED: Final[str] = "FIXED"
    PER_PERSON: Final[str] = "PER_PERSON"
    MIN_PEOPLE: Final[str] = "MIN_PEOPLE"
    MIN_AMOUNT: Final[str] = "MIN_AMOUNT"

    ALL: Final[list[str]] = [PERCENT, FIXED, PER_PERSON, MIN_PEOPLE, MIN_AMOUNT]


class ChargeType:
    PER_PERSON: Final[str] = "PER_PERSON"
    PER_SESSION: Final[str] = "PER_SESSION"

    ALL: Final[list[str]] = [PER_PERSON, PER_SESSION]


class DiscountType:
    PERCENT: Final[str] = "PERCENT"
    FIXED: Final[str] = "FIXED"
    PROMOTION: Final[str] = "PROMOTION"


class PaymentMethod:
    CASH: Final[str] = "CASH"
    QR: Final[str] = "QR"


class BillingItemType:
    MENU: Final[str] = "MENU"
    EXTRA: Final[str] = "EXTRA"


# =============================================================================
# FlowTrak Constants
# =============================================================================


class Priority:
    LOW: Final[str] = "LOW"
    MEDIUM: Final[str] = "MEDIUM"
    HIGH: Final[str] = "HIGH"
    URGENT: Final[str] = "URGENT"

    ALL: Final[list[str]] = [LOW, MEDIUM, HIGH, URGENT]


class CheckpointStatus:
    PENDING: Final[str] = "PENDING"
    PROCESSING: Final[str] = "PROCESSING"
    COMPLETED: Final[str] = "COMPLETED"
    RETURNED: Final[str] = "RETURNED"
    PROBLEM: Final[str] = "PROBLEM"

    ALL: Final[list[str]] = [PENDING, PROCESSING, COMPLETED, RETURNED, PROBLEM]


class CheckpointAction:
    START: Final[str] = "start"
    COMPLETE: Final[str] = "complete"
    RETURN: Final[str] = "return"
    PROBLEM: Final[str] = "problem"

    ALL: Final[list[str]] = [START, COMPLETE, RETURN, PROBLEM]


# action -> (statuses it may start from, resulting status)
CHECKPOINT_TRANSITIONS: Final[dict[str, tuple[tuple[str, ...], str]]] = {
    CheckpointAction.START: (
        (CheckpointStatus.PENDING, CheckpointStatus.RETURNED),
        CheckpointStatus.PROCESSING,
    ),
    CheckpointAction.COMPLETE: ((CheckpointStatus.PROCESSING,), CheckpointStatus.COMPLETED),
    CheckpointAction.RETURN: ((CheckpointStatus.PROCESSING,), CheckpointStatus.RETURNED),
    CheckpointAction.PROBLEM: ((CheckpointStatus.PROCESSING,), CheckpointStatus.PROBLEM),
}


# =============================================================================
# Logged Actions
# =============================================================================


class SystemAction:
    """Action names written to system_log."""

    LOGIN: Final[str] = "LOGIN"
    LOGIN_FAILED: Final[str] = "LOGIN_FAILED"
    CREATE_TABLE: Final[str] = "CREATE_TABLE"
    UPDATE_TABLE: Final[str] = "UPDATE_TABLE"
    DELETE_TABLE: Final[str] = "DELETE_TABLE"
    OPEN_TABLE: Final[str] = "OPEN_TABLE"
    CANCEL_SESSION: Final[str] = "CANCEL_SESSION"
    ORDER_CREATE: Final[str] = "ORDER_CREATE"
    CREATE_MENU_ITEM: Final[str] = "CREATE_MENU_ITEM"
    UPDATE_MENU_ITEM: Final[str] = "UPDATE_MENU_ITEM"
    DELETE_MENU_ITEM: Final[str] = "DELETE_MENU_ITEM"
    CREATE_CATEGORY: Final[str] = "CREATE_CATEGORY"
    UPDATE_CATEGORY: Final[str] = "UPDATE_CATEGORY"
    DELETE_CATEGORY: Final[str] = "DELETE_CATEGORY"
    CREATE_PACKAGE: Final[str] = "CREATE_PACKAGE"
    UPDATE_PACKAGE: Final[str] = "UPDATE_PACKAGE"
    DELETE_PACKAGE: Final[str] = "DELETE_PACKAGE"
    CREATE_PROMOTION: Final[str] = "CREATE_PROMOTION"
    UPDATE_PROMOTION: Final[str] = "UPDATE_PROMOTION"
    DELETE_PROMOTION: Final[str] = "DELETE_PROMOTION"
    CREATE_EXTRA_CHARGE: Final[str] = "CREATE_EXTRA_CHARGE"
    UPDATE_EXTRA_CHARGE: Final[str] = "UPDATE_EXTRA_CHARGE"
    DELETE_EXTRA_CHARGE: Final[str] = "DELETE_EXTRA_CHARGE"
    CLOSE_BILLING: Final[str] = "CLOSE_BILLING"
    UPDATE_RESTAURANT_INFO: Final[str] = "UPDATE_RESTAURANT_INFO"
    CREATE_USER: Final[str] = "CREATE_USER"
    UPDATE_USER: Final[str] = "UPDATE_USER"
    DELETE_USER: Final[str] = "DELETE_USER"
    UPLOAD_IMAGE: Final[str] = "UPLOAD_IMAGE"

    @staticmethod
    def order_status(status: str) -> str:
        return f"ORDER_{status}"


class ActivityAction:
    """Action names written to the FlowTrak activity log."""

    CREATE_WORK_ORDER: Final[str] = "CREATE_WORK_ORDER"
    UPDATE_WORK_ORDER: Final[str] = "UPDATE_WORK_ORDER"
    DELETE_WORK_ORDER: Final[str] = "DELETE_WORK_ORDER"
    ADD_COMMENT: Final[str] = "ADD_COMMENT"

    @staticmethod
    def checkpoint(action: str) -> str:
        return f"CHECKPOINT_{action.upper()}"


# =============================================================================
# Validation Constants
# =============================================================================


class Limits:
    """Validation limits."""

    MIN_QUANTITY: Final[int] = 1
    MAX_QUANTITY: Final[int] = 99

    MAX_NAME_LENGTH: Final[int] = 200
    MAX_DESCRIPTION_LENGTH: Final[int] = 2000
    MAX_NOTE_LENGTH: Final[int] = 500
    MAX_URL_LENGTH: Final[int] = 2048
    MAX_SEARCH_TERM_LENGTH: Final[int] = 100

    MIN_PASSWORD_LENGTH: Final[int] = 6

    MAX_PEOPLE_COUNT: Final[int] = 100
    DEFAULT_POPULAR_LIMIT: Final[int] = 6
    MAX_MENTION_USERS: Final[int] = 100
    DEFAULT_PAGE_SIZE: Final[int] = 10
    MAX_PAGE_SIZE: Final[int] = 100
    MAX_LOG_LIMIT: Final[int] = 500


def validate_order_item_transition(current_status: str, new_status: str) -> bool:
    """
    Order items only move forward through the kitchen flow.

    Skipping steps is allowed (a runner may serve a dish that was
    never marked DONE); moving back or staying put is not.
    """
    flow = OrderItemStatus.ALL
    if current_status not in flow or new_status not in flow:
        return False
    return flow.index(new_status) > flow.index(current_status)
