"""
Domain Services - restaurant POS application layer.

Services hold the business rules and stamp audit fields; routers stay
thin, commit the transaction and emit events.

Structure:
    Router (thin controller)
        ↓
    Service (business logic)  ← YOU ARE HERE
        ↓
    Repository (data access)
        ↓
    Model (entity)

Usage:
    from mooprompt_api.services.domain import SessionService

    # In router
    session = SessionService(db).open(body, user)
"""

from .table_service import TableService
from .session_service import SessionService
from .menu_service import MenuService
from .order_service import OrderService
from .pricing_service import ExtraChargeService, PackageService, PromotionService
from .billing_service import BillingService
from .restaurant_service import RestaurantService
from .user_service import UserService

__all__ = [
    "TableService",
    "SessionService",
    "MenuService",
    "OrderService",
    "PackageService",
    "PromotionService",
    "ExtraChargeService",
    "BillingService",
    "RestaurantService",
    "UserService",
]
