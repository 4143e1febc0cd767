"""
Restaurant POS routers.
"""

from mooprompt_api.routers.pos.billing import router as billing_router
from mooprompt_api.routers.pos.cart import router as cart_router
from mooprompt_api.routers.pos.logs import router as logs_router
from mooprompt_api.routers.pos.menu import router as menu_router
from mooprompt_api.routers.pos.orders import router as orders_router
from mooprompt_api.routers.pos.pricing import router as pricing_router
from mooprompt_api.routers.pos.qr import router as qr_router
from mooprompt_api.routers.pos.restaurant import router as restaurant_router
from mooprompt_api.routers.pos.sessions import router as sessions_router
from mooprompt_api.routers.pos.tables import router as tables_router
from mooprompt_api.routers.pos.upload import router as upload_router
from mooprompt_api.routers.pos.users import router as users_router

routers = [
    tables_router,
    sessions_router,
    menu_router,
    cart_router,
    orders_router,
    pricing_router,
    billing_router,
    qr_router,
    restaurant_router,
    upload_router,
    users_router,
    logs_router,
]

__all__ = [
    "routers",
    "billing_router",
    "cart_router",
    "logs_router",
    "menu_router",
    "orders_router",
    "pricing_router",
    "qr_router",
    "restaurant_router",
    "sessions_router",
    "tables_router",
    "upload_router",
    "users_router",
]
