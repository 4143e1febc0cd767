"""
Unauthenticated endpoints. Only the health checks live here; the
customer QR menu and order placement live with the POS routers.
"""

from .health import router as health_router

__all__ = ["health_router"]
