"""
Staff sign-in for the POS: /api/auth/login and /api/auth/me.
FlowTrak has its own copy under /api/flow/auth.
"""

from .routes import router

__all__ = ["router"]
