"""
Common utilities shared across routers.
"""

from .deps import (
    current_user,
    require_admin,
    require_management,
    require_front_of_house,
    require_kitchen,
    require_flow_manager,
    require_flow_admin,
)
from .pagination import PageParams, get_page_params

__all__ = [
    # Role guards
    "current_user",
    "require_admin",
    "require_management",
    "require_front_of_house",
    "require_kitchen",
    "require_flow_manager",
    "require_flow_admin",
    # Pagination
    "PageParams",
    "get_page_params",
]
