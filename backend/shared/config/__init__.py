"""
Configuration module: settings, logging, constants.
"""

from shared.config.settings import settings, get_settings, DATABASE_URL
from shared.config.logging import get_logger, setup_logging
from shared.config.constants import (
    Roles,
    TableStatus,
    SessionStatus,
    OrderItemStatus,
    CheckpointStatus,
    Limits,
    MANAGEMENT_ROLES,
)

__all__ = [
    # settings
    "settings",
    "get_settings",
    "DATABASE_URL",
    # logging
    "get_logger",
    "setup_logging",
    # constants
    "Roles",
    "TableStatus",
    "SessionStatus",
    "OrderItemStatus",
    "CheckpointStatus",
    "MANAGEMENT_ROLES",
    "Limits",
]
