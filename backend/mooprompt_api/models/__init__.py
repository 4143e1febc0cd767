"""
SQLAlchemy ORM Models Package.

All models are organized into domain-specific modules:
- base: Base class and AuditMixin
- user: User
- audit: SystemLog
- table: Table, TableSession
- catalog: MenuCategory, MenuItem
- order: Order, OrderItem
- package: Package, ExtraCharge
- promotion: Promotion
- billing: BillingSummary, BillingItem
- restaurant: RestaurantInfo
- workflow: Department, Template, TemplateCheckpoint, WorkOrder,
  Checkpoint, Comment, ActivityLog (FlowTrak)
"""

# Base classes
from .base import Base, AuditMixin, IdType, as_utc, utcnow

# Users and audit
from .user import User
from .audit import SystemLog

# Floor and sessions
from .table import Table, TableSession

# Menu
from .catalog import MenuCategory, MenuItem

# Orders
from .order import Order, OrderItem

# Pricing
from .package import Package, ExtraCharge
from .promotion import Promotion

# Billing
from .billing import BillingSummary, BillingItem

# Restaurant settings
from .restaurant import RestaurantInfo, DEFAULT_RESTAURANT_NAME

# FlowTrak
from .workflow import (
    Department,
    Template,
    TemplateCheckpoint,
    WorkOrder,
    Checkpoint,
    Comment,
    ActivityLog,
)


__all__ = [
    "Base",
    "AuditMixin",
    "IdType",
    "as_utc",
    "utcnow",
    "User",
    "SystemLog",
    "Table",
    "TableSession",
    "MenuCategory",
    "MenuItem",
    "Order",
    "OrderItem",
    "Package",
    "ExtraCharge",
    "Promotion",
    "BillingSummary",
    "BillingItem",
    "RestaurantInfo",
    "DEFAULT_RESTAURANT_NAME",
    "Department",
    "Template",
    "TemplateCheckpoint",
    "WorkOrder",
    "Checkpoint",
    "Comment",
    "ActivityLog",
]
