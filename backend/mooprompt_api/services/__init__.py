"""
Services module for business logic.

LAYOUT:
- domain/: Restaurant POS services (tables, sessions, menu, orders, billing)
- flow/: FlowTrak services (departments, templates, work orders, comments)
- crud/: Repository pattern
- storage.py: Uploaded images and attachments
- system_log.py: Business action log

Usage:
    from mooprompt_api.services.domain import TableService
    service = TableService(db)
    tables = service.list_tables(status="AVAILABLE")
"""

from .base_service import Actor, BaseService, actor_id, actor_name

__all__ = [
    "Actor",
    "BaseService",
    "actor_id",
    "actor_name",
]
