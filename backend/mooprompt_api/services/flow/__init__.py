"""
FlowTrak services: departments, templates, work orders, checkpoints
and comments.
"""

from .deadline import deadline_info
from .department_service import DepartmentService
from .template_service import TemplateService
from .work_order_service import WorkOrderService, work_order_summary
from .checkpoint_service import CheckpointService
from .comment_service import CommentService, parse_mentions

__all__ = [
    "deadline_info",
    "DepartmentService",
    "TemplateService",
    "WorkOrderService",
    "work_order_summary",
    "CheckpointService",
    "CommentService",
    "parse_mentions",
]
