"""
FlowTrak routers, mounted under /api/flow.
"""

from fastapi import APIRouter

from mooprompt_api.routers.flow.auth import router as auth_router
from mooprompt_api.routers.flow.checkpoints import router as checkpoints_router
from mooprompt_api.routers.flow.comments import router as comments_router
from mooprompt_api.routers.flow.departments import router as departments_router
from mooprompt_api.routers.flow.templates import router as templates_router
from mooprompt_api.routers.flow.users import router as users_router
from mooprompt_api.routers.flow.work import router as work_router

router = APIRouter(prefix="/api/flow")
router.include_router(auth_router)
router.include_router(departments_router)
router.include_router(templates_router)
router.include_router(work_router)
router.include_router(checkpoints_router)
router.include_router(comments_router)
router.include_router(users_router)

__all__ = ["router"]
