"""
Health check endpoints for the REST API.
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from redis import RedisError
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from shared.config.settings import settings
from shared.config.logging import api_logger as logger
from shared.infrastructure.db import SessionLocal
from shared.infrastructure.events import get_redis_sync_client


router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health")
def health_check():
    """
    Basic health check endpoint.
    Returns service status without checking dependencies.
    """
    return {
        "status": "healthy",
        "service": "rest-api",
        "environment": settings.environment,
    }


@router.get("/health/detailed")
def detailed_health_check():
    """
    Check the database and Redis.

    Returns 503 Service Unavailable if any dependency is down.
    """
    dependencies = {}

    try:
        with SessionLocal() as db:
            db.execute(text("SELECT 1"))
        dependencies["database"] = {"status": "healthy"}
    except SQLAlchemyError as e:
        logger.error("Database health check failed", error=str(e))
        dependencies["database"] = {"status": "unhealthy", "error": str(e)}

    try:
        get_redis_sync_client().ping()
        dependencies["redis"] = {"status": "healthy"}
    except RedisError as e:
        logger.error("Redis health check failed", error=str(e))
        dependencies["redis"] = {"status": "unhealthy", "error": str(e)}

    healthy = all(d["status"] == "healthy" for d in dependencies.values())
    body = {
        "status": "healthy" if healthy else "unhealthy",
        "service": "rest-api",
        "environment": settings.environment,
        "dependencies": dependencies,
    }
    return JSONResponse(status_code=200 if healthy else 503, content=body)
