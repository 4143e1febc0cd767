"""
Startup and shutdown for the REST API process.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from shared.infrastructure.db import engine, get_db_context
from shared.config.settings import settings
from shared.config.logging import setup_logging, api_logger as logger
from shared.infrastructure.events import close_redis_pool
from mooprompt_api.models import Base
from mooprompt_api.seed import seed


def check_configuration() -> None:
    """Refuse to start a production server with default secrets."""
    problems = settings.validate_production_secrets()
    for problem in problems:
        logger.error("Configuration problem", problem=problem)
    if problems and settings.environment == "production":
        raise RuntimeError("Insecure production configuration: " + "; ".join(problems))


def prepare_database() -> None:
    """Create tables and the first admin/demo data when enabled."""
    if settings.auto_create_tables:
        Base.metadata.create_all(bind=engine)
        logger.info("Schema verified", tables=len(Base.metadata.tables))
    if settings.seed_on_startup:
        with get_db_context() as db:
            seed(db)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    check_configuration()
    logger.info("MooPrompt API starting", port=settings.rest_api_port, env=settings.environment)
    prepare_database()

    yield

    await close_redis_pool()
    logger.info("MooPrompt API stopped")
