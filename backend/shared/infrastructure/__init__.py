"""
Infrastructure module: database and Redis/events.

Provides:
- Database sessions and transactions (db.py)
- Redis pub/sub for real-time events (events/)
- Request correlation IDs (correlation.py)
"""

from shared.infrastructure.db import (
    engine,
    SessionLocal,
    get_db,
    get_db_context,
    safe_commit,
)
from shared.infrastructure.events import (
    get_redis_pool,
    get_redis_sync_client,
    close_redis_pool,
    emit,
)

__all__ = [
    # db
    "engine",
    "SessionLocal",
    "get_db",
    "get_db_context",
    "safe_commit",
    # events (Redis)
    "get_redis_pool",
    "get_redis_sync_client",
    "close_redis_pool",
    "emit",
]
