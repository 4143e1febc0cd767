"""
Redis clients shared by the REST API and the WebSocket gateway.

- The REST API publishes from sync endpoints: ``get_redis_sync_client()``
  hands out clients over one blocking connection pool.
- The gateway subscribes with ``get_redis_pool()``, one asyncio client
  per process.

Both are created on first use so importing this module never opens a
socket (tests swap the publisher out and never touch Redis).
"""

from __future__ import annotations

import asyncio
import threading

import redis
import redis.asyncio as aioredis

from shared.config.settings import settings, REDIS_URL
from shared.config.logging import get_logger

logger = get_logger(__name__)

HEALTH_CHECK_INTERVAL = 30


def _connection_options(max_connections: int) -> dict:
    return {
        "max_connections": max_connections,
        "decode_responses": True,
        "socket_connect_timeout": settings.redis_socket_timeout,
        "socket_timeout": settings.redis_socket_timeout,
        "health_check_interval": HEALTH_CHECK_INTERVAL,
    }


# Publisher side (sync) --------------------------------------------------------

_sync_pool: redis.ConnectionPool | None = None
_sync_guard = threading.Lock()


def get_redis_sync_client() -> redis.Redis:
    """Client over the shared blocking pool, used to PUBLISH events."""
    global _sync_pool
    with _sync_guard:
        if _sync_pool is None:
            _sync_pool = redis.ConnectionPool.from_url(
                REDIS_URL, **_connection_options(settings.redis_sync_pool_max_connections)
            )
            logger.info("Redis publish pool ready", max_connections=settings.redis_sync_pool_max_connections)
    return redis.Redis(connection_pool=_sync_pool)


def close_redis_sync_client() -> None:
    global _sync_pool
    with _sync_guard:
        pool, _sync_pool = _sync_pool, None
    if pool is None:
        return
    try:
        pool.disconnect()
    except redis.RedisError as exc:
        logger.warning("Redis publish pool did not close cleanly", error=str(exc))
    else:
        logger.info("Redis publish pool closed")


# Subscriber side (async) ------------------------------------------------------

_async_client: aioredis.Redis | None = None
_async_guard: asyncio.Lock | None = None


async def get_redis_pool() -> aioredis.Redis:
    """The process-wide asyncio client, used by the gateway to SUBSCRIBE."""
    global _async_client, _async_guard
    if _async_client is not None:
        return _async_client

    if _async_guard is None:
        _async_guard = asyncio.Lock()
    async with _async_guard:
        if _async_client is None:
            _async_client = aioredis.from_url(
                REDIS_URL, **_connection_options(settings.redis_pool_max_connections)
            )
            logger.info("Redis subscribe client ready", max_connections=settings.redis_pool_max_connections)
    return _async_client


async def close_redis_pool() -> None:
    """Close both sides; called from the application lifespans."""
    global _async_client, _async_guard
    client, _async_client = _async_client, None
    _async_guard = None
    if client is not None:
        await client.aclose()
        logger.info("Redis subscribe client closed")
    close_redis_sync_client()
