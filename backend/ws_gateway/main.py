"""
WebSocket Gateway main application.
Pushes POS and FlowTrak events to browsers and tablets.
"""

from __future__ import annotations

import asyncio
import json
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Query, WebSocket, WebSocketDisconnect
from fastapi.responses import JSONResponse
from redis import RedisError

from shared.config.logging import audit_ws_connection, setup_logging, ws_gateway_logger as logger
from shared.config.settings import settings
from shared.infrastructure.events import Event, close_redis_pool, get_redis_pool, work_room
from shared.security.auth import verify_ws_token
from shared.utils.exceptions import AppException
from ws_gateway.connection_manager import ConnectionManager
from ws_gateway.redis_subscriber import run_subscriber


# Global connection manager
manager = ConnectionManager()

MAX_MESSAGE_SIZE = settings.ws_max_message_size
CLEANUP_INTERVAL_SECONDS = 30


def event_payload(event: Event) -> dict[str, Any]:
    """What a socket receives for an event."""
    return {"type": event.type, "data": event.data or {}, "ts": event.ts}


async def dispatch_event(event: Event) -> int:
    """Room events go to the room's members, the rest to everyone."""
    payload = event_payload(event)
    if event.room is not None:
        sent = await manager.send_to_room(event.room, payload)
    else:
        sent = await manager.broadcast(payload)
    logger.debug("Dispatched event", event_type=event.type, room=event.room, clients=sent)
    return sent


def _parse_client_message(raw: str) -> dict[str, Any] | None:
    if raw == "ping":
        return {"type": "ping"}
    try:
        message = json.loads(raw)
    except json.JSONDecodeError:
        return None
    return message if isinstance(message, dict) else None


def _work_room_from(message: dict[str, Any]) -> str | None:
    work_id = message.get("work_id")
    if isinstance(work_id, str) and work_id.isdigit():
        work_id = int(work_id)
    try:
        return work_room(work_id)
    except ValueError:
        return None


async def handle_client_message(websocket: WebSocket, raw: str) -> dict[str, Any] | None:
    """
    React to one client frame.

    Supported messages:
        ``ping`` or ``{"type": "ping"}``            -> ``{"type": "pong"}``
        ``{"type": "join:work", "work_id": 12}``    -> joins room ``work:12``
        ``{"type": "leave:work", "work_id": 12}``   -> leaves it

    Returns:
        The reply to send back, or None.
    """
    message = _parse_client_message(raw)
    if message is None:
        return {"type": "error", "data": {"reason": "invalid_message"}}

    kind = message.get("type")
    if kind == "ping":
        return {"type": "pong"}

    if kind in ("join:work", "leave:work"):
        room = _work_room_from(message)
        if room is None:
            return {"type": "error", "data": {"reason": "invalid_work_id"}}
        if kind == "join:work":
            await manager.join(websocket, room)
            return {"type": "joined", "data": {"room": room}}
        await manager.leave(websocket, room)
        return {"type": "left", "data": {"room": room}}

    return {"type": "error", "data": {"reason": "unknown_type"}}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.
    Starts the Redis subscriber and the stale-connection sweep.
    """
    setup_logging()
    logger.info("Starting WebSocket Gateway", port=settings.ws_gateway_port, env=settings.environment)

    subscriber_task = asyncio.create_task(run_subscriber(dispatch_event))
    cleanup_task = asyncio.create_task(start_heartbeat_cleanup())

    yield

    logger.info("Shutting down WebSocket Gateway")
    await manager.shutdown()
    for task in (subscriber_task, cleanup_task):
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        except Exception as e:
            logger.error("Background task ended with error", error=str(e))

    await close_redis_pool()
    logger.info("Redis connection pool closed")


async def start_heartbeat_cleanup():
    """Close sockets that stopped sending pings."""
    while True:
        try:
            await asyncio.sleep(CLEANUP_INTERVAL_SECONDS)
            cleaned = await manager.cleanup_stale_connections()
            if cleaned > 0:
                logger.info("Cleaned up stale connections", count=cleaned)
        except asyncio.CancelledError:
            break
        except Exception as e:
            logger.error("Error in heartbeat cleanup", error=str(e))


app = FastAPI(
    title="MooPrompt WebSocket Gateway",
    version="0.1.0",
    lifespan=lifespan,
)


# =============================================================================
# Health Check
# =============================================================================


@app.get("/ws/health")
def health_check():
    """Basic health check endpoint."""
    return {
        "status": "healthy",
        "service": "ws-gateway",
        "environment": settings.environment,
        **manager.get_stats(),
    }


@app.get("/ws/health/detailed")
async def detailed_health_check():
    """Verifies Redis connectivity; 503 when it is down."""
    checks: dict[str, Any] = {
        "service": "ws-gateway",
        "environment": settings.environment,
        "connections": manager.get_stats(),
        "dependencies": {},
    }
    all_healthy = True

    try:
        redis = await get_redis_pool()
        await redis.ping()
        checks["dependencies"]["redis"] = {"status": "healthy"}
    except (RedisError, OSError) as e:
        checks["dependencies"]["redis"] = {"status": "unhealthy", "error": str(e)}
        all_healthy = False

    checks["status"] = "healthy" if all_healthy else "degraded"
    if not all_healthy:
        return JSONResponse(content=checks, status_code=503)
    return checks


# =============================================================================
# WebSocket Endpoint
# =============================================================================


@app.websocket("/ws/events")
async def events_websocket(
    websocket: WebSocket,
    token: str | None = Query(default=None, description="Optional staff JWT"),
):
    """
    Event stream for every screen.

    Customers connect anonymously; staff screens may pass their token so
    connections show up in the audit log under their user id.
    """
    origin = websocket.headers.get("origin")
    try:
        claims = verify_ws_token(token)
    except AppException as e:
        audit_ws_connection("AUTH_FAILED", "/ws/events", origin=origin, reason=str(e.detail))
        await websocket.close(code=4001, reason="Invalid token")
        return

    user_id = int(claims["sub"]) if claims else None
    try:
        await manager.connect(websocket, user_id)
    except ConnectionError as e:
        audit_ws_connection("REJECTED", "/ws/events", user_id=user_id, origin=origin, reason=str(e))
        return
    audit_ws_connection("CONNECT", "/ws/events", user_id=user_id, origin=origin)

    try:
        while True:
            data = await websocket.receive_text()

            if len(data) > MAX_MESSAGE_SIZE:
                logger.warning("Message size exceeded limit", user_id=user_id, size=len(data))
                await websocket.close(code=1009, reason="Message too large")
                break

            manager.record_heartbeat(websocket)
            reply = await handle_client_message(websocket, data)
            if reply is not None:
                await websocket.send_json(reply)
    except WebSocketDisconnect:
        pass
    finally:
        await manager.disconnect(websocket)
        audit_ws_connection("DISCONNECT", "/ws/events", user_id=user_id, origin=origin)


# =============================================================================
# Development entry point
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "ws_gateway.main:app",
        host="0.0.0.0",
        port=settings.ws_gateway_port,
        reload=True,
    )
