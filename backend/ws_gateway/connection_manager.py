"""
WebSocket connection manager.

Every connection receives global events; a connection that joined a
room (``work:{id}``) also receives that room's events.
"""

from __future__ import annotations

import asyncio
import time
from typing import Any

from fastapi import WebSocket
from starlette.websockets import WebSocketState

from shared.config.logging import ws_gateway_logger as logger
from shared.config.settings import settings


def _is_ws_connected(ws: WebSocket) -> bool:
    """True when the socket is ready to send and receive."""
    return ws.client_state == WebSocketState.CONNECTED and ws.application_state == WebSocketState.CONNECTED


class ConnectionManager:
    """
    Tracks open sockets and their room memberships.

    Dict mutations happen under an asyncio.Lock; sends work on snapshots
    so a disconnect during a broadcast is harmless.
    """

    HEARTBEAT_TIMEOUT = settings.ws_heartbeat_timeout
    MAX_CONNECTIONS = settings.ws_max_total_connections

    def __init__(self):
        self._shutdown = False
        self.connections: set[WebSocket] = set()
        self.by_room: dict[str, set[WebSocket]] = {}
        self._ws_to_rooms: dict[WebSocket, set[str]] = {}
        self._ws_to_user: dict[WebSocket, int] = {}
        self._last_heartbeat: dict[WebSocket, float] = {}
        self._lock = asyncio.Lock()

    async def connect(self, websocket: WebSocket, user_id: int | None = None, timeout: float = 5.0) -> None:
        """
        Accept a socket and register it.

        Raises:
            ConnectionError: During shutdown, on accept timeout or when the
                server is at its connection limit.
        """
        if self._shutdown:
            raise ConnectionError("Server is shutting down")

        try:
            await asyncio.wait_for(websocket.accept(), timeout=timeout)
        except asyncio.TimeoutError:
            raise ConnectionError("WebSocket accept timed out")

        if len(self.connections) >= self.MAX_CONNECTIONS:
            await websocket.close(code=1013, reason="Too many connections")
            raise ConnectionError(f"Connection limit reached ({self.MAX_CONNECTIONS})")

        async with self._lock:
            self.connections.add(websocket)
            self._ws_to_rooms[websocket] = set()
            self._last_heartbeat[websocket] = time.time()
            if user_id is not None:
                self._ws_to_user[websocket] = user_id

    async def disconnect(self, websocket: WebSocket) -> None:
        """Remove a socket from every registration."""
        async with self._lock:
            self.connections.discard(websocket)
            self._last_heartbeat.pop(websocket, None)
            self._ws_to_user.pop(websocket, None)
            for room in self._ws_to_rooms.pop(websocket, set()):
                members = self.by_room.get(room)
                if members is not None:
                    members.discard(websocket)
                    if not members:
                        del self.by_room[room]

    async def join(self, websocket: WebSocket, room: str) -> None:
        async with self._lock:
            if websocket not in self.connections:
                return
            self.by_room.setdefault(room, set()).add(websocket)
            self._ws_to_rooms[websocket].add(room)

    async def leave(self, websocket: WebSocket, room: str) -> None:
        async with self._lock:
            members = self.by_room.get(room)
            if members is not None:
                members.discard(websocket)
                if not members:
                    del self.by_room[room]
            if websocket in self._ws_to_rooms:
                self._ws_to_rooms[websocket].discard(room)

    def rooms_of(self, websocket: WebSocket) -> set[str]:
        return set(self._ws_to_rooms.get(websocket, set()))

    async def _send_all(self, targets: list[WebSocket], payload: dict[str, Any], scope: str) -> int:
        sent = 0
        for ws in targets:
            if not _is_ws_connected(ws):
                continue
            try:
                await ws.send_json(payload)
                sent += 1
            except Exception as e:
                logger.warning("Failed to send event", scope=scope, error=str(e))
        return sent

    async def send_to_room(self, room: str, payload: dict[str, Any]) -> int:
        """
        Send to the members of one room.

        Returns:
            Number of sockets that received the message.
        """
        return await self._send_all(list(self.by_room.get(room, set())), payload, room)

    async def broadcast(self, payload: dict[str, Any]) -> int:
        """Send to every connected socket."""
        return await self._send_all(list(self.connections), payload, "global")

    @property
    def total_connections(self) -> int:
        return len(self.connections)

    def get_stats(self) -> dict[str, Any]:
        return {
            "total_connections": self.total_connections,
            "authenticated_connections": len(self._ws_to_user),
            "rooms": len(self.by_room),
        }

    # =========================================================================
    # Heartbeats
    # =========================================================================

    def record_heartbeat(self, websocket: WebSocket) -> None:
        self._last_heartbeat[websocket] = time.time()

    def get_stale_connections(self) -> list[WebSocket]:
        """Sockets silent for longer than HEARTBEAT_TIMEOUT."""
        now = time.time()
        return [
            ws for ws, last in list(self._last_heartbeat.items())
            if now - last > self.HEARTBEAT_TIMEOUT
        ]

    async def cleanup_stale_connections(self) -> int:
        stale = self.get_stale_connections()
        for ws in stale:
            try:
                await ws.close(code=1001, reason="Heartbeat timeout")
            except Exception as e:
                logger.warning("Failed to close stale connection", error=str(e))
            await self.disconnect(ws)
        return len(stale)

    async def shutdown(self) -> int:
        """Reject new sockets and close the open ones."""
        self._shutdown = True
        logger.info("WebSocket manager shutting down")

        async with self._lock:
            open_sockets = list(self.connections)

        closed = 0
        for ws in open_sockets:
            try:
                await ws.close(code=1001, reason="Server shutdown")
                closed += 1
            except Exception as e:
                logger.warning("Failed to close connection during shutdown", error=str(e))
            await self.disconnect(ws)

        logger.info("WebSocket shutdown complete", closed=closed)
        return closed

    def is_shutting_down(self) -> bool:
        return self._shutdown
