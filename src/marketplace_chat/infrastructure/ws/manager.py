"""In-process WebSocket connection manager."""
from __future__ import annotations

import logging
from typing import Any

from fastapi import WebSocket

from marketplace_chat.infrastructure.ws.protocol import WsOutbound

logger = logging.getLogger(__name__)


class ConnectionManager:
    """Tracks WebSocket connections per principal; every connection is on the chat topic."""

    def __init__(self) -> None:
        self._connections: dict[str, set[WebSocket]] = {}

    @property
    def connection_count(self) -> int:
        return sum(len(conns) for conns in self._connections.values())

    async def connect(self, ws: WebSocket, principal_key: str) -> None:
        await ws.accept()
        self._connections.setdefault(principal_key, set()).add(ws)
        logger.debug("WS connected: %s (total=%d)", principal_key, self.connection_count)

    def disconnect(self, ws: WebSocket, principal_key: str) -> None:
        conns = self._connections.get(principal_key)
        if conns:
            conns.discard(ws)
            if not conns:
                del self._connections[principal_key]
        logger.debug("WS disconnected: %s", principal_key)

    async def broadcast(self, event_type: str, data: Any) -> None:
        """Send an event to every open connection. Dead sockets are dropped."""
        raw = WsOutbound(type=event_type, data=data).model_dump_json()
        dead: list[tuple[str, WebSocket]] = []
        for pkey, conns in list(self._connections.items()):
            for ws in list(conns):
                try:
                    await ws.send_text(raw)
                except Exception:
                    dead.append((pkey, ws))
        for pkey, ws in dead:
            self.disconnect(ws, pkey)
