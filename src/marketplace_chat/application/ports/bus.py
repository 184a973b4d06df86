from __future__ import annotations

from typing import Any, Protocol


class RealtimeEmitter(Protocol):
    async def emit(self, event: str, payload: Any) -> None:
        """Broadcast to every current subscriber of the chat topic."""
        ...


class NotificationPublisher(Protocol):
    async def publish(
        self,
        exchange: str,
        routing_key: str,
        body: str,
        description: str,
    ) -> None:
        """Hand a message to the broker without waiting for it to be processed."""
        ...
