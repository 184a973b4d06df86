"""Redis Streams publisher for broker-style exchange/routing-key delivery."""
from __future__ import annotations

import logging

import redis.asyncio as aioredis

from marketplace_chat.application.exceptions import NotificationDeliveryError

logger = logging.getLogger(__name__)


def stream_key(exchange: str, routing_key: str) -> str:
    return f"{exchange}:{routing_key}"


class RedisStreamPublisher:
    """Implements application.ports.bus.NotificationPublisher.

    Each exchange/routing-key pair maps to one stream; consumers bind to it
    with a consumer group and own acknowledgement and redelivery.
    """

    def __init__(self, redis: aioredis.Redis, *, maxlen: int = 10_000) -> None:
        self._redis = redis
        self._maxlen = maxlen

    async def publish(
        self,
        exchange: str,
        routing_key: str,
        body: str,
        description: str,
    ) -> None:
        key = stream_key(exchange, routing_key)
        try:
            entry_id = await self._redis.xadd(
                key,
                {"exchange": exchange, "routing_key": routing_key, "body": body},
                maxlen=self._maxlen,
                approximate=True,
            )
        except aioredis.RedisError as exc:
            raise NotificationDeliveryError(f"publish to {key} failed: {exc}") from exc
        logger.info("%s (stream=%s id=%s)", description, key, entry_id)
