"""Post-commit side effects: real-time fan-out and offer email publishing."""
from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Awaitable
from uuid import UUID

from marketplace_chat.application.dto.events import OfferEmailDTO, message_to_payload
from marketplace_chat.application.exceptions import NotificationDeliveryError
from marketplace_chat.application.ports.bus import NotificationPublisher, RealtimeEmitter
from marketplace_chat.domain.entities.message import Message
from marketplace_chat.domain.value_objects.enums import ChatEvent

logger = logging.getLogger(__name__)


class ChatNotifier:
    """Runs notifications for already-committed writes.

    Every method is best-effort: failures and timeouts are logged and never
    raised, so the triggering operation still succeeds.
    """

    def __init__(
        self,
        emitter: RealtimeEmitter,
        publisher: NotificationPublisher,
        *,
        exchange: str,
        routing_key: str,
        timeout: float = 5.0,
    ) -> None:
        self._emitter = emitter
        self._publisher = publisher
        self._exchange = exchange
        self._routing_key = routing_key
        self._timeout = timeout

    async def message_added(self, message: Message) -> None:
        jobs = [self.message_received(message)]
        if message.has_offer and message.offer is not None:
            jobs.insert(0, self.offer_sent(message))
        await asyncio.gather(*jobs)

    async def message_received(self, message: Message) -> bool:
        async def _emit() -> None:
            await self._emitter.emit(ChatEvent.MESSAGE_RECEIVED, message_to_payload(message))

        return await self._deliver(f"emit {ChatEvent.MESSAGE_RECEIVED!s} for {message.id}", _emit())

    async def message_updated(self, message_id: UUID) -> bool:
        return await self._deliver(
            f"emit {ChatEvent.MESSAGE_UPDATED!s} for {message_id}",
            self._emitter.emit(ChatEvent.MESSAGE_UPDATED, message_id),
        )

    async def offer_sent(self, message: Message) -> bool:
        async def _publish() -> None:
            details = OfferEmailDTO.from_message(message)
            await self._publisher.publish(
                self._exchange,
                self._routing_key,
                json.dumps(details.to_payload()),
                "Order email sent to notification service",
            )

        return await self._deliver(f"publish offer email for {message.id}", _publish())

    async def _deliver(self, action: str, call: Awaitable[Any]) -> bool:
        try:
            await asyncio.wait_for(call, timeout=self._timeout)
        except TimeoutError:
            logger.warning("%s timed out after %.1fs", action, self._timeout)
            return False
        except NotificationDeliveryError as exc:
            logger.warning("%s failed: %s", action, exc.detail)
            return False
        except Exception:
            logger.exception("%s failed unexpectedly", action)
            return False
        return True
