"""Shared test fixtures."""
from __future__ import annotations

import dataclasses
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any
from uuid import UUID

import pytest

from marketplace_chat.application.dto.message import NewMessageDTO
from marketplace_chat.application.exceptions import (
    ConflictError,
    NotificationDeliveryError,
    PersistenceError,
)
from marketplace_chat.domain.entities.conversation import Conversation
from marketplace_chat.domain.entities.message import ConversationPreview, Message, Offer
from marketplace_chat.domain.value_objects.enums import OfferFlag
from marketplace_chat.services.notifier import ChatNotifier

BASE_TIME = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


def make_offer(**overrides: Any) -> Offer:
    values: dict[str, Any] = {
        "gig_title": "Logo design",
        "price": 50.0,
        "description": "Three concepts",
        "delivery_in_days": 3,
    }
    values.update(overrides)
    return Offer(**values)


def make_message(
    *,
    conversation_id: str = "c1",
    sender: str = "alice",
    receiver: str = "bob",
    body: str | None = "hello",
    is_read: bool = False,
    offer: Offer | None = None,
    created_at: datetime | None = None,
) -> Message:
    return Message(
        id=uuid.uuid4(),
        conversation_id=conversation_id,
        body=body,
        file=None,
        file_type=None,
        file_size=None,
        file_name=None,
        gig_id=None,
        buyer_id="b1",
        seller_id="s1",
        sender_username=sender,
        sender_picture=None,
        receiver_username=receiver,
        receiver_picture=None,
        is_read=is_read,
        has_offer=offer is not None,
        offer=offer,
        created_at=created_at or BASE_TIME,
    )


def make_new_message(
    *,
    conversation_id: str = "c1",
    sender: str = "alice",
    receiver: str = "bob",
    body: str | None = "hi",
    offer: Offer | None = None,
    created_at: datetime | None = None,
) -> NewMessageDTO:
    return NewMessageDTO(
        conversation_id=conversation_id,
        sender_username=sender,
        receiver_username=receiver,
        body=body,
        buyer_id="b1",
        seller_id="s1",
        has_offer=offer is not None,
        offer=offer,
        created_at=created_at,
    )


def at(minutes: int) -> datetime:
    return BASE_TIME + timedelta(minutes=minutes)


def _sort_key(m: Message) -> tuple[datetime, str]:
    return m.created_at, str(m.id)


def _between(m: Message, first: str, second: str) -> bool:
    return (m.sender_username, m.receiver_username) in ((first, second), (second, first))


@dataclass
class FakeConversationReader:
    _store: list[Conversation] = field(default_factory=list)

    async def list_between(self, first_username: str, second_username: str) -> list[Conversation]:
        pair = {(first_username, second_username), (second_username, first_username)}
        return [c for c in self._store if (c.sender_username, c.receiver_username) in pair]


@dataclass
class FakeConversationWriter:
    _reader: FakeConversationReader

    async def create(self, conversation: Conversation) -> Conversation:
        if any(c.conversation_id == conversation.conversation_id for c in self._reader._store):
            raise ConflictError(f"Conversation {conversation.conversation_id} already exists")
        self._reader._store.append(conversation)
        return conversation


@dataclass
class FakeMessageReader:
    _messages: list[Message] = field(default_factory=list)

    async def get_by_id(self, message_id: UUID) -> Message | None:
        return next((m for m in self._messages if m.id == message_id), None)

    async def list_between(self, first_username: str, second_username: str) -> list[Message]:
        return sorted(
            (m for m in self._messages if _between(m, first_username, second_username)),
            key=_sort_key,
        )

    async def list_for_conversation(self, conversation_id: str) -> list[Message]:
        return sorted(
            (m for m in self._messages if m.conversation_id == conversation_id),
            key=_sort_key,
        )

    async def latest_per_conversation(self, username: str) -> list[ConversationPreview]:
        latest: dict[str, Message] = {}
        for m in self._messages:
            if username not in (m.sender_username, m.receiver_username):
                continue
            current = latest.get(m.conversation_id)
            if current is None or _sort_key(m) > _sort_key(current):
                latest[m.conversation_id] = m
        ordered = sorted(latest.values(), key=_sort_key, reverse=True)
        return [
            ConversationPreview(
                id=m.id,
                conversation_id=m.conversation_id,
                seller_id=m.seller_id,
                buyer_id=m.buyer_id,
                receiver_username=m.receiver_username,
                receiver_picture=m.receiver_picture,
                sender_username=m.sender_username,
                sender_picture=m.sender_picture,
                body=m.body,
                file=m.file,
                gig_id=m.gig_id,
                is_read=m.is_read,
                has_offer=m.has_offer,
                created_at=m.created_at,
            )
            for m in ordered
        ]


@dataclass
class FakeMessageWriter:
    _reader: FakeMessageReader
    fail_writes: bool = False

    async def add(self, message: Message) -> Message:
        if self.fail_writes:
            raise PersistenceError("add message: storage unavailable")
        self._reader._messages.append(message)
        return message

    async def set_offer_flag(self, message_id: UUID, flag: OfferFlag) -> Message | None:
        target = await self._reader.get_by_id(message_id)
        if target is None or not target.has_offer or target.offer is None:
            return None
        return self._replace(
            message_id,
            lambda m: dataclasses.replace(m, offer=dataclasses.replace(m.offer, **{flag.value: True})),
        )

    async def mark_read(self, message_id: UUID) -> Message | None:
        return self._replace(message_id, lambda m: dataclasses.replace(m, is_read=True))

    async def mark_many_read(self, sender_username: str, receiver_username: str) -> int:
        count = 0
        for i, m in enumerate(self._reader._messages):
            if (
                m.sender_username == sender_username
                and m.receiver_username == receiver_username
                and not m.is_read
            ):
                self._reader._messages[i] = dataclasses.replace(m, is_read=True)
                count += 1
        return count

    def _replace(self, message_id: UUID, change) -> Message | None:
        for i, m in enumerate(self._reader._messages):
            if m.id == message_id:
                self._reader._messages[i] = change(m)
                return self._reader._messages[i]
        return None


@dataclass
class FakeUoW:
    """In-memory UoW for unit tests."""
    conversations: FakeConversationReader = field(default_factory=FakeConversationReader)
    conversations_w: FakeConversationWriter | None = None
    messages: FakeMessageReader = field(default_factory=FakeMessageReader)
    messages_w: FakeMessageWriter | None = None
    _committed: bool = False
    commits: int = 0

    def __post_init__(self) -> None:
        if self.conversations_w is None:
            self.conversations_w = FakeConversationWriter(self.conversations)
        if self.messages_w is None:
            self.messages_w = FakeMessageWriter(self.messages)

    async def commit(self) -> None:
        self._committed = True
        self.commits += 1

    async def rollback(self) -> None:
        pass


@dataclass
class FakeEmitter:
    calls: list[tuple[str, Any]] = field(default_factory=list)
    fail: bool = False

    async def emit(self, event: str, payload: Any) -> None:
        if self.fail:
            raise NotificationDeliveryError("socket server down")
        self.calls.append((str(event), payload))


@dataclass
class FakePublisher:
    calls: list[dict[str, str]] = field(default_factory=list)
    fail: bool = False

    async def publish(self, exchange: str, routing_key: str, body: str, description: str) -> None:
        if self.fail:
            raise NotificationDeliveryError("broker down")
        self.calls.append(
            {
                "exchange": exchange,
                "routing_key": routing_key,
                "body": body,
                "description": description,
            }
        )


@pytest.fixture
def emitter() -> FakeEmitter:
    return FakeEmitter()


@pytest.fixture
def publisher() -> FakePublisher:
    return FakePublisher()


@pytest.fixture
def notifier(emitter: FakeEmitter, publisher: FakePublisher) -> ChatNotifier:
    return ChatNotifier(
        emitter,
        publisher,
        exchange="gigconnect-order-exchange",
        routing_key="order-email",
        timeout=1.0,
    )
