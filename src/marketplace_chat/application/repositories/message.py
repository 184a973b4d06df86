from __future__ import annotations

from typing import Protocol
from uuid import UUID

from marketplace_chat.domain.entities.message import ConversationPreview, Message
from marketplace_chat.domain.value_objects.enums import OfferFlag


class MessageReader(Protocol):
    async def get_by_id(self, message_id: UUID) -> Message | None: ...

    async def list_between(
        self, first_username: str, second_username: str
    ) -> list[Message]: ...

    async def list_for_conversation(self, conversation_id: str) -> list[Message]: ...

    async def latest_per_conversation(
        self, username: str
    ) -> list[ConversationPreview]:
        """Most recent message of every conversation the user takes part in."""
        ...


class MessageWriter(Protocol):
    async def add(self, message: Message) -> Message: ...

    async def set_offer_flag(
        self, message_id: UUID, flag: OfferFlag
    ) -> Message | None: ...

    async def mark_read(self, message_id: UUID) -> Message | None: ...

    async def mark_many_read(self, sender_username: str, receiver_username: str) -> int:
        """Mark unread messages from sender to receiver as read. Returns the match count."""
        ...
