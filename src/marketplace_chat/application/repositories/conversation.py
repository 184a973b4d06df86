from __future__ import annotations

from typing import Protocol

from marketplace_chat.domain.entities.conversation import Conversation


class ConversationReader(Protocol):
    async def list_between(
        self, first_username: str, second_username: str
    ) -> list[Conversation]:
        """Conversations between the two users, in either direction."""
        ...


class ConversationWriter(Protocol):
    async def create(self, conversation: Conversation) -> Conversation:
        """Insert. Raises ConflictError if conversation_id is taken."""
        ...
