from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone

from marketplace_chat.application.uow import UnitOfWork
from marketplace_chat.domain.entities.conversation import Conversation

logger = logging.getLogger(__name__)


async def stage_conversation(
    conversation_id: str,
    sender_username: str,
    receiver_username: str,
    uow: UnitOfWork,
) -> Conversation:
    """Insert a conversation without committing.

    There is no existence check; a duplicate conversation_id surfaces as
    ConflictError from the store.
    """
    conversation = Conversation(
        id=uuid.uuid4(),
        conversation_id=conversation_id,
        sender_username=sender_username,
        receiver_username=receiver_username,
        created_at=datetime.now(timezone.utc),
    )
    conversation = await uow.conversations_w.create(conversation)
    logger.info(
        "Conversation %s created between %s and %s",
        conversation_id, sender_username, receiver_username,
    )
    return conversation


async def create_conversation(
    conversation_id: str,
    sender_username: str,
    receiver_username: str,
    uow: UnitOfWork,
) -> Conversation:
    conversation = await stage_conversation(
        conversation_id, sender_username, receiver_username, uow,
    )
    await uow.commit()
    return conversation


async def get_conversation(
    sender_username: str,
    receiver_username: str,
    uow: UnitOfWork,
) -> list[Conversation]:
    return await uow.conversations.list_between(sender_username, receiver_username)
