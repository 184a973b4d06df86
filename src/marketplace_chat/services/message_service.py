from __future__ import annotations

import uuid
from datetime import datetime, timezone

from marketplace_chat.application.dto.message import NewMessageDTO
from marketplace_chat.application.exceptions import ValidationError
from marketplace_chat.application.uow import UnitOfWork
from marketplace_chat.domain.entities.message import ConversationPreview, Message
from marketplace_chat.services import conversation_service
from marketplace_chat.services.notifier import ChatNotifier


async def add_message(
    data: NewMessageDTO,
    uow: UnitOfWork,
    notifier: ChatNotifier,
) -> Message:
    """Persist a message, then notify.

    The write is committed before anything is emitted or published; a failed
    notification does not undo it.
    """
    msg = await _stage_message(data, uow)
    await uow.commit()
    await notifier.message_added(msg)
    return msg


async def send_message(
    data: NewMessageDTO,
    has_conversation_id: bool,
    uow: UnitOfWork,
    notifier: ChatNotifier,
) -> Message:
    """Add a message, opening the conversation first when the thread is new.

    Both rows are committed together.
    """
    if not has_conversation_id:
        await conversation_service.stage_conversation(
            data.conversation_id, data.sender_username, data.receiver_username, uow,
        )
    return await add_message(data, uow, notifier)


async def get_messages(
    sender_username: str,
    receiver_username: str,
    uow: UnitOfWork,
) -> list[Message]:
    return await uow.messages.list_between(sender_username, receiver_username)


async def get_user_messages(conversation_id: str, uow: UnitOfWork) -> list[Message]:
    return await uow.messages.list_for_conversation(conversation_id)


async def get_user_conversation_list(
    username: str,
    uow: UnitOfWork,
) -> list[ConversationPreview]:
    return await uow.messages.latest_per_conversation(username)


async def _stage_message(data: NewMessageDTO, uow: UnitOfWork) -> Message:
    if data.has_offer and data.offer is None:
        raise ValidationError("hasOffer is set but the message carries no offer")

    msg = Message(
        id=uuid.uuid4(),
        conversation_id=data.conversation_id,
        body=data.body,
        file=data.file,
        file_type=data.file_type,
        file_size=data.file_size,
        file_name=data.file_name,
        gig_id=data.gig_id,
        buyer_id=data.buyer_id,
        seller_id=data.seller_id,
        sender_username=data.sender_username,
        sender_picture=data.sender_picture,
        receiver_username=data.receiver_username,
        receiver_picture=data.receiver_picture,
        is_read=data.is_read,
        has_offer=data.has_offer,
        offer=data.offer if data.has_offer else None,
        created_at=data.created_at or datetime.now(timezone.utc),
    )
    return await uow.messages_w.add(msg)
