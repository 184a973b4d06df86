from __future__ import annotations

from uuid import UUID

from marketplace_chat.application.exceptions import NoOpError, NotFoundError
from marketplace_chat.application.uow import UnitOfWork
from marketplace_chat.domain.entities.message import Message
from marketplace_chat.domain.value_objects.ids import parse_message_id
from marketplace_chat.services.notifier import ChatNotifier


async def mark_message_as_read(
    message_id: UUID | str,
    uow: UnitOfWork,
    notifier: ChatNotifier,
) -> Message:
    mid = parse_message_id(message_id)
    message = await uow.messages_w.mark_read(mid) if mid else None
    if message is None:
        raise NotFoundError("Message not found")

    await uow.commit()
    await notifier.message_updated(message.id)
    return message


async def mark_many_messages_as_read(
    receiver_username: str,
    sender_username: str,
    anchor_message_id: UUID | str,
    uow: UnitOfWork,
    notifier: ChatNotifier,
) -> Message:
    """Mark every unread message from sender to receiver as read.

    The returned message is the anchor, fetched by id on its own; it is not
    necessarily one of the messages that were just marked.
    """
    anchor_id = parse_message_id(anchor_message_id)
    if anchor_id is None:
        raise NotFoundError("Message not found")

    marked = await uow.messages_w.mark_many_read(sender_username, receiver_username)
    if marked == 0:
        raise NoOpError(
            f"No unread messages from {sender_username} to {receiver_username}"
        )
    await uow.commit()

    anchor = await uow.messages.get_by_id(anchor_id)
    if anchor is None:
        raise NotFoundError("Message not found")

    await notifier.message_updated(anchor_id)
    return anchor
