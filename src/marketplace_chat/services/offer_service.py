from __future__ import annotations

from uuid import UUID

from marketplace_chat.application.exceptions import NotFoundError, ValidationError
from marketplace_chat.application.uow import UnitOfWork
from marketplace_chat.domain.entities.message import Message
from marketplace_chat.domain.value_objects.enums import OfferFlag
from marketplace_chat.domain.value_objects.ids import parse_message_id


async def update_offer(
    message_id: UUID | str,
    flag_name: str,
    uow: UnitOfWork,
) -> Message:
    """Set ``offer.<flag_name>`` to true. Other flags are left as they are.

    Only messages sent with an offer can be updated.
    """
    try:
        flag = OfferFlag(flag_name)
    except ValueError:
        allowed = ", ".join(f.value for f in OfferFlag)
        raise ValidationError(
            f"Unknown offer type {flag_name!r}; expected one of: {allowed}"
        ) from None

    mid = parse_message_id(message_id)
    if mid is None:
        raise NotFoundError("Message not found")

    message = await uow.messages_w.set_offer_flag(mid, flag)
    if message is None:
        if await uow.messages.get_by_id(mid) is None:
            raise NotFoundError("Message not found")
        raise ValidationError("Message has no offer")

    await uow.commit()
    return message
