from __future__ import annotations

from typing import NewType
from uuid import UUID

MessageId = NewType("MessageId", UUID)


def parse_message_id(raw: UUID | str) -> MessageId | None:
    """Return the id as a UUID, or None when it cannot name any message."""
    if isinstance(raw, UUID):
        return MessageId(raw)
    try:
        return MessageId(UUID(raw))
    except (TypeError, ValueError):
        return None
