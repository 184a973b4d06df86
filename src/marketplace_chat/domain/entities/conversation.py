from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True, slots=True)
class Conversation:
    id: UUID
    conversation_id: str
    sender_username: str
    receiver_username: str
    created_at: datetime
