from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from marketplace_chat.domain.entities.message import Offer


@dataclass(frozen=True, slots=True)
class NewMessageDTO:
    conversation_id: str
    sender_username: str
    receiver_username: str
    body: str | None = None
    file: str | None = None
    file_type: str | None = None
    file_size: str | None = None
    file_name: str | None = None
    gig_id: str | None = None
    buyer_id: str | None = None
    seller_id: str | None = None
    sender_picture: str | None = None
    receiver_picture: str | None = None
    is_read: bool = False
    has_offer: bool = False
    offer: Offer | None = None
    created_at: datetime | None = None
