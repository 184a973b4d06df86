from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True, slots=True)
class Offer:
    gig_title: str
    price: float
    description: str
    delivery_in_days: int
    old_delivery_date: str | None = None
    new_delivery_date: str | None = None
    accepted: bool = False
    rejected: bool = False
    cancelled: bool = False
    completed: bool = False


@dataclass(frozen=True, slots=True)
class Message:
    id: UUID
    conversation_id: str
    body: str | None
    file: str | None
    file_type: str | None
    file_size: str | None
    file_name: str | None
    gig_id: str | None
    buyer_id: str | None
    seller_id: str | None
    sender_username: str
    sender_picture: str | None
    receiver_username: str
    receiver_picture: str | None
    is_read: bool
    has_offer: bool
    offer: Offer | None
    created_at: datetime


@dataclass(frozen=True, slots=True)
class ConversationPreview:
    """Latest message of a thread, as shown in a user's inbox."""

    id: UUID
    conversation_id: str
    seller_id: str | None
    buyer_id: str | None
    receiver_username: str
    receiver_picture: str | None
    sender_username: str
    sender_picture: str | None
    body: str | None
    file: str | None
    gig_id: str | None
    is_read: bool
    has_offer: bool
    created_at: datetime
