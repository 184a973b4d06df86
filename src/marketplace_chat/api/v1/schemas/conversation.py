from __future__ import annotations

from datetime import datetime
from uuid import UUID

from marketplace_chat.api.v1.schemas.common import CamelModel


class ConversationResponse(CamelModel):
    id: UUID
    conversation_id: str
    sender_username: str
    receiver_username: str
    created_at: datetime


class ConversationLookupResponse(CamelModel):
    message: str
    conversation: list[ConversationResponse]


class ConversationPreviewResponse(CamelModel):
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


class ConversationListResponse(CamelModel):
    message: str
    conversations: list[ConversationPreviewResponse]
