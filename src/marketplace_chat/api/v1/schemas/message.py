from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import ConfigDict, Field, model_validator

from marketplace_chat.api.v1.schemas.common import CamelModel
from marketplace_chat.application.dto.message import NewMessageDTO
from marketplace_chat.domain.entities.message import Offer


class OfferSchema(CamelModel):
    gig_title: str
    price: float = Field(ge=0)
    description: str
    delivery_in_days: int = Field(ge=0)
    old_delivery_date: str | None = None
    new_delivery_date: str | None = None
    accepted: bool = False
    rejected: bool = False
    cancelled: bool = False
    completed: bool = False

    def to_entity(self) -> Offer:
        return Offer(
            gig_title=self.gig_title,
            price=self.price,
            description=self.description,
            delivery_in_days=self.delivery_in_days,
            old_delivery_date=self.old_delivery_date,
            new_delivery_date=self.new_delivery_date,
            accepted=self.accepted,
            rejected=self.rejected,
            cancelled=self.cancelled,
            completed=self.completed,
        )


class SendMessageRequest(CamelModel):
    conversation_id: str = Field(min_length=1)
    sender_username: str = Field(min_length=1)
    receiver_username: str = Field(min_length=1)
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
    offer: OfferSchema | None = None
    has_conversation_id: bool = False

    model_config = ConfigDict(coerce_numbers_to_str=True)

    @model_validator(mode="after")
    def _offer_present(self) -> SendMessageRequest:
        if self.has_offer and self.offer is None:
            raise ValueError("offer is required when hasOffer is true")
        return self

    def to_dto(self, *, file: str | None) -> NewMessageDTO:
        return NewMessageDTO(
            conversation_id=self.conversation_id,
            sender_username=self.sender_username,
            receiver_username=self.receiver_username,
            body=self.body,
            file=file,
            file_type=self.file_type,
            file_size=self.file_size,
            file_name=self.file_name,
            gig_id=self.gig_id,
            buyer_id=self.buyer_id,
            seller_id=self.seller_id,
            sender_picture=self.sender_picture,
            receiver_picture=self.receiver_picture,
            is_read=self.is_read,
            has_offer=self.has_offer,
            offer=self.offer.to_entity() if self.offer else None,
        )


class MessageResponse(CamelModel):
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
    offer: OfferSchema | None
    created_at: datetime


class SendMessageResponse(CamelModel):
    message: str
    conversation_id: str
    message_data: MessageResponse


class MessageListResponse(CamelModel):
    message: str
    messages: list[MessageResponse]


class SingleMessageResponse(CamelModel):
    message: str
    single_message: MessageResponse


class UpdateOfferRequest(CamelModel):
    message_id: str
    type: str


class MarkReadRequest(CamelModel):
    message_id: str


class MarkManyReadRequest(CamelModel):
    receiver_username: str = Field(min_length=1)
    sender_username: str = Field(min_length=1)
    message_id: str
