from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from marketplace_chat.application.exceptions import ValidationError
from marketplace_chat.domain.entities.message import Message, Offer
from marketplace_chat.domain.value_objects.enums import EmailTemplate


@dataclass(frozen=True, slots=True)
class OfferEmailDTO:
    """Payload consumed by the notification service's offer email template."""

    sender: str
    amount: str
    buyer_username: str
    seller_username: str
    title: str
    description: str
    delivery_days: str
    template: str = EmailTemplate.OFFER

    @classmethod
    def from_message(cls, message: Message) -> OfferEmailDTO:
        offer = message.offer
        if offer is None:
            raise ValidationError(f"Message {message.id} carries no offer")
        return cls(
            sender=message.sender_username,
            amount=format_amount(offer.price),
            buyer_username=message.receiver_username.lower(),
            seller_username=message.sender_username.lower(),
            title=offer.gig_title,
            description=offer.description,
            delivery_days=str(offer.delivery_in_days),
        )

    def to_payload(self) -> dict[str, Any]:
        return {
            "sender": self.sender,
            "amount": self.amount,
            "buyerUsername": self.buyer_username,
            "sellerUsername": self.seller_username,
            "title": self.title,
            "description": self.description,
            "deliveryDays": self.delivery_days,
            "template": str(self.template),
        }


def format_amount(price: float) -> str:
    """Render a price the way clients display it: 50.0 -> "50", 49.5 -> "49.5"."""
    if float(price).is_integer():
        return str(int(price))
    return str(price)


def offer_to_payload(offer: Offer) -> dict[str, Any]:
    return {
        "gigTitle": offer.gig_title,
        "price": offer.price,
        "description": offer.description,
        "deliveryInDays": offer.delivery_in_days,
        "oldDeliveryDate": offer.old_delivery_date,
        "newDeliveryDate": offer.new_delivery_date,
        "accepted": offer.accepted,
        "rejected": offer.rejected,
        "cancelled": offer.cancelled,
        "completed": offer.completed,
    }


def message_to_payload(message: Message) -> dict[str, Any]:
    """Full message as broadcast in a "message received" event."""
    return {
        "id": message.id,
        "conversationId": message.conversation_id,
        "body": message.body,
        "file": message.file,
        "fileType": message.file_type,
        "fileSize": message.file_size,
        "fileName": message.file_name,
        "gigId": message.gig_id,
        "buyerId": message.buyer_id,
        "sellerId": message.seller_id,
        "senderUsername": message.sender_username,
        "senderPicture": message.sender_picture,
        "receiverUsername": message.receiver_username,
        "receiverPicture": message.receiver_picture,
        "isRead": message.is_read,
        "hasOffer": message.has_offer,
        "offer": offer_to_payload(message.offer) if message.offer else None,
        "createdAt": message.created_at,
    }
