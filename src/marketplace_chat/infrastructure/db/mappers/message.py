from __future__ import annotations

from typing import Any, Mapping

from marketplace_chat.domain.entities.message import ConversationPreview, Message, Offer
from marketplace_chat.infrastructure.db.models.message import MessageModel


def offer_from_document(doc: Mapping[str, Any] | None) -> Offer | None:
    if not doc:
        return None
    return Offer(
        gig_title=doc.get("gigTitle", ""),
        price=doc.get("price", 0),
        description=doc.get("description", ""),
        delivery_in_days=doc.get("deliveryInDays", 0),
        old_delivery_date=doc.get("oldDeliveryDate"),
        new_delivery_date=doc.get("newDeliveryDate"),
        accepted=bool(doc.get("accepted", False)),
        rejected=bool(doc.get("rejected", False)),
        cancelled=bool(doc.get("cancelled", False)),
        completed=bool(doc.get("completed", False)),
    )


def offer_to_document(offer: Offer | None) -> dict[str, Any] | None:
    if offer is None:
        return None
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


def model_to_entity(model: MessageModel) -> Message:
    return Message(
        id=model.id,
        conversation_id=model.conversation_id,
        body=model.body,
        file=model.file,
        file_type=model.file_type,
        file_size=model.file_size,
        file_name=model.file_name,
        gig_id=model.gig_id,
        buyer_id=model.buyer_id,
        seller_id=model.seller_id,
        sender_username=model.sender_username,
        sender_picture=model.sender_picture,
        receiver_username=model.receiver_username,
        receiver_picture=model.receiver_picture,
        is_read=model.is_read,
        has_offer=model.has_offer,
        offer=offer_from_document(model.offer),
        created_at=model.created_at,
    )


def entity_to_model(entity: Message) -> MessageModel:
    return MessageModel(
        id=entity.id,
        conversation_id=entity.conversation_id,
        body=entity.body,
        file=entity.file,
        file_type=entity.file_type,
        file_size=entity.file_size,
        file_name=entity.file_name,
        gig_id=entity.gig_id,
        buyer_id=entity.buyer_id,
        seller_id=entity.seller_id,
        sender_username=entity.sender_username,
        sender_picture=entity.sender_picture,
        receiver_username=entity.receiver_username,
        receiver_picture=entity.receiver_picture,
        is_read=entity.is_read,
        has_offer=entity.has_offer,
        offer=offer_to_document(entity.offer),
        created_at=entity.created_at,
    )


def row_to_preview(row: Mapping[str, Any]) -> ConversationPreview:
    return ConversationPreview(
        id=row["id"],
        conversation_id=row["conversation_id"],
        seller_id=row["seller_id"],
        buyer_id=row["buyer_id"],
        receiver_username=row["receiver_username"],
        receiver_picture=row["receiver_picture"],
        sender_username=row["sender_username"],
        sender_picture=row["sender_picture"],
        body=row["body"],
        file=row["file"],
        gig_id=row["gig_id"],
        is_read=row["is_read"],
        has_offer=row["has_offer"],
        created_at=row["created_at"],
    )
