from __future__ import annotations

from marketplace_chat.domain.entities.conversation import Conversation
from marketplace_chat.infrastructure.db.models.conversation import ConversationModel


def model_to_entity(model: ConversationModel) -> Conversation:
    return Conversation(
        id=model.id,
        conversation_id=model.conversation_id,
        sender_username=model.sender_username,
        receiver_username=model.receiver_username,
        created_at=model.created_at,
    )


def entity_to_model(entity: Conversation) -> ConversationModel:
    return ConversationModel(
        id=entity.id,
        conversation_id=entity.conversation_id,
        sender_username=entity.sender_username,
        receiver_username=entity.receiver_username,
        created_at=entity.created_at,
    )
