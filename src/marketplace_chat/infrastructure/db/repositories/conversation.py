from __future__ import annotations

from sqlalchemy import and_, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace_chat.domain.entities.conversation import Conversation
from marketplace_chat.infrastructure.db.errors import translate_db_errors
from marketplace_chat.infrastructure.db.mappers import conversation as mapper
from marketplace_chat.infrastructure.db.models.conversation import ConversationModel


class ConversationReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_between(
        self,
        first_username: str,
        second_username: str,
    ) -> list[Conversation]:
        stmt = (
            select(ConversationModel)
            .where(
                or_(
                    and_(
                        ConversationModel.sender_username == first_username,
                        ConversationModel.receiver_username == second_username,
                    ),
                    and_(
                        ConversationModel.sender_username == second_username,
                        ConversationModel.receiver_username == first_username,
                    ),
                )
            )
            .order_by(ConversationModel.created_at.asc(), ConversationModel.id)
        )
        with translate_db_errors("list conversations"):
            result = await self._session.execute(stmt)
        return [mapper.model_to_entity(m) for m in result.scalars().all()]


class ConversationWriterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, conversation: Conversation) -> Conversation:
        model = mapper.entity_to_model(conversation)
        self._session.add(model)
        with translate_db_errors(f"create conversation {conversation.conversation_id}"):
            await self._session.flush()
        return mapper.model_to_entity(model)
