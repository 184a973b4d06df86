from __future__ import annotations

from uuid import UUID

from sqlalchemy import and_, cast, or_, select, update
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace_chat.domain.entities.message import ConversationPreview, Message
from marketplace_chat.domain.value_objects.enums import OfferFlag
from marketplace_chat.infrastructure.db.errors import translate_db_errors
from marketplace_chat.infrastructure.db.mappers import message as mapper
from marketplace_chat.infrastructure.db.models.message import MessageModel

# Columns exposed in the inbox preview; offer and file metadata are left out.
_PREVIEW_COLUMNS = (
    MessageModel.id,
    MessageModel.conversation_id,
    MessageModel.seller_id,
    MessageModel.buyer_id,
    MessageModel.receiver_username,
    MessageModel.receiver_picture,
    MessageModel.sender_username,
    MessageModel.sender_picture,
    MessageModel.body,
    MessageModel.file,
    MessageModel.gig_id,
    MessageModel.is_read,
    MessageModel.has_offer,
    MessageModel.created_at,
)


class MessageReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, message_id: UUID) -> Message | None:
        with translate_db_errors(f"get message {message_id}"):
            model = await self._session.get(MessageModel, message_id)
        return mapper.model_to_entity(model) if model else None

    async def list_between(
        self,
        first_username: str,
        second_username: str,
    ) -> list[Message]:
        stmt = (
            select(MessageModel)
            .where(
                or_(
                    and_(
                        MessageModel.sender_username == first_username,
                        MessageModel.receiver_username == second_username,
                    ),
                    and_(
                        MessageModel.sender_username == second_username,
                        MessageModel.receiver_username == first_username,
                    ),
                )
            )
            .order_by(MessageModel.created_at.asc(), MessageModel.id.asc())
        )
        with translate_db_errors("list messages between users"):
            result = await self._session.execute(stmt)
        return [mapper.model_to_entity(m) for m in result.scalars().all()]

    async def list_for_conversation(self, conversation_id: str) -> list[Message]:
        stmt = (
            select(MessageModel)
            .where(MessageModel.conversation_id == conversation_id)
            .order_by(MessageModel.created_at.asc(), MessageModel.id.asc())
        )
        with translate_db_errors(f"list messages of {conversation_id}"):
            result = await self._session.execute(stmt)
        return [mapper.model_to_entity(m) for m in result.scalars().all()]

    async def latest_per_conversation(self, username: str) -> list[ConversationPreview]:
        # DISTINCT ON keeps the first row per conversation in the ORDER BY below.
        latest = (
            select(*_PREVIEW_COLUMNS)
            .where(
                or_(
                    MessageModel.sender_username == username,
                    MessageModel.receiver_username == username,
                )
            )
            .distinct(MessageModel.conversation_id)
            .order_by(
                MessageModel.conversation_id,
                MessageModel.created_at.desc(),
                MessageModel.id.desc(),
            )
            .subquery("latest")
        )
        stmt = select(latest).order_by(latest.c.created_at.desc(), latest.c.id.desc())
        with translate_db_errors(f"list conversations of {username}"):
            result = await self._session.execute(stmt)
        return [mapper.row_to_preview(row) for row in result.mappings().all()]


class MessageWriterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(self, message: Message) -> Message:
        model = mapper.entity_to_model(message)
        self._session.add(model)
        with translate_db_errors(f"add message to {message.conversation_id}"):
            await self._session.flush()
        return mapper.model_to_entity(model)

    async def set_offer_flag(self, message_id: UUID, flag: OfferFlag) -> Message | None:
        """Merge ``{flag: true}`` into the offer document.

        Only messages that carry an offer match; None otherwise.
        """
        stmt = (
            update(MessageModel)
            .where(
                MessageModel.id == message_id,
                MessageModel.has_offer.is_(True),
                MessageModel.offer.is_not(None),
            )
            .values(offer=MessageModel.offer.op("||")(cast({flag.value: True}, JSONB)))
            .returning(MessageModel)
            .execution_options(synchronize_session=False)
        )
        return await self._update_one(stmt, f"set offer.{flag.value} on {message_id}")

    async def mark_read(self, message_id: UUID) -> Message | None:
        stmt = (
            update(MessageModel)
            .where(MessageModel.id == message_id)
            .values(is_read=True)
            .returning(MessageModel)
            .execution_options(synchronize_session=False)
        )
        return await self._update_one(stmt, f"mark {message_id} read")

    async def mark_many_read(self, sender_username: str, receiver_username: str) -> int:
        stmt = (
            update(MessageModel)
            .where(
                MessageModel.sender_username == sender_username,
                MessageModel.receiver_username == receiver_username,
                MessageModel.is_read.is_(False),
            )
            .values(is_read=True)
            .execution_options(synchronize_session=False)
        )
        with translate_db_errors(f"mark messages {sender_username}->{receiver_username} read"):
            result = await self._session.execute(stmt)
        return result.rowcount

    async def _update_one(self, stmt, action: str) -> Message | None:
        with translate_db_errors(action):
            result = await self._session.execute(stmt)
            model = result.scalar_one_or_none()
        return mapper.model_to_entity(model) if model else None
