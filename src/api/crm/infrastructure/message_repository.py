"""PostgreSQL implementation of IMessageRepository.

Messages are append-only; there is no update operation.
"""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from crm.domain.entities import Message
from crm.domain.value_objects import SenderType
from crm.infrastructure.models import MessageModel
from crm.ports.repositories import IMessageRepository
from infrastructure.database.exceptions import translate_storage_errors


class MessageRepository(IMessageRepository):
    """Repository managing the messages table of one tenant namespace."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(
        self,
        conversation_id: UUID,
        sender_type: SenderType,
        sender_id: str | None,
        content: str,
    ) -> Message:
        model = MessageModel(
            conversation_id=conversation_id,
            sender_type=sender_type,
            sender_id=sender_id,
            content=content,
        )
        async with translate_storage_errors("message insert"):
            self._session.add(model)
            await self._session.flush()
        return _message_to_domain(model)

    async def get_by_id(self, message_id: UUID) -> Message | None:
        async with translate_storage_errors("message lookup"):
            result = await self._session.execute(
                select(MessageModel).where(MessageModel.id == message_id)
            )
        model = result.scalar_one_or_none()
        return _message_to_domain(model) if model is not None else None

    async def list_by_conversation(self, conversation_id: UUID) -> list[Message]:
        async with translate_storage_errors("message listing"):
            result = await self._session.execute(
                select(MessageModel)
                .where(MessageModel.conversation_id == conversation_id)
                .order_by(MessageModel.created_at.asc())
            )
        return [_message_to_domain(m) for m in result.scalars().all()]

    async def delete(self, message_id: UUID) -> bool:
        async with translate_storage_errors("message delete"):
            result = await self._session.execute(
                delete(MessageModel).where(MessageModel.id == message_id)
            )
        return result.rowcount > 0


def _message_to_domain(model: MessageModel) -> Message:
    return Message(
        id=model.id,
        conversation_id=model.conversation_id,
        sender_type=SenderType(model.sender_type),
        sender_id=model.sender_id,
        content=model.content,
        created_at=model.created_at,
    )
