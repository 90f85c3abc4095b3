"""PostgreSQL implementation of IConversationRepository."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from crm.domain.entities import Conversation
from crm.domain.value_objects import ConversationStatus
from crm.infrastructure.models import ConversationModel
from crm.ports.repositories import IConversationRepository
from infrastructure.database.exceptions import translate_storage_errors


class ConversationRepository(IConversationRepository):
    """Repository managing the conversations table of one tenant namespace."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(self, contact_id: UUID, status: ConversationStatus) -> Conversation:
        model = ConversationModel(contact_id=contact_id, status=status)
        async with translate_storage_errors("conversation insert"):
            self._session.add(model)
            await self._session.flush()
        return _conversation_to_domain(model)

    async def get_by_id(
        self, conversation_id: UUID, for_update: bool = False
    ) -> Conversation | None:
        stmt = select(ConversationModel).where(ConversationModel.id == conversation_id)
        if for_update:
            stmt = stmt.with_for_update()
        async with translate_storage_errors("conversation lookup"):
            result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return _conversation_to_domain(model) if model is not None else None

    async def list_by_contact(self, contact_id: UUID) -> list[Conversation]:
        async with translate_storage_errors("conversation listing"):
            result = await self._session.execute(
                select(ConversationModel)
                .where(ConversationModel.contact_id == contact_id)
                .order_by(ConversationModel.created_at.desc())
            )
        return [_conversation_to_domain(m) for m in result.scalars().all()]

    async def set_status(
        self, conversation_id: UUID, status: ConversationStatus
    ) -> Conversation | None:
        async with translate_storage_errors("conversation update"):
            result = await self._session.execute(
                update(ConversationModel)
                .where(ConversationModel.id == conversation_id)
                .values(status=status)
                .returning(ConversationModel)
            )
        model = result.scalar_one_or_none()
        return _conversation_to_domain(model) if model is not None else None

    async def touch_last_message(self, conversation_id: UUID, at: datetime) -> None:
        async with translate_storage_errors("conversation update"):
            await self._session.execute(
                update(ConversationModel)
                .where(ConversationModel.id == conversation_id)
                .values(last_message_at=at)
            )

    async def delete(self, conversation_id: UUID) -> bool:
        async with translate_storage_errors("conversation delete"):
            result = await self._session.execute(
                delete(ConversationModel).where(ConversationModel.id == conversation_id)
            )
        return result.rowcount > 0


def _conversation_to_domain(model: ConversationModel) -> Conversation:
    return Conversation(
        id=model.id,
        contact_id=model.contact_id,
        status=ConversationStatus(model.status),
        last_message_at=model.last_message_at,
        created_at=model.created_at,
        updated_at=model.updated_at,
    )
