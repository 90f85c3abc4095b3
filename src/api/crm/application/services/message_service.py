"""Message application service."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from crm.application.observability import CRMServiceProbe, DefaultCRMServiceProbe
from crm.domain.entities import Message
from crm.domain.value_objects import SenderType
from crm.ports.exceptions import ConversationNotFoundError, MessageNotFoundError
from crm.ports.repositories import IConversationRepository, IMessageRepository


class MessageService:
    """Application service for appending and reading messages."""

    def __init__(
        self,
        session: AsyncSession,
        conversation_repository: IConversationRepository,
        message_repository: IMessageRepository,
        probe: CRMServiceProbe | None = None,
    ):
        self._session = session
        self._conversation_repository = conversation_repository
        self._message_repository = message_repository
        self._probe = probe or DefaultCRMServiceProbe()

    async def create_message(
        self,
        conversation_id: UUID,
        sender_type: SenderType,
        content: str,
        sender_id: str | None = None,
    ) -> Message:
        """Append a message and stamp the conversation's last_message_at.

        The conversation row is locked, the message inserted and
        ``last_message_at`` set to the message's ``created_at`` in a single
        transaction.

        Raises:
            ConversationNotFoundError: If the conversation does not exist
        """
        async with self._session.begin():
            conversation = await self._conversation_repository.get_by_id(
                conversation_id, for_update=True
            )
            if conversation is None:
                self._probe.conversation_not_found(str(conversation_id))
                raise ConversationNotFoundError(
                    f"Conversation {conversation_id} not found"
                )

            message = await self._message_repository.add(
                conversation_id=conversation_id,
                sender_type=sender_type,
                sender_id=sender_id,
                content=content,
            )
            await self._conversation_repository.touch_last_message(
                conversation_id, message.created_at
            )

        self._probe.message_created(str(message.id), str(conversation_id))
        return message

    async def list_for_conversation(self, conversation_id: UUID) -> list[Message]:
        """List a conversation's messages, oldest first.

        Raises:
            ConversationNotFoundError: If the conversation does not exist
        """
        if await self._conversation_repository.get_by_id(conversation_id) is None:
            self._probe.conversation_not_found(str(conversation_id))
            raise ConversationNotFoundError(f"Conversation {conversation_id} not found")
        return await self._message_repository.list_by_conversation(conversation_id)

    async def get_message(self, message_id: UUID) -> Message:
        """Retrieve a message.

        Raises:
            MessageNotFoundError: If the message does not exist
        """
        message = await self._message_repository.get_by_id(message_id)
        if message is None:
            self._probe.message_not_found(str(message_id))
            raise MessageNotFoundError(f"Message {message_id} not found")
        return message

    async def delete_message(self, message_id: UUID) -> None:
        """Delete a message.

        Raises:
            MessageNotFoundError: If the message does not exist
        """
        async with self._session.begin():
            deleted = await self._message_repository.delete(message_id)

        if not deleted:
            self._probe.message_not_found(str(message_id))
            raise MessageNotFoundError(f"Message {message_id} not found")
        self._probe.message_deleted(str(message_id))
