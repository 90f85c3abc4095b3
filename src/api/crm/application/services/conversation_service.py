"""Conversation application service."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from crm.application.observability import CRMServiceProbe, DefaultCRMServiceProbe
from crm.domain.entities import Conversation
from crm.domain.value_objects import ConversationStatus
from crm.ports.exceptions import ContactNotFoundError, ConversationNotFoundError
from crm.ports.repositories import (
    IContactRepository,
    IConversationRepository,
    IMessageRepository,
)


class ConversationService:
    """Application service for conversations and their message history."""

    def __init__(
        self,
        session: AsyncSession,
        contact_repository: IContactRepository,
        conversation_repository: IConversationRepository,
        message_repository: IMessageRepository,
        probe: CRMServiceProbe | None = None,
    ):
        self._session = session
        self._contact_repository = contact_repository
        self._conversation_repository = conversation_repository
        self._message_repository = message_repository
        self._probe = probe or DefaultCRMServiceProbe()

    async def list_for_contact(self, contact_id: UUID) -> list[Conversation]:
        """List a contact's conversations, newest first, each with its messages.

        Raises:
            ContactNotFoundError: If the contact does not exist
        """
        if await self._contact_repository.get_by_id(contact_id) is None:
            self._probe.contact_not_found(str(contact_id))
            raise ContactNotFoundError(f"Contact {contact_id} not found")

        conversations = await self._conversation_repository.list_by_contact(contact_id)
        for conversation in conversations:
            conversation.messages = await self._message_repository.list_by_conversation(
                conversation.id
            )
        return conversations

    async def get_conversation(self, conversation_id: UUID) -> Conversation:
        """Retrieve a conversation with its messages, oldest first.

        Raises:
            ConversationNotFoundError: If the conversation does not exist
        """
        conversation = await self._conversation_repository.get_by_id(conversation_id)
        if conversation is None:
            self._probe.conversation_not_found(str(conversation_id))
            raise ConversationNotFoundError(f"Conversation {conversation_id} not found")

        conversation.messages = await self._message_repository.list_by_conversation(
            conversation_id
        )
        return conversation

    async def update_status(
        self, conversation_id: UUID, status: ConversationStatus
    ) -> Conversation:
        """Move a conversation to another status.

        Raises:
            ConversationNotFoundError: If the conversation does not exist
        """
        async with self._session.begin():
            conversation = await self._conversation_repository.set_status(
                conversation_id, status
            )
            if conversation is None:
                self._probe.conversation_not_found(str(conversation_id))
                raise ConversationNotFoundError(
                    f"Conversation {conversation_id} not found"
                )

        self._probe.conversation_status_changed(str(conversation_id), status.value)
        return conversation

    async def delete_conversation(self, conversation_id: UUID) -> None:
        """Delete a conversation and its messages.

        Raises:
            ConversationNotFoundError: If the conversation does not exist
        """
        async with self._session.begin():
            deleted = await self._conversation_repository.delete(conversation_id)

        if not deleted:
            self._probe.conversation_not_found(str(conversation_id))
            raise ConversationNotFoundError(f"Conversation {conversation_id} not found")
        self._probe.conversation_deleted(str(conversation_id))
