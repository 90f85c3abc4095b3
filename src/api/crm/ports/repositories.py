"""Repository protocols (ports) for the CRM bounded context.

Implementations run on a tenant-scoped session, so every query touches
only the resolved tenant's namespace. Repositories flush but never commit;
transactions belong to the application services.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Protocol, runtime_checkable
from uuid import UUID

from crm.domain.entities import Contact, Conversation, Message
from crm.domain.value_objects import ConversationStatus, SenderType


@runtime_checkable
class IContactRepository(Protocol):
    """Repository for Contact persistence."""

    async def add(
        self,
        name: str,
        email: str | None,
        phone: str | None,
        metadata: dict[str, Any],
    ) -> Contact:
        """Insert a contact and return it with generated fields."""
        ...

    async def get_by_id(self, contact_id: UUID) -> Contact | None:
        """Retrieve a contact by id."""
        ...

    async def list_all(self) -> list[Contact]:
        """List contacts, newest first."""
        ...

    async def update(self, contact_id: UUID, changes: dict[str, Any]) -> Contact | None:
        """Apply field changes; None if the contact does not exist."""
        ...

    async def delete(self, contact_id: UUID) -> bool:
        """Delete a contact (cascading to its conversations)."""
        ...


@runtime_checkable
class IConversationRepository(Protocol):
    """Repository for Conversation persistence."""

    async def add(self, contact_id: UUID, status: ConversationStatus) -> Conversation:
        """Insert a conversation and return it with generated fields."""
        ...

    async def get_by_id(
        self, conversation_id: UUID, for_update: bool = False
    ) -> Conversation | None:
        """Retrieve a conversation (without messages)."""
        ...

    async def list_by_contact(self, contact_id: UUID) -> list[Conversation]:
        """List a contact's conversations, newest first (without messages)."""
        ...

    async def set_status(
        self, conversation_id: UUID, status: ConversationStatus
    ) -> Conversation | None:
        """Change the status; None if the conversation does not exist."""
        ...

    async def touch_last_message(self, conversation_id: UUID, at: datetime) -> None:
        """Record the time of the latest message."""
        ...

    async def delete(self, conversation_id: UUID) -> bool:
        """Delete a conversation (cascading to its messages)."""
        ...


@runtime_checkable
class IMessageRepository(Protocol):
    """Repository for Message persistence."""

    async def add(
        self,
        conversation_id: UUID,
        sender_type: SenderType,
        sender_id: str | None,
        content: str,
    ) -> Message:
        """Insert a message and return it with its creation time."""
        ...

    async def get_by_id(self, message_id: UUID) -> Message | None:
        """Retrieve a message by id."""
        ...

    async def list_by_conversation(self, conversation_id: UUID) -> list[Message]:
        """List a conversation's messages, oldest first."""
        ...

    async def delete(self, message_id: UUID) -> bool:
        """Delete a message."""
        ...
