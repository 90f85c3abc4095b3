"""Domain entities for the CRM context.

Entities live inside a tenant namespace; identifiers are UUIDs generated
at creation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from uuid import UUID

from crm.domain.exceptions import InvalidContactError
from crm.domain.value_objects import ConversationStatus, SenderType


@dataclass
class Message:
    """A single message in a conversation. Immutable once created."""

    id: UUID
    conversation_id: UUID
    sender_type: SenderType
    content: str
    created_at: datetime
    sender_id: str | None = None


@dataclass
class Conversation:
    """A thread of messages with one contact."""

    id: UUID
    contact_id: UUID
    status: ConversationStatus
    created_at: datetime
    updated_at: datetime
    last_message_at: datetime | None = None
    messages: list[Message] = field(default_factory=list)


@dataclass
class Contact:
    """A person or organization a tenant talks to."""

    id: UUID
    name: str
    created_at: datetime
    updated_at: datetime
    email: str | None = None
    phone: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def validate_details(name: str | None, email: str | None, phone: str | None) -> None:
        """Check the contact business rules.

        Raises:
            InvalidContactError: If the name is blank or neither email nor
                phone is given
        """
        if not name or not name.strip():
            raise InvalidContactError("Name is required")
        if not email and not phone:
            raise InvalidContactError("Either email or phone is required")
