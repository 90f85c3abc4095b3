"""Pydantic models for message API requests and responses."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from crm.domain.entities import Message


class CreateMessageRequest(BaseModel):
    """Request model for appending a message to a conversation."""

    conversation_id: str = Field(..., description="Conversation ID (UUID)")
    sender_type: str = Field(..., description="One of user, contact, system")
    sender_id: str | None = Field(default=None, max_length=255)
    content: str = Field(..., min_length=1)


class MessageResponse(BaseModel):
    """Response model for a message."""

    id: UUID
    conversation_id: UUID
    sender_type: str
    sender_id: str | None
    content: str
    created_at: datetime

    @classmethod
    def from_domain(cls, message: Message) -> MessageResponse:
        """Convert domain Message entity to API response."""
        return cls(
            id=message.id,
            conversation_id=message.conversation_id,
            sender_type=message.sender_type.value,
            sender_id=message.sender_id,
            content=message.content,
            created_at=message.created_at,
        )
