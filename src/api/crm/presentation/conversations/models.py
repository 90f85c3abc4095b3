"""Pydantic models for conversation API requests and responses."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from crm.domain.entities import Conversation
from crm.presentation.messages.models import MessageResponse


class UpdateConversationStatusRequest(BaseModel):
    """Request model for changing a conversation's status."""

    status: str = Field(..., description="One of active, archived, closed")


class ConversationResponse(BaseModel):
    """Response model for a conversation and its messages."""

    id: UUID
    contact_id: UUID
    status: str
    last_message_at: datetime | None
    created_at: datetime
    updated_at: datetime
    messages: list[MessageResponse] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, conversation: Conversation) -> ConversationResponse:
        """Convert domain Conversation entity to API response.

        Args:
            conversation: Conversation with any loaded messages

        Returns:
            ConversationResponse
        """
        return cls(
            id=conversation.id,
            contact_id=conversation.contact_id,
            status=conversation.status.value,
            last_message_at=conversation.last_message_at,
            created_at=conversation.created_at,
            updated_at=conversation.updated_at,
            messages=[MessageResponse.from_domain(m) for m in conversation.messages],
        )
