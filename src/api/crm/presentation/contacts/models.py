"""Pydantic models for contact API requests and responses."""

from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field

from crm.domain.entities import Contact, Conversation
from crm.presentation.conversations.models import ConversationResponse


class CreateContactRequest(BaseModel):
    """Request model for creating a contact.

    Business rules (non-blank name, email or phone present) are checked by
    the domain so they answer 400 rather than a schema error.
    """

    name: str | None = Field(default=None, max_length=255)
    email: str | None = Field(default=None, max_length=255)
    phone: str | None = Field(default=None, max_length=50)
    metadata: dict[str, Any] = Field(default_factory=dict)


class UpdateContactRequest(BaseModel):
    """Request model for a partial contact update; unset fields are kept."""

    name: str | None = Field(default=None, max_length=255)
    email: str | None = Field(default=None, max_length=255)
    phone: str | None = Field(default=None, max_length=50)
    metadata: dict[str, Any] | None = None


class ContactResponse(BaseModel):
    """Response model for a contact."""

    id: UUID
    name: str
    email: str | None
    phone: str | None
    metadata: dict[str, Any]
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, contact: Contact) -> ContactResponse:
        """Convert domain Contact entity to API response."""
        return cls(
            id=contact.id,
            name=contact.name,
            email=contact.email,
            phone=contact.phone,
            metadata=contact.metadata,
            created_at=contact.created_at,
            updated_at=contact.updated_at,
        )


class CreateContactResponse(BaseModel):
    """Response model for a created contact and its first conversation."""

    contact: ContactResponse
    conversation: ConversationResponse

    @classmethod
    def from_domain(
        cls, contact: Contact, conversation: Conversation
    ) -> CreateContactResponse:
        return cls(
            contact=ContactResponse.from_domain(contact),
            conversation=ConversationResponse.from_domain(conversation),
        )
