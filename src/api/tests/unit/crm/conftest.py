"""Shared fixtures for CRM unit tests."""

from __future__ import annotations

from datetime import UTC, datetime
from uuid import uuid4

import pytest

from crm.domain.entities import Contact, Conversation, Message
from crm.domain.value_objects import ConversationStatus, SenderType


@pytest.fixture
def now() -> datetime:
    return datetime(2024, 1, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
def contact(now: datetime) -> Contact:
    return Contact(
        id=uuid4(),
        name="John Doe",
        email="john@example.com",
        phone=None,
        metadata={"company": "Example Inc"},
        created_at=now,
        updated_at=now,
    )


@pytest.fixture
def conversation(contact: Contact, now: datetime) -> Conversation:
    return Conversation(
        id=uuid4(),
        contact_id=contact.id,
        status=ConversationStatus.ACTIVE,
        created_at=now,
        updated_at=now,
    )


@pytest.fixture
def message(conversation: Conversation, now: datetime) -> Message:
    return Message(
        id=uuid4(),
        conversation_id=conversation.id,
        sender_type=SenderType.CONTACT,
        content="Hi, I'm interested in your product.",
        created_at=now,
    )
