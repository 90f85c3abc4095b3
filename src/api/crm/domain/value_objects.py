"""Value objects for the CRM domain."""

from __future__ import annotations

from enum import StrEnum


class ConversationStatus(StrEnum):
    """Lifecycle state of a conversation."""

    ACTIVE = "active"
    ARCHIVED = "archived"
    CLOSED = "closed"


class SenderType(StrEnum):
    """Who authored a message."""

    USER = "user"
    CONTACT = "contact"
    SYSTEM = "system"
