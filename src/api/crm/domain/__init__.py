"""CRM domain: contacts, conversations and messages."""

from crm.domain.entities import Contact, Conversation, Message
from crm.domain.exceptions import InvalidContactError
from crm.domain.value_objects import ConversationStatus, SenderType

__all__ = [
    "Contact",
    "Conversation",
    "ConversationStatus",
    "InvalidContactError",
    "Message",
    "SenderType",
]
