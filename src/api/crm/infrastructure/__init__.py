"""Infrastructure layer for the CRM bounded context."""

from crm.infrastructure.contact_repository import ContactRepository
from crm.infrastructure.conversation_repository import ConversationRepository
from crm.infrastructure.message_repository import MessageRepository

__all__ = [
    "ContactRepository",
    "ConversationRepository",
    "MessageRepository",
]
