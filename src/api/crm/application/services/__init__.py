"""Application services for the CRM bounded context."""

from crm.application.services.contact_service import ContactService
from crm.application.services.conversation_service import ConversationService
from crm.application.services.message_service import MessageService

__all__ = [
    "ContactService",
    "ConversationService",
    "MessageService",
]
