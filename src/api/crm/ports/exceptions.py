"""Port exceptions for the CRM bounded context."""


class ContactNotFoundError(Exception):
    """Raised when a contact does not exist in the tenant namespace."""

    pass


class ConversationNotFoundError(Exception):
    """Raised when a conversation does not exist in the tenant namespace."""

    pass


class MessageNotFoundError(Exception):
    """Raised when a message does not exist in the tenant namespace."""

    pass
