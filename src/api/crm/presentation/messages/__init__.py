"""Messages endpoints."""

from crm.presentation.messages.routes import router

__all__ = ["router"]
