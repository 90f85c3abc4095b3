"""Contacts endpoints."""

from crm.presentation.contacts.routes import router

__all__ = ["router"]
