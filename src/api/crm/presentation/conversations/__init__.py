"""Conversations endpoints."""

from crm.presentation.conversations.routes import router

__all__ = ["router"]
