"""CRM presentation layer.

Organizes presentation concerns by aggregate (contacts, conversations,
messages). Every endpoint is tenant-scoped through the tenant header.
"""

from __future__ import annotations

from fastapi import APIRouter

from crm.presentation import contacts, conversations, messages

router = APIRouter()

router.include_router(contacts.router)
router.include_router(conversations.router)
router.include_router(messages.router)

__all__ = ["router"]
