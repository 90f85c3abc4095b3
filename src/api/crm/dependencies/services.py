"""Dependency injection for CRM services.

Repositories and services are built per request on the tenant-scoped
session; FastAPI's dependency cache makes them share one session.
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from crm.application.observability import CRMServiceProbe, DefaultCRMServiceProbe
from crm.application.services import (
    ContactService,
    ConversationService,
    MessageService,
)
from crm.dependencies.session import get_tenant_session
from crm.infrastructure import (
    ContactRepository,
    ConversationRepository,
    MessageRepository,
)
from shared_kernel.middleware.tenant_context import TenantContext
from shared_kernel.observability_context import ObservationContext
from tenancy.dependencies.tenant_context import resolve_tenant_context


def get_crm_service_probe(
    tenant: Annotated[TenantContext, Depends(resolve_tenant_context)],
) -> CRMServiceProbe:
    """Get CRMServiceProbe bound to the resolved tenant."""
    return DefaultCRMServiceProbe().with_context(
        ObservationContext(tenant_id=tenant.tenant_id, schema_name=tenant.schema_name)
    )


def get_contact_repository(
    session: Annotated[AsyncSession, Depends(get_tenant_session)],
) -> ContactRepository:
    return ContactRepository(session=session)


def get_conversation_repository(
    session: Annotated[AsyncSession, Depends(get_tenant_session)],
) -> ConversationRepository:
    return ConversationRepository(session=session)


def get_message_repository(
    session: Annotated[AsyncSession, Depends(get_tenant_session)],
) -> MessageRepository:
    return MessageRepository(session=session)


def get_contact_service(
    session: Annotated[AsyncSession, Depends(get_tenant_session)],
    contact_repo: Annotated[ContactRepository, Depends(get_contact_repository)],
    conversation_repo: Annotated[
        ConversationRepository, Depends(get_conversation_repository)
    ],
    probe: Annotated[CRMServiceProbe, Depends(get_crm_service_probe)],
) -> ContactService:
    """Get ContactService instance for the current tenant."""
    return ContactService(
        session=session,
        contact_repository=contact_repo,
        conversation_repository=conversation_repo,
        probe=probe,
    )


def get_conversation_service(
    session: Annotated[AsyncSession, Depends(get_tenant_session)],
    contact_repo: Annotated[ContactRepository, Depends(get_contact_repository)],
    conversation_repo: Annotated[
        ConversationRepository, Depends(get_conversation_repository)
    ],
    message_repo: Annotated[MessageRepository, Depends(get_message_repository)],
    probe: Annotated[CRMServiceProbe, Depends(get_crm_service_probe)],
) -> ConversationService:
    """Get ConversationService instance for the current tenant."""
    return ConversationService(
        session=session,
        contact_repository=contact_repo,
        conversation_repository=conversation_repo,
        message_repository=message_repo,
        probe=probe,
    )


def get_message_service(
    session: Annotated[AsyncSession, Depends(get_tenant_session)],
    conversation_repo: Annotated[
        ConversationRepository, Depends(get_conversation_repository)
    ],
    message_repo: Annotated[MessageRepository, Depends(get_message_repository)],
    probe: Annotated[CRMServiceProbe, Depends(get_crm_service_probe)],
) -> MessageService:
    """Get MessageService instance for the current tenant."""
    return MessageService(
        session=session,
        conversation_repository=conversation_repo,
        message_repository=message_repo,
        probe=probe,
    )
