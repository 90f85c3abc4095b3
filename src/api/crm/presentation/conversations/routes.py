"""HTTP routes for conversations."""

from __future__ import annotations

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, HTTPException, status

from crm.application.services import ConversationService
from crm.dependencies.services import get_conversation_service
from crm.domain.value_objects import ConversationStatus
from crm.ports.exceptions import ContactNotFoundError, ConversationNotFoundError
from crm.presentation.conversations.models import (
    ConversationResponse,
    UpdateConversationStatusRequest,
)
from crm.presentation.identifiers import parse_uuid
from infrastructure.database.exceptions import StorageUnavailableError

logger = structlog.get_logger()

router = APIRouter(
    prefix="/conversations",
    tags=["conversations"],
)


@router.get("/contact/{contact_id}")
async def list_contact_conversations(
    contact_id: str,
    service: Annotated[ConversationService, Depends(get_conversation_service)],
) -> list[ConversationResponse]:
    """List a contact's conversations, newest first, with their messages.

    Raises:
        HTTPException: 400 if the ID is not a UUID
        HTTPException: 404 if the contact does not exist
    """
    contact_uuid = parse_uuid(contact_id, "contact")

    try:
        conversations = await service.list_for_contact(contact_uuid)
        return [ConversationResponse.from_domain(c) for c in conversations]

    except ContactNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Contact not found",
        )
    except StorageUnavailableError:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database unavailable",
        )
    except Exception:
        logger.exception("conversation_list_failed", contact_id=contact_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to list conversations",
        )


@router.get("/{conversation_id}")
async def get_conversation(
    conversation_id: str,
    service: Annotated[ConversationService, Depends(get_conversation_service)],
) -> ConversationResponse:
    """Get a conversation with its messages, oldest first."""
    conversation_uuid = parse_uuid(conversation_id, "conversation")

    try:
        conversation = await service.get_conversation(conversation_uuid)
        return ConversationResponse.from_domain(conversation)

    except ConversationNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Conversation not found",
        )
    except StorageUnavailableError:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database unavailable",
        )
    except Exception:
        logger.exception("conversation_get_failed", conversation_id=conversation_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve conversation",
        )


@router.patch("/{conversation_id}/status")
async def update_conversation_status(
    conversation_id: str,
    request: UpdateConversationStatusRequest,
    service: Annotated[ConversationService, Depends(get_conversation_service)],
) -> ConversationResponse:
    """Change a conversation's status.

    Raises:
        HTTPException: 400 if the ID or the status is invalid
        HTTPException: 404 if the conversation does not exist
    """
    conversation_uuid = parse_uuid(conversation_id, "conversation")
    try:
        new_status = ConversationStatus(request.status)
    except ValueError as e:
        allowed = ", ".join(s.value for s in ConversationStatus)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid status. Must be one of: {allowed}",
        ) from e

    try:
        conversation = await service.update_status(conversation_uuid, new_status)
        return ConversationResponse.from_domain(conversation)

    except ConversationNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Conversation not found",
        )
    except StorageUnavailableError:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database unavailable",
        )
    except Exception:
        logger.exception("conversation_update_failed", conversation_id=conversation_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update conversation",
        )


@router.delete(
    "/{conversation_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_model=None,
)
async def delete_conversation(
    conversation_id: str,
    service: Annotated[ConversationService, Depends(get_conversation_service)],
) -> None:
    """Delete a conversation and its messages."""
    conversation_uuid = parse_uuid(conversation_id, "conversation")

    try:
        await service.delete_conversation(conversation_uuid)

    except ConversationNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Conversation not found",
        )
    except StorageUnavailableError:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database unavailable",
        )
    except Exception:
        logger.exception("conversation_delete_failed", conversation_id=conversation_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete conversation",
        )
