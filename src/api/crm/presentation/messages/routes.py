"""HTTP routes for messages."""

from __future__ import annotations

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, HTTPException, status

from crm.application.services import MessageService
from crm.dependencies.services import get_message_service
from crm.domain.value_objects import SenderType
from crm.ports.exceptions import ConversationNotFoundError, MessageNotFoundError
from crm.presentation.identifiers import parse_uuid
from crm.presentation.messages.models import CreateMessageRequest, MessageResponse
from infrastructure.database.exceptions import StorageUnavailableError

logger = structlog.get_logger()

router = APIRouter(
    prefix="/messages",
    tags=["messages"],
)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    responses={
        201: {"description": "Message appended"},
        400: {"description": "Invalid conversation ID or sender type"},
        404: {"description": "Conversation not found"},
        503: {"description": "Database unavailable"},
        500: {"description": "Internal server error"},
    },
)
async def create_message(
    request: CreateMessageRequest,
    service: Annotated[MessageService, Depends(get_message_service)],
) -> MessageResponse:
    """Append a message to a conversation.

    The conversation's last_message_at moves to the new message's
    created_at in the same transaction.
    """
    conversation_uuid = parse_uuid(request.conversation_id, "conversation")
    try:
        sender_type = SenderType(request.sender_type)
    except ValueError as e:
        allowed = ", ".join(s.value for s in SenderType)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid sender_type. Must be one of: {allowed}",
        ) from e

    try:
        message = await service.create_message(
            conversation_id=conversation_uuid,
            sender_type=sender_type,
            content=request.content,
            sender_id=request.sender_id,
        )
        return MessageResponse.from_domain(message)

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
        logger.exception("message_create_failed")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create message",
        )


@router.get("/conversation/{conversation_id}")
async def list_conversation_messages(
    conversation_id: str,
    service: Annotated[MessageService, Depends(get_message_service)],
) -> list[MessageResponse]:
    """List a conversation's messages, oldest first."""
    conversation_uuid = parse_uuid(conversation_id, "conversation")

    try:
        messages = await service.list_for_conversation(conversation_uuid)
        return [MessageResponse.from_domain(m) for m in messages]

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
        logger.exception("message_list_failed", conversation_id=conversation_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to list messages",
        )


@router.get("/{message_id}")
async def get_message(
    message_id: str,
    service: Annotated[MessageService, Depends(get_message_service)],
) -> MessageResponse:
    """Get message by ID."""
    message_uuid = parse_uuid(message_id, "message")

    try:
        message = await service.get_message(message_uuid)
        return MessageResponse.from_domain(message)

    except MessageNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Message not found",
        )
    except StorageUnavailableError:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database unavailable",
        )
    except Exception:
        logger.exception("message_get_failed", message_id=message_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve message",
        )


@router.delete(
    "/{message_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_model=None,
)
async def delete_message(
    message_id: str,
    service: Annotated[MessageService, Depends(get_message_service)],
) -> None:
    """Delete a message."""
    message_uuid = parse_uuid(message_id, "message")

    try:
        await service.delete_message(message_uuid)

    except MessageNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Message not found",
        )
    except StorageUnavailableError:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database unavailable",
        )
    except Exception:
        logger.exception("message_delete_failed", message_id=message_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete message",
        )
