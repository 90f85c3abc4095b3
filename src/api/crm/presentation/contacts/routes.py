"""HTTP routes for contact management."""

from __future__ import annotations

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, HTTPException, status

from crm.application.services import ContactService
from crm.dependencies.services import get_contact_service
from crm.domain.exceptions import InvalidContactError
from crm.ports.exceptions import ContactNotFoundError
from crm.presentation.contacts.models import (
    ContactResponse,
    CreateContactRequest,
    CreateContactResponse,
    UpdateContactRequest,
)
from crm.presentation.identifiers import parse_uuid
from infrastructure.database.exceptions import StorageUnavailableError

logger = structlog.get_logger()

router = APIRouter(
    prefix="/contacts",
    tags=["contacts"],
)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    responses={
        201: {"description": "Contact and its first conversation created"},
        400: {"description": "Name missing or no email/phone given"},
        401: {"description": "Missing or unknown tenant"},
        503: {"description": "Database unavailable"},
        500: {"description": "Internal server error"},
    },
)
async def create_contact(
    request: CreateContactRequest,
    service: Annotated[ContactService, Depends(get_contact_service)],
) -> CreateContactResponse:
    """Create a contact together with an active conversation.

    Raises:
        HTTPException: 400 if the contact details are invalid
        HTTPException: 503 if the database is unavailable
        HTTPException: 500 for unexpected errors
    """
    try:
        contact, conversation = await service.create_contact(
            name=request.name,
            email=request.email,
            phone=request.phone,
            metadata=request.metadata,
        )
        return CreateContactResponse.from_domain(contact, conversation)

    except InvalidContactError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    except StorageUnavailableError:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database unavailable",
        )
    except Exception:
        logger.exception("contact_create_failed")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create contact",
        )


@router.get("")
async def list_contacts(
    service: Annotated[ContactService, Depends(get_contact_service)],
) -> list[ContactResponse]:
    """List the tenant's contacts, newest first."""
    try:
        contacts = await service.list_contacts()
        return [ContactResponse.from_domain(c) for c in contacts]

    except StorageUnavailableError:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database unavailable",
        )
    except Exception:
        logger.exception("contact_list_failed")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to list contacts",
        )


@router.get("/{contact_id}")
async def get_contact(
    contact_id: str,
    service: Annotated[ContactService, Depends(get_contact_service)],
) -> ContactResponse:
    """Get contact by ID.

    Raises:
        HTTPException: 400 if the ID is not a UUID
        HTTPException: 404 if the contact does not exist
    """
    contact_uuid = parse_uuid(contact_id, "contact")

    try:
        contact = await service.get_contact(contact_uuid)
        return ContactResponse.from_domain(contact)

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
        logger.exception("contact_get_failed", contact_id=contact_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve contact",
        )


@router.put("/{contact_id}")
async def update_contact(
    contact_id: str,
    request: UpdateContactRequest,
    service: Annotated[ContactService, Depends(get_contact_service)],
) -> ContactResponse:
    """Update the fields present in the request body.

    Raises:
        HTTPException: 400 if the ID is not a UUID or the update blanks the name
        HTTPException: 404 if the contact does not exist
    """
    contact_uuid = parse_uuid(contact_id, "contact")

    try:
        contact = await service.update_contact(
            contact_uuid, request.model_dump(exclude_unset=True)
        )
        return ContactResponse.from_domain(contact)

    except InvalidContactError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
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
        logger.exception("contact_update_failed", contact_id=contact_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update contact",
        )


@router.delete(
    "/{contact_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_model=None,
)
async def delete_contact(
    contact_id: str,
    service: Annotated[ContactService, Depends(get_contact_service)],
) -> None:
    """Delete a contact with its conversations and messages."""
    contact_uuid = parse_uuid(contact_id, "contact")

    try:
        await service.delete_contact(contact_uuid)

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
        logger.exception("contact_delete_failed", contact_id=contact_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete contact",
        )
