"""Contact application service.

Works on a tenant-scoped session: every statement lands in the resolved
tenant's namespace.
"""

from __future__ import annotations

from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from crm.application.observability import CRMServiceProbe, DefaultCRMServiceProbe
from crm.domain.entities import Contact, Conversation
from crm.domain.exceptions import InvalidContactError
from crm.domain.value_objects import ConversationStatus
from crm.ports.exceptions import ContactNotFoundError
from crm.ports.repositories import IContactRepository, IConversationRepository

_UPDATABLE_FIELDS = frozenset({"name", "email", "phone", "metadata"})


class ContactService:
    """Application service for contact management."""

    def __init__(
        self,
        session: AsyncSession,
        contact_repository: IContactRepository,
        conversation_repository: IConversationRepository,
        probe: CRMServiceProbe | None = None,
    ):
        """Initialize ContactService with dependencies.

        Args:
            session: Tenant-scoped session for transaction management
            contact_repository: Repository for contacts
            conversation_repository: Repository for conversations
            probe: Optional domain probe for observability
        """
        self._session = session
        self._contact_repository = contact_repository
        self._conversation_repository = conversation_repository
        self._probe = probe or DefaultCRMServiceProbe()

    async def create_contact(
        self,
        name: str,
        email: str | None = None,
        phone: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> tuple[Contact, Conversation]:
        """Create a contact together with its first, active conversation.

        Both rows are inserted in one transaction.

        Raises:
            InvalidContactError: If name is blank or no email/phone is given
        """
        Contact.validate_details(name, email, phone)

        async with self._session.begin():
            contact = await self._contact_repository.add(
                name=name.strip(),
                email=email,
                phone=phone,
                metadata=metadata or {},
            )
            conversation = await self._conversation_repository.add(
                contact_id=contact.id,
                status=ConversationStatus.ACTIVE,
            )

        self._probe.contact_created(
            contact_id=str(contact.id),
            conversation_id=str(conversation.id),
        )
        return contact, conversation

    async def list_contacts(self) -> list[Contact]:
        """List contacts, newest first."""
        return await self._contact_repository.list_all()

    async def get_contact(self, contact_id: UUID) -> Contact:
        """Retrieve a contact.

        Raises:
            ContactNotFoundError: If the contact does not exist
        """
        contact = await self._contact_repository.get_by_id(contact_id)
        if contact is None:
            self._probe.contact_not_found(str(contact_id))
            raise ContactNotFoundError(f"Contact {contact_id} not found")
        return contact

    async def update_contact(self, contact_id: UUID, changes: dict[str, Any]) -> Contact:
        """Apply a partial update to a contact.

        Only the fields present in ``changes`` are touched.

        Raises:
            InvalidContactError: If the update blanks the name or unknown
                fields are supplied
            ContactNotFoundError: If the contact does not exist
        """
        unknown = set(changes) - _UPDATABLE_FIELDS
        if unknown:
            raise InvalidContactError(f"Unknown contact fields: {sorted(unknown)}")
        if "name" in changes:
            name = changes["name"]
            if not name or not name.strip():
                raise InvalidContactError("Name is required")
            changes = {**changes, "name": name.strip()}

        async with self._session.begin():
            contact = await self._contact_repository.update(contact_id, changes)
            if contact is None:
                self._probe.contact_not_found(str(contact_id))
                raise ContactNotFoundError(f"Contact {contact_id} not found")

        self._probe.contact_updated(str(contact_id), sorted(changes))
        return contact

    async def delete_contact(self, contact_id: UUID) -> None:
        """Delete a contact and, by cascade, its conversations and messages.

        Raises:
            ContactNotFoundError: If the contact does not exist
        """
        async with self._session.begin():
            deleted = await self._contact_repository.delete(contact_id)

        if not deleted:
            self._probe.contact_not_found(str(contact_id))
            raise ContactNotFoundError(f"Contact {contact_id} not found")
        self._probe.contact_deleted(str(contact_id))
