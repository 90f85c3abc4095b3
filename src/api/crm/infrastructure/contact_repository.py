"""PostgreSQL implementation of IContactRepository.

Runs on a tenant-scoped session; transactions are owned by the caller.
"""

from __future__ import annotations

from typing import Any
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from crm.domain.entities import Contact
from crm.infrastructure.models import ContactModel
from crm.ports.repositories import IContactRepository
from infrastructure.database.exceptions import translate_storage_errors


class ContactRepository(IContactRepository):
    """Repository managing the contacts table of one tenant namespace."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(
        self,
        name: str,
        email: str | None,
        phone: str | None,
        metadata: dict[str, Any],
    ) -> Contact:
        model = ContactModel(
            name=name,
            email=email,
            phone=phone,
            contact_metadata=metadata,
        )
        async with translate_storage_errors("contact insert"):
            self._session.add(model)
            await self._session.flush()
        return _contact_to_domain(model)

    async def get_by_id(self, contact_id: UUID) -> Contact | None:
        model = await self._get_model(contact_id)
        return _contact_to_domain(model) if model is not None else None

    async def list_all(self) -> list[Contact]:
        async with translate_storage_errors("contact listing"):
            result = await self._session.execute(
                select(ContactModel).order_by(ContactModel.created_at.desc())
            )
        return [_contact_to_domain(m) for m in result.scalars().all()]

    async def update(self, contact_id: UUID, changes: dict[str, Any]) -> Contact | None:
        model = await self._get_model(contact_id)
        if model is None:
            return None

        for field_name, value in changes.items():
            if field_name == "metadata":
                model.contact_metadata = value
            else:
                setattr(model, field_name, value)

        async with translate_storage_errors("contact update"):
            await self._session.flush()
        return _contact_to_domain(model)

    async def delete(self, contact_id: UUID) -> bool:
        async with translate_storage_errors("contact delete"):
            result = await self._session.execute(
                delete(ContactModel).where(ContactModel.id == contact_id)
            )
        return result.rowcount > 0

    async def _get_model(self, contact_id: UUID) -> ContactModel | None:
        async with translate_storage_errors("contact lookup"):
            result = await self._session.execute(
                select(ContactModel).where(ContactModel.id == contact_id)
            )
        return result.scalar_one_or_none()


def _contact_to_domain(model: ContactModel) -> Contact:
    return Contact(
        id=model.id,
        name=model.name,
        email=model.email,
        phone=model.phone,
        metadata=dict(model.contact_metadata or {}),
        created_at=model.created_at,
        updated_at=model.updated_at,
    )
