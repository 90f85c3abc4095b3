"""PostgreSQL implementation of ITenantRepository.

This repository manages the tenant registry in the shared ``public``
schema. Transactions are owned by the caller; the repository only flushes.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncSession

from infrastructure.database.exceptions import translate_storage_errors
from tenancy.domain.aggregates import Tenant
from tenancy.domain.value_objects import SchemaName, TenantId
from tenancy.infrastructure.models import TenantModel
from tenancy.infrastructure.observability import (
    DefaultTenantRepositoryProbe,
    TenantRepositoryProbe,
)
from tenancy.ports.exceptions import DuplicateTenantError
from tenancy.ports.repositories import ITenantRepository


class TenantRepository(ITenantRepository):
    """Repository managing PostgreSQL storage for Tenant aggregates."""

    def __init__(
        self,
        session: AsyncSession,
        probe: TenantRepositoryProbe | None = None,
    ) -> None:
        """Initialize repository with database session.

        Args:
            session: AsyncSession bound to the registry engine
            probe: Optional domain probe for observability
        """
        self._session = session
        self._probe = probe or DefaultTenantRepositoryProbe()

    async def save(self, tenant: Tenant) -> None:
        """Persist tenant metadata to PostgreSQL.

        Args:
            tenant: The Tenant aggregate to persist

        Raises:
            DuplicateTenantError: If the schema name is already registered
        """
        try:
            async with translate_storage_errors("tenant save"):
                stmt = select(TenantModel).where(TenantModel.id == tenant.id.value)
                result = await self._session.execute(stmt)
                model = result.scalar_one_or_none()

                if model:
                    # schema_name is immutable once set
                    model.name = tenant.name
                else:
                    model = TenantModel(
                        id=tenant.id.value,
                        name=tenant.name,
                        schema_name=tenant.schema_name.value,
                        created_at=tenant.created_at,
                        updated_at=tenant.updated_at,
                    )
                    self._session.add(model)

                # Flush to surface unique index violations now
                await self._session.flush()

        except IntegrityError as e:
            if "ix_tenants_schema_name" in str(e):
                self._probe.duplicate_schema_name(tenant.schema_name.value)
                raise DuplicateTenantError(
                    f"Tenant with schema name '{tenant.schema_name}' already exists"
                ) from e
            raise

        self._probe.tenant_saved(tenant.id.value, tenant.schema_name.value)

    async def get_by_id(self, tenant_id: TenantId) -> Tenant | None:
        """Fetch tenant metadata from PostgreSQL.

        Args:
            tenant_id: The unique identifier of the tenant

        Returns:
            The Tenant aggregate, or None if not found
        """
        async with translate_storage_errors("tenant lookup"):
            stmt = select(TenantModel).where(TenantModel.id == tenant_id.value)
            result = await self._session.execute(stmt)
            model = result.scalar_one_or_none()

        if model is None:
            return None

        self._probe.tenant_retrieved(model.id)
        return self._to_domain(model)

    async def get_by_schema_name(self, schema_name: SchemaName) -> Tenant | None:
        """Fetch tenant by namespace name."""
        async with translate_storage_errors("tenant lookup"):
            stmt = select(TenantModel).where(TenantModel.schema_name == schema_name.value)
            result = await self._session.execute(stmt)
            model = result.scalar_one_or_none()

        if model is None:
            return None

        self._probe.tenant_retrieved(model.id)
        return self._to_domain(model)

    async def list_all(self) -> list[Tenant]:
        """Fetch all tenants, newest first."""
        async with translate_storage_errors("tenant listing"):
            stmt = select(TenantModel).order_by(TenantModel.created_at.desc())
            result = await self._session.execute(stmt)
            models = result.scalars().all()

        tenants = [self._to_domain(model) for model in models]
        self._probe.tenants_listed(len(tenants))
        return tenants

    async def delete(self, tenant: Tenant) -> bool:
        """Delete tenant row from PostgreSQL.

        Args:
            tenant: The Tenant aggregate to delete

        Returns:
            True if deleted, False if not found
        """
        async with translate_storage_errors("tenant delete"):
            stmt = select(TenantModel).where(TenantModel.id == tenant.id.value)
            result = await self._session.execute(stmt)
            model = result.scalar_one_or_none()

            if model is None:
                return False

            await self._session.delete(model)
            await self._session.flush()

        self._probe.tenant_deleted(tenant.id.value)
        return True

    async def connection(self) -> AsyncConnection:
        """Return the connection carrying the session's current transaction."""
        return await self._session.connection()

    @staticmethod
    def _to_domain(model: TenantModel) -> Tenant:
        return Tenant(
            id=TenantId(value=model.id),
            name=model.name,
            schema_name=SchemaName(value=model.schema_name),
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
