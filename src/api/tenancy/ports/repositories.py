"""Repository and collaborator protocols (ports) for the tenancy context.

The lifecycle service depends only on these protocols, so tests can swap
in fakes for the registry, the namespace store, the migration runner and
the connection registry.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from tenancy.domain.aggregates import Tenant
from tenancy.domain.value_objects import SchemaName, TenantId

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncConnection

    from infrastructure.database.connections import TenantConnection
    from infrastructure.migrations.scripts import MigrationScriptSet


@runtime_checkable
class ITenantRepository(Protocol):
    """Repository for Tenant aggregate persistence in the shared registry."""

    async def save(self, tenant: Tenant) -> None:
        """Persist a tenant aggregate.

        Creates a new tenant row or updates an existing one. Flushes so
        constraint violations surface immediately.

        Raises:
            DuplicateTenantError: If the schema name is already registered
        """
        ...

    async def get_by_id(self, tenant_id: TenantId) -> Tenant | None:
        """Retrieve a tenant by its ID."""
        ...

    async def get_by_schema_name(self, schema_name: SchemaName) -> Tenant | None:
        """Retrieve a tenant by its namespace name."""
        ...

    async def list_all(self) -> list[Tenant]:
        """List all tenants, newest first."""
        ...

    async def delete(self, tenant: Tenant) -> bool:
        """Delete a tenant row.

        Returns:
            True if deleted, False if not found
        """
        ...

    async def connection(self) -> AsyncConnection:
        """Return the connection the repository's session runs on.

        Lets namespace DDL join the registry transaction.
        """
        ...


@runtime_checkable
class INamespaceStore(Protocol):
    """Schema existence/creation/removal primitives."""

    async def exists(self, name: str) -> bool: ...

    async def create(self, name: str) -> None: ...

    async def drop(self, name: str, connection: AsyncConnection | None = None) -> None: ...


@runtime_checkable
class IMigrationRunner(Protocol):
    """Applies versioned scripts to one namespace."""

    async def apply_latest(self, schema: str, scripts: MigrationScriptSet) -> list[str]: ...

    async def rollback_last(self, schema: str, scripts: MigrationScriptSet) -> str | None: ...


@runtime_checkable
class ITenantConnectionRegistry(Protocol):
    """Process-wide cache of tenant-scoped connections keyed by schema name."""

    async def resolve(self, schema_name: str) -> TenantConnection: ...

    async def release(self, schema_name: str) -> None: ...

    async def release_all(self) -> None: ...
