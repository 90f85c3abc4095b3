"""Tenant lifecycle application service.

Provisions, deprovisions and resolves tenants. Provisioning spans two
storage domains: the registry row (transactional) and the tenant namespace
(schema DDL run on its own connections). The row is committed only after
the namespace exists and is fully migrated; a namespace created by a
failed attempt is dropped again as a compensating step.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.database.exceptions import NamespaceAlreadyExistsError
from shared_kernel.middleware.tenant_context import TenantContext
from tenancy.application.observability import (
    DefaultTenantServiceProbe,
    TenantServiceProbe,
)
from tenancy.domain.aggregates import Tenant
from tenancy.domain.value_objects import TenantId
from tenancy.ports.exceptions import (
    DuplicateTenantError,
    TenantNotFoundError,
    UnknownTenantError,
)
from tenancy.ports.repositories import (
    IMigrationRunner,
    INamespaceStore,
    ITenantConnectionRegistry,
    ITenantRepository,
)

if TYPE_CHECKING:
    from infrastructure.migrations.scripts import MigrationScriptSet


class TenantLifecycleService:
    """Application service for the tenant lifecycle.

    Lifecycle operations run their steps strictly in sequence. The registry
    transaction is managed here with ``session.begin()``.
    """

    def __init__(
        self,
        session: AsyncSession,
        tenant_repository: ITenantRepository,
        namespace_store: INamespaceStore,
        migration_runner: IMigrationRunner,
        connection_registry: ITenantConnectionRegistry,
        tenant_scripts: MigrationScriptSet,
        probe: TenantServiceProbe | None = None,
    ):
        """Initialize TenantLifecycleService with dependencies.

        Args:
            session: Registry session for transaction management
            tenant_repository: Repository for the tenant registry
            namespace_store: Schema create/drop primitives
            migration_runner: Applies the tenant script set to a namespace
            connection_registry: Cache of tenant-scoped connections
            tenant_scripts: Migration scripts every tenant namespace receives
            probe: Optional domain probe for observability
        """
        self._session = session
        self._tenant_repository = tenant_repository
        self._namespace_store = namespace_store
        self._migration_runner = migration_runner
        self._connection_registry = connection_registry
        self._tenant_scripts = tenant_scripts
        self._probe = probe or DefaultTenantServiceProbe()

    async def create_tenant(self, name: str) -> Tenant:
        """Provision a tenant with a ready, fully migrated namespace.

        Args:
            name: Human display name of the tenant

        Returns:
            The created Tenant aggregate

        Raises:
            InvalidTenantNameError: If the name sanitizes to nothing usable
            DuplicateTenantError: If the derived schema name is registered
            NamespaceAlreadyExistsError: If an unregistered schema of that
                name already exists
            MigrationFailureError: If a tenant migration script fails
            StorageUnavailableError: On connectivity failures
        """
        tenant = Tenant.create(name=name)
        schema_name = tenant.schema_name.value
        namespace_created = False

        try:
            async with self._session.begin():
                existing = await self._tenant_repository.get_by_schema_name(
                    tenant.schema_name
                )
                if existing is not None:
                    raise DuplicateTenantError(
                        f"Tenant with schema name '{schema_name}' already exists"
                    )

                await self._tenant_repository.save(tenant)

                await self._namespace_store.create(schema_name)
                namespace_created = True
                await self._migration_runner.apply_latest(
                    schema_name, self._tenant_scripts
                )

        except DuplicateTenantError:
            self._probe.duplicate_tenant(name=tenant.name, schema_name=schema_name)
            raise

        except NamespaceAlreadyExistsError:
            # Someone else's schema; only the registry row is rolled back
            self._probe.namespace_conflict(schema_name)
            raise

        except Exception as e:
            if namespace_created:
                self._probe.provisioning_failed(schema_name, e)
                await self._drop_partial_namespace(schema_name)
            raise

        self._probe.tenant_created(
            tenant_id=tenant.id.value,
            name=tenant.name,
            schema_name=schema_name,
        )
        return tenant

    async def delete_tenant(self, tenant_id: TenantId) -> None:
        """Remove a tenant's registry row and drop its namespace.

        Both happen on the registry connection inside one transaction, so
        they commit together or not at all.

        Raises:
            TenantNotFoundError: If the tenant does not exist
            StorageUnavailableError: On connectivity failures
        """
        async with self._session.begin():
            tenant = await self._tenant_repository.get_by_id(tenant_id)
            if tenant is None:
                self._probe.tenant_not_found(tenant_id=tenant_id.value)
                raise TenantNotFoundError(f"Tenant {tenant_id} not found")

            await self._tenant_repository.delete(tenant)
            connection = await self._tenant_repository.connection()
            await self._namespace_store.drop(
                tenant.schema_name.value, connection=connection
            )

        await self._connection_registry.release(tenant.schema_name.value)
        self._probe.tenant_deleted(
            tenant_id=tenant_id.value,
            schema_name=tenant.schema_name.value,
        )

    async def get_tenant(self, tenant_id: TenantId) -> Tenant | None:
        """Retrieve a tenant by ID.

        Returns:
            The Tenant aggregate, or None if not found
        """
        async with self._session.begin():
            tenant = await self._tenant_repository.get_by_id(tenant_id)

        if tenant is None:
            self._probe.tenant_not_found(tenant_id=tenant_id.value)
            return None

        self._probe.tenant_retrieved(tenant_id=tenant_id.value)
        return tenant

    async def list_tenants(self) -> list[Tenant]:
        """List all tenants, newest first."""
        async with self._session.begin():
            tenants = await self._tenant_repository.list_all()
        self._probe.tenants_listed(count=len(tenants))
        return tenants

    async def resolve_tenant(self, tenant_id: str) -> TenantContext:
        """Resolve a raw tenant identifier to a scoped tenant context.

        Args:
            tenant_id: Identifier as supplied by the caller

        Returns:
            TenantContext carrying the tenant's scoped connection

        Raises:
            UnknownTenantError: If the identifier is malformed or unregistered
            StorageUnavailableError: On connectivity failures
        """
        try:
            parsed = TenantId.from_string(tenant_id)
        except ValueError as e:
            self._probe.unknown_tenant(tenant_id=tenant_id)
            raise UnknownTenantError(f"Unknown tenant: {tenant_id}") from e

        # Registry connection goes back to the pool before the caller's
        # tenant-scoped work starts
        async with self._session.begin():
            tenant = await self._tenant_repository.get_by_id(parsed)
        if tenant is None:
            self._probe.unknown_tenant(tenant_id=tenant_id)
            raise UnknownTenantError(f"Unknown tenant: {tenant_id}")

        connection = await self._connection_registry.resolve(tenant.schema_name.value)
        self._probe.tenant_resolved(
            tenant_id=tenant.id.value,
            schema_name=tenant.schema_name.value,
        )
        return TenantContext(
            tenant_id=tenant.id.value,
            schema_name=tenant.schema_name.value,
            connection=connection,
        )

    async def upgrade_tenants(self) -> dict[str, list[str]]:
        """Apply pending tenant migrations to every registered tenant.

        Stops at the first failing namespace.

        Returns:
            Mapping of schema name to the scripts applied to it
        """
        results: dict[str, list[str]] = {}
        for tenant in await self.list_tenants():
            schema_name = tenant.schema_name.value
            applied = await self._migration_runner.apply_latest(
                schema_name, self._tenant_scripts
            )
            self._probe.tenant_migrated(schema_name, applied)
            results[schema_name] = applied
        return results

    async def _drop_partial_namespace(self, schema_name: str) -> None:
        try:
            await self._namespace_store.drop(schema_name)
        except Exception as e:
            # The original error is what the caller needs to see
            self._probe.compensation_failed(schema_name, e)
        else:
            self._probe.namespace_compensated(schema_name)
