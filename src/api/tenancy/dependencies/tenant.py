"""Dependency injection for the tenant lifecycle.

Composes the shared registry engine and session with tenancy components
(repository, namespace store, migration runner, connection registry).
"""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.database.dependencies import (
    get_registry_engine,
    get_registry_session,
)
from infrastructure.database.namespace_store import NamespaceStore
from infrastructure.migrations import MigrationRunner, tenant_scripts
from infrastructure.settings import get_database_settings, get_tenancy_settings
from tenancy.application.observability import (
    DefaultTenantServiceProbe,
    TenantServiceProbe,
)
from tenancy.application.services import TenantLifecycleService
from tenancy.infrastructure.connection_registry import TenantConnectionRegistry
from tenancy.infrastructure.tenant_repository import TenantRepository


@lru_cache
def get_connection_registry() -> TenantConnectionRegistry:
    """Get the process-wide tenant connection registry (singleton).

    Released on application shutdown via ``release_all()``.
    """
    return TenantConnectionRegistry(
        settings=get_database_settings(),
        tenancy_settings=get_tenancy_settings(),
    )


def get_namespace_store() -> NamespaceStore:
    """Get NamespaceStore bound to the registry engine."""
    return NamespaceStore(engine=get_registry_engine())


def get_migration_runner() -> MigrationRunner:
    """Get MigrationRunner bound to the registry engine."""
    return MigrationRunner(
        engine=get_registry_engine(),
        tracking_table_name=get_tenancy_settings().migration_table,
    )


def get_tenant_service_probe() -> TenantServiceProbe:
    """Get TenantServiceProbe instance.

    Returns:
        DefaultTenantServiceProbe instance for observability
    """
    return DefaultTenantServiceProbe()


def get_tenant_repository(
    session: Annotated[AsyncSession, Depends(get_registry_session)],
) -> TenantRepository:
    """Get TenantRepository instance.

    Args:
        session: Async registry session

    Returns:
        TenantRepository instance
    """
    return TenantRepository(session=session)


def get_tenant_service(
    session: Annotated[AsyncSession, Depends(get_registry_session)],
    tenant_repo: Annotated[TenantRepository, Depends(get_tenant_repository)],
    namespace_store: Annotated[NamespaceStore, Depends(get_namespace_store)],
    migration_runner: Annotated[MigrationRunner, Depends(get_migration_runner)],
    connection_registry: Annotated[
        TenantConnectionRegistry, Depends(get_connection_registry)
    ],
    tenant_service_probe: Annotated[
        TenantServiceProbe, Depends(get_tenant_service_probe)
    ],
) -> TenantLifecycleService:
    """Get TenantLifecycleService instance.

    Args:
        session: Registry session (shared with the repository via FastAPI
            dependency caching)
        tenant_repo: Tenant repository
        namespace_store: Schema DDL primitives
        migration_runner: Per-namespace migration runner
        connection_registry: Tenant connection cache
        tenant_service_probe: Tenant service probe for observability

    Returns:
        TenantLifecycleService instance
    """
    return TenantLifecycleService(
        session=session,
        tenant_repository=tenant_repo,
        namespace_store=namespace_store,
        migration_runner=migration_runner,
        connection_registry=connection_registry,
        tenant_scripts=tenant_scripts(),
        probe=tenant_service_probe,
    )
