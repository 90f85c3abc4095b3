"""Integration test fixtures for database tests.

These fixtures require a running PostgreSQL instance. Use docker-compose
for testing; connection settings come from the CRM_DB_* environment
variables. Tests are skipped when the database cannot be reached.

Every tenant created here gets a name starting with "IT " so its schema
starts with ``it_`` and leftovers can be swept.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from uuid import uuid4

import pytest
import pytest_asyncio
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from infrastructure.database.engines import PUBLIC_SCHEMA, create_registry_engine
from infrastructure.database.exceptions import StorageUnavailableError
from infrastructure.database.namespace_store import NamespaceStore
from infrastructure.migrations import MigrationRunner, registry_scripts, tenant_scripts
from infrastructure.settings import DatabaseSettings, TenancySettings
from tenancy.application.services import TenantLifecycleService
from tenancy.infrastructure.connection_registry import TenantConnectionRegistry
from tenancy.infrastructure.tenant_repository import TenantRepository

TEST_TENANT_PREFIX = "it_"


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: mark test as integration test (requires database)",
    )


@pytest.fixture(scope="session")
def integration_db_settings() -> DatabaseSettings:
    """Database settings for integration tests.

    Override with environment variables:
        CRM_DB_HOST, CRM_DB_PORT, CRM_DB_DATABASE, etc.
    """
    return DatabaseSettings()


@pytest.fixture(scope="session")
def tenancy_settings() -> TenancySettings:
    return TenancySettings()


@pytest.fixture
def tenant_name() -> str:
    """A unique tenant display name for one test."""
    return f"IT {uuid4().hex[:12]}"


async def _sweep_test_tenants(engine: AsyncEngine) -> None:
    store = NamespaceStore(engine=engine)
    for name in await store.list_names(prefix=TEST_TENANT_PREFIX):
        await store.drop(name)
    async with engine.begin() as conn:
        await conn.execute(
            text("DELETE FROM tenants WHERE schema_name LIKE :prefix"),
            {"prefix": f"{TEST_TENANT_PREFIX}%"},
        )


@pytest_asyncio.fixture
async def registry_engine(
    integration_db_settings: DatabaseSettings,
    tenancy_settings: TenancySettings,
) -> AsyncGenerator[AsyncEngine, None]:
    """Registry engine with the registry schema migrated.

    Removes every test tenant before and after the test.
    """
    engine = create_registry_engine(integration_db_settings)
    runner = MigrationRunner(
        engine=engine, tracking_table_name=tenancy_settings.migration_table
    )
    try:
        await runner.apply_latest(PUBLIC_SCHEMA, registry_scripts())
    except StorageUnavailableError as e:
        await engine.dispose()
        pytest.skip(f"PostgreSQL unavailable: {e}")

    await _sweep_test_tenants(engine)
    yield engine
    await _sweep_test_tenants(engine)
    await engine.dispose()


@pytest.fixture
def namespace_store(registry_engine: AsyncEngine) -> NamespaceStore:
    return NamespaceStore(engine=registry_engine)


@pytest.fixture
def migration_runner(
    registry_engine: AsyncEngine, tenancy_settings: TenancySettings
) -> MigrationRunner:
    return MigrationRunner(
        engine=registry_engine,
        tracking_table_name=tenancy_settings.migration_table,
    )


@pytest_asyncio.fixture
async def connection_registry(
    integration_db_settings: DatabaseSettings,
    tenancy_settings: TenancySettings,
) -> AsyncGenerator[TenantConnectionRegistry, None]:
    registry = TenantConnectionRegistry(
        settings=integration_db_settings,
        tenancy_settings=tenancy_settings,
    )
    yield registry
    await registry.release_all()


@pytest_asyncio.fixture
async def registry_session(
    registry_engine: AsyncEngine,
) -> AsyncGenerator[AsyncSession, None]:
    sessionmaker = async_sessionmaker(registry_engine, expire_on_commit=False)
    async with sessionmaker() as session:
        yield session


@pytest.fixture
def lifecycle_service(
    registry_session: AsyncSession,
    namespace_store: NamespaceStore,
    migration_runner: MigrationRunner,
    connection_registry: TenantConnectionRegistry,
) -> TenantLifecycleService:
    """Lifecycle service wired to the real database."""
    return TenantLifecycleService(
        session=registry_session,
        tenant_repository=TenantRepository(session=registry_session),
        namespace_store=namespace_store,
        migration_runner=migration_runner,
        connection_registry=connection_registry,
        tenant_scripts=tenant_scripts(),
    )

