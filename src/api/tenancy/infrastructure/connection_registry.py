"""Process-wide cache of tenant-scoped connections.

Maps a namespace name to a pooled engine whose connections default
``search_path`` to that namespace. Entries are created on first resolution
and live until released; there is no eviction.
"""

from __future__ import annotations

import asyncio
from typing import Callable

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from infrastructure.database.connections import TenantConnection
from infrastructure.database.engines import create_tenant_engine
from infrastructure.database.namespace_store import validate_namespace_name
from infrastructure.settings import DatabaseSettings, TenancySettings
from tenancy.infrastructure.observability import (
    ConnectionRegistryProbe,
    DefaultConnectionRegistryProbe,
)
from tenancy.ports.repositories import ITenantConnectionRegistry

EngineFactory = Callable[[DatabaseSettings, str, int], AsyncEngine]


class TenantConnectionRegistry(ITenantConnectionRegistry):
    """Insert-if-absent cache of TenantConnection objects.

    A single asyncio.Lock serializes every mutation, so concurrent first
    use of the same namespace builds exactly one pool. Engine construction
    performs no I/O; connections open lazily on first session use.
    """

    def __init__(
        self,
        settings: DatabaseSettings,
        tenancy_settings: TenancySettings | None = None,
        engine_factory: EngineFactory = create_tenant_engine,
        probe: ConnectionRegistryProbe | None = None,
    ) -> None:
        self._settings = settings
        tenancy_settings = tenancy_settings or TenancySettings()
        self._pool_size = tenancy_settings.tenant_pool_max_connections
        self._engine_factory = engine_factory
        self._probe = probe or DefaultConnectionRegistryProbe()
        self._connections: dict[str, TenantConnection] = {}
        self._lock = asyncio.Lock()

    def __contains__(self, schema_name: object) -> bool:
        return schema_name in self._connections

    def __len__(self) -> int:
        return len(self._connections)

    async def resolve(self, schema_name: str) -> TenantConnection:
        """Return the cached connection for a namespace, creating it if absent.

        Args:
            schema_name: Tenant namespace name

        Returns:
            TenantConnection whose sessions default to ``schema_name``
        """
        validate_namespace_name(schema_name)

        connection = self._connections.get(schema_name)
        if connection is not None:
            return connection

        async with self._lock:
            connection = self._connections.get(schema_name)
            if connection is None:
                engine = self._engine_factory(self._settings, schema_name, self._pool_size)
                connection = TenantConnection(
                    schema_name=schema_name,
                    engine=engine,
                    sessionmaker=async_sessionmaker(
                        engine,
                        expire_on_commit=False,
                        class_=AsyncSession,
                    ),
                )
                self._connections[schema_name] = connection
                self._probe.connection_created(schema_name, self._pool_size)
            return connection

    async def release(self, schema_name: str) -> None:
        """Dispose and evict one namespace's connection; no-op if absent."""
        async with self._lock:
            connection = self._connections.pop(schema_name, None)
        if connection is None:
            return
        await connection.engine.dispose()
        self._probe.connection_released(schema_name)

    async def release_all(self) -> None:
        """Dispose every cached connection. Used at process shutdown."""
        async with self._lock:
            connections = list(self._connections.values())
            self._connections.clear()

        for connection in connections:
            try:
                await connection.engine.dispose()
            except Exception as e:
                # Keep disposing the rest
                self._probe.connection_dispose_failed(connection.schema_name, e)
        self._probe.all_connections_released(len(connections))
