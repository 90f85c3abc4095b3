"""Tenant-scoped connection handle."""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker


@dataclass(frozen=True)
class TenantConnection:
    """A pooled engine whose connections default to one tenant schema.

    Attributes:
        schema_name: Namespace unqualified table names resolve to
        engine: Engine owning the connection pool for this namespace
        sessionmaker: Session factory bound to ``engine``
    """

    schema_name: str
    engine: AsyncEngine
    sessionmaker: async_sessionmaker[AsyncSession]

    def session(self) -> AsyncSession:
        """Open a new session; use as ``async with connection.session()``."""
        return self.sessionmaker()
