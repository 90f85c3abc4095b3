"""Database dependency injection for FastAPI.

Provides the registry engine (shared ``public`` schema) and async sessions
bound to it, with proper transaction management and connection pooling.
"""

from __future__ import annotations

import threading
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from infrastructure.database.engines import create_registry_engine
from infrastructure.observability import DefaultConnectionProbe
from infrastructure.settings import get_database_settings

# Module-level probe for observability
_probe = DefaultConnectionProbe()

# Module-level engine instance (created on first use)
_registry_engine: AsyncEngine | None = None
_registry_sessionmaker: async_sessionmaker[AsyncSession] | None = None

# Thread lock for safe engine initialization
_engine_lock = threading.Lock()


def get_registry_engine() -> AsyncEngine:
    """Get the registry database engine (singleton).

    Creates engine on first call and caches for subsequent calls.
    Uses double-check locking for thread-safe initialization.
    Also creates and caches the sessionmaker for efficient session creation.

    Returns:
        Configured async engine for the shared registry schema
    """
    global _registry_engine, _registry_sessionmaker
    if _registry_engine is None:
        with _engine_lock:
            # Double-check after acquiring lock
            if _registry_engine is None:
                settings = get_database_settings()
                _registry_engine = create_registry_engine(settings)
                _registry_sessionmaker = async_sessionmaker(
                    _registry_engine,
                    expire_on_commit=False,
                    class_=AsyncSession,
                )
                _probe.engine_created(
                    schema_name="public",
                    max_connections=settings.pool_max_connections,
                )
    return _registry_engine


def get_registry_sessionmaker() -> async_sessionmaker[AsyncSession]:
    """Get the sessionmaker bound to the registry engine."""
    get_registry_engine()
    assert _registry_sessionmaker is not None
    return _registry_sessionmaker


async def get_registry_session() -> AsyncGenerator[AsyncSession, None]:
    """Provide a registry session (FastAPI dependency).

    The session is configured to NOT auto-commit. Callers must explicitly
    manage transactions using `async with session.begin()`.

    Usage:
        @router.post("/tenants")
        async def create_tenant(
            session: AsyncSession = Depends(get_registry_session)
        ):
            async with session.begin():
                session.add(tenant)
                # transaction commits at end of `with` block

    Yields:
        AsyncSession for registry operations
    """
    async with get_registry_sessionmaker()() as session:
        yield session


async def close_database_connections() -> None:
    """Close the registry engine's connections.

    Should be called on application shutdown to properly cleanup connections.
    Also resets the sessionmaker to allow reinitialization.
    """
    global _registry_engine, _registry_sessionmaker

    if _registry_engine is not None:
        await _registry_engine.dispose()
        _probe.engine_disposed(schema_name="public")
        _registry_engine = None
        _registry_sessionmaker = None
