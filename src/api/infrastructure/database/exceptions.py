"""Storage-level exceptions shared by every bounded context.

Driver errors (asyncpg, SQLAlchemy) are translated into these at the
infrastructure boundary so callers never handle raw database errors.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.exc import DBAPIError, InterfaceError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError


class DatabaseError(Exception):
    """Base exception for database operations."""

    pass


class StorageUnavailableError(DatabaseError):
    """Raised on transient infrastructure failures.

    Covers refused connections, dropped connections, exhausted pools and
    timeouts. Callers may retry the whole operation; nothing is retried
    automatically.
    """

    pass


class InvalidNamespaceNameError(DatabaseError, ValueError):
    """Raised when a namespace name is not a safe schema identifier."""

    pass


class NamespaceAlreadyExistsError(DatabaseError):
    """Raised when creating a namespace (schema) that already exists."""

    def __init__(self, name: str):
        super().__init__(f"Namespace '{name}' already exists")
        self.name = name


class MigrationFailureError(DatabaseError):
    """Raised when a migration script fails to apply or roll back.

    Attributes:
        namespace: Schema the script was running against
        revision: Identifier of the failing script
    """

    def __init__(self, message: str, namespace: str, revision: str | None = None):
        super().__init__(message)
        self.namespace = namespace
        self.revision = revision


def is_transient(error: BaseException) -> bool:
    """Tell whether an exception is a connectivity/timeout failure."""
    if isinstance(error, (OperationalError, InterfaceError, PoolTimeoutError)):
        return True
    if isinstance(error, DBAPIError) and error.connection_invalidated:
        return True
    # ConnectionRefusedError and TimeoutError are both OSError subclasses
    return isinstance(error, (asyncio.TimeoutError, OSError))


@asynccontextmanager
async def translate_storage_errors(operation: str) -> AsyncIterator[None]:
    """Re-raise transient driver failures as StorageUnavailableError.

    Non-transient errors (constraint violations, SQL errors) propagate
    unchanged so callers can map them to domain exceptions.

    Args:
        operation: Short description used in the error message
    """
    try:
        yield
    except DatabaseError:
        raise
    except Exception as e:
        if is_transient(e):
            raise StorageUnavailableError(f"Storage unavailable during {operation}: {e}") from e
        raise
