"""Namespace (PostgreSQL schema) DDL primitives.

A tenant namespace is a PostgreSQL schema. This module owns the only code
that interpolates a schema name into DDL, so every name is validated and
quoted by the dialect before it reaches the database.
"""

from __future__ import annotations

import re

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine

from infrastructure.database.engines import PUBLIC_SCHEMA
from infrastructure.database.exceptions import (
    InvalidNamespaceNameError,
    NamespaceAlreadyExistsError,
    translate_storage_errors,
)
from infrastructure.observability.probes import (
    DefaultNamespaceStoreProbe,
    NamespaceStoreProbe,
)

_NAMESPACE_PATTERN = re.compile(r"^[a-z0-9_]{1,63}$")

_SYSTEM_SCHEMAS = ("information_schema", PUBLIC_SCHEMA)


def validate_namespace_name(name: str) -> str:
    """Check that a name is safe to use as a schema identifier.

    Raises:
        InvalidNamespaceNameError: If the name is empty, too long, or
            contains characters outside ``[a-z0-9_]``
    """
    if not isinstance(name, str) or not _NAMESPACE_PATTERN.match(name):
        raise InvalidNamespaceNameError(f"Invalid namespace name: {name!r}")
    return name


class NamespaceStore:
    """Exists/create/drop operations against PostgreSQL schemas.

    Runs on the registry engine. Operations that accept a connection run on
    it, joining whatever transaction the caller has open.
    """

    def __init__(
        self,
        engine: AsyncEngine,
        probe: NamespaceStoreProbe | None = None,
    ) -> None:
        self._engine = engine
        self._probe = probe or DefaultNamespaceStoreProbe()

    def _quote(self, name: str) -> str:
        return self._engine.dialect.identifier_preparer.quote_schema(name)

    async def exists(self, name: str) -> bool:
        """Check the schema catalog for a namespace.

        Args:
            name: Namespace name

        Returns:
            True if a schema with this exact name exists
        """
        validate_namespace_name(name)
        async with translate_storage_errors("namespace lookup"):
            async with self._engine.connect() as conn:
                result = await conn.execute(
                    text(
                        "SELECT 1 FROM information_schema.schemata "
                        "WHERE schema_name = :name"
                    ),
                    {"name": name},
                )
                return result.first() is not None

    async def create(self, name: str) -> None:
        """Create an empty namespace.

        The existence check yields a clear error before any DDL runs;
        ``IF NOT EXISTS`` keeps a lost race with a concurrent creator benign.

        Raises:
            NamespaceAlreadyExistsError: If the schema already exists
        """
        validate_namespace_name(name)
        if await self.exists(name):
            self._probe.namespace_already_exists(name)
            raise NamespaceAlreadyExistsError(name)

        async with translate_storage_errors("namespace create"):
            async with self._engine.begin() as conn:
                await conn.execute(
                    text(f"CREATE SCHEMA IF NOT EXISTS {self._quote(name)}")
                )
        self._probe.namespace_created(name)

    async def drop(self, name: str, connection: AsyncConnection | None = None) -> None:
        """Drop a namespace and everything in it.

        Idempotent: dropping a missing namespace succeeds.

        Args:
            name: Namespace name
            connection: Optional open connection; when given the DROP joins
                its current transaction and commits or rolls back with it
        """
        validate_namespace_name(name)
        if name in _SYSTEM_SCHEMAS or name.startswith("pg_"):
            raise InvalidNamespaceNameError(f"Refusing to drop system schema {name!r}")

        statement = text(f"DROP SCHEMA IF EXISTS {self._quote(name)} CASCADE")
        async with translate_storage_errors("namespace drop"):
            if connection is not None:
                await connection.execute(statement)
            else:
                async with self._engine.begin() as conn:
                    await conn.execute(statement)
        self._probe.namespace_dropped(name)

    async def list_names(self, prefix: str | None = None) -> list[str]:
        """List non-system namespaces, sorted by name.

        Args:
            prefix: Optional name prefix filter
        """
        query = (
            "SELECT schema_name FROM information_schema.schemata "
            "WHERE schema_name NOT LIKE 'pg\\_%' "
            "AND schema_name NOT IN ('information_schema', 'public')"
        )
        params: dict[str, str] = {}
        if prefix:
            query += " AND schema_name LIKE :prefix"
            params["prefix"] = prefix.replace("_", "\\_") + "%"
        query += " ORDER BY schema_name"

        async with translate_storage_errors("namespace listing"):
            async with self._engine.connect() as conn:
                result = await conn.execute(text(query), params)
                return [row[0] for row in result]
