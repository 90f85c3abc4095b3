"""Per-namespace migration runner.

Applies a MigrationScriptSet to one PostgreSQL schema and records progress
in a tracking table inside that same schema, so every namespace carries its
own independent migration history.

Each script runs in its own transaction together with its tracking row,
with ``search_path`` pinned to the target schema so scripts can use
unqualified table names. Alembic's ``op`` proxy is bound to the connection
for the duration of each script.
"""

from __future__ import annotations

from typing import Callable

from alembic.migration import MigrationContext
from alembic.operations import Operations
from sqlalchemy import (
    Column,
    Connection,
    DateTime,
    Integer,
    MetaData,
    String,
    Table,
    delete,
    func,
    inspect,
    select,
    text,
)
from sqlalchemy.ext.asyncio import AsyncEngine

from infrastructure.database.exceptions import (
    MigrationFailureError,
    translate_storage_errors,
)
from infrastructure.database.namespace_store import validate_namespace_name
from infrastructure.migrations.scripts import MigrationScript, MigrationScriptSet
from infrastructure.observability.probes import DefaultMigrationProbe, MigrationProbe

DEFAULT_TRACKING_TABLE = "crm_migrations"


def tracking_table(schema: str, name: str = DEFAULT_TRACKING_TABLE) -> Table:
    """Build the tracking table definition for one schema."""
    return Table(
        name,
        MetaData(schema=schema),
        Column("id", Integer, primary_key=True, autoincrement=True),
        Column("name", String(255), nullable=False),
        Column("batch", Integer, nullable=False),
        Column(
            "migration_time",
            DateTime(timezone=True),
            server_default=func.now(),
            nullable=False,
        ),
    )


class MigrationRunner:
    """Applies and rolls back migration scripts for a single namespace."""

    def __init__(
        self,
        engine: AsyncEngine,
        tracking_table_name: str = DEFAULT_TRACKING_TABLE,
        probe: MigrationProbe | None = None,
    ) -> None:
        self._engine = engine
        self._tracking_table_name = tracking_table_name
        self._probe = probe or DefaultMigrationProbe()

    async def apply_latest(self, schema: str, scripts: MigrationScriptSet) -> list[str]:
        """Apply every pending script in ascending revision order.

        All scripts applied by one call share a batch number. A failing
        script stops the run; scripts applied before it stay applied.

        Args:
            schema: Target namespace (must already exist)
            scripts: Script set to apply

        Returns:
            Names of the scripts applied by this call

        Raises:
            MigrationFailureError: If a script fails
            StorageUnavailableError: On connectivity failures
        """
        validate_namespace_name(schema)
        async with translate_storage_errors(f"migration of {schema}"):
            async with self._engine.connect() as conn:
                return await conn.run_sync(self._upgrade, schema, scripts)

    async def rollback_last(self, schema: str, scripts: MigrationScriptSet) -> str | None:
        """Undo the most recently applied script.

        Returns:
            Name of the rolled back script, or None if nothing was applied

        Raises:
            MigrationFailureError: If the downgrade fails or the applied
                script is not part of ``scripts``
        """
        validate_namespace_name(schema)
        async with translate_storage_errors(f"rollback of {schema}"):
            async with self._engine.connect() as conn:
                return await conn.run_sync(self._downgrade, schema, scripts)

    async def applied(self, schema: str) -> list[str]:
        """Names of applied scripts in application order."""
        validate_namespace_name(schema)
        async with translate_storage_errors(f"migration status of {schema}"):
            async with self._engine.connect() as conn:
                return await conn.run_sync(self._applied_names, schema)

    def _upgrade(
        self, connection: Connection, schema: str, scripts: MigrationScriptSet
    ) -> list[str]:
        table = tracking_table(schema, self._tracking_table_name)
        with connection.begin():
            table.create(connection, checkfirst=True)
            done = set(connection.scalars(select(table.c.name)))
            batch = (connection.scalar(select(func.max(table.c.batch))) or 0) + 1

        pending = [s for s in scripts if s.name not in done]
        if not pending:
            self._probe.migrations_up_to_date(schema)
            return []

        applied: list[str] = []
        for script in pending:
            try:
                with connection.begin():
                    self._set_search_path(connection, schema)
                    self._run(connection, script.upgrade)
                    connection.execute(
                        table.insert().values(name=script.name, batch=batch)
                    )
            except Exception as e:
                self._probe.migration_failed(schema, script.name, e)
                raise MigrationFailureError(
                    f"Migration {script.name} failed on {schema}: {e}",
                    namespace=schema,
                    revision=script.revision,
                ) from e
            self._probe.migration_applied(schema, script.name, batch)
            applied.append(script.name)
        return applied

    def _downgrade(
        self, connection: Connection, schema: str, scripts: MigrationScriptSet
    ) -> str | None:
        table = tracking_table(schema, self._tracking_table_name)
        with connection.begin():
            if not inspect(connection).has_table(table.name, schema=schema):
                last = None
            else:
                last = connection.execute(
                    select(table.c.id, table.c.name).order_by(table.c.id.desc()).limit(1)
                ).first()

        if last is None:
            self._probe.nothing_to_roll_back(schema)
            return None

        script: MigrationScript | None = scripts.get(last.name)
        if script is None:
            raise MigrationFailureError(
                f"Applied migration {last.name} is not in the '{scripts.label}' set",
                namespace=schema,
            )

        try:
            with connection.begin():
                self._set_search_path(connection, schema)
                self._run(connection, script.downgrade)
                connection.execute(delete(table).where(table.c.id == last.id))
        except Exception as e:
            self._probe.migration_failed(schema, script.name, e)
            raise MigrationFailureError(
                f"Rollback of {script.name} failed on {schema}: {e}",
                namespace=schema,
                revision=script.revision,
            ) from e

        self._probe.migration_rolled_back(schema, script.name)
        return script.name

    def _applied_names(self, connection: Connection, schema: str) -> list[str]:
        table = tracking_table(schema, self._tracking_table_name)
        with connection.begin():
            if not inspect(connection).has_table(table.name, schema=schema):
                return []
            return list(connection.scalars(select(table.c.name).order_by(table.c.id)))

    def _set_search_path(self, connection: Connection, schema: str) -> None:
        quoted = connection.dialect.identifier_preparer.quote_schema(schema)
        connection.execute(text(f"SET LOCAL search_path TO {quoted}"))

    def _run(self, connection: Connection, step: Callable[[], None]) -> None:
        """Run one script function with ``alembic.op`` bound to the connection."""
        context = MigrationContext.configure(connection)
        with Operations.context(context):
            step()
