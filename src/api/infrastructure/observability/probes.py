"""Domain probes for infrastructure observability.

Domain probes provide a high-level instrumentation API oriented around
domain semantics, keeping infrastructure code clean and testable.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class ConnectionProbe(Protocol):
    """Domain probe for database engine (connection pool) lifecycle."""

    def engine_created(self, schema_name: str, max_connections: int) -> None:
        """Record that a pooled engine was created for a schema."""
        ...

    def engine_disposed(self, schema_name: str) -> None:
        """Record that a pooled engine was disposed."""
        ...

    def with_context(self, context: ObservationContext) -> ConnectionProbe:
        """Create a new probe with observation context bound."""
        ...


class NamespaceStoreProbe(Protocol):
    """Domain probe for namespace (schema) DDL operations."""

    def namespace_created(self, name: str) -> None:
        """Record that a namespace was created."""
        ...

    def namespace_already_exists(self, name: str) -> None:
        """Record that a create targeted an existing namespace."""
        ...

    def namespace_dropped(self, name: str) -> None:
        """Record that a namespace was dropped (or was already absent)."""
        ...

    def with_context(self, context: ObservationContext) -> NamespaceStoreProbe:
        """Create a new probe with observation context bound."""
        ...


class MigrationProbe(Protocol):
    """Domain probe for migration runner operations."""

    def migration_applied(self, namespace: str, revision: str, batch: int) -> None:
        """Record that one migration script was applied."""
        ...

    def migrations_up_to_date(self, namespace: str) -> None:
        """Record that no pending migrations were found."""
        ...

    def migration_failed(self, namespace: str, revision: str, error: Exception) -> None:
        """Record that a migration script failed to apply or roll back."""
        ...

    def migration_rolled_back(self, namespace: str, revision: str) -> None:
        """Record that one migration script was rolled back."""
        ...

    def nothing_to_roll_back(self, namespace: str) -> None:
        """Record that a rollback found no applied migrations."""
        ...

    def with_context(self, context: ObservationContext) -> MigrationProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultConnectionProbe:
    """Default implementation of ConnectionProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        """Get context metadata as kwargs for logging."""
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultConnectionProbe:
        """Create a new probe with observation context bound."""
        return DefaultConnectionProbe(logger=self._logger, context=context)

    def engine_created(self, schema_name: str, max_connections: int) -> None:
        """Record that a pooled engine was created for a schema."""
        self._logger.info(
            "database_engine_created",
            schema_name=schema_name,
            max_connections=max_connections,
            **self._get_context_kwargs(),
        )

    def engine_disposed(self, schema_name: str) -> None:
        """Record that a pooled engine was disposed."""
        self._logger.info(
            "database_engine_disposed",
            schema_name=schema_name,
            **self._get_context_kwargs(),
        )


class DefaultNamespaceStoreProbe:
    """Default implementation of NamespaceStoreProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        """Get context metadata as kwargs for logging."""
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultNamespaceStoreProbe:
        """Create a new probe with observation context bound."""
        return DefaultNamespaceStoreProbe(logger=self._logger, context=context)

    def namespace_created(self, name: str) -> None:
        """Record that a namespace was created."""
        self._logger.info(
            "namespace_created",
            namespace=name,
            **self._get_context_kwargs(),
        )

    def namespace_already_exists(self, name: str) -> None:
        """Record that a create targeted an existing namespace."""
        self._logger.warning(
            "namespace_already_exists",
            namespace=name,
            **self._get_context_kwargs(),
        )

    def namespace_dropped(self, name: str) -> None:
        """Record that a namespace was dropped (or was already absent)."""
        self._logger.info(
            "namespace_dropped",
            namespace=name,
            **self._get_context_kwargs(),
        )


class DefaultMigrationProbe:
    """Default implementation of MigrationProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        """Get context metadata as kwargs for logging."""
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultMigrationProbe:
        """Create a new probe with observation context bound."""
        return DefaultMigrationProbe(logger=self._logger, context=context)

    def migration_applied(self, namespace: str, revision: str, batch: int) -> None:
        """Record that one migration script was applied."""
        self._logger.info(
            "migration_applied",
            namespace=namespace,
            revision=revision,
            batch=batch,
            **self._get_context_kwargs(),
        )

    def migrations_up_to_date(self, namespace: str) -> None:
        """Record that no pending migrations were found."""
        self._logger.debug(
            "migrations_up_to_date",
            namespace=namespace,
            **self._get_context_kwargs(),
        )

    def migration_failed(self, namespace: str, revision: str, error: Exception) -> None:
        """Record that a migration script failed to apply or roll back."""
        self._logger.error(
            "migration_failed",
            namespace=namespace,
            revision=revision,
            error=str(error),
            error_type=type(error).__name__,
            **self._get_context_kwargs(),
        )

    def migration_rolled_back(self, namespace: str, revision: str) -> None:
        """Record that one migration script was rolled back."""
        self._logger.info(
            "migration_rolled_back",
            namespace=namespace,
            revision=revision,
            **self._get_context_kwargs(),
        )

    def nothing_to_roll_back(self, namespace: str) -> None:
        """Record that a rollback found no applied migrations."""
        self._logger.info(
            "migration_nothing_to_roll_back",
            namespace=namespace,
            **self._get_context_kwargs(),
        )
