"""Domain probe for the tenant-scoped connection registry."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class ConnectionRegistryProbe(Protocol):
    """Domain probe for tenant connection cache operations."""

    def connection_created(self, schema_name: str, pool_size: int) -> None:
        """Record that a new pooled connection was built for a namespace."""
        ...

    def connection_released(self, schema_name: str) -> None:
        """Record that a cached connection was disposed and evicted."""
        ...

    def all_connections_released(self, count: int) -> None:
        """Record that every cached connection was disposed."""
        ...

    def connection_dispose_failed(self, schema_name: str, error: Exception) -> None:
        """Record that disposing a pool raised."""
        ...

    def with_context(self, context: ObservationContext) -> ConnectionRegistryProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultConnectionRegistryProbe:
    """Default implementation of ConnectionRegistryProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultConnectionRegistryProbe:
        """Create a new probe with observation context bound."""
        return DefaultConnectionRegistryProbe(logger=self._logger, context=context)

    def connection_created(self, schema_name: str, pool_size: int) -> None:
        """Record that a new pooled connection was built for a namespace."""
        self._logger.info(
            "tenant_connection_created",
            schema_name=schema_name,
            pool_size=pool_size,
            **self._get_context_kwargs(),
        )

    def connection_released(self, schema_name: str) -> None:
        """Record that a cached connection was disposed and evicted."""
        self._logger.info(
            "tenant_connection_released",
            schema_name=schema_name,
            **self._get_context_kwargs(),
        )

    def all_connections_released(self, count: int) -> None:
        """Record that every cached connection was disposed."""
        self._logger.info(
            "tenant_connections_released",
            count=count,
            **self._get_context_kwargs(),
        )

    def connection_dispose_failed(self, schema_name: str, error: Exception) -> None:
        """Record that disposing a pool raised."""
        self._logger.error(
            "tenant_connection_dispose_failed",
            schema_name=schema_name,
            error=str(error),
            error_type=type(error).__name__,
            **self._get_context_kwargs(),
        )
