"""Domain probes for tenant registry repository operations."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class TenantRepositoryProbe(Protocol):
    """Domain probe for tenant repository operations."""

    def tenant_saved(self, tenant_id: str, schema_name: str) -> None:
        """Record that a tenant row was saved."""
        ...

    def tenant_retrieved(self, tenant_id: str) -> None:
        """Record that a tenant was retrieved."""
        ...

    def tenants_listed(self, count: int) -> None:
        """Record that tenants were listed."""
        ...

    def tenant_deleted(self, tenant_id: str) -> None:
        """Record that a tenant row was deleted."""
        ...

    def duplicate_schema_name(self, schema_name: str) -> None:
        """Record that a unique index violation on schema_name occurred."""
        ...

    def with_context(self, context: ObservationContext) -> TenantRepositoryProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultTenantRepositoryProbe:
    """Default implementation of TenantRepositoryProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultTenantRepositoryProbe:
        """Create a new probe with observation context bound."""
        return DefaultTenantRepositoryProbe(logger=self._logger, context=context)

    def tenant_saved(self, tenant_id: str, schema_name: str) -> None:
        """Record that a tenant row was saved."""
        self._logger.info(
            "tenant_saved",
            tenant_id=tenant_id,
            schema_name=schema_name,
            **self._get_context_kwargs(),
        )

    def tenant_retrieved(self, tenant_id: str) -> None:
        """Record that a tenant was retrieved."""
        self._logger.debug(
            "tenant_retrieved",
            tenant_id=tenant_id,
            **self._get_context_kwargs(),
        )

    def tenants_listed(self, count: int) -> None:
        """Record that tenants were listed."""
        self._logger.debug(
            "tenants_listed",
            count=count,
            **self._get_context_kwargs(),
        )

    def tenant_deleted(self, tenant_id: str) -> None:
        """Record that a tenant row was deleted."""
        self._logger.info(
            "tenant_deleted",
            tenant_id=tenant_id,
            **self._get_context_kwargs(),
        )

    def duplicate_schema_name(self, schema_name: str) -> None:
        """Record that a unique index violation on schema_name occurred."""
        self._logger.warning(
            "duplicate_tenant_schema_name",
            schema_name=schema_name,
            **self._get_context_kwargs(),
        )
