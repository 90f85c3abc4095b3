"""Domain probe for tenant context resolution.

Following Domain-Oriented Observability patterns, this probe captures
domain-significant events related to resolving the tenant named in the
X-Tenant-Id request header.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class TenantContextProbe(Protocol):
    """Domain probe for tenant context resolution operations."""

    def tenant_resolved(self, tenant_id: str, schema_name: str) -> None:
        """Record that tenant context was resolved from the request header."""
        ...

    def tenant_header_missing(self, header: str) -> None:
        """Record that the tenant header was missing."""
        ...

    def unknown_tenant(self, raw_value: str) -> None:
        """Record that the header named a malformed or unregistered tenant."""
        ...

    def tenant_resolution_failed(self, raw_value: str, error: Exception) -> None:
        """Record that resolution failed because storage was unavailable."""
        ...

    def with_context(self, context: ObservationContext) -> TenantContextProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultTenantContextProbe:
    """Default implementation of TenantContextProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultTenantContextProbe:
        """Create a new probe with observation context bound."""
        return DefaultTenantContextProbe(logger=self._logger, context=context)

    def tenant_resolved(self, tenant_id: str, schema_name: str) -> None:
        """Record that tenant context was resolved from the request header."""
        self._logger.debug(
            "tenant_context_resolved",
            tenant_id=tenant_id,
            schema_name=schema_name,
            **self._get_context_kwargs(),
        )

    def tenant_header_missing(self, header: str) -> None:
        """Record that the tenant header was missing."""
        self._logger.warning(
            "tenant_context_header_missing",
            header=header,
            **self._get_context_kwargs(),
        )

    def unknown_tenant(self, raw_value: str) -> None:
        """Record that the header named a malformed or unregistered tenant."""
        self._logger.warning(
            "tenant_context_unknown_tenant",
            raw_value=raw_value,
            **self._get_context_kwargs(),
        )

    def tenant_resolution_failed(self, raw_value: str, error: Exception) -> None:
        """Record that resolution failed because storage was unavailable."""
        self._logger.error(
            "tenant_context_resolution_failed",
            raw_value=raw_value,
            error=str(error),
            error_type=type(error).__name__,
            **self._get_context_kwargs(),
        )
