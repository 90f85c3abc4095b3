"""Protocol for tenant lifecycle service observability.

Defines the interface for domain probes that capture application-level
domain events for provisioning, deprovisioning and resolving tenants.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class TenantServiceProbe(Protocol):
    """Domain probe for tenant lifecycle service operations."""

    def tenant_created(self, tenant_id: str, name: str, schema_name: str) -> None:
        """Record that a tenant was provisioned."""
        ...

    def tenant_retrieved(self, tenant_id: str) -> None:
        """Record that a tenant was retrieved."""
        ...

    def tenants_listed(self, count: int) -> None:
        """Record that tenants were listed."""
        ...

    def tenant_deleted(self, tenant_id: str, schema_name: str) -> None:
        """Record that a tenant and its namespace were removed."""
        ...

    def tenant_not_found(self, tenant_id: str) -> None:
        """Record that a tenant was not found."""
        ...

    def duplicate_tenant(self, name: str, schema_name: str) -> None:
        """Record that the derived schema name is already registered."""
        ...

    def namespace_conflict(self, schema_name: str) -> None:
        """Record that provisioning hit a namespace it did not create."""
        ...

    def provisioning_failed(self, schema_name: str, error: Exception) -> None:
        """Record that provisioning failed after the namespace was created."""
        ...

    def namespace_compensated(self, schema_name: str) -> None:
        """Record that a partially provisioned namespace was dropped."""
        ...

    def compensation_failed(self, schema_name: str, error: Exception) -> None:
        """Record that dropping a partially provisioned namespace failed."""
        ...

    def tenant_resolved(self, tenant_id: str, schema_name: str) -> None:
        """Record that a tenant id was resolved to a scoped connection."""
        ...

    def unknown_tenant(self, tenant_id: str) -> None:
        """Record that a request named an unregistered tenant."""
        ...

    def tenant_migrated(self, schema_name: str, applied: list[str]) -> None:
        """Record that pending migrations were applied to a tenant namespace."""
        ...

    def with_context(self, context: ObservationContext) -> TenantServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultTenantServiceProbe:
    """Default implementation of TenantServiceProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultTenantServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultTenantServiceProbe(logger=self._logger, context=context)

    def tenant_created(self, tenant_id: str, name: str, schema_name: str) -> None:
        """Record that a tenant was provisioned."""
        self._logger.info(
            "tenant_created",
            tenant_id=tenant_id,
            name=name,
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

    def tenant_deleted(self, tenant_id: str, schema_name: str) -> None:
        """Record that a tenant and its namespace were removed."""
        self._logger.info(
            "tenant_deleted",
            tenant_id=tenant_id,
            schema_name=schema_name,
            **self._get_context_kwargs(),
        )

    def tenant_not_found(self, tenant_id: str) -> None:
        """Record that a tenant was not found."""
        self._logger.debug(
            "tenant_not_found",
            tenant_id=tenant_id,
            **self._get_context_kwargs(),
        )

    def duplicate_tenant(self, name: str, schema_name: str) -> None:
        """Record that the derived schema name is already registered."""
        self._logger.warning(
            "duplicate_tenant",
            name=name,
            schema_name=schema_name,
            **self._get_context_kwargs(),
        )

    def namespace_conflict(self, schema_name: str) -> None:
        """Record that provisioning hit a namespace it did not create."""
        self._logger.warning(
            "tenant_namespace_conflict",
            schema_name=schema_name,
            **self._get_context_kwargs(),
        )

    def provisioning_failed(self, schema_name: str, error: Exception) -> None:
        """Record that provisioning failed after the namespace was created."""
        self._logger.error(
            "tenant_provisioning_failed",
            schema_name=schema_name,
            error=str(error),
            error_type=type(error).__name__,
            **self._get_context_kwargs(),
        )

    def namespace_compensated(self, schema_name: str) -> None:
        """Record that a partially provisioned namespace was dropped."""
        self._logger.info(
            "tenant_namespace_compensated",
            schema_name=schema_name,
            **self._get_context_kwargs(),
        )

    def compensation_failed(self, schema_name: str, error: Exception) -> None:
        """Record that dropping a partially provisioned namespace failed."""
        self._logger.error(
            "tenant_namespace_compensation_failed",
            schema_name=schema_name,
            error=str(error),
            error_type=type(error).__name__,
            message="Namespace may be orphaned and needs manual cleanup",
            **self._get_context_kwargs(),
        )

    def tenant_resolved(self, tenant_id: str, schema_name: str) -> None:
        """Record that a tenant id was resolved to a scoped connection."""
        self._logger.debug(
            "tenant_resolved",
            tenant_id=tenant_id,
            schema_name=schema_name,
            **self._get_context_kwargs(),
        )

    def unknown_tenant(self, tenant_id: str) -> None:
        """Record that a request named an unregistered tenant."""
        self._logger.warning(
            "unknown_tenant",
            tenant_id=tenant_id,
            **self._get_context_kwargs(),
        )

    def tenant_migrated(self, schema_name: str, applied: list[str]) -> None:
        """Record that pending migrations were applied to a tenant namespace."""
        self._logger.info(
            "tenant_migrated",
            schema_name=schema_name,
            applied=applied,
            count=len(applied),
            **self._get_context_kwargs(),
        )
