"""Tenant context FastAPI dependency.

Resolves the tenant named in the X-Tenant-Id request header to its
namespace and tenant-scoped connection.

A missing header, a malformed identifier or an unregistered tenant all
return 401; a storage outage returns 503.

Usage in FastAPI routes:
    @router.get("/example")
    async def example(
        tenant: Annotated[TenantContext, Depends(resolve_tenant_context)],
    ):
        async with tenant.connection.session() as session:
            ...
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from infrastructure.database.exceptions import StorageUnavailableError
from infrastructure.settings import get_tenancy_settings
from shared_kernel.middleware.observability.tenant_context_probe import (
    DefaultTenantContextProbe,
    TenantContextProbe,
)
from shared_kernel.middleware.tenant_context import TenantContext
from tenancy.application.services import TenantLifecycleService
from tenancy.dependencies.tenant import get_tenant_service
from tenancy.ports.exceptions import UnknownTenantError


def get_tenant_context_probe() -> TenantContextProbe:
    """Get TenantContextProbe instance for tenant context resolution.

    Returns:
        DefaultTenantContextProbe instance for observability
    """
    return DefaultTenantContextProbe()


async def get_tenant_context(
    x_tenant_id: str | None,
    tenant_service: TenantLifecycleService,
    probe: TenantContextProbe,
    header_name: str = "X-Tenant-Id",
) -> TenantContext:
    """Resolve the tenant context from a raw header value.

    This is the core logic for the tenant context dependency.

    Args:
        x_tenant_id: The tenant header value, or None if missing.
        tenant_service: Lifecycle service used to resolve the tenant.
        probe: Domain probe for observability.
        header_name: Header name, used in error messages.

    Returns:
        TenantContext with the tenant id, schema name and scoped connection.

    Raises:
        HTTPException 401: If the header is missing, malformed or names an
            unregistered tenant.
        HTTPException 503: If the registry could not be reached.
    """
    raw_value = (x_tenant_id or "").strip()
    if not raw_value:
        probe.tenant_header_missing(header=header_name)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Missing {header_name} header",
        )

    # ULIDs are case-insensitive; ids are stored in canonical upper case
    try:
        context = await tenant_service.resolve_tenant(raw_value.upper())
    except UnknownTenantError:
        probe.unknown_tenant(raw_value=raw_value)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid tenant",
        )
    except StorageUnavailableError as e:
        probe.tenant_resolution_failed(raw_value=raw_value, error=e)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Tenant registry unavailable",
        )

    probe.tenant_resolved(
        tenant_id=context.tenant_id,
        schema_name=context.schema_name,
    )
    return context


async def resolve_tenant_context(
    request: Request,
    tenant_service: Annotated[TenantLifecycleService, Depends(get_tenant_service)],
    probe: Annotated[TenantContextProbe, Depends(get_tenant_context_probe)],
) -> TenantContext:
    """Resolve tenant context for the current request.

    The header name comes from ``TenancySettings.tenant_header``.

    Returns:
        TenantContext for the tenant named in the request header

    Raises:
        HTTPException: If tenant resolution fails (401/503)
    """
    header_name = get_tenancy_settings().tenant_header
    return await get_tenant_context(
        x_tenant_id=request.headers.get(header_name),
        tenant_service=tenant_service,
        probe=probe,
        header_name=header_name,
    )
