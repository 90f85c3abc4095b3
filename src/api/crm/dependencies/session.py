"""Tenant-scoped session dependency.

Every CRM request runs on a session opened from the resolved tenant's
connection, so unqualified table names resolve inside its namespace.
"""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from shared_kernel.middleware.tenant_context import TenantContext
from tenancy.dependencies.tenant_context import resolve_tenant_context


async def get_tenant_session(
    tenant: Annotated[TenantContext, Depends(resolve_tenant_context)],
) -> AsyncGenerator[AsyncSession, None]:
    """Yield a session on the tenant's namespace for one request.

    The session is closed on every exit path, returning its connection to
    the tenant pool.
    """
    async with tenant.connection.session() as session:
        yield session
