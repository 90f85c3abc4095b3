"""Shared middleware for cross-cutting concerns.

Holds the tenant context value object handed from tenant resolution to
every tenant-scoped bounded context.
"""

from shared_kernel.middleware.tenant_context import TenantContext

__all__ = ["TenantContext"]
