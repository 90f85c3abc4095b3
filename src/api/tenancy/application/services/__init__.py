"""Application services for the tenancy bounded context.

Application services orchestrate domain aggregates, repositories, and
other infrastructure to fulfill use cases.
"""

from tenancy.application.services.tenant_lifecycle_service import (
    TenantLifecycleService,
)

__all__ = [
    "TenantLifecycleService",
]
