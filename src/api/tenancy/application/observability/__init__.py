"""Domain-Oriented Observability for the tenancy application layer."""

from tenancy.application.observability.tenant_service_probe import (
    DefaultTenantServiceProbe,
    TenantServiceProbe,
)

__all__ = [
    "TenantServiceProbe",
    "DefaultTenantServiceProbe",
]
