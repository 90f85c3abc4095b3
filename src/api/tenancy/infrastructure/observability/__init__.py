"""Domain-Oriented Observability for tenancy infrastructure."""

from tenancy.infrastructure.observability.connection_registry_probe import (
    ConnectionRegistryProbe,
    DefaultConnectionRegistryProbe,
)
from tenancy.infrastructure.observability.repository_probe import (
    DefaultTenantRepositoryProbe,
    TenantRepositoryProbe,
)

__all__ = [
    "ConnectionRegistryProbe",
    "DefaultConnectionRegistryProbe",
    "TenantRepositoryProbe",
    "DefaultTenantRepositoryProbe",
]
