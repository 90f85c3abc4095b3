"""Domain aggregates for the tenancy context."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime

from tenancy.domain.value_objects import SchemaName, TenantId


@dataclass
class Tenant:
    """Tenant aggregate representing one customer organization.

    Each tenant owns exactly one isolated namespace named ``schema_name``.

    Business rules:
    - ``schema_name`` is derived from the name once, at creation
    - ``schema_name`` is globally unique and never changes afterwards
    """

    id: TenantId
    name: str
    schema_name: SchemaName
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @classmethod
    def create(cls, name: str) -> Tenant:
        """Factory method for creating a new tenant.

        Args:
            name: Human display name of the tenant

        Returns:
            A new Tenant aggregate with a generated id

        Raises:
            InvalidTenantNameError: If the name yields no usable schema name
        """
        name = name.strip()
        return cls(
            id=TenantId.generate(),
            name=name,
            schema_name=SchemaName.from_tenant_name(name),
        )
