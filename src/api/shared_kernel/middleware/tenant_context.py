"""Tenant context value object for resolved tenant identification.

This module contains the pure value object that represents a resolved
tenant context. It contains no business logic, making it safe for the
shared kernel.

The actual resolution logic (header extraction, ULID validation, registry
lookup) lives in the tenancy bounded context's dependency layer.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from infrastructure.database.connections import TenantConnection


@dataclass(frozen=True)
class TenantContext:
    """Resolved tenant context for the current request.

    This is a shared kernel value object used across bounded contexts
    to carry the resolved tenant identity and its scoped connection.

    Attributes:
        tenant_id: The validated tenant identifier as a string.
        schema_name: The tenant's namespace.
        connection: Pooled connection whose sessions default to that namespace.
    """

    tenant_id: str
    schema_name: str
    connection: TenantConnection
