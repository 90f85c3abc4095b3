"""Tenancy domain: tenant aggregate, identifiers and schema naming rules."""

from tenancy.domain.aggregates import Tenant
from tenancy.domain.exceptions import InvalidTenantNameError
from tenancy.domain.value_objects import (
    SchemaName,
    TenantId,
    sanitize_schema_name,
)

__all__ = [
    "InvalidTenantNameError",
    "SchemaName",
    "Tenant",
    "TenantId",
    "sanitize_schema_name",
]
