"""Pydantic models for tenant API requests and responses."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from tenancy.domain.aggregates import Tenant


class CreateTenantRequest(BaseModel):
    """Request model for creating a tenant."""

    name: str = Field(..., description="Tenant name", min_length=1, max_length=255)


class TenantResponse(BaseModel):
    """Response model for tenant."""

    id: str = Field(..., description="Tenant ID (ULID format)")
    name: str = Field(..., description="Tenant name")
    schema_name: str = Field(..., description="Namespace holding the tenant's data")
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, tenant: Tenant) -> TenantResponse:
        """Convert domain Tenant aggregate to API response.

        Args:
            tenant: Tenant domain aggregate

        Returns:
            TenantResponse
        """
        return cls(
            id=tenant.id.value,
            name=tenant.name,
            schema_name=tenant.schema_name.value,
            created_at=tenant.created_at,
            updated_at=tenant.updated_at,
        )
