"""HTTP routes for tenant management."""

from __future__ import annotations

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, HTTPException, status

from infrastructure.database.exceptions import (
    MigrationFailureError,
    NamespaceAlreadyExistsError,
    StorageUnavailableError,
)
from tenancy.application.services import TenantLifecycleService
from tenancy.dependencies.tenant import get_tenant_service
from tenancy.domain.exceptions import InvalidTenantNameError
from tenancy.domain.value_objects import TenantId
from tenancy.ports.exceptions import DuplicateTenantError, TenantNotFoundError
from tenancy.presentation.tenants.models import CreateTenantRequest, TenantResponse

logger = structlog.get_logger()

router = APIRouter(
    prefix="/tenants",
    tags=["tenants"],
)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    responses={
        201: {"description": "Tenant and namespace provisioned"},
        400: {"description": "Name yields no usable schema name"},
        409: {"description": "Schema name already in use"},
        503: {"description": "Database unavailable"},
        500: {"description": "Internal server error"},
    },
)
async def create_tenant(
    request: CreateTenantRequest,
    service: Annotated[TenantLifecycleService, Depends(get_tenant_service)],
) -> TenantResponse:
    """Create a new tenant.

    Provisions the tenant's namespace and migrates it before the tenant
    is registered.

    Args:
        request: Tenant creation request (name)
        service: Tenant lifecycle service

    Returns:
        TenantResponse with created tenant details

    Raises:
        HTTPException: 400 if the name sanitizes to nothing usable
        HTTPException: 409 if the schema name is already in use
        HTTPException: 503 if the database is unavailable
        HTTPException: 500 for unexpected errors
    """
    try:
        tenant = await service.create_tenant(name=request.name)
        return TenantResponse.from_domain(tenant)

    except InvalidTenantNameError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    except (DuplicateTenantError, NamespaceAlreadyExistsError):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="A tenant with a similar name already exists",
        )
    except StorageUnavailableError:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database unavailable",
        )
    except MigrationFailureError as e:
        logger.error("tenant_create_migration_failed", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create tenant",
        )
    except Exception:
        logger.exception("tenant_create_failed")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create tenant",
        )


@router.get("")
async def list_tenants(
    service: Annotated[TenantLifecycleService, Depends(get_tenant_service)],
) -> list[TenantResponse]:
    """List all tenants, newest first.

    Raises:
        HTTPException: 503 if the database is unavailable
        HTTPException: 500 for unexpected errors
    """
    try:
        tenants = await service.list_tenants()
        return [TenantResponse.from_domain(t) for t in tenants]

    except StorageUnavailableError:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database unavailable",
        )
    except Exception:
        logger.exception("tenant_list_failed")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to list tenants",
        )


@router.get("/{tenant_id}")
async def get_tenant(
    tenant_id: str,
    service: Annotated[TenantLifecycleService, Depends(get_tenant_service)],
) -> TenantResponse:
    """Get tenant by ID.

    Args:
        tenant_id: Tenant ID (ULID format)
        service: Tenant lifecycle service

    Returns:
        TenantResponse with tenant details

    Raises:
        HTTPException: 400 if tenant ID is invalid
        HTTPException: 404 if tenant not found
        HTTPException: 503 if the database is unavailable
        HTTPException: 500 for unexpected errors
    """
    try:
        tenant_id_obj = TenantId.from_string(tenant_id)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid tenant ID format: {e}",
        ) from e

    try:
        tenant = await service.get_tenant(tenant_id_obj)
        if tenant is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Tenant {tenant_id} not found",
            )
        return TenantResponse.from_domain(tenant)

    except HTTPException:
        raise
    except StorageUnavailableError:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database unavailable",
        )
    except Exception:
        logger.exception("tenant_get_failed", tenant_id=tenant_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve tenant",
        )


@router.delete(
    "/{tenant_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_model=None,
    responses={
        204: {"description": "Tenant and namespace deleted"},
        400: {"description": "Invalid tenant ID format"},
        404: {"description": "Tenant not found"},
        503: {"description": "Database unavailable"},
        500: {"description": "Internal server error"},
    },
)
async def delete_tenant(
    tenant_id: str,
    service: Annotated[TenantLifecycleService, Depends(get_tenant_service)],
) -> None:
    """Delete a tenant and drop its namespace.

    Args:
        tenant_id: Tenant ID (ULID format)
        service: Tenant lifecycle service

    Returns:
        None (204 No Content on success)

    Raises:
        HTTPException: 400 if tenant ID is invalid
        HTTPException: 404 if tenant not found
        HTTPException: 503 if the database is unavailable
        HTTPException: 500 for unexpected errors
    """
    try:
        tenant_id_obj = TenantId.from_string(tenant_id)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid tenant ID format: {e}",
        ) from e

    try:
        await service.delete_tenant(tenant_id_obj)

    except TenantNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Tenant {tenant_id} not found",
        )
    except StorageUnavailableError:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database unavailable",
        )
    except Exception:
        logger.exception("tenant_delete_failed", tenant_id=tenant_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete tenant",
        )
