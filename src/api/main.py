"""Main FastAPI application entry point."""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from crm import presentation as crm_presentation
from infrastructure.database.dependencies import (
    close_database_connections,
    get_registry_engine,
)
from infrastructure.database.engines import PUBLIC_SCHEMA
from infrastructure.logging import configure_logging
from infrastructure.migrations import MigrationRunner, registry_scripts
from infrastructure.settings import (
    get_cors_settings,
    get_settings,
    get_tenancy_settings,
)
from infrastructure.version import __version__
from tenancy import presentation as tenancy_presentation
from tenancy.dependencies.tenant import get_connection_registry

logger = structlog.get_logger()


@asynccontextmanager
async def crm_lifespan(app: FastAPI):
    """Application lifespan context.

    Manages:
    - Logging configuration
    - Optional registry migration at startup
    - Tenant connection pools and the registry engine (closed on shutdown)
    """
    configure_logging(debug=get_settings().debug)

    tenancy_settings = get_tenancy_settings()
    if tenancy_settings.migrate_registry_on_startup:
        runner = MigrationRunner(
            engine=get_registry_engine(),
            tracking_table_name=tenancy_settings.migration_table,
        )
        await runner.apply_latest(PUBLIC_SCHEMA, registry_scripts())

    yield

    # Shutdown: tenant pools first, then the registry engine
    await get_connection_registry().release_all()
    await close_database_connections()


app = FastAPI(
    title="Multi-Tenant CRM API",
    description="Contacts, conversations and messages in per-tenant PostgreSQL schemas",
    version=__version__,
    lifespan=crm_lifespan,
)

_cors = get_cors_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors.origins,
    allow_credentials=_cors.allow_credentials,
    allow_methods=_cors.allow_methods,
    allow_headers=["Content-Type", get_tenancy_settings().tenant_header],
    expose_headers=_cors.expose_headers,
)

# Tenant lifecycle routes (registry-scoped)
app.include_router(tenancy_presentation.router)

# CRM routes (tenant-scoped via the tenant header)
app.include_router(crm_presentation.router)


@app.get("/")
def root() -> dict:
    """Describe the API and its endpoint groups."""
    return {
        "message": "Multi-Tenant CRM API",
        "version": __version__,
        "endpoints": {
            "tenants": "/tenants",
            "contacts": "/contacts",
            "conversations": "/conversations",
            "messages": "/messages",
        },
    }


@app.get("/health")
def health():
    """Basic health check endpoint."""
    return {"status": "ok"}
