"""Application settings using pydantic-settings.

Settings are loaded from environment variables with sensible defaults
for development. Production deployments should set all values explicitly.
"""

from functools import lru_cache

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Database connection settings.

    Environment variables:
        CRM_DB_HOST: Database host (default: localhost)
        CRM_DB_PORT: Database port (default: 5432)
        CRM_DB_DATABASE: Database name (default: multi_tenant_crm)
        CRM_DB_USERNAME: Database user (default: postgres)
        CRM_DB_PASSWORD: Database password (required in production)
        CRM_DB_POOL_MAX_CONNECTIONS: Registry pool size; the pool opens
            connections lazily and never exceeds this (default: 10)
        CRM_DB_COMMAND_TIMEOUT: Seconds before a statement is abandoned (default: 30)
    """

    model_config = SettingsConfigDict(
        env_prefix="CRM_DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = Field(default="localhost", description="Database host")
    port: int = Field(default=5432, description="Database port")
    database: str = Field(default="multi_tenant_crm", description="Database name")
    username: str = Field(default="postgres", description="Database username")
    password: SecretStr = Field(
        default=SecretStr(""),
        description="Database password",
    )
    pool_max_connections: int = Field(
        default=10,
        description="Maximum connections in pool",
        ge=1,
        le=100,
    )
    command_timeout: float = Field(
        default=30.0,
        description="Seconds before a statement or connection attempt times out",
        gt=0,
    )

    @property
    def connection_string(self) -> str:
        """Generate a connection string (without password for logging)."""
        return f"postgresql://{self.username}@{self.host}:{self.port}/{self.database}"


class TenancySettings(BaseSettings):
    """Tenant isolation settings.

    Environment variables:
        CRM_TENANCY_TENANT_HEADER: Header carrying the tenant ID (default: X-Tenant-Id)
        CRM_TENANCY_MIGRATION_TABLE: Reserved migration-tracking table name
            created inside every namespace (default: crm_migrations)
        CRM_TENANCY_TENANT_POOL_MAX_CONNECTIONS: Per-tenant pool limit (default: 5)
        CRM_TENANCY_MIGRATE_REGISTRY_ON_STARTUP: Apply registry migrations
            when the API starts (default: false)
    """

    model_config = SettingsConfigDict(
        env_prefix="CRM_TENANCY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    tenant_header: str = Field(
        default="X-Tenant-Id",
        description="Request header carrying the tenant identifier",
    )
    migration_table: str = Field(
        default="crm_migrations",
        description="Migration-tracking table name (reserved in every namespace)",
        pattern=r"^[a-z_][a-z0-9_]*$",
    )
    tenant_pool_max_connections: int = Field(default=5, ge=1, le=50)
    migrate_registry_on_startup: bool = Field(
        default=False,
        description="Apply pending registry migrations during app startup",
    )


class CORSSettings(BaseSettings):
    """CORS settings for the browser frontend.

    Environment variables:
        CRM_CORS_ORIGINS: JSON list of allowed origins
            (default: ["http://localhost:5173"])
        CRM_CORS_ALLOW_CREDENTIALS: Allow cookies/credentials (default: true)
    """

    model_config = SettingsConfigDict(
        env_prefix="CRM_CORS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    origins: list[str] = Field(default_factory=lambda: ["http://localhost:5173"])
    allow_credentials: bool = Field(default=True)
    allow_methods: list[str] = Field(
        default_factory=lambda: ["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"]
    )
    expose_headers: list[str] = Field(default_factory=lambda: ["Content-Length"])


class Settings(BaseSettings):
    """Main application settings aggregating all configuration sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application metadata
    app_name: str = Field(default="Multi-Tenant CRM API", description="Application name")
    debug: bool = Field(default=False, description="Debug mode")

    @property
    def database(self) -> DatabaseSettings:
        """Get database settings."""
        return get_database_settings()

    @property
    def tenancy(self) -> TenancySettings:
        """Get tenancy settings."""
        return get_tenancy_settings()


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()


@lru_cache
def get_database_settings() -> DatabaseSettings:
    """Get cached database settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return DatabaseSettings()


@lru_cache
def get_tenancy_settings() -> TenancySettings:
    """Get cached tenancy settings."""
    return TenancySettings()


@lru_cache
def get_cors_settings() -> CORSSettings:
    """Get cached CORS settings."""
    return CORSSettings()
