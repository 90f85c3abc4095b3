"""Versioned schema migrations for the registry and tenant namespaces."""

from infrastructure.migrations.runner import MigrationRunner, tracking_table
from infrastructure.migrations.scripts import (
    MigrationScript,
    MigrationScriptSet,
    registry_scripts,
    tenant_scripts,
)

__all__ = [
    "MigrationRunner",
    "MigrationScript",
    "MigrationScriptSet",
    "registry_scripts",
    "tenant_scripts",
    "tracking_table",
]
