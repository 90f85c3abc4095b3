"""Database infrastructure - shared connection and namespace primitives."""

from infrastructure.database.exceptions import (
    DatabaseError,
    InvalidNamespaceNameError,
    MigrationFailureError,
    NamespaceAlreadyExistsError,
    StorageUnavailableError,
    translate_storage_errors,
)

__all__ = [
    "DatabaseError",
    "InvalidNamespaceNameError",
    "MigrationFailureError",
    "NamespaceAlreadyExistsError",
    "StorageUnavailableError",
    "translate_storage_errors",
]
