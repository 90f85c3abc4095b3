"""Value objects for the tenancy domain.

Value objects are immutable descriptors that provide type safety and
domain semantics for identifiers and domain concepts.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from ulid import ULID

from tenancy.domain.exceptions import InvalidTenantNameError

SCHEMA_NAME_MAX_LENGTH = 50

_NON_ALPHANUMERIC = re.compile(r"[^a-z0-9]")
_RESERVED_SCHEMA_NAMES = frozenset({"public", "information_schema"})


def sanitize_schema_name(raw: str) -> str:
    """Turn a human tenant name into a schema identifier.

    Lower-cases, replaces every character outside ``[a-z0-9]`` with ``_``,
    strips leading/trailing underscores and truncates to 50 characters.
    Pure and total; the result may be empty.

    Example:
        >>> sanitize_schema_name("Acme Corp")
        'acme_corp'
    """
    name = _NON_ALPHANUMERIC.sub("_", raw.lower()).strip("_")
    # Truncation can expose a trailing separator
    return name[:SCHEMA_NAME_MAX_LENGTH].rstrip("_")


@dataclass(frozen=True)
class TenantId:
    """Identifier for a Tenant aggregate.

    Uses ULID for sortability and distribution-friendly generation.
    """

    value: str

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @classmethod
    def generate(cls) -> TenantId:
        """Generate a new TenantId using ULID."""
        return cls(value=str(ULID()))

    @classmethod
    def from_string(cls, value: str) -> TenantId:
        """Create TenantId from string value.

        Args:
            value: ULID string

        Returns:
            TenantId instance

        Raises:
            ValueError: If value is not a valid ULID
        """
        try:
            ULID.from_str(value)
        except ValueError as e:
            raise ValueError(f"Invalid TenantId: {value}") from e

        return cls(value=value)


@dataclass(frozen=True)
class SchemaName:
    """Name of a tenant's isolated namespace.

    Always sanitized, non-empty, at most 50 characters and never one of
    the PostgreSQL system schemas.
    """

    value: str

    def __post_init__(self) -> None:
        if not self.value:
            raise InvalidTenantNameError("Schema name cannot be empty")
        if sanitize_schema_name(self.value) != self.value:
            raise InvalidTenantNameError(f"Schema name is not sanitized: {self.value!r}")
        if self.value in _RESERVED_SCHEMA_NAMES or self.value.startswith("pg_"):
            raise InvalidTenantNameError(f"Schema name is reserved: {self.value!r}")

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @classmethod
    def from_tenant_name(cls, name: str) -> SchemaName:
        """Derive the schema name for a tenant display name.

        Raises:
            InvalidTenantNameError: If the name sanitizes to nothing usable
        """
        sanitized = sanitize_schema_name(name)
        if not sanitized:
            raise InvalidTenantNameError(
                f"Tenant name {name!r} does not contain any letters or digits"
            )
        return cls(value=sanitized)
