"""SQLAlchemy declarative bases and shared model utilities.

Two declarative bases exist because the application stores data in two
kinds of namespace:

- ``Base`` maps the shared registry tables living in the ``public`` schema.
- ``TenantBase`` maps the per-tenant tables. Its tables carry no schema
  qualifier; the tenant-scoped engine's ``search_path`` decides which
  tenant namespace a statement touches.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import DateTime, MetaData
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def _utc_now() -> datetime:
    """Generate UTC timestamp for database defaults.

    Uses a named function instead of lambda for SQLAlchemy 2.0 compatibility.
    Ensures proper INSERT-time evaluation.
    """
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Base class for ORM models stored in the shared registry schema."""

    type_annotation_map: dict[type, Any] = {}


class TenantBase(DeclarativeBase):
    """Base class for ORM models stored inside a tenant namespace.

    Uses its own MetaData so registry and tenant tables are never created,
    reflected or dropped together.
    """

    metadata = MetaData()
    type_annotation_map: dict[type, Any] = {}


class CreatedAtMixin:
    """Mixin providing a created_at timestamp column for append-only rows."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        insert_default=_utc_now,  # Evaluated at INSERT time
        nullable=False,
    )


class TimestampMixin(CreatedAtMixin):
    """Mixin providing created_at and updated_at timestamp columns.

    Automatically sets created_at on insert and updates updated_at on modification.
    Uses timezone-aware UTC timestamps with Python-side default generation.
    """

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        insert_default=_utc_now,  # Evaluated at INSERT time
        onupdate=_utc_now,  # Evaluated at UPDATE time
        nullable=False,
    )
