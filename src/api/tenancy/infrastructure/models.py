"""SQLAlchemy ORM model for the tenant registry.

The ``tenants`` table lives in the shared ``public`` schema and maps each
tenant to the namespace holding its data.
"""

from sqlalchemy import Index, String
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, TimestampMixin


class TenantModel(Base, TimestampMixin):
    """ORM model for tenants table.

    Note: schema_name is globally unique; the unique index is the
    authoritative guard against two tenants sharing a namespace.
    """

    __tablename__ = "tenants"
    __table_args__ = (
        Index("ix_tenants_schema_name", "schema_name", unique=True),
    )

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    schema_name: Mapped[str] = mapped_column(String(63), nullable=False)

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<TenantModel(id={self.id}, schema_name={self.schema_name})>"
