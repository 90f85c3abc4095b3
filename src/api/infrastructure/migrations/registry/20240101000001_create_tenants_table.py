"""create tenants table

Revision ID: 20240101000001
Create Date: 2024-01-01 00:00:01.000000

"""

import sqlalchemy as sa
from alembic import op


revision: str = "20240101000001"


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "tenants",
        sa.Column("id", sa.String(length=26), nullable=False),  # ULID
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("schema_name", sa.String(length=63), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    # One namespace per tenant
    op.create_index("ix_tenants_schema_name", "tenants", ["schema_name"], unique=True)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("ix_tenants_schema_name", table_name="tenants")
    op.drop_table("tenants")
