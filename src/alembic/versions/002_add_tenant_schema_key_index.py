"""Add unique index on the tenant schema key

Revision ID: 002
Revises: 001
Create Date: 2026-10-16 00:00:00.000000

Tenant ids that differ only in case or hyphens ("Acme" and "acme", "a-b" and
"ab") resolve to the same tenant schema. A functional unique index on the
lowercased, hyphen-free id keeps two such tenants out of the directory.
"""

from collections.abc import Sequence

from alembic import op

revision: str = "002"
down_revision: str | None = "001"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    # Same expression as validators.tenant_schema_key
    op.execute(
        """
        CREATE UNIQUE INDEX ix_tenants_schema_key
        ON public.tenants (LOWER(REPLACE(id, '-', '')))
        """
    )


def downgrade() -> None:
    op.drop_index("ix_tenants_schema_key", table_name="tenants", schema="public")
