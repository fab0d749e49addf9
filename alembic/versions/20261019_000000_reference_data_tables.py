"""Reference data tables for QC Tracker

Revision ID: 20261019_000000
Revises: None
Create Date: 2026-10-19 00:00:00.000000

Creates the keyed reference-data tables served by the generic CRUD API:
- customers (natural key ``code``)
- customers_site (natural key ``code``, references ``customers.code``)

Revision format: YYYYMMDD_HHMMSS_description

"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "20261019_000000"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the reference data tables."""

    # Create customers table
    op.create_table(
        "customers",
        sa.Column("code", sa.String(5), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_by", sa.Integer(), nullable=True),
        sa.Column("updated_by", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("code"),
        sa.UniqueConstraint("name", name="uq_customers_name"),
    )

    # Create customers_site table
    op.create_table(
        "customers_site",
        sa.Column("code", sa.String(10), nullable=False),
        sa.Column("customers", sa.String(5), nullable=False),
        sa.Column("site", sa.String(5), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_by", sa.Integer(), nullable=True),
        sa.Column("updated_by", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("code"),
        sa.ForeignKeyConstraint(["customers"], ["customers.code"], name="fk_customers_site_customers"),
        sa.Index("ix_customers_site_customers", "customers"),
        sa.Index("ix_customers_site_site", "site"),
    )


def downgrade() -> None:
    """Drop the reference data tables."""
    op.drop_table("customers_site")
    op.drop_table("customers")
