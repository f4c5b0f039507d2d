"""add companies

Revision ID: 4e8a1c2b9d35
Revises: 9b2e4c1d7a10
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa


revision = "4e8a1c2b9d35"
down_revision = "9b2e4c1d7a10"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "companies",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("name", sa.String(length=128), nullable=False),
        sa.Column("contact_email", sa.String(length=256), nullable=True),
        sa.Column("contact_phone", sa.String(length=64), nullable=True),
        sa.Column("max_employees", sa.Integer(), nullable=False, server_default=sa.text("10")),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("1")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("version", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )
    # companies already named by users become registry entries
    op.execute(
        "INSERT INTO companies (id, name, max_employees, is_active, version) "
        "SELECT DISTINCT 'legacy-' || company_name, company_name, 10, 1, 1 "
        "FROM users WHERE company_name IS NOT NULL AND company_name <> ''"
    )


def downgrade() -> None:
    op.drop_table("companies")
