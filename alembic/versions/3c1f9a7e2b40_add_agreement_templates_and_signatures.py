"""add agreement_templates and investor_signatures tables

Revision ID: 3c1f9a7e2b40
Revises:
Create Date: 2026-10-18 00:00:00.000000
"""

from collections.abc import Sequence

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3c1f9a7e2b40"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

agreement_template_type = sa.Enum(
    "co_ownership",
    "power_of_attorney",
    "jop_declaration",
    name="agreement_template_type",
)


def upgrade() -> None:
    op.create_table(
        "agreement_templates",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("template_type", agreement_template_type, nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("content_hash", sa.String(length=64), nullable=False),
        sa.Column("content_arabic", sa.Text(), nullable=False),
        sa.Column("content_hash_arabic", sa.String(length=64), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("template_pdf_path", sa.String(length=500), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_agreement_templates_type_active",
        "agreement_templates",
        ["template_type", "is_active"],
        unique=False,
    )
    op.create_table(
        "investor_signatures",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("investor_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("template_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("property_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("template_version", sa.Integer(), nullable=False),
        sa.Column("signature_hash", sa.String(length=64), nullable=False),
        sa.Column("consent_given", sa.Boolean(), nullable=False),
        sa.Column("ip_address", sa.String(length=45), nullable=True),
        sa.Column("user_agent", sa.String(length=500), nullable=True),
        sa.Column("signed_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["template_id"], ["agreement_templates.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "investor_id",
            "template_id",
            "property_id",
            name="uq_investor_signatures_investor_template_property",
        ),
    )
    op.create_index(
        "ix_investor_signatures_property",
        "investor_signatures",
        ["property_id"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index("ix_investor_signatures_property", table_name="investor_signatures")
    op.drop_table("investor_signatures")
    op.drop_index("ix_agreement_templates_type_active", table_name="agreement_templates")
    op.drop_table("agreement_templates")
    agreement_template_type.drop(op.get_bind(), checkfirst=True)
