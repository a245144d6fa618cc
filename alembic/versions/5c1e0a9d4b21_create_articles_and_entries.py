"""create articles, field schema and entries

Revision ID: 5c1e0a9d4b21
Revises:
Create Date: 2026-10-19 09:12:04.118230
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "5c1e0a9d4b21"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "articles",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("organization", sa.String(200), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="draft"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.CheckConstraint("status IN ('draft','active','archived')", name="ck_articles_status"),
    )
    op.create_index("articles_name_idx", "articles", ["name"])
    op.create_index("articles_organization_idx", "articles", ["organization"])
    op.create_index("articles_status_idx", "articles", ["status"])
    op.create_index("articles_created_at_idx", "articles", ["created_at"])

    op.create_table(
        "field_definitions",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("article_id", sa.Integer(), sa.ForeignKey("articles.id", ondelete="CASCADE"), nullable=False),
        sa.Column("key", sa.String(120), nullable=False),
        sa.Column("label", sa.String(200), nullable=False),
        sa.Column("field_type", sa.String(20), nullable=False),
        sa.Column("scope", sa.String(20), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.CheckConstraint(
            "field_type IN ('text','number','boolean','select')",
            name="ck_field_definitions_type",
        ),
        sa.CheckConstraint("scope IN ('attribute','shop_floor')", name="ck_field_definitions_scope"),
        sa.UniqueConstraint("article_id", "key", name="uq_field_definitions_article_key"),
    )
    op.create_index("field_definitions_article_id_idx", "field_definitions", ["article_id"])

    op.create_table(
        "field_validations",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "field_definition_id",
            sa.Integer(),
            sa.ForeignKey("field_definitions.id", ondelete="CASCADE"),
            nullable=False,
            unique=True,
        ),
        sa.Column("required", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("min", sa.Numeric(), nullable=True),
        sa.Column("max", sa.Numeric(), nullable=True),
        sa.Column("options", sa.JSON(), nullable=True),
    )

    op.create_table(
        "entries",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("article_id", sa.Integer(), sa.ForeignKey("articles.id", ondelete="CASCADE"), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("status", sa.String(20), nullable=False, server_default="PREPARATION"),
        sa.Column("priority", sa.String(10), nullable=False, server_default="normal"),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.CheckConstraint("quantity >= 1", name="ck_entries_quantity_positive"),
        sa.CheckConstraint(
            "status IN ('PREPARATION','IN PRODUCTION','READY')",
            name="ck_entries_status",
        ),
    )
    op.create_index("entries_article_id_idx", "entries", ["article_id"])

    op.create_table(
        "entry_values",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("entry_id", sa.Integer(), sa.ForeignKey("entries.id", ondelete="CASCADE"), nullable=False),
        sa.Column(
            "field_definition_id",
            sa.Integer(),
            sa.ForeignKey("field_definitions.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("value_text", sa.Text(), nullable=True),
        sa.Column("value_number", sa.Numeric(), nullable=True),
        sa.Column("value_boolean", sa.Boolean(), nullable=True),
    )
    op.create_index("entry_values_entry_id_idx", "entry_values", ["entry_id"])
    op.create_index("entry_values_field_definition_id_idx", "entry_values", ["field_definition_id"])


def downgrade() -> None:
    op.drop_table("entry_values")
    op.drop_table("entries")
    op.drop_table("field_validations")
    op.drop_table("field_definitions")
    op.drop_table("articles")
