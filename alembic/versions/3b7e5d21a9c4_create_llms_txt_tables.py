"""create shops, content_settings and llm_content_cache tables

Revision ID: 3b7e5d21a9c4
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3b7e5d21a9c4"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create installation, settings and llms.txt cache tables."""
    op.create_table(
        "shops",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("shop_domain", sa.String(length=255), nullable=False),
        sa.Column("access_token", sa.String(length=255), nullable=False),
        sa.Column("plan_name", sa.String(length=50), nullable=True),
        sa.Column("subscription_id", sa.String(length=255), nullable=True),
        sa.Column("subscription_status", sa.String(length=50), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_shops_shop_domain"), "shops", ["shop_domain"], unique=True)

    op.create_table(
        "content_settings",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("shop_domain", sa.String(length=255), nullable=False),
        sa.Column("include_products", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("include_collections", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("include_articles", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("include_pages", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("auto_sync_enabled", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_content_settings_shop_domain"), "content_settings", ["shop_domain"], unique=True)

    op.create_table(
        "llm_content_cache",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("shop", sa.String(length=255), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_llm_content_cache_shop"), "llm_content_cache", ["shop"], unique=True)


def downgrade() -> None:
    """Drop llms.txt tables."""
    op.drop_index(op.f("ix_llm_content_cache_shop"), table_name="llm_content_cache")
    op.drop_table("llm_content_cache")
    op.drop_index(op.f("ix_content_settings_shop_domain"), table_name="content_settings")
    op.drop_table("content_settings")
    op.drop_index(op.f("ix_shops_shop_domain"), table_name="shops")
    op.drop_table("shops")
