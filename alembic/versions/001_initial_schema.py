"""Initial schema: pages and page_translations tables.

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""

from collections.abc import Sequence

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

revision: str = "001"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "pages",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("title", sa.Text, nullable=False),
        sa.Column("slug", sa.Text, nullable=False),
        sa.Column("parent_id", sa.Integer, sa.ForeignKey("public.pages.id", ondelete="RESTRICT"), nullable=True),
        sa.Column("sort_order", sa.Integer, nullable=False, server_default="0"),
        sa.Column("is_draft", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("show_on_menu", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("full_path", sa.Text, nullable=False, server_default=""),
        sa.UniqueConstraint("slug", name="pages_slug_key"),
        schema="public",
    )
    op.create_index("pages_parent_id_idx", "pages", ["parent_id"], schema="public")
    op.create_index(
        "pages_full_path_idx",
        "pages",
        ["full_path"],
        schema="public",
        postgresql_ops={"full_path": "text_pattern_ops"},
    )
    op.create_table(
        "page_translations",
        sa.Column("page_id", sa.Integer, sa.ForeignKey("public.pages.id", ondelete="CASCADE"), nullable=False),
        sa.Column("locale", sa.Text, nullable=False),
        sa.Column("title", sa.Text, nullable=False),
        sa.Column("content", postgresql.JSONB, nullable=True),
        sa.Column("published", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.PrimaryKeyConstraint("page_id", "locale"),
        schema="public",
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table("page_translations", schema="public")
    op.drop_index("pages_full_path_idx", table_name="pages", schema="public")
    op.drop_index("pages_parent_id_idx", table_name="pages", schema="public")
    op.drop_table("pages", schema="public")
