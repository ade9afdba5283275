"""Initial schema — newsletter_signups, community_fits, products.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "newsletter_signups",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("uniqueness_check", sa.Text, nullable=False),
        sa.Column("form_data", sa.JSON, nullable=False),
        sa.Column("notification_email_sent", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("reply_email_sent", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("email_sent_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index(
        "ix_newsletter_signups_uniqueness_check",
        "newsletter_signups", ["uniqueness_check"], unique=True,
    )

    op.create_table(
        "community_fits",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("user_handle", sa.String(64), nullable=True),
        sa.Column("image_urls", sa.JSON, nullable=False),
        sa.Column("caption", sa.Text, nullable=False, server_default=""),
        sa.Column("approved", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("like_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        "products",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("description_rich_text", sa.Text, nullable=True),
        sa.Column("price", sa.Float, nullable=False, server_default="0"),
        sa.Column("currency", sa.String(3), nullable=False, server_default="usd"),
        sa.Column("image_url", sa.String(1000), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="draft"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )


def downgrade() -> None:
    op.drop_table("products")
    op.drop_table("community_fits")
    op.drop_index("ix_newsletter_signups_uniqueness_check", table_name="newsletter_signups")
    op.drop_table("newsletter_signups")
