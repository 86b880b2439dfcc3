"""initial schema

Revision ID: 5b1e0c7d9a20
Revises:
Create Date: 2026-10-17 09:12:40.118204

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '5b1e0c7d9a20'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "states",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("name", sa.Text, unique=True, nullable=False),
        sa.Column("abbreviation", sa.Text, unique=True, nullable=False),
    )

    op.create_table(
        "counties",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("state_id", sa.Integer, sa.ForeignKey("states.id"), nullable=False),
        sa.Column("name", sa.Text, nullable=False),
        sa.Column("status", sa.Text, server_default="available", nullable=False),
    )

    op.create_table(
        "users",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("email", sa.Text, unique=True, index=True, nullable=False),
        sa.Column("phone", sa.Text, nullable=True, index=True),
        sa.Column("first_name", sa.Text, nullable=True),
        sa.Column("last_name", sa.Text, nullable=True),
        sa.Column("password_hash", sa.Text, nullable=False),
        sa.Column("user_type", sa.Text, server_default="standard", nullable=False),
        sa.Column("credits", sa.Integer, server_default="0", nullable=False),
        sa.Column("has_used_free_trial", sa.Boolean, server_default="0", nullable=False),
        sa.Column("created_at", sa.DateTime, nullable=False),
        sa.Column("updated_at", sa.DateTime, nullable=False),
    )

    op.create_table(
        "auctions",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("external_id", sa.Text, unique=True, index=True, nullable=False),
        sa.Column("canonical_url", sa.Text, unique=True, nullable=False),
        sa.Column("url", sa.Text, server_default="", nullable=False),
        sa.Column("title", sa.Text, nullable=True),
        sa.Column("item_count", sa.Integer, nullable=True),
        sa.Column("zip_code", sa.Text, nullable=True),
        sa.Column("location", sa.Text, nullable=True),
        sa.Column("auctioneer", sa.Text, nullable=True),
        sa.Column("auction_name", sa.Text, nullable=True),
        sa.Column("auction_date", sa.DateTime, nullable=True),
        sa.Column("is_free_claim", sa.Boolean, server_default="0", nullable=False),
        sa.Column("county_id", sa.Integer, sa.ForeignKey("counties.id"), nullable=True),
        sa.Column("created_at", sa.DateTime, nullable=False),
        sa.Column("updated_at", sa.DateTime, nullable=False),
    )

    op.create_table(
        "claimed_auctions",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.id"), index=True, nullable=False),
        sa.Column("auction_id", sa.Integer, sa.ForeignKey("auctions.id"), unique=True, nullable=False),
        sa.Column("price_paid", sa.Numeric(10, 2), nullable=False),
        sa.Column("claimed_at", sa.DateTime, nullable=False),
    )

    op.create_table(
        "credit_transactions",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.id"), index=True, nullable=False),
        sa.Column("amount", sa.Integer, nullable=False),
        sa.Column("reason", sa.Text, nullable=False),
        sa.Column("auction_id", sa.Integer, sa.ForeignKey("auctions.id"), nullable=True),
        sa.Column("created_at", sa.DateTime, nullable=False),
    )


def downgrade() -> None:
    op.drop_table("credit_transactions")
    op.drop_table("claimed_auctions")
    op.drop_table("auctions")
    op.drop_table("users")
    op.drop_table("counties")
    op.drop_table("states")
