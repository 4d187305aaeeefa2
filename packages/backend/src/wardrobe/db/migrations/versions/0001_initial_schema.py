"""Initial schema: users and clothing items

Creates the users table (with the deferred refresh-token fingerprint
slot) and the clothing_items table with its image-pair check.

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19 09:00:00.000000
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.String(100), nullable=True),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("password_hash", sa.String(255), nullable=True),
        sa.Column("refresh_token_hash", sa.String(64), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_users_refresh_token_hash", "users", ["refresh_token_hash"])

    op.create_table(
        "clothing_items",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "owner_id",
            sa.Uuid(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("category", sa.String(20), nullable=False),
        sa.Column("color", sa.String(50), nullable=False),
        sa.Column("brand", sa.String(100), nullable=True),
        sa.Column("image_url", sa.Text(), nullable=True),
        sa.Column("image_asset_id", sa.String(255), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint(
            "(image_url IS NULL AND image_asset_id IS NULL) OR "
            "(image_url IS NOT NULL AND image_asset_id IS NOT NULL)",
            name="ck_clothing_items_image_pair",
        ),
    )
    op.create_index("idx_clothing_items_owner", "clothing_items", ["owner_id"])


def downgrade() -> None:
    op.drop_index("idx_clothing_items_owner", table_name="clothing_items")
    op.drop_table("clothing_items")
    op.drop_index("ix_users_refresh_token_hash", table_name="users")
    op.drop_table("users")
