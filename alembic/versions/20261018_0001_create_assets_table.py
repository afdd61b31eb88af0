"""Create assets table.

Revision ID: 0001
Revises: None
Create Date: 2026-10-18
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the asset metadata table with owner and visibility indexes."""
    op.create_table(
        "assets",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("display_name", sa.String(255), nullable=False),
        sa.Column("mime_type", sa.String(100), nullable=False),
        sa.Column("size", sa.Integer(), nullable=False),
        sa.Column("storage_path", sa.String(512), nullable=False),
        sa.Column("public_url", sa.String(1024), nullable=True),
        sa.Column("owner_id", sa.String(255), nullable=True),
        sa.Column(
            "visibility",
            sa.Enum("private", "public", name="assetvisibility"),
            nullable=False,
            server_default="private",
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_assets_owner_id", "assets", ["owner_id"])
    op.create_index("ix_assets_visibility", "assets", ["visibility"])


def downgrade() -> None:
    """Drop the assets table and its enum type."""
    op.drop_index("ix_assets_visibility", table_name="assets")
    op.drop_index("ix_assets_owner_id", table_name="assets")
    op.drop_table("assets")

    # Drop the enum type (PostgreSQL only; SQLite no-ops)
    sa.Enum(name="assetvisibility").drop(op.get_bind(), checkfirst=True)
