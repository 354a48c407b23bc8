"""create weddings

Revision ID: 4f2a9c1e7b30
Revises: 
Create Date: 2026-10-19 10:12:44.301877

"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '4f2a9c1e7b30'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create 'weddings' table (one row per wedding, guest lists as JSON)."""
    op.create_table(
        "weddings",
        sa.Column("id", sa.String(length=64), nullable=False),
        sa.Column("couple_names", sa.String(length=200), nullable=False),
        sa.Column("rsvp_deadline", sa.DateTime(), nullable=True),
        sa.Column("guest_name_list", sa.JSON(), nullable=False),
        sa.Column("legacy_rsvps", sa.JSON(), nullable=True),
        sa.Column("guest_list", sa.JSON(), nullable=True),
        sa.Column("guest_list_version", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_weddings_id"), "weddings", ["id"], unique=False)


def downgrade() -> None:
    """Drop 'weddings' table."""
    op.drop_index(op.f("ix_weddings_id"), table_name="weddings")
    op.drop_table("weddings")
