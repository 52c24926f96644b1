"""Create state_snapshots table

Revision ID: 20261016_state_snapshots
Revises:
Create Date: 2026-10-16
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20261016_state_snapshots"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "state_snapshots",
        sa.Column("key", sa.String(length=128), nullable=False),
        sa.Column("payload", sa.Text(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("key"),
    )


def downgrade():
    op.drop_table("state_snapshots")
