"""create_rsvps_table

Revision ID: 3f1c2a7b9d10
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""

import sqlalchemy as sa
import sqlalchemy_utils
from alembic import op

# revision identifiers, used by Alembic.
revision = "3f1c2a7b9d10"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "rsvps",
        sa.Column("uuid", sqlalchemy_utils.types.uuid.UUIDType(binary=False), nullable=False),
        sa.Column("event_slug", sa.String(length=100), nullable=False),
        sa.Column("latest_event", sa.String(length=100), nullable=True),
        sa.Column("full_name", sa.String(length=100), nullable=False),
        sa.Column("email", sa.String(length=254), nullable=False),
        sa.Column("phone", sa.String(length=40), nullable=True),
        sa.Column("major", sa.String(length=120), nullable=True),
        sa.Column("grad_year", sa.String(length=4), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("consent", sa.SmallInteger(), nullable=False, server_default="0"),
        sa.Column("ip", sa.LargeBinary(length=16), nullable=True),
        sa.Column("user_agent", sa.String(length=255), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.current_timestamp(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.current_timestamp(),
        ),
        sa.PrimaryKeyConstraint("uuid"),
    )

    op.create_index("ix_rsvps_email", "rsvps", ["email"], unique=True)
    op.create_index("ix_rsvps_latest_event", "rsvps", ["latest_event"])


def downgrade() -> None:
    op.drop_index("ix_rsvps_latest_event", table_name="rsvps")
    op.drop_index("ix_rsvps_email", table_name="rsvps")
    op.drop_table("rsvps")
