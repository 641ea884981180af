"""create bookings

Revision ID: 20261018_04
Revises: 20261018_03
Create Date: 2026-10-18 10:15:00
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "20261018_04"
down_revision: Union[str, None] = "20261018_03"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "bookings",
        sa.Column("id", sa.Integer(), sa.Identity(), primary_key=True, nullable=False),
        sa.Column("start_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("item_id", sa.Integer(), nullable=False),
        sa.Column("booker_id", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="WAITING"),
        sa.ForeignKeyConstraint(["item_id"], ["items.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["booker_id"], ["users.id"], ondelete="CASCADE"),
        sa.CheckConstraint("start_date < end_date", name="ck_bookings_start_before_end"),
        sa.CheckConstraint(
            "status IN ('WAITING', 'APPROVED', 'REJECTED', 'CANCELED')",
            name="ck_bookings_status",
        ),
    )
    op.create_index("ix_bookings_id", "bookings", ["id"], unique=False)
    op.create_index("ix_bookings_item_id", "bookings", ["item_id"], unique=False)
    op.create_index("ix_bookings_booker_id", "bookings", ["booker_id"], unique=False)
    op.create_index("ix_bookings_start_date", "bookings", ["start_date"], unique=False)

    op.execute("CREATE EXTENSION IF NOT EXISTS btree_gist")
    op.execute(
        """
        ALTER TABLE bookings
        ADD CONSTRAINT ex_bookings_item_period
        EXCLUDE USING gist (
            item_id WITH =,
            tstzrange(start_date, end_date, '[)') WITH &&
        )
        WHERE (status NOT IN ('REJECTED', 'CANCELED'))
        """
    )


def downgrade() -> None:
    op.execute("ALTER TABLE bookings DROP CONSTRAINT IF EXISTS ex_bookings_item_period")
    op.drop_index("ix_bookings_start_date", table_name="bookings")
    op.drop_index("ix_bookings_booker_id", table_name="bookings")
    op.drop_index("ix_bookings_item_id", table_name="bookings")
    op.drop_index("ix_bookings_id", table_name="bookings")
    op.drop_table("bookings")
