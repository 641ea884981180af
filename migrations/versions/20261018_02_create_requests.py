"""create item requests

Revision ID: 20261018_02
Revises: 20261018_01
Create Date: 2026-10-18 10:05:00
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "20261018_02"
down_revision: Union[str, None] = "20261018_01"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "requests",
        sa.Column("id", sa.Integer(), sa.Identity(), primary_key=True, nullable=False),
        sa.Column("description", sa.String(length=1000), nullable=False),
        sa.Column("requester_id", sa.Integer(), nullable=False),
        sa.Column("created", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["requester_id"], ["users.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_requests_id", "requests", ["id"], unique=False)
    op.create_index("ix_requests_requester_id", "requests", ["requester_id"], unique=False)
    op.create_index("ix_requests_created", "requests", ["created"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_requests_created", table_name="requests")
    op.drop_index("ix_requests_requester_id", table_name="requests")
    op.drop_index("ix_requests_id", table_name="requests")
    op.drop_table("requests")
