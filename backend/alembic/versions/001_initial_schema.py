"""Initial schema: facilities, sub_courts, notification_requests, user_accounts

Revision ID: 001
Revises:
Create Date: (run alembic upgrade head)

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

_json = sa.JSON().with_variant(postgresql.JSONB(), "postgresql")


def upgrade() -> None:
    op.create_table(
        "facilities",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("type", sa.String(64), nullable=True),
        sa.Column("location", sa.String(255), nullable=True),
        sa.Column("address", sa.String(512), nullable=True),
        sa.Column("latitude", sa.Float(), nullable=True),
        sa.Column("longitude", sa.Float(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("amenities", _json, nullable=False, server_default="[]"),
        sa.Column("images", _json, nullable=False, server_default="[]"),
        sa.Column("owner_id", sa.String(128), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_facilities_owner_id", "facilities", ["owner_id"], unique=False)

    op.create_table(
        "sub_courts",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column(
            "facility_id",
            sa.String(64),
            sa.ForeignKey("facilities.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("surface", sa.String(64), nullable=True),
        sa.Column("status", sa.String(16), nullable=False, server_default="in-use"),
        sa.Column("is_configured", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("last_updated_status", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_sub_courts_facility_id", "sub_courts", ["facility_id"], unique=False)

    op.create_table(
        "notification_requests",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("court_id", sa.String(64), nullable=True),
        sa.Column("court_name", sa.String(255), nullable=True),
        sa.Column("user_id", sa.String(128), nullable=False),
        sa.Column("user_email", sa.String(320), nullable=True),
        sa.Column("requested_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_notification_requests_court_id", "notification_requests", ["court_id"], unique=False)
    op.create_index("ix_notification_requests_user_id", "notification_requests", ["user_id"], unique=False)

    op.create_table(
        "user_accounts",
        sa.Column("id", sa.String(128), primary_key=True),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("display_name", sa.String(255), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_user_accounts_email", "user_accounts", ["email"], unique=True)


def downgrade() -> None:
    op.drop_table("user_accounts")
    op.drop_table("notification_requests")
    op.drop_table("sub_courts")
    op.drop_table("facilities")
