"""direct message rooms, memberships, logs and collaborators

Revision ID: 0001_direct_message_rooms
Revises:
Create Date: 2026-10-19
"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0001_direct_message_rooms"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("display_name", sa.String(100), nullable=False),
    )
    op.create_table(
        "user_relationships",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("from_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("to_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("relationship", sa.Integer(), nullable=False, server_default="0"),
        sa.UniqueConstraint("from_id", "to_id", name="uq_user_relationship_pair"),
    )
    op.create_index("ix_user_relationships_from_id", "user_relationships", ["from_id"])
    op.create_index("ix_user_relationships_to_id", "user_relationships", ["to_id"])

    op.create_table(
        "direct_message_rooms",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("start_inclusive_log_id", sa.Integer(), nullable=False, server_default="-1"),
        sa.Column("user_low_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("user_high_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        # one room per unordered pair; first-contact races fail here instead of duplicating
        sa.UniqueConstraint("user_low_id", "user_high_id", name="uq_direct_message_room_pair"),
    )
    op.create_table(
        "direct_message_room_memberships",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("room_id", sa.Integer(), sa.ForeignKey("direct_message_rooms.id"), nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("hide_log_id", sa.Integer(), nullable=False, server_default="-1"),
        sa.UniqueConstraint("room_id", "user_id", name="uq_direct_message_membership"),
    )
    op.create_index("ix_direct_message_room_memberships_room_id", "direct_message_room_memberships", ["room_id"])
    op.create_index("ix_direct_message_room_memberships_user_id", "direct_message_room_memberships", ["user_id"])

    op.create_table(
        "direct_message_logs",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("room_id", sa.Integer(), sa.ForeignKey("direct_message_rooms.id"), nullable=False),
        sa.Column("member_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("date", sa.Integer(), nullable=False),
        sa.Column("is_html", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_liked", sa.Boolean(), nullable=False, server_default=sa.false()),
        sqlite_autoincrement=True,
    )
    op.create_index("ix_direct_message_logs_room_id", "direct_message_logs", ["room_id"])
    op.create_index("ix_direct_message_logs_member_id", "direct_message_logs", ["member_id"])

    op.create_table(
        "notifications",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("created_at", sa.Integer(), nullable=False),
        sa.Column("is_read", sa.Boolean(), nullable=False, server_default=sa.false()),
    )
    op.create_index("ix_notifications_user_id", "notifications", ["user_id"])


def downgrade() -> None:
    op.drop_index("ix_notifications_user_id", table_name="notifications")
    op.drop_table("notifications")
    op.drop_index("ix_direct_message_logs_member_id", table_name="direct_message_logs")
    op.drop_index("ix_direct_message_logs_room_id", table_name="direct_message_logs")
    op.drop_table("direct_message_logs")
    op.drop_index("ix_direct_message_room_memberships_user_id", table_name="direct_message_room_memberships")
    op.drop_index("ix_direct_message_room_memberships_room_id", table_name="direct_message_room_memberships")
    op.drop_table("direct_message_room_memberships")
    op.drop_table("direct_message_rooms")
    op.drop_index("ix_user_relationships_to_id", table_name="user_relationships")
    op.drop_index("ix_user_relationships_from_id", table_name="user_relationships")
    op.drop_table("user_relationships")
    op.drop_table("users")
