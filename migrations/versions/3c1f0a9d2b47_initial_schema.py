"""initial schema

Revision ID: 3c1f0a9d2b47
Revises:
Create Date: 2026-10-19 09:12:44.518203

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "3c1f0a9d2b47"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create accounts, profiles, swipe edges, matches and messages."""
    op.create_table(
        "account",
        sa.Column("id", sa.String(length=32), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("password_hash", sa.Text(), nullable=False),
        sa.Column("gender", sa.String(length=32), nullable=False),
        sa.Column("birthday", sa.Date(), nullable=False),
        sa.Column("age", sa.Integer(), nullable=False),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("photo_url", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_account_email", "account", ["email"], unique=True)

    op.create_table(
        "profile",
        sa.Column("owner_id", sa.String(length=32), nullable=False),
        sa.Column("age", sa.Integer(), nullable=False),
        sa.Column("location", sa.Text(), nullable=True),
        sa.Column("interests", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["owner_id"], ["account.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("owner_id"),
    )

    op.create_table(
        "profile_edge",
        sa.Column("owner_id", sa.String(length=32), nullable=False),
        sa.Column("kind", sa.String(length=16), nullable=False),
        sa.Column("target_id", sa.String(length=32), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint("owner_id <> target_id", name="ck_profile_edge_not_self"),
        sa.CheckConstraint("kind IN ('liked', 'passed', 'matched')", name="ck_profile_edge_kind"),
        sa.ForeignKeyConstraint(["owner_id"], ["profile.owner_id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("owner_id", "kind", "target_id"),
    )
    op.create_index("ix_profile_edge_target", "profile_edge", ["target_id"])

    op.create_table(
        "account_match",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user1_id", sa.String(length=32), nullable=False),
        sa.Column("user2_id", sa.String(length=32), nullable=False),
        sa.Column("active", sa.Boolean(), nullable=False),
        sa.Column("matched_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint("user1_id < user2_id", name="ck_match_canonical_order"),
        sa.ForeignKeyConstraint(["user1_id"], ["account.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user2_id"], ["account.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user1_id", "user2_id", name="uq_match_pair"),
    )
    op.create_index("ix_account_match_user1_id", "account_match", ["user1_id"])
    op.create_index("ix_account_match_user2_id", "account_match", ["user2_id"])

    op.create_table(
        "message",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("conversation_id", sa.String(length=65), nullable=False),
        sa.Column("sender_id", sa.String(length=32), nullable=False),
        sa.Column("receiver_id", sa.String(length=32), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("is_read", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["sender_id"], ["account.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["receiver_id"], ["account.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_message_conversation_created", "message", ["conversation_id", "created_at"]
    )
    op.create_index(
        "ix_message_unread", "message", ["conversation_id", "receiver_id", "is_read"]
    )


def downgrade() -> None:
    op.drop_index("ix_message_unread", table_name="message")
    op.drop_index("ix_message_conversation_created", table_name="message")
    op.drop_table("message")
    op.drop_index("ix_account_match_user2_id", table_name="account_match")
    op.drop_index("ix_account_match_user1_id", table_name="account_match")
    op.drop_table("account_match")
    op.drop_index("ix_profile_edge_target", table_name="profile_edge")
    op.drop_table("profile_edge")
    op.drop_table("profile")
    op.drop_index("ix_account_email", table_name="account")
    op.drop_table("account")
