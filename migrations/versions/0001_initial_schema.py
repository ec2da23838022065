"""initial schema

Revision ID: 0001
Revises:
Create Date: 2026-10-18 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # --- ENUM types ---
    cat_action_enum = sa.Enum("feed", "cuddle", "love", name="cat_action_enum")
    cat_action_enum.create(op.get_bind(), checkfirst=True)

    log_level_enum = sa.Enum("info", "warn", "error", name="log_level_enum")
    log_level_enum.create(op.get_bind(), checkfirst=True)

    # --- users ---
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("fid", sa.Integer(), nullable=False),
        sa.Column("address", sa.String(42), nullable=True),
        sa.Column("username", sa.String(128), nullable=False),
        sa.Column("pfp_url", sa.String(512), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("fid", name="uq_users_fid"),
        sa.UniqueConstraint("address", name="uq_users_address"),
    )
    op.create_index("ix_users_id", "users", ["id"])

    # --- cat_sessions ---
    op.create_table(
        "cat_sessions",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("owner_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("partner_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("name", sa.String(128), nullable=False, server_default="cattyyy"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_cat_sessions_id", "cat_sessions", ["id"])
    op.create_index("ix_cat_sessions_owner_id", "cat_sessions", ["owner_id"])
    op.create_index("ix_cat_sessions_partner_id", "cat_sessions", ["partner_id"])

    # --- cat_stats ---
    op.create_table(
        "cat_stats",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("session_id", sa.Integer(), sa.ForeignKey("cat_sessions.id"), nullable=False),
        sa.Column("love", sa.Integer(), nullable=False, server_default="50"),
        sa.Column("hunger", sa.Integer(), nullable=False, server_default="30"),
        sa.Column("happiness", sa.Integer(), nullable=False, server_default="75"),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("session_id", name="uq_cat_stats_session"),
        sa.CheckConstraint("love BETWEEN 0 AND 100", name="ck_cat_stats_love"),
        sa.CheckConstraint("hunger BETWEEN 0 AND 100", name="ck_cat_stats_hunger"),
        sa.CheckConstraint("happiness BETWEEN 0 AND 100", name="ck_cat_stats_happiness"),
    )
    op.create_index("ix_cat_stats_id", "cat_stats", ["id"])

    # --- activities ---
    op.create_table(
        "activities",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("session_id", sa.Integer(), sa.ForeignKey("cat_sessions.id"), nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("action", sa.Enum(
            "feed", "cuddle", "love", name="cat_action_enum", create_type=False,
        ), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_activities_id", "activities", ["id"])
    op.create_index("ix_activities_user_id", "activities", ["user_id"])
    op.create_index("ix_activities_session_created", "activities", ["session_id", "created_at"])

    # --- wallet_connections ---
    op.create_table(
        "wallet_connections",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("address", sa.String(42), nullable=False),
        sa.Column("chain_id", sa.Integer(), nullable=False),
        sa.Column("connector", sa.String(64), nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("address", name="uq_wallet_connections_address"),
    )
    op.create_index("ix_wallet_connections_id", "wallet_connections", ["id"])
    op.create_index("ix_wallet_connections_user_id", "wallet_connections", ["user_id"])

    # --- log_entries ---
    op.create_table(
        "log_entries",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("level", sa.Enum(
            "info", "warn", "error", name="log_level_enum", create_type=False,
        ), nullable=False),
        sa.Column("message", sa.String(512), nullable=False),
        sa.Column("context", sa.Text(), nullable=True),
        sa.Column("fid", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_log_entries_id", "log_entries", ["id"])
    op.create_index("ix_log_entries_level", "log_entries", ["level"])
    op.create_index("ix_log_entries_fid", "log_entries", ["fid"])


def downgrade() -> None:
    op.drop_table("log_entries")
    op.drop_table("wallet_connections")
    op.drop_table("activities")
    op.drop_table("cat_stats")
    op.drop_table("cat_sessions")
    op.drop_table("users")
    sa.Enum(name="log_level_enum").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="cat_action_enum").drop(op.get_bind(), checkfirst=True)
