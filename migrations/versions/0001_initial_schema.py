"""initial schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # --- journal_entries ---
    op.create_table(
        "journal_entries",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("mood", sa.Integer(), nullable=True),
        sa.Column("gratitude_items", sa.Text(), nullable=True),
        sa.Column("used_voice", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("voice_duration_seconds", sa.Float(), nullable=True),
        sa.Column("day", sa.Date(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_journal_entries_id", "journal_entries", ["id"])
    op.create_index("ix_journal_entries_user_id", "journal_entries", ["user_id"])
    op.create_index("ix_journal_entries_day", "journal_entries", ["day"])

    # --- journal_evaluations ---
    op.create_table(
        "journal_evaluations",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("day", sa.Date(), nullable=False),
        sa.Column("maturity_score", sa.Integer(), nullable=False),
        sa.Column("mood_score", sa.Integer(), nullable=True),
        sa.Column("summary", sa.Text(), nullable=True),
        sa.Column("entry_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "day", name="uq_journal_evaluation_user_date"),
    )
    op.create_index("ix_journal_evaluations_id", "journal_evaluations", ["id"])
    op.create_index("ix_journal_evaluations_user_id", "journal_evaluations", ["user_id"])
    op.create_index("ix_journal_evaluations_day", "journal_evaluations", ["day"])

    # --- game_stats ---
    op.create_table(
        "game_stats",
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("total_entries", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("current_streak", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("longest_streak", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_points", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("level", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("last_entry_date", sa.Date(), nullable=True),
        sa.Column("average_recent_mood", sa.Float(), nullable=False, server_default="0"),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("user_id"),
    )

    # --- unlocked_achievements ---
    op.create_table(
        "unlocked_achievements",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("achievement_id", sa.String(64), nullable=False),
        sa.Column("points_earned", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("unlocked_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "achievement_id", name="uq_unlocked_achievement_user_id"),
    )
    op.create_index("ix_unlocked_achievements_id", "unlocked_achievements", ["id"])
    op.create_index("ix_unlocked_achievements_user_id", "unlocked_achievements", ["user_id"])

    # --- user_counters ---
    op.create_table(
        "user_counters",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("key", sa.String(64), nullable=False),
        sa.Column("value", sa.Integer(), nullable=False, server_default="0"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "key", name="uq_user_counter_user_key"),
    )
    op.create_index("ix_user_counters_id", "user_counters", ["id"])
    op.create_index("ix_user_counters_user_id", "user_counters", ["user_id"])


def downgrade() -> None:
    op.drop_table("user_counters")
    op.drop_table("unlocked_achievements")
    op.drop_table("game_stats")
    op.drop_table("journal_evaluations")
    op.drop_table("journal_entries")
