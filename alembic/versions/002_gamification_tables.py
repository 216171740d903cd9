"""Gamification tables.

Creates badges, user_badges and daily_action_counts. The unique
constraints here are what make badge awards and daily counters safe
under concurrent requests.

Revision ID: 002_gamification_tables
Revises: 001_users_and_follows
Create Date: 2026-10-17
"""

from collections.abc import Sequence

from alembic import op

revision: str = "002_gamification_tables"
down_revision: str | None = "001_users_and_follows"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    # --- Badge catalog ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS badges (
            id VARCHAR(36) PRIMARY KEY,
            name VARCHAR(128) UNIQUE NOT NULL,
            trigger VARCHAR(64) UNIQUE NOT NULL,
            points INTEGER NOT NULL,
            message TEXT NOT NULL,
            tier VARCHAR(16) NOT NULL,
            created_at TIMESTAMPTZ DEFAULT NOW()
        )
    """)

    # --- User Badges ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS user_badges (
            id VARCHAR(36) PRIMARY KEY,
            user_id VARCHAR(36) NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            badge_id VARCHAR(36) NOT NULL REFERENCES badges(id),
            earned_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            CONSTRAINT user_badges_user_id_badge_id_key UNIQUE (user_id, badge_id)
        )
    """)
    op.execute("""
        CREATE INDEX IF NOT EXISTS idx_user_badges_user
        ON user_badges(user_id, earned_at DESC)
    """)

    # --- Daily action counters ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS daily_action_counts (
            id VARCHAR(36) PRIMARY KEY,
            user_id VARCHAR(36) NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            action_type VARCHAR(64) NOT NULL,
            action_date DATE NOT NULL,
            count INTEGER NOT NULL DEFAULT 0,
            updated_at TIMESTAMPTZ DEFAULT NOW(),
            CONSTRAINT daily_action_counts_user_action_date_key UNIQUE (user_id, action_type, action_date)
        )
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS daily_action_counts CASCADE")
    op.execute("DROP TABLE IF EXISTS user_badges CASCADE")
    op.execute("DROP TABLE IF EXISTS badges CASCADE")
