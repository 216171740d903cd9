"""Users and follow graph.

Revision ID: 001_users_and_follows
Revises: None
Create Date: 2026-10-17
"""

from collections.abc import Sequence

from alembic import op

revision: str = "001_users_and_follows"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    # --- Users ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS users (
            id VARCHAR(36) PRIMARY KEY,
            email VARCHAR(320) UNIQUE,
            first_name VARCHAR(128),
            last_name VARCHAR(128),
            profile_image_url TEXT,
            orcid VARCHAR(19),
            bio TEXT,
            subject_areas JSON,
            total_xp INTEGER NOT NULL DEFAULT 0 CHECK (total_xp >= 0),
            level INTEGER NOT NULL DEFAULT 0 CHECK (level >= 0),
            created_at TIMESTAMPTZ DEFAULT NOW(),
            updated_at TIMESTAMPTZ DEFAULT NOW()
        )
    """)

    # --- Follows ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS follows (
            id VARCHAR(36) PRIMARY KEY,
            follower_id VARCHAR(36) NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            following_id VARCHAR(36) NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            created_at TIMESTAMPTZ DEFAULT NOW(),
            CONSTRAINT follows_follower_following_key UNIQUE (follower_id, following_id),
            CONSTRAINT follows_no_self_follow CHECK (follower_id <> following_id)
        )
    """)
    op.execute("""
        CREATE INDEX IF NOT EXISTS idx_follows_following
        ON follows(following_id)
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS follows CASCADE")
    op.execute("DROP TABLE IF EXISTS users CASCADE")
