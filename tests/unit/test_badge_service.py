"""Badge service unit tests: award, duplicate prevention, XP integration."""

from __future__ import annotations

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from myscience.db.models import BadgeDefinition, Follow, UserBadge
from myscience.errors import UserNotFoundError
from myscience.gamification.badge_service import (
    award_badge_by_trigger,
    get_all_badges,
    get_badge_by_trigger,
    get_user_badges,
    has_badge,
)
from myscience.gamification.catalog import BadgeTrigger
from myscience.gamification.xp_service import get_xp_state


async def _badge_count(db: AsyncSession, user_id: str) -> int:
    result = await db.execute(select(func.count()).select_from(UserBadge).where(UserBadge.user_id == user_id))
    return result.scalar_one()


class TestGetBadgeByTrigger:
    """Test badge lookup."""

    @pytest.mark.asyncio
    async def test_finds_existing_badge(self, seeded_db):
        badge = await get_badge_by_trigger(seeded_db, BadgeTrigger.CONNECT_ORCID)
        assert badge is not None
        assert badge.name == "Identity Verified"
        assert badge.points == 100
        assert badge.tier == "Rare"

    @pytest.mark.asyncio
    async def test_accepts_plain_string(self, seeded_db):
        badge = await get_badge_by_trigger(seeded_db, "first_like")
        assert badge is not None
        assert badge.name == "First Like"

    @pytest.mark.asyncio
    async def test_unknown_trigger_string_raises(self, seeded_db):
        with pytest.raises(ValueError):
            await get_badge_by_trigger(seeded_db, "nonexistent_trigger")


class TestAwardBadge:
    """Test award_badge_by_trigger."""

    @pytest.mark.asyncio
    async def test_first_award_grants_points(self, seeded_db, make_user):
        user_id = await make_user()

        award = await award_badge_by_trigger(seeded_db, user_id, BadgeTrigger.CREATE_ACCOUNT)

        assert award is not None
        assert award.badge_name == "First Steps"
        assert award.points == 50
        assert award.message == "Welcome to MyScience!"
        assert await has_badge(seeded_db, user_id, award.badge_id) is True
        assert await get_xp_state(seeded_db, user_id) == (50, 0)

    @pytest.mark.asyncio
    async def test_duplicate_award_returns_none(self, seeded_db, make_user):
        user_id = await make_user()

        first = await award_badge_by_trigger(seeded_db, user_id, BadgeTrigger.CREATE_ACCOUNT)
        second = await award_badge_by_trigger(seeded_db, user_id, BadgeTrigger.CREATE_ACCOUNT)

        assert first is not None
        assert second is None
        assert await _badge_count(seeded_db, user_id) == 1
        # XP granted only once
        assert await get_xp_state(seeded_db, user_id) == (50, 0)

    @pytest.mark.asyncio
    async def test_concurrent_award_loses_gracefully(self, seeded_db, engine, make_user):
        """Another request already inserted the row: no error, no second XP grant."""
        user_id = await make_user()
        badge = await get_badge_by_trigger(seeded_db, BadgeTrigger.FIRST_SAVE)
        badge_id = badge.id

        other = async_sessionmaker(engine, expire_on_commit=False)
        async with other() as session:
            session.add(UserBadge(user_id=user_id, badge_id=badge_id))
            await session.commit()

        award = await award_badge_by_trigger(seeded_db, user_id, BadgeTrigger.FIRST_SAVE)

        assert award is None
        assert await _badge_count(seeded_db, user_id) == 1
        assert await get_xp_state(seeded_db, user_id) == (0, 0)

    @pytest.mark.asyncio
    async def test_unknown_user_writes_nothing(self, seeded_db):
        with pytest.raises(UserNotFoundError):
            await award_badge_by_trigger(seeded_db, "ghost-user", BadgeTrigger.CREATE_ACCOUNT)

        result = await seeded_db.execute(select(func.count()).select_from(UserBadge))
        assert result.scalar_one() == 0

    @pytest.mark.asyncio
    async def test_missing_catalog_row_returns_none(self, seeded_db, make_user):
        user_id = await make_user()
        badge = await get_badge_by_trigger(seeded_db, BadgeTrigger.PAPER_CITED)
        await seeded_db.delete(badge)
        await seeded_db.commit()

        assert await award_badge_by_trigger(seeded_db, user_id, BadgeTrigger.PAPER_CITED) is None
        assert await get_xp_state(seeded_db, user_id) == (0, 0)

    @pytest.mark.asyncio
    async def test_zero_point_badge(self, seeded_db, make_user):
        user_id = await make_user(total_xp=32441)

        award = await award_badge_by_trigger(seeded_db, user_id, BadgeTrigger.REACH_LEVEL_30)

        assert award is not None
        assert award.badge_name == "Immortal"
        assert await get_xp_state(seeded_db, user_id) == (32441, 30)


class TestEligibilityChecks:
    """Triggers gated by a follow-graph predicate."""

    async def _follow_n(self, db: AsyncSession, make_user, user_id: str, n: int) -> None:
        for _ in range(n):
            target_id = await make_user()
            db.add(Follow(follower_id=user_id, following_id=target_id))
        await db.commit()

    @pytest.mark.asyncio
    async def test_connector_below_threshold(self, seeded_db, make_user):
        user_id = await make_user()
        await self._follow_n(seeded_db, make_user, user_id, 4)

        assert await award_badge_by_trigger(seeded_db, user_id, BadgeTrigger.FOLLOW_5_USERS) is None
        assert await _badge_count(seeded_db, user_id) == 0

    @pytest.mark.asyncio
    async def test_connector_at_threshold(self, seeded_db, make_user):
        user_id = await make_user()
        await self._follow_n(seeded_db, make_user, user_id, 5)

        award = await award_badge_by_trigger(seeded_db, user_id, BadgeTrigger.FOLLOW_5_USERS)
        assert award is not None
        assert award.badge_name == "Connector"
        assert await get_xp_state(seeded_db, user_id) == (20, 0)

    @pytest.mark.asyncio
    async def test_influencer_needs_followers(self, seeded_db, make_user):
        user_id = await make_user()
        assert await award_badge_by_trigger(seeded_db, user_id, BadgeTrigger.REACH_1000_FOLLOWERS) is None


class TestBadgeQueries:
    """Catalog and per-user listings."""

    @pytest.mark.asyncio
    async def test_all_badges_sorted_by_name(self, seeded_db):
        badges = await get_all_badges(seeded_db)
        names = [b.name for b in badges]
        assert len(names) == 14
        assert names == sorted(names)

    @pytest.mark.asyncio
    async def test_user_badges(self, seeded_db, make_user):
        user_id = await make_user()
        await award_badge_by_trigger(seeded_db, user_id, BadgeTrigger.CREATE_ACCOUNT)
        await award_badge_by_trigger(seeded_db, user_id, BadgeTrigger.FIRST_LIKE)

        earned = await get_user_badges(seeded_db, user_id)

        assert {row["name"] for row in earned} == {"First Steps", "First Like"}
        assert earned[0]["earned_at"] >= earned[1]["earned_at"]
        assert set(earned[0]) == {"id", "badge_id", "name", "message", "points", "tier", "earned_at"}

    @pytest.mark.asyncio
    async def test_user_without_badges(self, seeded_db, make_user):
        user_id = await make_user()
        assert await get_user_badges(seeded_db, user_id) == []

    @pytest.mark.asyncio
    async def test_badges_table_untouched_by_awards(self, seeded_db, make_user):
        user_id = await make_user()
        await award_badge_by_trigger(seeded_db, user_id, BadgeTrigger.CREATE_ACCOUNT)
        result = await seeded_db.execute(select(func.count()).select_from(BadgeDefinition))
        assert result.scalar_one() == 14
