"""Gamification event fan-out tests."""

from __future__ import annotations

import json

import pytest

from myscience.gamification.events import BADGE_EARNED_CHANNEL, LEVEL_UP_CHANNEL, publish_gamification_update
from myscience.gamification.schemas import BadgeAward, GamificationUpdate, LevelUp


class BrokenRedis:
    async def publish(self, channel: str, message: str) -> int:
        raise ConnectionError("redis is down")


def _update(with_level_up: bool = True) -> GamificationUpdate:
    return GamificationUpdate(
        new_badges=[
            BadgeAward(badge_id="b1", badge_name="First Like", message="m", points=10, tier="Common"),
            BadgeAward(badge_id="b2", badge_name="First Save", message="m", points=30, tier="Common"),
        ],
        level_up=LevelUp(old_level=0, new_level=1, symbol="s", label="Observer", tagline="t")
        if with_level_up
        else None,
        total_xp=140,
        current_level=1,
    )


class TestPublish:
    @pytest.mark.asyncio
    async def test_one_message_per_badge_then_level_up(self, fake_redis):
        await publish_gamification_update(fake_redis, "u1", _update())

        assert [c for c, _ in fake_redis.published] == [BADGE_EARNED_CHANNEL, BADGE_EARNED_CHANNEL, LEVEL_UP_CHANNEL]
        assert json.loads(fake_redis.published[1][1])["badge_name"] == "First Save"
        assert json.loads(fake_redis.published[2][1])["user_id"] == "u1"

    @pytest.mark.asyncio
    async def test_no_level_up(self, fake_redis):
        await publish_gamification_update(fake_redis, "u1", _update(with_level_up=False))
        assert len(fake_redis.published) == 2

    @pytest.mark.asyncio
    async def test_without_redis(self):
        await publish_gamification_update(None, "u1", _update())

    @pytest.mark.asyncio
    async def test_publish_failure_is_logged_not_raised(self, caplog):
        await publish_gamification_update(BrokenRedis(), "u1", _update())
        assert "Failed to publish" in caplog.text
