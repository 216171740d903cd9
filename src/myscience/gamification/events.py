"""Redis pub/sub fan-out for badge and level-up moments.

The websocket layer subscribes to these channels to show the "level up"
modal and badge toasts without polling.
"""

from __future__ import annotations

import json
import logging

from myscience.gamification.schemas import GamificationUpdate

logger = logging.getLogger(__name__)

BADGE_EARNED_CHANNEL = "pubsub:badge_earned"
LEVEL_UP_CHANNEL = "pubsub:level_up"


async def publish_gamification_update(redis: object, user_id: str, update: GamificationUpdate) -> None:
    """Publish one message per new badge and one for a level-up, if any."""
    if redis is None:
        return

    for badge in update.new_badges:
        await _publish(redis, BADGE_EARNED_CHANNEL, {"user_id": user_id, **badge.model_dump()})

    if update.level_up is not None:
        await _publish(redis, LEVEL_UP_CHANNEL, {"user_id": user_id, **update.level_up.model_dump()})


async def _publish(redis: object, channel: str, payload: dict) -> None:
    try:
        await redis.publish(channel, json.dumps(payload))  # type: ignore[attr-defined]
    except Exception:
        logger.warning("Failed to publish %s event", channel, exc_info=True)
