"""Badge seeding: mirror BADGE_DEFINITIONS into the badges table.

One-way sync. The in-code catalog is authoritative; rows are inserted when
missing (by name) and their mutable fields overwritten otherwise. Rows are
never deleted.
"""

from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from myscience.db.models import BadgeDefinition
from myscience.db.upsert import upsert_insert
from myscience.gamification.catalog import BADGE_DEFINITIONS, BadgeDefinitionData

logger = logging.getLogger(__name__)


async def seed_badges(
    db: AsyncSession,
    definitions: tuple[BadgeDefinitionData, ...] = BADGE_DEFINITIONS,
) -> int:
    """Upsert all badge definitions. Returns number of badges seeded."""
    seeded = 0
    for badge in definitions:
        stmt = upsert_insert(db, BadgeDefinition).values(
            name=badge.name,
            trigger=badge.trigger.value,
            points=badge.points,
            message=badge.message,
            tier=badge.tier.value,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["name"],
            set_={
                "trigger": stmt.excluded.trigger,
                "points": stmt.excluded.points,
                "message": stmt.excluded.message,
                "tier": stmt.excluded.tier,
            },
        )
        await db.execute(stmt)
        seeded += 1

    await db.commit()
    logger.info("Seeded %d badge definitions", seeded)
    return seeded
