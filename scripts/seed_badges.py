"""
Seed script to sync the badge catalog into the database.

Safe to run repeatedly: badges are upserted by name and existing rows are
updated to match the in-code catalog.

Usage:
    MYSCIENCE_DATABASE_URL=postgresql+asyncpg://... python scripts/seed_badges.py
"""

import asyncio

from myscience.config import get_settings
from myscience.database import close_db, init_db, session_scope
from myscience.gamification.seed import seed_badges
from myscience.middleware.logging import setup_logging


async def main() -> None:
    settings = get_settings()
    setup_logging(settings)
    await init_db(settings.database_url)
    try:
        async with session_scope() as db:
            count = await seed_badges(db)
        print(f"Seeded {count} badges")
    finally:
        await close_db()


if __name__ == "__main__":
    asyncio.run(main())
