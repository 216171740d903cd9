"""FastAPI application factory."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from myscience.config import get_settings
from myscience.database import close_db, init_db, session_scope
from myscience.gamification.router import router as gamification_router
from myscience.gamification.seed import seed_badges
from myscience.health.router import router as health_router
from myscience.middleware import setup_middleware
from myscience.redis_client import close_redis, init_redis
from myscience.social.router import router as social_router
from myscience.users.router import router as users_router

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup and shutdown lifecycle."""
    settings = get_settings()
    await init_db(settings.database_url)
    if settings.publish_events:
        await init_redis(settings.redis_url)

    # Badge catalog must be in sync before the first gamified request
    if settings.seed_badges_on_startup:
        async with session_scope() as db:
            await seed_badges(db)
        logger.info("badge_catalog_seeded")

    yield

    await close_db()
    await close_redis()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="MyScience API",
        description="XP, levels and badges for the MyScience research-discovery app",
        version=settings.app_version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    setup_middleware(app, settings)
    app.include_router(health_router, tags=["Health"])
    app.include_router(gamification_router)
    app.include_router(users_router)
    app.include_router(social_router)

    return app


app = create_app()
