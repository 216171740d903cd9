"""Health, readiness, and version endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from myscience.config import get_settings
from myscience.database import get_session
from myscience.db.models import BadgeDefinition
from myscience.gamification.catalog import BADGE_DEFINITIONS
from myscience.redis_client import get_redis

router = APIRouter()


@router.get("/health")
async def health() -> dict[str, str]:
    """Liveness probe: returns 200 if the process is alive."""
    return {"status": "healthy"}


@router.get("/ready")
async def readiness(
    db: AsyncSession = Depends(get_session),  # noqa: B008
) -> dict[str, object]:
    """Readiness probe.

    The database must answer and hold the full badge catalog; an unseeded
    catalog makes every award silently return nothing. Redis is checked
    only when event publishing is enabled.
    """
    checks: dict[str, object] = {}

    try:
        result = await db.execute(select(func.count()).select_from(BadgeDefinition))
        seeded = result.scalar_one()
        checks["database"] = "ok"
        expected = len(BADGE_DEFINITIONS)
        checks["badge_catalog"] = "ok" if seeded >= expected else f"missing: {seeded}/{expected}"
    except Exception as exc:
        checks["database"] = f"error: {exc}"

    if get_settings().publish_events:
        try:
            await get_redis().ping()
            checks["redis"] = "ok"
        except Exception as exc:
            checks["redis"] = f"error: {exc}"
    else:
        checks["redis"] = "disabled"

    all_ok = all(v in ("ok", "disabled") for v in checks.values())
    return {"status": "ready" if all_ok else "degraded", "checks": checks}


@router.get("/version")
async def version() -> dict[str, str]:
    settings = get_settings()
    return {
        "version": settings.app_version,
        "environment": settings.environment,
    }
