"""Shared test fixtures.

Each test gets its own SQLite file so service code that commits step by
step can be exercised without a PostgreSQL server.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, Awaitable, Callable

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from myscience.auth.jwt import create_access_token
from myscience.database import close_db, get_engine, init_db
from myscience.db.base import Base
from myscience.db.models import User
from myscience.dependencies import get_event_publisher
from myscience.gamification.levels import calculate_level
from myscience.gamification.seed import seed_badges
from myscience.main import create_app


class FakeRedis:
    """Records PUBLISH calls instead of talking to a server."""

    def __init__(self) -> None:
        self.published: list[tuple[str, str]] = []

    async def publish(self, channel: str, message: str) -> int:
        self.published.append((channel, message))
        return 1


@pytest_asyncio.fixture
async def engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """Fresh SQLite database with the full schema."""
    await init_db(f"sqlite+aiosqlite:///{tmp_path / 'myscience.db'}")
    db_engine = get_engine()
    async with db_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield db_engine
    await close_db()


@pytest_asyncio.fixture
async def db_session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Get a direct database session for test setup and assertions."""
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest_asyncio.fixture
async def seeded_db(db_session: AsyncSession) -> AsyncSession:
    """DB session with the badge catalog seeded."""
    await seed_badges(db_session)
    return db_session


@pytest.fixture
def make_user(db_session: AsyncSession) -> Callable[..., Awaitable[str]]:
    """Factory: insert a user with ``total_xp`` (level derived) and return its id."""

    async def _make(total_xp: int = 0, **fields: object) -> str:
        user = User(total_xp=total_xp, level=calculate_level(total_xp), **fields)
        db_session.add(user)
        await db_session.commit()
        return user.id

    return _make


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest_asyncio.fixture
async def client(seeded_db: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client against the app, sharing the test database, without Redis."""
    app = create_app()

    async def _no_redis() -> AsyncGenerator[None, None]:
        yield None

    app.dependency_overrides[get_event_publisher] = _no_redis

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def auth_headers() -> Callable[[str], dict[str, str]]:
    """Factory: bearer header for a user id."""

    def _headers(user_id: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(user_id)}"}

    return _headers
