"""Dialect-aware INSERT ... ON CONFLICT construction."""

from __future__ import annotations

from typing import Any

from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession


def upsert_insert(db: AsyncSession, model: Any) -> Any:
    """Return an ``insert()`` for *model* that supports ``on_conflict_do_*``.

    PostgreSQL is the production store; SQLite backs local runs and tests.
    """
    if db.get_bind().dialect.name == "sqlite":
        return sqlite_insert(model)
    return pg_insert(model)
