# blaze_live/core/db.py
"""
Optional Postgres handle for team snapshots.

Everything here is a no-op until init_engine() finds DATABASE_URL, so the
live endpoints never depend on the database being reachable.
"""
import logging
import os
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Iterable
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine

logger = logging.getLogger("blaze_live.db")

ASYNC_SCHEME = "postgresql+asyncpg"
# Heroku/Railway hand out either spelling
PLAIN_SCHEMES = {"postgres", "postgresql", ASYNC_SCHEME}

_engine: AsyncEngine | None = None


def asyncpg_url(raw: str) -> str:
    """Point a postgres URL at the asyncpg driver; TLS on unless the URL says otherwise."""
    parts = urlsplit(raw.strip())
    if parts.scheme not in PLAIN_SCHEMES:
        raise ValueError(f"snapshot store needs a postgres URL, got scheme {parts.scheme!r}")

    query = dict(parse_qsl(parts.query))
    query.setdefault("ssl", os.getenv("DATABASE_SSL", "require"))
    return urlunsplit(parts._replace(scheme=ASYNC_SCHEME, query=urlencode(query)))


def get_database_url() -> str | None:
    raw = os.getenv("DATABASE_URL")
    if not raw:
        return None
    return asyncpg_url(raw)


def is_enabled() -> bool:
    return _engine is not None


async def init_engine() -> AsyncEngine | None:
    global _engine
    url = get_database_url()
    if not url:
        logger.info("DATABASE_URL not set; snapshot persistence disabled")
        return None
    _engine = create_async_engine(url, pool_pre_ping=True, pool_size=2, max_overflow=2)
    logger.info("snapshot store on %s", _engine.url.render_as_string(hide_password=True))
    return _engine


async def close_engine():
    global _engine
    if _engine is not None:
        engine, _engine = _engine, None
        await engine.dispose()


@asynccontextmanager
async def _transaction() -> AsyncIterator[AsyncConnection | None]:
    if _engine is None:
        yield None
        return
    async with _engine.begin() as conn:
        yield conn


async def exec_sql(sql: str, params: dict[str, Any] | None = None):
    async with _transaction() as conn:
        if conn is None:
            return None
        return await conn.execute(text(sql), params or {})


async def exec_many(sql: str, rows: Iterable[dict[str, Any]]):
    batch = list(rows)
    async with _transaction() as conn:
        if conn is None or not batch:
            return None
        await conn.execute(text(sql), batch)
