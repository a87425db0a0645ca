"""
Async database access helpers (raw SQL) using asyncpg.

This module owns the connection pool. FastAPI initializes it on startup and
closes it on shutdown (see `api/main.py`). Each request borrows exactly one
connection through the `connection` dependency.

SQL parameter style:
- asyncpg uses positional placeholders: $1, $2, $3, ...
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from typing import Any

import asyncpg

from .config import Settings
from .connection_string import connect_kwargs, is_url_form

_pool: asyncpg.Pool | None = None

logger = logging.getLogger(__name__)


async def init_pool(settings: Settings) -> None:
    global _pool
    if _pool is not None:
        return None
    # A URL that survived normalization is handed to asyncpg as a DSN as-is.
    if is_url_form(settings.connection_string):
        kwargs: dict[str, Any] = {"dsn": settings.connection_string}
        target = "DSN"
    else:
        kwargs = connect_kwargs(settings.connection_string)
        target = f"{kwargs['host']}:{kwargs['port']}/{kwargs.get('database', '')}"
    # min_size=0: startup does not need the database to be reachable.
    _pool = await asyncpg.create_pool(
        min_size=0,
        max_size=5,
        command_timeout=30,
        **kwargs,
    )
    logger.info("DB pool ready for %s", target)


async def close_pool() -> None:
    global _pool
    if _pool is None:
        return None
    await _pool.close()
    _pool = None
    logger.info("DB pool closed")


def pool() -> asyncpg.Pool:
    if _pool is None:
        raise RuntimeError("DB pool is not initialized. Call init_pool() on startup.")
    return _pool


async def connection() -> AsyncIterator[asyncpg.Connection]:
    """
    FastAPI dependency: one connection per request, released on every exit path.
    """
    async with pool().acquire() as conn:
        yield conn


def _record_to_dict(record: asyncpg.Record) -> dict[str, Any]:
    return dict(record)


def rows_affected(status: str) -> int:
    """
    Parse the row count out of a command tag, e.g. "UPDATE 1" or "INSERT 0 1".
    """
    tail = (status or "").rsplit(" ", 1)[-1]
    return int(tail) if tail.isdigit() else 0


async def fetch_one(conn: asyncpg.Connection, sql: str, *args: Any) -> dict[str, Any] | None:
    """
    Run a query and return a single row as a dict (or None).
    """
    row = await conn.fetchrow(sql, *args)
    return _record_to_dict(row) if row is not None else None


async def fetch_all(conn: asyncpg.Connection, sql: str, *args: Any) -> list[dict[str, Any]]:
    """
    Run a query and return all rows as a list of dicts.
    """
    rows = await conn.fetch(sql, *args)
    return [_record_to_dict(r) for r in rows]


async def fetch_value(conn: asyncpg.Connection, sql: str, *args: Any) -> Any:
    return await conn.fetchval(sql, *args)


async def execute(conn: asyncpg.Connection, sql: str, *args: Any) -> int:
    """
    Run a statement (INSERT/UPDATE/DELETE). Returns the number of affected rows.
    """
    status = await conn.execute(sql, *args)
    return rows_affected(status)
