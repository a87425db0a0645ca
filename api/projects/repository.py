"""
Test-project persistence (raw SQL).

Identifiers are static and quoted once here; only values are bound.
"""

from __future__ import annotations

import asyncpg

from core import db

SELECT_ALL = 'SELECT "Id", "Name" FROM "TestProjects" ORDER BY "Id"'

SELECT_BY_ID = 'SELECT "Id", "Name" FROM "TestProjects" WHERE "Id" = $1'

INSERT = 'INSERT INTO "TestProjects" ("Name") VALUES ($1) RETURNING "Id"'

UPDATE_NAME = 'UPDATE "TestProjects" SET "Name" = $1 WHERE "Id" = $2'

DELETE_BY_ID = 'DELETE FROM "TestProjects" WHERE "Id" = $1'


async def list_projects(conn: asyncpg.Connection) -> list[dict]:
    return await db.fetch_all(conn, SELECT_ALL)


async def get_project(conn: asyncpg.Connection, project_id: int) -> dict | None:
    return await db.fetch_one(conn, SELECT_BY_ID, project_id)


async def create_project(conn: asyncpg.Connection, *, name: str) -> int:
    project_id = await db.fetch_value(conn, INSERT, name)
    if project_id is None:
        raise RuntimeError("Failed to create project.")
    return int(project_id)


async def update_project_name(conn: asyncpg.Connection, project_id: int, *, name: str) -> bool:
    return await db.execute(conn, UPDATE_NAME, name, project_id) > 0


async def delete_project(conn: asyncpg.Connection, project_id: int) -> bool:
    return await db.execute(conn, DELETE_BY_ID, project_id) > 0
