"""
Test-project business logic.

The only domain rule is existence: get/update/delete on an absent id is a 404.
"""

from __future__ import annotations

import logging

import asyncpg
from fastapi import HTTPException, status

from . import repository, schemas

logger = logging.getLogger(__name__)

NOT_FOUND_DETAIL = "Project not found."


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND_DETAIL)


def _to_project(row: dict) -> schemas.Project:
    return schemas.Project(id=int(row["Id"]), name=str(row["Name"]))


async def list_projects(conn: asyncpg.Connection) -> list[schemas.Project]:
    rows = await repository.list_projects(conn)
    return [_to_project(row) for row in rows]


async def get_project(conn: asyncpg.Connection, project_id: int) -> schemas.Project:
    row = await repository.get_project(conn, project_id)
    if row is None:
        raise _not_found()
    return _to_project(row)


async def create_project(conn: asyncpg.Connection, payload: schemas.Project) -> schemas.Project:
    project_id = await repository.create_project(conn, name=payload.name)
    logger.info("Created project %s", project_id)
    return schemas.Project(id=project_id, name=payload.name)


async def update_project(conn: asyncpg.Connection, project_id: int, payload: schemas.Project) -> None:
    updated = await repository.update_project_name(conn, project_id, name=payload.name)
    if not updated:
        raise _not_found()
    logger.info("Updated project %s", project_id)


async def delete_project(conn: asyncpg.Connection, project_id: int) -> None:
    deleted = await repository.delete_project(conn, project_id)
    if not deleted:
        raise _not_found()
    logger.info("Deleted project %s", project_id)
