"""
Test-project CRUD endpoints, mounted at /api/test.
"""

from __future__ import annotations

from typing import Annotated

import asyncpg
from fastapi import APIRouter, Depends, Path, Request, Response, status

from core import db

from . import schemas, service

router = APIRouter()

# "Id" is an int4 column; larger ids would fail in the driver, not as a 404.
INT4_MIN = -(2**31)
INT4_MAX = 2**31 - 1

ProjectId = Annotated[int, Path(ge=INT4_MIN, le=INT4_MAX)]


@router.get("", response_model=list[schemas.Project])
async def list_projects(conn: asyncpg.Connection = Depends(db.connection)) -> list[schemas.Project]:
    return await service.list_projects(conn)


@router.get("/{project_id}", response_model=schemas.Project, name="get_project")
async def get_project(
    project_id: ProjectId,
    conn: asyncpg.Connection = Depends(db.connection),
) -> schemas.Project:
    return await service.get_project(conn, project_id)


@router.post("", response_model=schemas.Project, status_code=status.HTTP_201_CREATED)
async def create_project(
    payload: schemas.Project,
    request: Request,
    response: Response,
    conn: asyncpg.Connection = Depends(db.connection),
) -> schemas.Project:
    project = await service.create_project(conn, payload)
    response.headers["Location"] = str(request.url_for("get_project", project_id=project.id))
    return project


@router.put("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
async def update_project(
    project_id: ProjectId,
    payload: schemas.Project,
    conn: asyncpg.Connection = Depends(db.connection),
) -> Response:
    await service.update_project(conn, project_id, payload)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_project(
    project_id: ProjectId,
    conn: asyncpg.Connection = Depends(db.connection),
) -> Response:
    await service.delete_project(conn, project_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
