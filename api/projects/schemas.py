"""
Pydantic schemas for the test-projects endpoints.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class Project(BaseModel):
    # Assigned by the database; ignored when sent by the client.
    id: int = 0
    name: str = Field(...)
