"""Project schemas."""
from uuid import UUID
from datetime import datetime
from typing import Literal

from pydantic import Field, field_validator

from app.schemas.common import APIModel

ProjectStatusValue = Literal["active", "archived", "completed"]


class ProjectCreate(APIModel):
    name: str = Field(min_length=1, max_length=255)
    description: str | None = Field(None, max_length=1000)
    status: ProjectStatusValue | None = None

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v


class ProjectUpdate(APIModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = Field(None, max_length=1000)
    status: ProjectStatusValue | None = None


class ProjectRead(APIModel):
    id: UUID
    tenant_id: UUID
    name: str
    description: str | None = None
    status: str
    created_by: UUID | None = None
    created_by_name: str | None = None
    task_count: int = 0
    completed_task_count: int = 0
    created_at: datetime
    updated_at: datetime | None = None
