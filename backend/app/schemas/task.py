"""Task schemas."""
from uuid import UUID
from datetime import date, datetime
from typing import Literal

from pydantic import Field, field_validator

from app.schemas.common import APIModel

TaskStatusValue = Literal["todo", "in_progress", "completed"]
PriorityValue = Literal["low", "medium", "high"]


class TaskCreate(APIModel):
    title: str = Field(min_length=1, max_length=255)
    description: str | None = Field(None, max_length=1000)
    priority: PriorityValue = "medium"
    assigned_to: UUID | None = None
    due_date: date | None = None

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, v):
        return v.strip() if isinstance(v, str) else v


class TaskUpdate(APIModel):
    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = Field(None, max_length=1000)
    status: TaskStatusValue | None = None
    priority: PriorityValue | None = None
    assigned_to: UUID | None = None
    due_date: date | None = None


class TaskStatusUpdate(APIModel):
    status: TaskStatusValue


class TaskRead(APIModel):
    id: UUID
    project_id: UUID
    tenant_id: UUID
    title: str
    description: str | None = None
    status: str
    priority: str
    assigned_to: UUID | None = None
    due_date: date | None = None
    created_at: datetime
    updated_at: datetime | None = None
