"""Task schemas."""

from datetime import datetime

from pydantic import Field, field_validator

from src.models.enums import TaskStatus
from src.models.task import TITLE_MAX_LENGTH
from src.schemas.base import APIModel


class TaskCreate(APIModel):
    """Create a new task."""

    title: str = Field(..., min_length=1, max_length=TITLE_MAX_LENGTH)
    description: str | None = None
    total_minutes: int = Field(0, ge=0)
    # Only honored for admins
    user_id: int | None = None


class TaskUpdate(APIModel):
    """Partial task update. Fields left out of the request are not touched."""

    title: str | None = Field(None, min_length=1, max_length=TITLE_MAX_LENGTH)
    description: str | None = None
    status: TaskStatus | None = None
    total_minutes: int | None = Field(None, ge=0)
    # Only honored for admins
    user_id: int | None = None

    @field_validator("title", "status", "total_minutes", "user_id")
    @classmethod
    def reject_explicit_null(cls, value):
        if value is None:
            raise ValueError("Field may not be null")
        return value


class TaskStatusUpdate(APIModel):
    """Explicit status change."""

    status: TaskStatus


class TaskOwner(APIModel):
    """Owner summary embedded in task responses."""

    id: int
    email: str


class TaskResponse(APIModel):
    """Task response."""

    id: int
    title: str
    description: str | None
    status: TaskStatus
    total_minutes: int
    user_id: int
    created_at: datetime
    updated_at: datetime
    user: TaskOwner


class TaskEnvelope(APIModel):
    """Single task wrapper."""

    task: TaskResponse


class TaskListResponse(APIModel):
    """Task list wrapper."""

    tasks: list[TaskResponse]
