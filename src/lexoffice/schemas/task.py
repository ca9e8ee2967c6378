"""Task schemas for API request/response."""

from datetime import date, datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from src.lexoffice.models.enums import TaskPriority, TaskStatus
from src.lexoffice.schemas.common import CamelModel, require_text

# Select boxes send this literal when no project is chosen
NO_PROJECT = "none"


class TaskCreate(CamelModel):
    """Schema for creating a task. ``assigned_to`` is a single user id."""

    title: str = Field(min_length=1, max_length=255)
    assigned_to: str = Field(min_length=1)
    description: str | None = None
    project_id: str | None = None
    project_title: str | None = None
    client_id: str | None = None
    client_name: str | None = None
    status: TaskStatus = TaskStatus.NOT_STARTED
    priority: TaskPriority = TaskPriority.MEDIUM
    start_date: date | None = None
    end_date: date | None = None
    estimated_hours: Decimal | None = Field(default=None, ge=0)
    actual_hours: Decimal | None = Field(default=None, ge=0)
    progress: int = Field(default=0, ge=0, le=100)
    tags: list[str] = Field(default_factory=list)
    notes: str | None = None
    subtasks: list[Any] = Field(default_factory=list)

    @field_validator("title", "assigned_to")
    @classmethod
    def validate_text(cls, v: str, info: ValidationInfo) -> str:
        return require_text(v, info.field_name)

    @field_validator("project_id")
    @classmethod
    def ignore_no_project(cls, v: str | None) -> str | None:
        if v is None or v.strip() in ("", NO_PROJECT):
            return None
        return v


class TaskUpdate(CamelModel):
    """Schema for updating a task. Only the fields sent are written."""

    title: str | None = Field(default=None, min_length=1, max_length=255)
    assigned_to: str | None = Field(default=None, min_length=1)
    description: str | None = None
    project_id: str | None = None
    project_title: str | None = None
    client_id: str | None = None
    client_name: str | None = None
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    start_date: date | None = None
    end_date: date | None = None
    estimated_hours: Decimal | None = Field(default=None, ge=0)
    actual_hours: Decimal | None = Field(default=None, ge=0)
    progress: int | None = Field(default=None, ge=0, le=100)
    tags: list[str] | None = None
    notes: str | None = None
    subtasks: list[Any] | None = None

    @field_validator("title", "assigned_to")
    @classmethod
    def validate_text(cls, v: str | None, info: ValidationInfo) -> str | None:
        if v is not None:
            return require_text(v, info.field_name)
        return v


class TaskRead(BaseModel):
    """Schema for reading a task."""

    id: str
    title: str
    description: str | None = None
    project_id: str | None = None
    project_title: str | None = None
    client_id: str | None = None
    client_name: str | None = None
    assigned_to: str | None = None
    status: str | None = None
    priority: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    estimated_hours: float | None = None
    actual_hours: float | None = None
    progress: int | None = None
    tags: list[Any] | None = None
    notes: str | None = None
    subtasks: list[Any] | None = None
    created_by: str
    created_at: datetime | None = None
    updated_at: datetime | None = None
    is_active: bool = True


class TaskStats(CamelModel):
    total: int = 0
    completed: int = 0
    in_progress: int = 0
    not_started: int = 0
    on_hold: int = 0
    urgent: int = 0
    overdue: int = 0
