"""Project (case/deal pipeline) schemas for API request/response."""

from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from src.lexoffice.models.enums import Currency, ProjectPriority, ProjectStatus
from src.lexoffice.schemas.common import CamelModel, as_utc, require_text


class ProjectCreate(CamelModel):
    """Schema for creating a project.

    Dates accept 'YYYY-MM-DD' or full ISO 8601; naive values are taken as UTC.
    """

    title: str = Field(min_length=1, max_length=255)
    client_name: str = Field(min_length=1, max_length=255)
    start_date: datetime
    due_date: datetime
    description: str | None = None
    client_id: str | None = None
    organization: str | None = Field(default=None, max_length=255)
    address: str | None = Field(default=None, max_length=255)
    budget: Decimal = Field(default=Decimal("0"), ge=0)
    currency: Currency = Currency.BRL
    status: ProjectStatus = ProjectStatus.CONTACTED
    priority: ProjectPriority = ProjectPriority.MEDIUM
    progress: int = Field(default=0, ge=0, le=100)
    tags: list[str] = Field(default_factory=list)
    assigned_to: list[Any] = Field(default_factory=list)
    notes: str | None = None
    contacts: list[Any] = Field(default_factory=list)

    @field_validator("title", "client_name")
    @classmethod
    def validate_text(cls, v: str, info: ValidationInfo) -> str:
        return require_text(v, info.field_name)

    @field_validator("start_date", "due_date")
    @classmethod
    def validate_dates(cls, v: datetime) -> datetime:
        return as_utc(v)


class ProjectUpdate(CamelModel):
    """Schema for updating a project. Only the fields sent are written."""

    title: str | None = Field(default=None, min_length=1, max_length=255)
    client_name: str | None = Field(default=None, min_length=1, max_length=255)
    start_date: datetime | None = None
    due_date: datetime | None = None
    completed_at: datetime | None = None
    description: str | None = None
    client_id: str | None = None
    organization: str | None = Field(default=None, max_length=255)
    address: str | None = Field(default=None, max_length=255)
    budget: Decimal | None = Field(default=None, ge=0)
    currency: Currency | None = None
    status: ProjectStatus | None = None
    priority: ProjectPriority | None = None
    progress: int | None = Field(default=None, ge=0, le=100)
    tags: list[str] | None = None
    assigned_to: list[Any] | None = None
    notes: str | None = None
    contacts: list[Any] | None = None

    @field_validator("title", "client_name")
    @classmethod
    def validate_text(cls, v: str | None, info: ValidationInfo) -> str | None:
        if v is not None:
            return require_text(v, info.field_name)
        return v

    @field_validator("start_date", "due_date", "completed_at")
    @classmethod
    def validate_dates(cls, v: datetime | None) -> datetime | None:
        return as_utc(v)


class ProjectRead(BaseModel):
    """Schema for reading a project."""

    id: str
    title: str
    description: str | None = None
    client_name: str | None = None
    client_id: str | None = None
    organization: str | None = None
    address: str | None = None
    budget: float | None = None
    currency: str | None = None
    status: str | None = None
    priority: str | None = None
    progress: int | None = None
    start_date: datetime | None = None
    due_date: datetime | None = None
    completed_at: datetime | None = None
    tags: list[Any] | None = None
    assigned_to: list[Any] | None = None
    notes: str | None = None
    contacts: list[Any] | None = None
    created_by: str
    created_at: datetime | None = None
    updated_at: datetime | None = None
    is_active: bool = True


class ProjectStatusCounts(BaseModel):
    contacted: int = 0
    proposal: int = 0
    won: int = 0
    lost: int = 0


class ProjectPriorityCounts(BaseModel):
    low: int = 0
    medium: int = 0
    high: int = 0


class ProjectStats(CamelModel):
    total: int = 0
    avg_progress: int = 0
    overdue: int = 0
    revenue: float = 0.0
    by_status: ProjectStatusCounts = Field(default_factory=ProjectStatusCounts)
    by_priority: ProjectPriorityCounts = Field(default_factory=ProjectPriorityCounts)
