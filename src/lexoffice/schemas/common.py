"""Shared request/response building blocks for tenant entities."""

import math
from datetime import UTC, datetime
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 50


class CamelModel(BaseModel):
    """Accepts camelCase (API) and snake_case (internal) field names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def blank_to_none(v: object) -> object:
    """Treat empty strings from HTML forms as absent values."""
    if isinstance(v, str) and not v.strip():
        return None
    return v


def as_utc(v: datetime | None) -> datetime | None:
    """Attach UTC to naive datetimes ('YYYY-MM-DD' inputs parse as naive midnight)."""
    if v is not None and v.tzinfo is None:
        return v.replace(tzinfo=UTC)
    return v


def require_text(v: str, field: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError(f"{field} cannot be empty or whitespace only")
    return v


class ListFilters(BaseModel):
    """Filters accepted by every entity list operation.

    Unset filters are ignored. Filters an entity does not support are ignored
    as well, so one model serves clients, projects and tasks.
    """

    page: int = Field(default=DEFAULT_PAGE, ge=1)
    limit: int = Field(default=DEFAULT_LIMIT, ge=1)
    status: str | None = None
    priority: str | None = None
    search: str | None = None
    tags: list[str] | None = None
    assigned_to: str | None = None
    project_id: str | None = None

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


class Pagination(CamelModel):
    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        total_pages = math.ceil(total / limit) if limit else 0
        return cls(
            page=page,
            limit=limit,
            total=total,
            total_pages=total_pages,
            has_next=page < total_pages,
            has_prev=page > 1,
        )


class PaginatedResponse(BaseModel, Generic[T]):
    """Page of records plus the offset pagination descriptor."""

    items: list[T]
    pagination: Pagination
