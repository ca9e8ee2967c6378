"""List query parameters shared by every entity listing."""

from typing import Annotated

from fastapi import Depends, Query, Request

from src.lexoffice.core.config import get_settings
from src.lexoffice.schemas.common import ListFilters


def get_list_filters(
    request: Request,
    page: Annotated[int, Query(ge=1, description="Page number, starting at 1")] = 1,
    limit: Annotated[int | None, Query(ge=1, description="Page size")] = None,
    status: Annotated[str | None, Query()] = None,
    priority: Annotated[str | None, Query()] = None,
    search: Annotated[str | None, Query(description="Case-insensitive substring")] = None,
    assigned_to: Annotated[str | None, Query(alias="assignedTo")] = None,
    project_id: Annotated[str | None, Query(alias="projectId")] = None,
) -> ListFilters:
    """Collect list filters from the query string.

    Tags may be sent as ``tags=a&tags=b`` or ``tags[]=a&tags[]=b``. Page size
    defaults to the configured page size and is capped at the maximum.
    """
    settings = get_settings()
    page_size = min(limit or settings.default_page_size, settings.max_page_size)
    tags = [
        tag
        for tag in (
            *request.query_params.getlist("tags"),
            *request.query_params.getlist("tags[]"),
        )
        if tag
    ]
    return ListFilters(
        page=page,
        limit=page_size,
        status=status or None,
        priority=priority or None,
        search=search or None,
        tags=tags or None,
        assigned_to=assigned_to or None,
        project_id=project_id or None,
    )


ListFiltersDep = Annotated[ListFilters, Depends(get_list_filters)]
