"""Project endpoints - cases and deals in the sales pipeline."""

from fastapi import APIRouter, Depends, status

from src.lexoffice.api.dependencies import (
    CurrentPrincipal,
    ListFiltersDep,
    ProjectsServiceDep,
    TenantDB,
    require_account_types,
)
from src.lexoffice.core.errors import NotFound
from src.lexoffice.schemas import (
    PaginatedResponse,
    ProjectCreate,
    ProjectRead,
    ProjectStats,
    ProjectUpdate,
)

router = APIRouter(
    prefix="/projects",
    tags=["projects"],
    dependencies=[Depends(require_account_types())],
)


@router.get(
    "",
    response_model=PaginatedResponse[ProjectRead],
    summary="List projects",
    description=(
        "List active projects, newest first. Filters: status, priority, "
        "search (title, client, organization, description), tags."
    ),
)
async def list_projects(
    db: TenantDB,
    service: ProjectsServiceDep,
    filters: ListFiltersDep,
) -> PaginatedResponse[ProjectRead]:
    result = await service.list(db, filters)
    return PaginatedResponse[ProjectRead].model_validate(result)


@router.get("/stats", response_model=ProjectStats, summary="Project statistics")
async def get_project_stats(db: TenantDB, service: ProjectsServiceDep) -> ProjectStats:
    return await service.stats(db)


@router.get(
    "/{project_id}",
    response_model=ProjectRead,
    summary="Get project",
    responses={404: {"description": "Project not found"}},
)
async def get_project(project_id: str, db: TenantDB, service: ProjectsServiceDep) -> ProjectRead:
    row = await service.get_by_id(db, project_id)
    if row is None:
        raise NotFound("Project", project_id)
    return ProjectRead.model_validate(row)


@router.post(
    "",
    response_model=ProjectRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create project",
    responses={422: {"description": "Missing required field or invalid value"}},
)
async def create_project(
    request: ProjectCreate,
    db: TenantDB,
    principal: CurrentPrincipal,
    service: ProjectsServiceDep,
) -> ProjectRead:
    row = await service.create(db, request, created_by=principal.user_id)
    return ProjectRead.model_validate(row)


@router.patch(
    "/{project_id}",
    response_model=ProjectRead,
    summary="Update project",
    description="Only the fields present in the body are written.",
    responses={404: {"description": "Project not found"}},
)
async def update_project(
    project_id: str,
    request: ProjectUpdate,
    db: TenantDB,
    service: ProjectsServiceDep,
) -> ProjectRead:
    row = await service.update(db, project_id, request)
    if row is None:
        raise NotFound("Project", project_id)
    return ProjectRead.model_validate(row)


@router.delete(
    "/{project_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete project",
    description="Soft delete: the project is deactivated and disappears from listings.",
    responses={404: {"description": "Project not found"}},
)
async def delete_project(project_id: str, db: TenantDB, service: ProjectsServiceDep) -> None:
    if not await service.delete(db, project_id):
        raise NotFound("Project", project_id)
