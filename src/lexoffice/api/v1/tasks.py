"""Task endpoints."""

from fastapi import APIRouter, Depends, status

from src.lexoffice.api.dependencies import (
    CurrentPrincipal,
    ListFiltersDep,
    TasksServiceDep,
    TenantDB,
    require_account_types,
)
from src.lexoffice.core.errors import NotFound
from src.lexoffice.schemas import (
    PaginatedResponse,
    TaskCreate,
    TaskRead,
    TaskStats,
    TaskUpdate,
)

router = APIRouter(
    prefix="/tasks",
    tags=["tasks"],
    dependencies=[Depends(require_account_types())],
)


@router.get(
    "",
    response_model=PaginatedResponse[TaskRead],
    summary="List tasks",
    description=(
        "List active tasks, newest first. Filters: status, priority, assignedTo, "
        "projectId, search (title, description), tags."
    ),
)
async def list_tasks(
    db: TenantDB,
    service: TasksServiceDep,
    filters: ListFiltersDep,
) -> PaginatedResponse[TaskRead]:
    result = await service.list(db, filters)
    return PaginatedResponse[TaskRead].model_validate(result)


@router.get("/stats", response_model=TaskStats, summary="Task statistics")
async def get_task_stats(db: TenantDB, service: TasksServiceDep) -> TaskStats:
    return await service.stats(db)


@router.get(
    "/{task_id}",
    response_model=TaskRead,
    summary="Get task",
    responses={404: {"description": "Task not found"}},
)
async def get_task(task_id: str, db: TenantDB, service: TasksServiceDep) -> TaskRead:
    row = await service.get_by_id(db, task_id)
    if row is None:
        raise NotFound("Task", task_id)
    return TaskRead.model_validate(row)


@router.post(
    "",
    response_model=TaskRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create task",
    responses={422: {"description": "Missing required field or invalid value"}},
)
async def create_task(
    request: TaskCreate,
    db: TenantDB,
    principal: CurrentPrincipal,
    service: TasksServiceDep,
) -> TaskRead:
    row = await service.create(db, request, created_by=principal.user_id)
    return TaskRead.model_validate(row)


@router.patch(
    "/{task_id}",
    response_model=TaskRead,
    summary="Update task",
    description="Only the fields present in the body are written.",
    responses={404: {"description": "Task not found"}},
)
async def update_task(
    task_id: str,
    request: TaskUpdate,
    db: TenantDB,
    service: TasksServiceDep,
) -> TaskRead:
    row = await service.update(db, task_id, request)
    if row is None:
        raise NotFound("Task", task_id)
    return TaskRead.model_validate(row)


@router.delete(
    "/{task_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete task",
    description="Soft delete: the task is deactivated and disappears from listings.",
    responses={404: {"description": "Task not found"}},
)
async def delete_task(task_id: str, db: TenantDB, service: TasksServiceDep) -> None:
    if not await service.delete(db, task_id):
        raise NotFound("Task", task_id)
