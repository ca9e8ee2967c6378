"""Service dependencies.

Services are stateless and built once per process; the per-request tenant
handle is passed to each call.
"""

from typing import Annotated

from fastapi import Depends

from src.lexoffice.services import (
    TenantEntityService,
    get_clients_service,
    get_projects_service,
    get_tasks_service,
)

ClientsServiceDep = Annotated[TenantEntityService, Depends(get_clients_service)]
ProjectsServiceDep = Annotated[TenantEntityService, Depends(get_projects_service)]
TasksServiceDep = Annotated[TenantEntityService, Depends(get_tasks_service)]
