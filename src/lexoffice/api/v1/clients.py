"""Client endpoints - CRM contacts of the caller's tenant."""

from fastapi import APIRouter, Depends, status

from src.lexoffice.api.dependencies import (
    ClientsServiceDep,
    CurrentPrincipal,
    ListFiltersDep,
    TenantDB,
    require_account_types,
)
from src.lexoffice.core.errors import NotFound
from src.lexoffice.schemas import (
    ClientCreate,
    ClientRead,
    ClientStats,
    ClientUpdate,
    PaginatedResponse,
)

router = APIRouter(
    prefix="/clients",
    tags=["clients"],
    dependencies=[Depends(require_account_types())],
)


@router.get(
    "",
    response_model=PaginatedResponse[ClientRead],
    summary="List clients",
    description="List active clients, newest first. Filters: status, search (name, email), tags.",
)
async def list_clients(
    db: TenantDB,
    service: ClientsServiceDep,
    filters: ListFiltersDep,
) -> PaginatedResponse[ClientRead]:
    result = await service.list(db, filters)
    return PaginatedResponse[ClientRead].model_validate(result)


@router.get("/stats", response_model=ClientStats, summary="Client statistics")
async def get_client_stats(db: TenantDB, service: ClientsServiceDep) -> ClientStats:
    return await service.stats(db)


@router.get(
    "/{client_id}",
    response_model=ClientRead,
    summary="Get client",
    responses={404: {"description": "Client not found"}},
)
async def get_client(client_id: str, db: TenantDB, service: ClientsServiceDep) -> ClientRead:
    row = await service.get_by_id(db, client_id)
    if row is None:
        raise NotFound("Client", client_id)
    return ClientRead.model_validate(row)


@router.post(
    "",
    response_model=ClientRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create client",
    responses={422: {"description": "Missing required field or invalid value"}},
)
async def create_client(
    request: ClientCreate,
    db: TenantDB,
    principal: CurrentPrincipal,
    service: ClientsServiceDep,
) -> ClientRead:
    row = await service.create(db, request, created_by=principal.user_id)
    return ClientRead.model_validate(row)


@router.patch(
    "/{client_id}",
    response_model=ClientRead,
    summary="Update client",
    description="Only the fields present in the body are written.",
    responses={404: {"description": "Client not found"}},
)
async def update_client(
    client_id: str,
    request: ClientUpdate,
    db: TenantDB,
    service: ClientsServiceDep,
) -> ClientRead:
    row = await service.update(db, client_id, request)
    if row is None:
        raise NotFound("Client", client_id)
    return ClientRead.model_validate(row)


@router.delete(
    "/{client_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete client",
    description="Soft delete: the client is deactivated and disappears from listings.",
    responses={404: {"description": "Client not found"}},
)
async def delete_client(client_id: str, db: TenantDB, service: ClientsServiceDep) -> None:
    if not await service.delete(db, client_id):
        raise NotFound("Client", client_id)
