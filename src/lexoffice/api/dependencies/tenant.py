"""Tenant access dependencies.

Every tenant-data route depends on ``get_tenant_database``. It turns the
authenticated principal into a TenantDatabase bound to that tenant's schema,
and nothing else in the request path can pick a different schema.
"""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.exc import SQLAlchemyError

from src.lexoffice.api.dependencies.auth import CurrentPrincipal
from src.lexoffice.core.db import get_public_session
from src.lexoffice.core.errors import (
    DatabaseConnectionError,
    TenantAccessError,
    TenantInactive,
    TenantNotFound,
)
from src.lexoffice.core.logging import bind_tenant_context, get_logger
from src.lexoffice.models.public import Tenant
from src.lexoffice.repositories import TenantRepository
from src.lexoffice.tenancy import TenantDatabase

logger = get_logger(__name__)


async def get_tenant_repository() -> AsyncGenerator[TenantRepository]:
    """Get tenant repository with its own public schema session."""
    async with get_public_session() as session:
        yield TenantRepository(session)


TenantRepo = Annotated[TenantRepository, Depends(get_tenant_repository)]


async def _lookup_tenant(tenant_repo: TenantRepository, tenant_id: str) -> Tenant | None:
    try:
        return await tenant_repo.get_by_id(tenant_id)
    except (SQLAlchemyError, OSError) as e:
        logger.error(
            "Tenant directory lookup failed",
            tenant_id=tenant_id,
            error_type=type(e).__name__,
        )
        raise DatabaseConnectionError("Tenant directory unavailable") from e


async def get_tenant_database(
    request: Request,
    principal: CurrentPrincipal,
    tenant_repo: TenantRepo,
) -> AsyncGenerator[TenantDatabase]:
    """Validate tenant access and yield a handle bound to the tenant schema.

    The handle is released once the response has been sent.

    Raises:
        TenantAccessError: If the principal has no tenant
        TenantNotFound: If the tenant is not in the directory
        TenantInactive: If the tenant has been deactivated
        DatabaseConnectionError: If the directory cannot be reached
    """
    if not principal.tenant_id:
        raise TenantAccessError("Access denied: User has no tenant association")

    tenant = await _lookup_tenant(tenant_repo, principal.tenant_id)
    if tenant is None:
        raise TenantNotFound(principal.tenant_id)
    if not tenant.is_active:
        raise TenantInactive(tenant.id)

    db = TenantDatabase(tenant.id, tenant.schema_name)
    request.state.tenant = tenant
    request.state.tenant_db = db
    bind_tenant_context(tenant.id, db.schema_name)
    logger.debug("Tenant access granted", schema=db.schema_name)

    try:
        yield db
    finally:
        db.release()


TenantDB = Annotated[TenantDatabase, Depends(get_tenant_database)]
