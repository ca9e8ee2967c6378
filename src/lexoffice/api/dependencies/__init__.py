"""FastAPI dependency injection definitions.

Re-exports all dependencies for convenience.
"""

# Auth
from src.lexoffice.api.dependencies.auth import (
    AuthPrincipal,
    CurrentPrincipal,
    get_current_principal,
    require_account_types,
)

# Filters
from src.lexoffice.api.dependencies.filters import ListFiltersDep, get_list_filters

# Services
from src.lexoffice.api.dependencies.services import (
    ClientsServiceDep,
    ProjectsServiceDep,
    TasksServiceDep,
)

# Tenant
from src.lexoffice.api.dependencies.tenant import (
    TenantDB,
    TenantRepo,
    get_tenant_database,
    get_tenant_repository,
)

__all__ = [
    # Auth
    "AuthPrincipal",
    "CurrentPrincipal",
    "get_current_principal",
    "require_account_types",
    # Filters
    "ListFiltersDep",
    "get_list_filters",
    # Services
    "ClientsServiceDep",
    "ProjectsServiceDep",
    "TasksServiceDep",
    # Tenant
    "TenantDB",
    "TenantRepo",
    "get_tenant_database",
    "get_tenant_repository",
]
