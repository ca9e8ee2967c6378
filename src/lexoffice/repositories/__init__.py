"""Repositories for public schema data.

Tenant schema data is accessed through src.lexoffice.tenancy, not here.
"""

from src.lexoffice.repositories.base import BaseRepository
from src.lexoffice.repositories.tenant_repository import TenantRepository

__all__ = ["BaseRepository", "TenantRepository"]
