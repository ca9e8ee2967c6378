"""Repository for the tenant directory."""

from src.lexoffice.models.public import Tenant
from src.lexoffice.repositories.base import BaseRepository


class TenantRepository(BaseRepository[Tenant]):
    """Read access to tenants in public schema.

    Inherits get_by_id; the tenant access dependency is the only caller.
    """

    model = Tenant
