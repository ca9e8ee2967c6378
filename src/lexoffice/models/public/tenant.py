"""Tenant model - directory in public schema."""

from datetime import UTC, datetime
from uuid import uuid4

from sqlmodel import Field, SQLModel

from src.lexoffice.core.security.validators import resolve_schema


def utc_now() -> datetime:
    # public.tenants.created_at is TIMESTAMP WITHOUT TIME ZONE, stored as UTC
    return datetime.now(UTC).replace(tzinfo=None)


class Tenant(SQLModel, table=True):
    """Tenant directory entry in public schema.

    Rows are created by the provisioning flow; the API only reads them.
    """

    __tablename__ = "tenants"
    __table_args__ = {"schema": "public"}

    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True, max_length=64)
    name: str = Field(max_length=200, index=True)
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=utc_now)

    @property
    def schema_name(self) -> str:
        """Get the schema name for this tenant.

        Raises:
            InvalidTenantId: If the id cannot be turned into a safe schema name
        """
        return resolve_schema(self.id)
