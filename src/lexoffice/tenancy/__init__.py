"""Tenant-scoped data access: executor, CRUD helpers, schema steps."""

from src.lexoffice.tenancy.database import SCHEMA_PLACEHOLDER, TenantDatabase
from src.lexoffice.tenancy.helpers import insert, query, soft_delete, update
from src.lexoffice.tenancy.schema import SchemaReport, SchemaStep, ensure_schema

__all__ = [
    "SCHEMA_PLACEHOLDER",
    "SchemaReport",
    "SchemaStep",
    "TenantDatabase",
    "ensure_schema",
    "insert",
    "query",
    "soft_delete",
    "update",
]
