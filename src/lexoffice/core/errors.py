"""Error taxonomy for the tenant data access layer.

Validation and not-found conditions are expected control flow and are mapped
to 4xx responses. Database errors are infrastructure failures and surface as
a generic 5xx with the detail kept in server-side logs.
"""

from collections.abc import Iterable, Mapping, Sequence
from typing import Any


class LexOfficeError(Exception):
    """Base class for all application errors."""


class InvalidTenantId(LexOfficeError, ValueError):
    """Tenant identifier cannot be turned into a safe schema name."""


# --- Access control -------------------------------------------------------


class TenantAccessError(LexOfficeError):
    """The authenticated principal may not access tenant data."""

    def __init__(self, message: str = "Access denied", tenant_id: str | None = None):
        super().__init__(message)
        self.message = message
        self.tenant_id = tenant_id


class TenantNotFound(TenantAccessError):
    def __init__(self, tenant_id: str | None = None):
        super().__init__("Access denied: Tenant not found", tenant_id)


class TenantInactive(TenantAccessError):
    def __init__(self, tenant_id: str | None = None):
        super().__init__("Access denied: Tenant is inactive", tenant_id)


# --- Caller errors --------------------------------------------------------


class ValidationError(LexOfficeError):
    """A required field is missing or a value is outside its allowed set."""

    def __init__(self, message: str, fields: Sequence[str] = ()):
        super().__init__(message)
        self.message = message
        self.fields = list(fields)

    @classmethod
    def from_errors(
        cls, errors: Iterable[Mapping[str, Any]], skip_location: int = 0
    ) -> "ValidationError":
        """Build from pydantic error dicts.

        ``skip_location`` drops leading loc parts such as FastAPI's "body".
        """
        fields: list[str] = []
        missing: list[str] = []
        for error in errors:
            loc = error["loc"][skip_location:] or error["loc"]
            name = ".".join(str(part) for part in loc) or "body"
            if name not in fields:
                fields.append(name)
            if error["type"] == "missing" and name not in missing:
                missing.append(name)

        if missing and len(missing) == len(fields):
            return cls(f"Missing required field: {', '.join(missing)}", fields=fields)
        return cls(f"Invalid value for: {', '.join(fields)}", fields=fields)


class NoFieldsToUpdate(ValidationError):
    def __init__(self) -> None:
        super().__init__("No fields to update")


class NotFound(LexOfficeError):
    """Identifier does not resolve to an active row."""

    def __init__(self, entity: str, record_id: str):
        super().__init__(f"{entity} {record_id} not found")
        self.entity = entity
        self.record_id = record_id


# --- Infrastructure -------------------------------------------------------


class DatabaseError(LexOfficeError):
    """Base class for failures raised by the tenant query executor."""

    def __init__(self, message: str, statement: str | None = None):
        super().__init__(message)
        self.message = message
        # Rendered SQL only, bound values are never kept on the exception
        self.statement = statement


class QueryError(DatabaseError):
    def __init__(self, message: str, statement: str | None = None, sqlstate: str | None = None):
        super().__init__(message, statement)
        self.sqlstate = sqlstate


class SchemaNotFound(QueryError):
    def __init__(self, schema_name: str, statement: str | None = None):
        super().__init__(f"Schema {schema_name} does not exist", statement, sqlstate="3F000")
        self.schema_name = schema_name


class DatabaseConnectionError(DatabaseError):
    """Pool exhausted, network failure or connection dropped mid-statement."""
