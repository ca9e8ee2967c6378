"""Tenant schema resolution and identifier validators.

Everything here is a pure string operation. Schema names are embedded in SQL
text (they cannot be bound as parameters), so they are derived and checked
here before any statement is built.
"""

import re
from typing import Final

from src.lexoffice.core.errors import InvalidTenantId

MAX_SCHEMA_LENGTH: Final[int] = 63  # PostgreSQL identifier limit
TENANT_SCHEMA_PREFIX: Final[str] = "tenant_"
MAX_TENANT_KEY_LENGTH: Final[int] = MAX_SCHEMA_LENGTH - len(TENANT_SCHEMA_PREFIX)  # 56
TENANT_ID_REGEX: Final[str] = r"^[A-Za-z0-9][A-Za-z0-9_-]*$"
TENANT_SCHEMA_REGEX: Final[str] = rf"^{TENANT_SCHEMA_PREFIX}[a-z0-9]+(_[a-z0-9]+)*$"
SQL_IDENTIFIER_REGEX: Final[str] = r"^[a-z_][a-z0-9_]*$"

_TENANT_ID_PATTERN: Final[re.Pattern[str]] = re.compile(TENANT_ID_REGEX)
_TENANT_SCHEMA_PATTERN: Final[re.Pattern[str]] = re.compile(TENANT_SCHEMA_REGEX)
_SQL_IDENTIFIER_PATTERN: Final[re.Pattern[str]] = re.compile(SQL_IDENTIFIER_REGEX)


def tenant_schema_key(tenant_id: str) -> str:
    """Normalize a tenant id to the part of its schema name after the prefix.

    Ids with the same key share a schema, so the directory keeps this key
    unique (index ``ix_tenants_schema_key``).

    Examples:
        >>> tenant_schema_key("Acme-Corp")
        'acmecorp'
    """
    return tenant_id.lower().replace("-", "")


def resolve_schema(tenant_id: str) -> str:
    """Map a tenant id to its PostgreSQL schema name.

    The id is lowercased and hyphens are dropped, so a UUID tenant id maps to
    ``tenant_<32 hex chars>``. The mapping is stable for the lifetime of the
    tenant because it depends on nothing but the id.

    Examples:
        >>> resolve_schema("3F2A-0B")
        'tenant_3f2a0b'
        >>> resolve_schema("demo-tenant-id")
        'tenant_demotenantid'

    Raises:
        InvalidTenantId: If the id is empty, contains characters other than
            letters, digits, hyphens and underscores, or is too long.
    """
    if not isinstance(tenant_id, str) or not _TENANT_ID_PATTERN.fullmatch(tenant_id):
        raise InvalidTenantId(f"Invalid tenant id: {tenant_id!r}")

    key = tenant_schema_key(tenant_id)
    if len(key) > MAX_TENANT_KEY_LENGTH:
        raise InvalidTenantId(
            f"Tenant id too long for a schema name: {len(key)} > {MAX_TENANT_KEY_LENGTH}"
        )

    schema_name = f"{TENANT_SCHEMA_PREFIX}{key}"
    try:
        validate_schema_name(schema_name)
    except ValueError as e:
        raise InvalidTenantId(str(e)) from e
    return schema_name


def validate_schema_name(schema_name: str) -> None:
    """Validate schema name follows strict tenant naming convention.

    Schema names must:
    - Start with 'tenant_' prefix
    - Contain only lowercase letters, numbers, and single underscores as separators
    - Not exceed 63 characters (PostgreSQL limit)

    The required prefix keeps every name clear of the system schemas
    (``pg_*``, ``information_schema``, ``public``), and the character set
    leaves no room for quotes or comment markers. Words such as "public"
    inside a tenant key are allowed.

    Raises:
        ValueError: If schema name is invalid

    Examples:
        >>> validate_schema_name("tenant_acme")  # Valid
        >>> validate_schema_name("tenant_0f3a9c")  # Valid
        >>> validate_schema_name("acme")  # Invalid - missing prefix
        >>> validate_schema_name("tenant__acme")  # Invalid - consecutive underscores
    """
    if len(schema_name) > MAX_SCHEMA_LENGTH:
        raise ValueError(
            f"Schema name exceeds PostgreSQL limit: {len(schema_name)} > {MAX_SCHEMA_LENGTH}"
        )

    if not _TENANT_SCHEMA_PATTERN.fullmatch(schema_name):
        raise ValueError(
            f"Invalid schema name format: {schema_name}. "
            "Must be 'tenant_' followed by lowercase alphanumeric "
            "with single underscores as separators."
        )


def validate_identifier(name: str) -> str:
    """Validate a table or column name before it is written into SQL text."""
    if not _SQL_IDENTIFIER_PATTERN.fullmatch(name) or len(name) > MAX_SCHEMA_LENGTH:
        raise ValueError(f"Invalid SQL identifier: {name!r}")
    return name
