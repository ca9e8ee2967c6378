"""Security utilities - tokens and validators.

Re-exports all security-related functions for convenience.
"""

from src.lexoffice.core.security.crypto import (
    ACCESS_TOKEN_TYPE,
    create_access_token,
    decode_token,
)
from src.lexoffice.core.security.validators import (
    resolve_schema,
    tenant_schema_key,
    validate_identifier,
    validate_schema_name,
)

__all__ = [
    # Tokens
    "ACCESS_TOKEN_TYPE",
    "create_access_token",
    "decode_token",
    # Validators
    "resolve_schema",
    "tenant_schema_key",
    "validate_identifier",
    "validate_schema_name",
]
