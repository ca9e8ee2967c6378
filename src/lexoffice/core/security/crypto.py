"""JWT access tokens carrying the tenant-access claims.

Claims: ``sub`` (user id), ``tenant_id``, ``role``, ``account_type``. The
API only verifies tokens; issuing them belongs to the authentication
service; ``create_access_token`` exists for local tooling and tests.
"""

from datetime import UTC, datetime, timedelta
from typing import Any

from jose import JWTError, jwt

from src.lexoffice.core.config import get_settings

ACCESS_TOKEN_TYPE = "access"


def create_access_token(
    subject: str,
    tenant_id: str | None,
    role: str = "user",
    account_type: str | None = None,
    expires_delta: timedelta | None = None,
) -> str:
    settings = get_settings()
    issued_at = datetime.now(UTC)
    lifetime = expires_delta or timedelta(minutes=settings.access_token_expire_minutes)

    claims: dict[str, Any] = {
        "sub": subject,
        "type": ACCESS_TOKEN_TYPE,
        "role": role,
        "iat": issued_at,
        "exp": issued_at + lifetime,
    }
    if tenant_id is not None:
        claims["tenant_id"] = tenant_id
    if account_type is not None:
        claims["account_type"] = account_type

    return jwt.encode(  # type: ignore[no-any-return]
        claims, settings.jwt_secret_key, algorithm=settings.jwt_algorithm
    )


def decode_token(token: str) -> dict[str, Any] | None:
    """Verify signature and expiry. Returns None for any invalid token."""
    settings = get_settings()
    try:
        claims: dict[str, Any] = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
            options={"require_exp": True, "require_sub": True},
        )
    except JWTError:
        return None
    return claims
