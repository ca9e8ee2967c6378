"""Authentication and authorization dependencies."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, Header, HTTPException, status

from src.lexoffice.core.config import get_settings
from src.lexoffice.core.errors import TenantAccessError
from src.lexoffice.core.logging import bind_user_context, get_logger
from src.lexoffice.core.security import ACCESS_TOKEN_TYPE, decode_token

logger = get_logger(__name__)


@dataclass(frozen=True)
class AuthPrincipal:
    """Identity the authentication layer vouches for."""

    user_id: str
    tenant_id: str | None
    role: str
    account_type: str | None = None


async def get_current_principal(
    authorization: Annotated[str | None, Header()] = None,
) -> AuthPrincipal:
    """Validate the bearer access token and return its principal."""
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing or invalid authorization header",
        )

    payload = decode_token(authorization[7:])
    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )

    if payload.get("type") != ACCESS_TOKEN_TYPE:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token type",
        )

    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload",
        )

    tenant_id = payload.get("tenant_id")
    principal = AuthPrincipal(
        user_id=str(user_id),
        tenant_id=str(tenant_id) if tenant_id else None,
        role=payload.get("role") or "user",
        account_type=payload.get("account_type"),
    )

    bind_user_context(principal.user_id, principal.tenant_id, principal.role)
    return principal


CurrentPrincipal = Annotated[AuthPrincipal, Depends(get_current_principal)]


def require_account_types(
    *account_types: str,
) -> Callable[[AuthPrincipal], Awaitable[AuthPrincipal]]:
    """Build a dependency that restricts a route to some account types.

    Without arguments the allowed types come from settings; an empty list
    there allows every account type. Bypass roles (admin, superadmin) skip
    this check but still need a tenant to reach tenant data.
    """

    async def check_account_type(principal: CurrentPrincipal) -> AuthPrincipal:
        settings = get_settings()
        if principal.role in settings.tenant_bypass_roles:
            return principal

        allowed = account_types or tuple(settings.allowed_account_types)
        if allowed and principal.account_type not in allowed:
            logger.warning(
                "Insufficient account permissions",
                account_type=principal.account_type,
                required_account_types=list(allowed),
            )
            raise TenantAccessError(
                "Access denied: Insufficient account permissions", principal.tenant_id
            )
        return principal

    return check_account_type
