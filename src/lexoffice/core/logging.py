"""Structured logging for the API.

Request, principal and tenant context are bound through contextvars by the
HTTP middleware and the access dependencies, so every event emitted while a
request is served carries them without passing loggers around.
"""

import logging
import sys
from collections.abc import MutableMapping
from typing import Any

import structlog
from structlog.contextvars import bind_contextvars, clear_contextvars

# Keys whose values never reach the log output, whoever logs them
REDACTED_KEYS = frozenset({"authorization", "token", "password", "params", "values"})
NOISY_LOGGERS = ("sqlalchemy.engine", "asyncpg", "uvicorn.access")


def redact_sensitive(
    logger: Any, method_name: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    for key in REDACTED_KEYS & event_dict.keys():
        event_dict[key] = "[redacted]"
    return event_dict


def setup_logging(debug: bool = False) -> None:
    """Route structlog through stdlib logging.

    Debug mode renders colored console lines; otherwise one JSON object per
    event is written to stdout.
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=logging.DEBUG if debug else logging.INFO,
    )
    for name in NOISY_LOGGERS:
        # Statements are logged by TenantDatabase, with parameter names only
        logging.getLogger(name).setLevel(logging.WARNING)

    if debug:
        output: list[structlog.typing.Processor] = [
            structlog.dev.set_exc_info,
            structlog.dev.ConsoleRenderer(colors=True),
        ]
    else:
        output = [structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer()]

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            redact_sensitive,
            structlog.processors.StackInfoRenderer(),
            *output,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def bind_request_context(request_id: str | None) -> None:
    """Bind request-level context to all subsequent log calls.

    Args:
        request_id: The correlation ID for the current request.
    """
    if request_id:
        bind_contextvars(request_id=request_id)


def bind_user_context(user_id: str, tenant_id: str | None, role: str | None = None) -> None:
    """Bind the authenticated principal to all subsequent log calls.

    Args:
        user_id: The authenticated user's ID.
        tenant_id: The tenant claimed by the access token, if any.
        role: Optional role claim, useful when tracing admin access.
    """
    bind_contextvars(user_id=user_id)
    if tenant_id:
        bind_contextvars(tenant_id=tenant_id)
    if role:
        bind_contextvars(role=role)


def bind_tenant_context(tenant_id: str, schema_name: str) -> None:
    """Bind the resolved tenant schema once the tenant has been validated."""
    bind_contextvars(tenant_id=tenant_id, schema=schema_name)


def clear_request_context() -> None:
    """Clear all request-scoped context."""
    clear_contextvars()
