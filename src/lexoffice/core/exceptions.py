"""Exception handlers with request_id in responses."""

from asgi_correlation_id import correlation_id
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.lexoffice.core.errors import (
    DatabaseConnectionError,
    DatabaseError,
    InvalidTenantId,
    NotFound,
    TenantAccessError,
    ValidationError,
)
from src.lexoffice.core.logging import get_logger

logger = get_logger(__name__)


def _error_response(status_code: int, detail: str, **extra: object) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"detail": detail, **extra, "request_id": correlation_id.get()},
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Configure exception handlers that include request_id in responses."""

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "detail": exc.detail,
                "request_id": correlation_id.get(),
            },
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        # Same body as service-level validation errors; loc[0] is "body" or "query"
        error = ValidationError.from_errors(exc.errors(), skip_location=1)
        return _error_response(
            status.HTTP_422_UNPROCESSABLE_ENTITY, error.message, fields=error.fields
        )

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
        return _error_response(
            status.HTTP_422_UNPROCESSABLE_ENTITY, exc.message, fields=exc.fields
        )

    @app.exception_handler(NotFound)
    async def not_found_handler(request: Request, exc: NotFound) -> JSONResponse:
        return _error_response(status.HTTP_404_NOT_FOUND, str(exc))

    @app.exception_handler(TenantAccessError)
    async def tenant_access_handler(request: Request, exc: TenantAccessError) -> JSONResponse:
        logger.warning(
            "Tenant access denied",
            reason=exc.message,
            denied_tenant_id=exc.tenant_id,
            path=request.url.path,
        )
        return _error_response(status.HTTP_403_FORBIDDEN, exc.message)

    @app.exception_handler(InvalidTenantId)
    async def invalid_tenant_handler(request: Request, exc: InvalidTenantId) -> JSONResponse:
        logger.warning("Invalid tenant id", error=str(exc), path=request.url.path)
        return _error_response(
            status.HTTP_403_FORBIDDEN, "Access denied: Invalid user tenant association"
        )

    @app.exception_handler(DatabaseError)
    async def database_error_handler(request: Request, exc: DatabaseError) -> JSONResponse:
        # Statement is logged server-side only; bound values were never attached
        logger.error(
            "Database error",
            error_type=type(exc).__name__,
            error=exc.message,
            statement=exc.statement,
            path=request.url.path,
        )
        if isinstance(exc, DatabaseConnectionError):
            return _error_response(
                status.HTTP_503_SERVICE_UNAVAILABLE,
                "Service temporarily unavailable",
                code="DB_CONNECTION_ERROR",
            )
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        request_id = correlation_id.get()
        logger.exception(
            "Unhandled exception",
            exc_info=exc,
            request_id=request_id,
            path=request.url.path,
        )
        return JSONResponse(
            status_code=500,
            content={
                "detail": "Internal server error",
                "request_id": request_id,
            },
        )
