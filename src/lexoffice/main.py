"""LexOffice API application factory."""

import secrets
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from asgi_correlation_id import CorrelationIdMiddleware, correlation_id
from fastapi import Depends, FastAPI, HTTPException, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.security import APIKeyHeader
from prometheus_fastapi_instrumentator import Instrumentator
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from starlette.middleware.base import RequestResponseEndpoint

from src.lexoffice.api.v1.router import api_router
from src.lexoffice.core.config import Settings, get_settings
from src.lexoffice.core.db import dispose_engine, get_public_session, run_migrations_async
from src.lexoffice.core.exceptions import setup_exception_handlers
from src.lexoffice.core.logging import (
    bind_request_context,
    clear_request_context,
    get_logger,
    setup_logging,
)

logger = get_logger(__name__)

OPENAPI_TAGS = [
    {"name": "clients", "description": "CRM clients of the caller's tenant"},
    {"name": "projects", "description": "Cases and deals in the sales pipeline"},
    {"name": "tasks", "description": "Tasks assigned to tenant users"},
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    settings = get_settings()
    setup_logging(settings.debug)
    logger.info("API starting", app=settings.app_name, app_env=settings.app_env)

    # Tenant tables are brought up to date lazily; only public.tenants is migrated here
    if settings.run_migrations_on_startup:
        await run_migrations_async()
        logger.info("Public schema migrated")

    yield

    await dispose_engine()
    logger.info("API stopped")


def _add_middleware(app: FastAPI, settings: Settings) -> None:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "DELETE"],
        allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
    )

    @app.middleware("http")
    async def request_log_context(
        request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        clear_request_context()
        bind_request_context(correlation_id.get())
        try:
            return await call_next(request)
        finally:
            clear_request_context()

    # Outermost: the id must exist before the log context and the 500 handler read it
    app.add_middleware(CorrelationIdMiddleware)


def _expose_metrics(app: FastAPI, settings: Settings) -> None:
    instrumentator = Instrumentator(excluded_handlers=["/health", "/metrics"]).instrument(app)
    if not settings.metrics_api_key:
        instrumentator.expose(app, endpoint="/metrics", include_in_schema=False)
        return

    expected = settings.metrics_api_key
    api_key_header = APIKeyHeader(name="X-Metrics-Key", auto_error=False)

    async def verify_metrics_key(api_key: str | None = Depends(api_key_header)) -> None:
        if api_key is None or not secrets.compare_digest(api_key, expected):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid or missing metrics API key",
            )

    instrumentator.expose(
        app,
        endpoint="/metrics",
        include_in_schema=False,
        dependencies=[Depends(verify_metrics_key)],
    )


async def health() -> JSONResponse:
    """Liveness plus a round trip to the shared pool."""
    database = "healthy"
    try:
        async with get_public_session() as session:
            await session.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as e:
        logger.warning("Health check database failure", error_type=type(e).__name__)
        database = "unhealthy"

    overall = "healthy" if database == "healthy" else "unhealthy"
    return JSONResponse(
        content={"status": overall, "database": database},
        status_code=(
            status.HTTP_200_OK if overall == "healthy" else status.HTTP_503_SERVICE_UNAVAILABLE
        ),
    )


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Multi-tenant practice management API, one PostgreSQL schema per tenant",
        version="0.1.0",
        openapi_tags=OPENAPI_TAGS,
        docs_url=None if settings.is_production else "/docs",
        redoc_url=None if settings.is_production else "/redoc",
        lifespan=lifespan,
    )

    setup_exception_handlers(app)
    _add_middleware(app, settings)
    app.include_router(api_router)
    app.add_api_route("/health", health, methods=["GET"], tags=["health"])
    _expose_metrics(app, settings)

    return app


app = create_app()
