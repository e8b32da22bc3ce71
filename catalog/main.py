import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from catalog.api.routes.health import router as health_router
from catalog.api.routes.repositories import router as repositories_router
from catalog.core.config import settings
from catalog.core.errors import INVALID_REQUEST_BODY, CatalogError, get_status_code
from catalog.core.middleware import RepositoryIdGuardMiddleware, RequestSizeLimitMiddleware
from catalog.core.observability import (
    ObservabilityMiddleware,
    configure_structured_logging,
    extract_request_context,
    metrics,
    metrics_endpoint,
)
from catalog.core.telemetry import init_telemetry, instrument_fastapi, shutdown_telemetry
from catalog.repos.repository_repo import RepositoryStore

# Configure structured logging before creating logger
if settings.observability_structured_logs:
    configure_structured_logging(settings.app_log_level)

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Sets up:
    - An empty in-memory repository store on app.state
    - OpenTelemetry distributed tracing (when enabled)
    - Observability middleware (metrics, request tracking)
    - CORS middleware
    - Request body size limit
    - Malformed repository id rejection before routing
    - Exception handlers for domain errors
    - API routers and the metrics endpoint
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Initialize OpenTelemetry tracing on startup and flush it on shutdown."""
        init_telemetry()
        instrument_fastapi(app)
        yield
        shutdown_telemetry()

    app = FastAPI(
        title="Repository Catalog API",
        description="In-memory catalog of repositories with likes",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.state.repository_store = RepositoryStore()
    metrics.repositories_stored.set(0)

    # ============================================================================
    # Middleware
    # ============================================================================

    # Innermost, so metrics, CORS and the size limit still apply to rejected ids
    app.add_middleware(RepositoryIdGuardMiddleware)

    if settings.observability_enabled:
        app.add_middleware(
            ObservabilityMiddleware,
            request_id_header=settings.observability_request_id_header,
        )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_middleware(RequestSizeLimitMiddleware, max_size_bytes=settings.max_request_size_bytes)

    # ============================================================================
    # Exception Handlers
    # ============================================================================

    @app.exception_handler(CatalogError)
    async def catalog_error_handler(request: Request, exc: CatalogError) -> JSONResponse:
        """
        Handle domain errors raised by the store and the id validator.

        Args:
            request: The incoming request
            exc: The domain exception raised

        Returns:
            JSON response of the form {"error": message}
        """
        status_code = get_status_code(exc)

        context = {
            "error_type": exc.__class__.__name__,
            "details": exc.details,
            **extract_request_context(request),
        }

        if status_code >= 500:
            logger.error(f"{exc.__class__.__name__}: {exc.message}", extra=context)
        else:
            logger.warning(f"{exc.__class__.__name__}: {exc.message}", extra=context)

        return JSONResponse(status_code=status_code, content={"error": exc.message})

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        """Give routing and framework HTTP errors the same {"error": ...} shape."""
        if exc.status_code >= 500:
            logger.error(
                f"HTTP {exc.status_code}: {exc.detail}",
                extra=extract_request_context(request),
            )

        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=exc.headers,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Answer unparseable request bodies with 400 in the {"error": ...} shape."""
        logger.warning(
            "Request validation failed",
            extra={
                "validation_errors": jsonable_encoder(exc.errors()),
                **extract_request_context(request),
            },
        )

        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": INVALID_REQUEST_BODY},
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """
        Catch-all handler for unexpected exceptions.

        Logs the full exception and returns a generic 500 error to the client
        without exposing internal implementation details.
        """
        logger.error(
            f"Unhandled exception: {exc}",
            exc_info=True,
            extra=extract_request_context(request),
        )

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "An unexpected error occurred"},
        )

    # ============================================================================
    # Router Registration
    # ============================================================================

    app.include_router(health_router)
    app.include_router(repositories_router)

    if settings.observability_enabled:
        app.add_route("/metrics", metrics_endpoint, include_in_schema=False)

    return app


app = create_app()
