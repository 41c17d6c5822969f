"""FastAPI application factory and configuration.

This module provides the application factory function for creating
and configuring the FastAPI application with all middleware, routes,
and lifecycle handlers.
"""

import os
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from fileserve.core.config import get_settings
from fileserve.core.logging import (
    bind_correlation_id,
    clear_context,
    configure_logging,
    get_logger,
    new_correlation_id,
)
from fileserve.infrastructure.api.middleware import SecurityHeadersMiddleware

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Configures logging and makes sure the storage root exists.
    """
    settings = get_settings()
    configure_logging(settings)

    logger.info(
        "Starting FileServe",
        app_name=settings.app_name,
        version=settings.app_version,
        environment=settings.environment,
    )

    storage_root = settings.storage_root
    try:
        storage_root.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.error("Failed to create storage directory", path=str(storage_root), error=str(e))
        raise
    logger.info(
        "File storage initialized",
        path=str(storage_root),
        allowed_extensions=settings.allowed_extensions,
        auth_enabled=settings.auth_enabled,
    )

    yield

    logger.info("Shutting down FileServe")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        FastAPI: Configured FastAPI application instance.
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Read-only file and image API with on-the-fly thumbnails and mobile derivatives",
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        openapi_url="/openapi.json" if settings.is_development else None,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    register_health_check(app)
    register_routes(app)
    register_exception_handlers(app)
    register_middleware(app)

    return app


def register_health_check(app: FastAPI) -> None:
    """Register health check endpoints."""

    @app.get("/health", tags=["health"])
    async def health_check():
        """Basic health check endpoint.

        Returns 200 if the service is running. Does not check the storage root.
        """
        return {
            "status": "healthy",
            "service": "FileServe",
            "version": get_settings().app_version,
        }

    @app.get("/ready", tags=["health"])
    async def readiness_check():
        """Readiness check endpoint.

        Returns 200 if the storage root exists and is readable.
        """
        storage_root = get_settings().storage_root
        if storage_root.is_dir() and os.access(storage_root, os.R_OK):
            return {
                "status": "ready",
                "service": "FileServe",
                "version": get_settings().app_version,
                "storage": "available",
            }
        return JSONResponse(
            status_code=503,
            content={
                "status": "not_ready",
                "service": "FileServe",
                "storage": "unavailable",
            },
        )

    @app.get("/live", tags=["health"])
    async def liveness_check():
        """Liveness check endpoint."""
        return {
            "status": "alive",
            "service": "FileServe",
            "version": get_settings().app_version,
        }


def register_routes(app: FastAPI) -> None:
    """Register API routes."""
    from fileserve.infrastructure.api.routes import batch_router, files_router

    # Batch routes first; the files router ends with a catch-all path
    app.include_router(batch_router, prefix="/img/batch")
    app.include_router(files_router, prefix="/img")


def register_exception_handlers(app: FastAPI) -> None:
    """Register global exception handlers."""

    @app.exception_handler(Exception)
    async def global_exception_handler(request, exc):
        """Handle uncaught exceptions."""
        logger.error(
            "Unhandled exception",
            path=str(request.url),
            method=request.method,
            error=str(exc),
            exc_type=type(exc).__name__,
        )
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal server error",
                "detail": str(exc) if get_settings().debug else "An unexpected error occurred",
            },
        )


def register_middleware(app: FastAPI) -> None:
    """Register custom middleware."""

    app.add_middleware(SecurityHeadersMiddleware)

    @app.middleware("http")
    async def logging_middleware(request, call_next):
        """Log all requests and propagate the correlation ID."""
        correlation_id = request.headers.get("X-Correlation-ID") or new_correlation_id()
        bind_correlation_id(correlation_id)

        logger.info(
            "Request started",
            method=request.method,
            path=str(request.url.path),
        )

        try:
            response = await call_next(request)
            logger.info(
                "Request completed",
                method=request.method,
                path=str(request.url.path),
                status_code=response.status_code,
            )
            response.headers["X-Correlation-ID"] = correlation_id
            return response
        finally:
            clear_context()


# Create the application instance
app = create_app()
