"""Citizen Document Service - Main FastAPI Application

This module creates and configures the main FastAPI application, including:
- The documents API router
- Middleware (request ID correlation, CORS)
- Exception handlers (domain errors, database errors, fallback)
- Health and metrics endpoints
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from api.errors import domain_exception_handler
from api.v1.documents.router import router as documents_router
from config import get_settings
from dependencies import ServiceContainer, build_container
from domain.documents.errors import DomainError
from observability.logging_config import configure_logging
from observability.middleware import RequestIDMiddleware
from observability.router import router as observability_router

logger = logging.getLogger(__name__)


def create_app(container: Optional[ServiceContainer] = None) -> FastAPI:
    """Create the FastAPI application.

    Args:
        container: Prebuilt services (tests); when None the production
            container is built at startup from settings
    """
    settings = get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler.

        - Startup: build adapters and services unless a container was given
        - Shutdown: release the broker channel and connection
        """
        logger.info("Document service starting up...")
        logger.info(f"Environment: {settings.ENVIRONMENT}")

        owns_container = container is None
        app.state.container = container or build_container(settings)

        yield

        logger.info("Document service shutting down...")
        if owns_container:
            app.state.container.close()

    is_production = settings.ENVIRONMENT == "production"
    app = FastAPI(
        title="Citizen Document Service",
        description="Content-addressed document storage with authentication workflow",
        version="0.1.0",
        docs_url=None if is_production else "/docs",
        redoc_url=None if is_production else "/redoc",
        openapi_url=None if is_production else "/openapi.json",
        lifespan=lifespan,
    )
    if container is not None:
        app.state.container = container

    # =========================================================================
    # MIDDLEWARE CONFIGURATION
    # =========================================================================

    # Request ID Middleware (must be first for proper correlation)
    app.add_middleware(RequestIDMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )

    # =========================================================================
    # EXCEPTION HANDLERS
    # =========================================================================

    app.add_exception_handler(DomainError, domain_exception_handler)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """Handle request validation errors with the domain error shape."""
        logger.warning(f"Validation error on {request.method} {request.url.path}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "error": "VALIDATION_ERROR",
                "message": "Request validation failed",
                "details": exc.errors(),
            },
        )

    @app.exception_handler(SQLAlchemyError)
    async def database_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
        """Log the full error but return a generic message."""
        logger.error(f"Database error on {request.method} {request.url.path}", exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": "PERSISTENCE_ERROR",
                "message": "A database error occurred. Please try again later.",
            },
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Catch unhandled exceptions; details are logged, not exposed."""
        logger.error(f"Unhandled exception on {request.method} {request.url.path}", exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": "INTERNAL_ERROR",
                "message": "An unexpected error occurred. Please try again later.",
            },
        )

    # =========================================================================
    # ROUTERS
    # =========================================================================

    app.include_router(observability_router)
    app.include_router(documents_router, prefix="/api/v1")

    return app


def build_app() -> FastAPI:
    """Entry point for uvicorn: `uvicorn main:build_app --factory`."""
    settings = get_settings()
    configure_logging(level=settings.LOG_LEVEL, json_format=settings.LOG_JSON)
    return create_app()
