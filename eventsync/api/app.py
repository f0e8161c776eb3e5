"""FastAPI application configuration module."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# Internal imports
from ..config.environment import IS_PRODUCTION_ENVIRONMENT, LOG_LEVEL  # Environment must be imported first
from ..config.cors import CORS_CONFIG
from ..errors import (
    AuthError,
    EventSyncError,
    NoActiveSuggestionError,
    NotFoundError,
    PermissionDeniedError,
    SuggestionPendingError,
    TransientStoreError,
    ValidationError,
)
from ..utils.logging_config import setup_logging
from .. import __version__
from .dependencies import ServiceContainer, build_services
from .routes import admin, auth, changes, events, exports, health, notifications

logger = logging.getLogger(__name__)

# Most specific classes first
ERROR_STATUS_CODES = [
    (PermissionDeniedError, 403),
    (AuthError, 401),
    (NoActiveSuggestionError, 409),
    (SuggestionPendingError, 409),
    (ValidationError, 400),
    (NotFoundError, 404),
    (TransientStoreError, 503),
]


def status_code_for(exc: EventSyncError) -> int:
    for error_class, status_code in ERROR_STATUS_CODES:
        if isinstance(exc, error_class):
            return status_code
    return 500


async def eventsync_error_handler(request: Request, exc: EventSyncError) -> JSONResponse:
    """Translate the error taxonomy into HTTP responses."""
    status_code = status_code_for(exc)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
        detail = "Something went wrong, please try again"
    else:
        logger.info(f"{request.method} {request.url.path} rejected ({status_code}): {exc}")
        detail = str(exc)
    return JSONResponse(status_code=status_code, content={"detail": detail, "error": type(exc).__name__})


def create_application(services: Optional[ServiceContainer] = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    setup_logging(LOG_LEVEL)
    services = services or build_services()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Lifespan context manager for startup and shutdown events."""
        # Startup
        try:
            services.database.ensure_tables_exist()
            logger.info("Database initialized successfully")
        except Exception as e:
            logger.error(f"Startup failed: {e}")
            raise
        yield
        # Shutdown
        services.feed.close()

    app = FastAPI(
        title="EventSync API",
        description="Club event submission, approval and rescheduling",
        version=__version__,
        docs_url=None if IS_PRODUCTION_ENVIRONMENT else '/api/docs',
        redoc_url=None if IS_PRODUCTION_ENVIRONMENT else '/api/redoc',
        lifespan=lifespan
    )
    app.state.services = services

    # Configure CORS
    app.add_middleware(CORSMiddleware, **CORS_CONFIG)

    app.add_exception_handler(EventSyncError, eventsync_error_handler)

    # Include health check router without prefix
    app.include_router(health.router)

    # Include routers with prefix
    app.include_router(auth.router, prefix="/api")
    app.include_router(exports.router, prefix="/api")
    app.include_router(events.router, prefix="/api")
    app.include_router(changes.router, prefix="/api")
    app.include_router(notifications.router, prefix="/api")
    app.include_router(admin.router, prefix="/api")

    return app
