"""
Wellness FastAPI Application Entry Point

Main application initialization with:
- Lifespan management (startup/shutdown)
- CORS, security headers and rate limiting
- Error handling middleware and exception handlers
- Router registration (REST, WebSocket, health, metrics)

This is the production entry point for the wellness backend.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from wellness import __version__
from wellness.api.exception_handlers import register_exception_handlers
from wellness.api.middleware import (
    ErrorHandlerMiddleware,
    RateLimitConfig,
    RateLimitMiddleware,
    SecurityHeadersMiddleware,
)
from wellness.api.routes.chat_socket import router as chat_socket_router
from wellness.api.routes.health import router as health_router
from wellness.api.v1.router import api_router
from wellness.config import get_settings
from wellness.config.logging_config import configure_logging, get_logger
from wellness.infrastructure.database import get_db_manager
from wellness.infrastructure.metrics import metrics_router, update_system_info
from wellness.infrastructure.monitoring import init_sentry

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Handles startup and shutdown of all services.
    """
    settings = get_settings()
    configure_logging(settings)

    logger.info(
        "Starting wellness application",
        env=settings.env,
        version=__version__,
    )

    # Startup
    try:
        # Initialize database
        db = get_db_manager()
        await db.initialize()
        if settings.database.auto_create_tables:
            await db.create_all()
        logger.info("Database connection initialized")

        init_sentry(settings.sentry_dsn.get_secret_value(), environment=settings.env)
        update_system_info(settings.env)

        yield

    finally:
        # Shutdown
        logger.info("Shutting down wellness application")

        db = get_db_manager()
        await db.close()

        logger.info("Wellness application shutdown complete")


def create_application() -> FastAPI:
    """
    Create and configure FastAPI application.

    Returns:
        Configured FastAPI application
    """
    settings = get_settings()
    api_prefix = f"/api/{settings.api_version}"

    app = FastAPI(
        title="Wellness Companion API",
        description="AI chat companion for youth mental wellness - Backend API",
        version=__version__,
        docs_url="/docs" if not settings.is_production() else None,
        redoc_url="/redoc" if not settings.is_production() else None,
        lifespan=lifespan,
    )

    # Middleware runs in reverse order of registration
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(SecurityHeadersMiddleware, enable_hsts=settings.is_production())
    if settings.rate_limit.enabled:
        app.add_middleware(
            RateLimitMiddleware,
            config=RateLimitConfig.from_settings(settings.rate_limit),
            api_prefix=api_prefix,
        )
    app.add_middleware(ErrorHandlerMiddleware)

    register_exception_handlers(app)

    # Register routers
    app.include_router(api_router, prefix=api_prefix)
    app.include_router(chat_socket_router)
    app.include_router(health_router)
    app.include_router(metrics_router)

    # Root endpoint
    @app.get("/", include_in_schema=False)
    async def root() -> dict:
        """Root endpoint - basic info."""
        return {
            "name": "Wellness Companion API",
            "version": __version__,
            "status": "operational",
        }

    return app


# Create application instance
app = create_application()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "wellness.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.env == "development",
        log_level=settings.log_level.lower(),
    )
