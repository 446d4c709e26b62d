"""
FastAPI application with assembled routers.

Initializes FastAPI app with the session and health routers and configures
the uvicorn server.

Dependencies: fastapi, toad_architect.api.routers, uvicorn
System role: API entry point with router assembly and server launch
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from toad_architect import __version__
from toad_architect.api import api_router
from toad_architect.api.deps.dependencies import get_service_cache
from toad_architect.api.routers import health_router
from toad_architect.api.routers.sessions.session_error_handling import (
    register_error_handlers,
)
from toad_architect.boundary.db import dispose_engine, init_models
from toad_architect.configs import get_settings
from toad_architect.observability import configure_logging
from toad_architect.observability.middleware import (
    CorrelationMiddleware,
    RequestLoggingMiddleware,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Handles startup and shutdown events.
    """
    settings = get_settings()
    configure_logging(settings.log_level)

    # Startup
    await init_models()
    logger.info(
        "TOAD Architect backend started",
        extra={"environment": settings.environment, "port": settings.server.port},
    )

    yield

    # Shutdown
    get_service_cache().clear()
    await dispose_engine()
    logger.info("Database connections closed")


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application with routers.

    Returns:
        FastAPI: Configured application instance with all routers registered
    """
    settings = get_settings()

    app = FastAPI(
        title="TOAD Architect API",
        description="Conversational software-architecture advisor sessions",
        version=__version__,
        lifespan=lifespan,
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.server.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add observability middleware (correlation outermost so request logs carry the ID)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationMiddleware)

    register_error_handlers(app)

    app.include_router(health_router)
    app.include_router(api_router, prefix="/api")

    return app


app = create_app()


if __name__ == "__main__":
    settings = get_settings()
    uvicorn.run(
        "toad_architect.api.main:app",
        host=settings.server.host,
        port=settings.server.port,
    )
