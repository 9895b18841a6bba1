"""
FastAPI application with assembled routers.

Initializes the relay app, its middleware and routers, and runs uvicorn
when executed as a module.

Dependencies: fastapi, uvicorn, chatrelay.api.routers
System role: API entry point with router assembly and server launch
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from chatrelay import __version__
from chatrelay.api.deps.container import RelayContainer
from chatrelay.configs import get_settings
from chatrelay.observability.logger import configure_logging
from chatrelay.observability.middleware import CorrelationMiddleware, RequestLoggingMiddleware

from .routers import (
    files_router,
    health_router,
    messages_router,
    relay_ws_router,
    translate_router,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Creates tables and starts the expiration sweeper on startup; stops the
    sweeper and disposes the engine on shutdown.
    """
    container: RelayContainer = app.state.container
    await container.startup()

    yield

    await container.shutdown()


def create_app(container: RelayContainer | None = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        container: Prebuilt relay components; built from settings when omitted

    Returns:
        FastAPI: Configured application instance with all routers registered
    """
    if container is None:
        settings = get_settings()
        configure_logging(settings.log_level)
        container = RelayContainer.from_settings(settings)

    app = FastAPI(
        title="Chat Relay",
        description="Real-time multi-user chat relay with expiring messages and translation",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.container = container

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationMiddleware)

    app.include_router(health_router)
    app.include_router(translate_router)
    app.include_router(files_router)
    app.include_router(messages_router)
    app.include_router(relay_ws_router)

    return app


if __name__ == "__main__":
    uvicorn.run(
        "chatrelay.api.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
    )
