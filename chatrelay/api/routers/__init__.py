"""API routers."""

from .files import router as files_router
from .health import router as health_router
from .messages import router as messages_router
from .relay_ws import router as relay_ws_router
from .translate import router as translate_router

__all__ = [
    "files_router",
    "health_router",
    "messages_router",
    "relay_ws_router",
    "translate_router",
]
