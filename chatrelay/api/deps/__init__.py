"""API-specific dependencies."""

from .container import RelayContainer
from .dependencies import (
    get_container,
    get_coordinator,
    get_file_service,
    get_message_service,
    get_translation_gateway,
)

__all__ = [
    "RelayContainer",
    "get_container",
    "get_coordinator",
    "get_file_service",
    "get_message_service",
    "get_translation_gateway",
]
