"""
Router utility functions.

Contains helpers shared by router endpoints to keep them clean.
"""

from chatrelay.api.routers.router_utils.error_handling import (
    error_response,
    handle_relay_errors,
    status_for,
)

__all__ = [
    "error_response",
    "handle_relay_errors",
    "status_for",
]
