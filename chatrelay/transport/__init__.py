"""Transport adapters for relay connections."""

from chatrelay.transport.websocket_connection import WebSocketConnection

__all__ = ["WebSocketConnection"]
