"""
Relay WebSocket endpoint.

Routes: WS /ws

Frames are JSON objects ``{"event": <name>, "data": {...}}`` in both
directions. Inbound frames of one connection are handled one at a time,
in arrival order; outbound frames go through the connection's queue.

Dependencies: fastapi, chatrelay.core.broadcast, chatrelay.transport
System role: Real-time relay transport
"""

import json
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from chatrelay.core.broadcast import BroadcastCoordinator
from chatrelay.transport.websocket_connection import WebSocketConnection

logger = logging.getLogger(__name__)
router = APIRouter(tags=["relay"])


@router.websocket("/ws")
async def relay_socket(websocket: WebSocket) -> None:
    """
    WebSocket endpoint for the chat relay.

    Client sends:
        {"event": "join", "data": {"userId": "...", "userName": "..."}}
        {"event": "chat_message", "data": {"userId": "...", "message": "...", "sourceLang": "EN"}}
        {"event": "file_shared", "data": {"userId": "...", "files": [...]}}
        {"event": "delete_message", "data": {"userId": "...", "messageId": "..."}}
        {"event": "heartbeat", "data": {"userId": "..."}}

    Server sends:
        name_assigned, active_users, message_history, user_joined, user_left,
        chat_message, file_shared, message_deleted, messages_expired,
        file_deleted, error

    Args:
        websocket: WebSocket connection
    """
    container = websocket.app.state.container
    coordinator: BroadcastCoordinator = container.coordinator

    await websocket.accept()
    connection = WebSocketConnection(websocket, max_pending=container.settings.relay.outbound_queue_size)
    connection.start()
    ctx = coordinator.connect(connection)
    logger.info(
        "WebSocket connection established",
        extra={"connection_id": connection.connection_id, "client_host": str(websocket.client)},
    )

    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(message.get("code", 1000))

            raw_data = message.get("text")
            if raw_data is None:
                logger.warning(
                    "Rejected non-text frame",
                    extra={"connection_id": connection.connection_id},
                )
                coordinator.send_error(ctx, "INVALID_FRAME", "Only text frames are supported")
                continue

            try:
                frame = json.loads(raw_data)
            except json.JSONDecodeError as e:
                logger.warning(
                    "Failed to parse JSON",
                    extra={
                        "connection_id": connection.connection_id,
                        "error_msg": str(e),
                        "raw_data_preview": raw_data[:50],
                    },
                )
                coordinator.send_error(ctx, "INVALID_JSON", "Invalid JSON format")
                continue

            await coordinator.dispatch(ctx, frame)

    except WebSocketDisconnect as e:
        logger.info(
            "WebSocket disconnected",
            extra={"connection_id": connection.connection_id, "user_id": ctx.user_id, "close_code": e.code},
        )
    finally:
        coordinator.disconnect(ctx)
        await connection.close()
