"""
WebSocket event schemas.

Defines event names and payloads for the relay protocol. Every frame is a
JSON object ``{"event": <name>, "data": {...}}``. Client payloads are
validated here, before entering the broadcast coordinator.

Dependencies: pydantic
System role: Relay wire protocol
"""

from enum import Enum
from typing import Any

from pydantic import Field
from pydantic import ValidationError as PydanticValidationError

from chatrelay.core.exceptions import UnknownEventError, ValidationError
from chatrelay.models.common import CamelModel
from chatrelay.models.message import FileReference


class ClientEventType(str, Enum):
    """Client-to-server event types."""

    JOIN = "join"
    CHAT_MESSAGE = "chat_message"
    FILE_SHARED = "file_shared"
    DELETE_MESSAGE = "delete_message"
    HEARTBEAT = "heartbeat"


class ServerEventType(str, Enum):
    """Server-to-client event types."""

    NAME_ASSIGNED = "name_assigned"
    ACTIVE_USERS = "active_users"
    MESSAGE_HISTORY = "message_history"
    USER_JOINED = "user_joined"
    USER_LEFT = "user_left"
    CHAT_MESSAGE = "chat_message"
    FILE_SHARED = "file_shared"
    MESSAGE_DELETED = "message_deleted"
    MESSAGES_EXPIRED = "messages_expired"
    FILE_DELETED = "file_deleted"
    ERROR = "error"


class JoinPayload(CamelModel):
    """Join handshake; ``user_name`` is only a request."""

    user_id: str = Field(min_length=1, max_length=128)
    user_name: str | None = Field(default=None, max_length=64)


class ChatMessagePayload(CamelModel):
    """Text message sent by a joined client."""

    user_id: str = Field(min_length=1, max_length=128)
    user_name: str | None = None
    message: str
    source_lang: str = Field(default="EN", max_length=16)
    client_message_id: str | None = None


class FileSharedPayload(CamelModel):
    """Announcement of files the client already uploaded."""

    user_id: str = Field(min_length=1, max_length=128)
    user_name: str | None = None
    files: list[FileReference] = Field(min_length=1)
    client_message_id: str | None = None


class DeleteMessagePayload(CamelModel):
    """Owner-only deletion request."""

    user_id: str = Field(min_length=1, max_length=128)
    message_id: str = Field(min_length=1)


class HeartbeatPayload(CamelModel):
    """Liveness signal."""

    user_id: str = Field(min_length=1, max_length=128)


ClientPayload = (
    JoinPayload
    | ChatMessagePayload
    | FileSharedPayload
    | DeleteMessagePayload
    | HeartbeatPayload
)

PAYLOAD_MODELS: dict[ClientEventType, type[CamelModel]] = {
    ClientEventType.JOIN: JoinPayload,
    ClientEventType.CHAT_MESSAGE: ChatMessagePayload,
    ClientEventType.FILE_SHARED: FileSharedPayload,
    ClientEventType.DELETE_MESSAGE: DeleteMessagePayload,
    ClientEventType.HEARTBEAT: HeartbeatPayload,
}


def parse_client_event(frame: Any) -> tuple[ClientEventType, ClientPayload]:
    """
    Validate a decoded client frame into a typed payload.

    Args:
        frame: Decoded JSON frame

    Returns:
        tuple: Event type and its validated payload

    Raises:
        ValidationError: Frame shape, event name or payload fields are invalid
    """
    if not isinstance(frame, dict):
        raise ValidationError("Event frame must be a JSON object")

    raw_event = frame.get("event")
    try:
        event_type = ClientEventType(raw_event)
    except ValueError:
        raise UnknownEventError(raw_event)

    data = frame.get("data")
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValidationError("Event data must be a JSON object", field="data")

    try:
        payload = PAYLOAD_MODELS[event_type].model_validate(data)
    except PydanticValidationError as e:
        errors = [
            {"loc": ".".join(str(part) for part in err["loc"]), "msg": err["msg"]}
            for err in e.errors()
        ]
        raise ValidationError(
            f"Invalid {event_type.value} payload",
            details={"errors": errors},
        )
    return event_type, payload
