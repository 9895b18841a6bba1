"""
Broadcast coordinator.

Per-connection state machine for the relay protocol:

    CONNECTED --join--> JOINED --disconnect--> CLOSED

Handles join, chat message, file share, delete and heartbeat events,
persists durable records before fanning them out, and converts every
handler error into an ``error`` event sent to the originating connection.
Fan-out is a synchronous enqueue on each connection's outbound queue.

Dependencies: chatrelay.core, chatrelay.application.services
System role: Real-time message and session coordination
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from chatrelay.application.services.file_service import FileService
from chatrelay.application.services.message_service import MessageService
from chatrelay.configs.relay import RelaySettings
from chatrelay.core.exceptions import (
    ChatRelayException,
    PermissionDeniedError,
    ValidationError,
)
from chatrelay.core.identity import IdentityAssigner
from chatrelay.core.session_registry import Connection, SessionRegistry, SessionState
from chatrelay.models.events import (
    ChatMessagePayload,
    ClientEventType,
    DeleteMessagePayload,
    FileSharedPayload,
    HeartbeatPayload,
    JoinPayload,
    ServerEventType,
    parse_client_event,
)
from chatrelay.models.message import MessageResponse

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ConnectionState(str, Enum):
    """Lifecycle states of a relay connection."""

    CONNECTED = "connected"
    JOINED = "joined"
    CLOSED = "closed"


@dataclass
class ConnectionContext:
    """
    Per-connection protocol state.

    Attributes:
        connection: Transport handle
        state: Current lifecycle state
        user_id: Identity bound by the join handshake
        display_name: Name assigned at join
    """

    connection: Connection
    state: ConnectionState = ConnectionState.CONNECTED
    user_id: str | None = None
    display_name: str | None = None


class BroadcastCoordinator:
    """
    Connection event handling and fan-out.

    Registry, assigner and services are injected so each test can use a
    fresh, isolated set.

    Args:
        registry: Active session registry
        assigner: Display name assigner
        message_service: Message persistence
        relay_settings: TTL, history window and message limits
        file_service: File deletion, for file retraction events
        clock: Source of the current UTC time
    """

    def __init__(
        self,
        registry: SessionRegistry,
        assigner: IdentityAssigner,
        message_service: MessageService,
        relay_settings: RelaySettings,
        file_service: FileService | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._registry = registry
        self._assigner = assigner
        self._messages = message_service
        self._files = file_service
        self._settings = relay_settings
        self._clock = clock
        self._handlers = {
            ClientEventType.JOIN: self.handle_join,
            ClientEventType.CHAT_MESSAGE: self.handle_chat_message,
            ClientEventType.FILE_SHARED: self.handle_file_shared,
            ClientEventType.DELETE_MESSAGE: self.handle_delete_message,
            ClientEventType.HEARTBEAT: self.handle_heartbeat,
        }

    @property
    def registry(self) -> SessionRegistry:
        return self._registry

    def connect(self, connection: Connection) -> ConnectionContext:
        """Open the protocol state for a new transport connection."""
        logger.debug("Connection opened", extra={"connection_id": connection.connection_id})
        return ConnectionContext(connection=connection)

    async def dispatch(self, ctx: ConnectionContext, frame: Any) -> None:
        """
        Validate and handle one decoded client frame.

        Never raises: failures become an ``error`` event on the originating
        connection, echoing the client's ``clientMessageId`` when present.
        """
        if ctx.state is ConnectionState.CLOSED:
            return

        client_message_id = None
        if isinstance(frame, dict) and isinstance(frame.get("data"), dict):
            client_message_id = frame["data"].get("clientMessageId")

        try:
            event_type, payload = parse_client_event(frame)
            await self._handlers[event_type](ctx, payload)
        except ChatRelayException as e:
            logger.warning(
                "Event rejected",
                extra={
                    "connection_id": ctx.connection.connection_id,
                    "user_id": ctx.user_id,
                    "error_code": e.code,
                    "error_msg": e.message,
                },
            )
            self.send_error(ctx, e.code, e.message, e.details, client_message_id)
        except Exception:
            logger.exception(
                "Unexpected error handling event",
                extra={"connection_id": ctx.connection.connection_id, "user_id": ctx.user_id},
            )
            self.send_error(ctx, "INTERNAL_ERROR", "Internal server error", None, client_message_id)

    def send_error(
        self,
        ctx: ConnectionContext,
        code: str,
        message: str,
        details: dict | None = None,
        client_message_id: str | None = None,
    ) -> None:
        """Send an ``error`` event to one connection only."""
        data: dict[str, Any] = {"code": code, "message": message, "details": details or {}}
        if client_message_id:
            data["clientMessageId"] = client_message_id
        ctx.connection.send(ServerEventType.ERROR.value, data)

    async def handle_join(self, ctx: ConnectionContext, payload: JoinPayload) -> None:
        """
        Bind an identity to the connection.

        Sends the assigned name, the active user list and the recent history
        to the joining connection, then announces the join to everyone else.
        A history failure is reported to the joining connection only and
        does not undo the join.
        """
        if ctx.state is ConnectionState.JOINED and ctx.user_id != payload.user_id:
            raise ValidationError(
                "Connection already joined as another user",
                field="userId",
                details={"user_id": ctx.user_id},
            )

        display_name = self._assigner.assign(payload.user_name, payload.user_id)
        now = self._clock()
        previous = self._registry.put(
            payload.user_id,
            SessionState(
                user_id=payload.user_id,
                display_name=display_name,
                connection=ctx.connection,
                joined_at=now,
                last_seen_at=now,
            ),
        )
        ctx.user_id = payload.user_id
        ctx.display_name = display_name
        ctx.state = ConnectionState.JOINED

        identity = {"userId": payload.user_id, "userName": display_name}
        ctx.connection.send(ServerEventType.NAME_ASSIGNED.value, identity)
        ctx.connection.send(
            ServerEventType.ACTIVE_USERS.value,
            [session.to_summary().to_wire() for session in self._registry.list_active()],
        )

        try:
            history = await self._messages.get_recent(self._settings.history_window)
        except ChatRelayException as e:
            logger.error(
                "History hydration failed",
                extra={"user_id": payload.user_id, "error_msg": e.message},
            )
            self.send_error(ctx, e.code, "Message history unavailable", e.details)
        else:
            ctx.connection.send(
                ServerEventType.MESSAGE_HISTORY.value,
                [message.to_wire() for message in history],
            )

        if previous is None or previous.connection is not ctx.connection:
            self.broadcast(ServerEventType.USER_JOINED, identity, exclude_user_id=payload.user_id)

        logger.info(
            "User joined",
            extra={
                "user_id": payload.user_id,
                "display_name": display_name,
                "connection_id": ctx.connection.connection_id,
                "active_count": len(self._registry),
            },
        )

    async def handle_chat_message(self, ctx: ConnectionContext, payload: ChatMessagePayload) -> None:
        """
        Persist a text message, then broadcast it to every session.

        The sender receives the stored message too, so its view gets the
        authoritative id and expiry. Nothing is broadcast if persisting fails.
        """
        session = self._require_session(ctx, payload.user_id, ClientEventType.CHAT_MESSAGE)
        body = payload.message.strip()
        if not body:
            raise ValidationError("Message cannot be empty", field="message")
        if len(body) > self._settings.max_message_length:
            raise ValidationError(
                f"Message exceeds {self._settings.max_message_length} characters",
                field="message",
                details={"length": len(body)},
            )

        now = self._clock()
        stored = await self._messages.create_message(
            user_id=session.user_id,
            user_name=session.display_name,
            body=body,
            source_lang=payload.source_lang.upper(),
            created_at=now,
            expires_at=now + self._settings.message_ttl,
        )
        self._fan_out_stored(ctx, ServerEventType.CHAT_MESSAGE, stored, payload.client_message_id, include_sender=True)

    async def handle_file_shared(self, ctx: ConnectionContext, payload: FileSharedPayload) -> None:
        """
        Persist a file share, then broadcast it to every other session.

        The uploader already holds the upload response, so it is not sent
        the broadcast.
        """
        session = self._require_session(ctx, payload.user_id, ClientEventType.FILE_SHARED)
        now = self._clock()
        files = [f.model_copy(update={"user_id": f.user_id or session.user_id}) for f in payload.files]
        stored = await self._messages.create_message(
            user_id=session.user_id,
            user_name=session.display_name,
            files=files,
            created_at=now,
            expires_at=now + self._settings.message_ttl,
        )
        self._fan_out_stored(ctx, ServerEventType.FILE_SHARED, stored, payload.client_message_id, include_sender=False)

    async def handle_delete_message(self, ctx: ConnectionContext, payload: DeleteMessagePayload) -> None:
        self._require_session(ctx, payload.user_id, ClientEventType.DELETE_MESSAGE)
        await self.delete_message(payload.user_id, payload.message_id)

    async def handle_heartbeat(self, ctx: ConnectionContext, payload: HeartbeatPayload) -> None:
        """Refresh liveness; no response is sent."""
        self._require_session(ctx, payload.user_id, ClientEventType.HEARTBEAT)
        self._registry.touch(payload.user_id, self._clock())

    async def delete_message(self, requester_id: str, message_id: str) -> MessageResponse:
        """
        Owner-only message deletion, shared by the WebSocket and HTTP surfaces.

        Raises:
            NotFoundError: No such message
            PermissionDeniedError: Requester is not the author; nothing changes
            PersistenceError: Store failure; nothing is broadcast
        """
        deleted = await self._messages.delete_message(message_id, requester_id)
        self.broadcast(ServerEventType.MESSAGE_DELETED, {"messageId": deleted.id})
        return deleted

    async def delete_file(self, requester_id: str, file_id: str) -> list[str]:
        """
        Owner-only file deletion with retraction broadcast.

        Returns:
            list[str]: Ids of messages the file was removed from
        """
        if self._files is None:
            raise RuntimeError("File service not configured")
        affected = await self._files.delete_file(file_id, requester_id)
        self.broadcast(ServerEventType.FILE_DELETED, {"fileId": file_id})
        return affected

    def announce_expired(self, message_ids: list[str]) -> None:
        """Announce one sweep batch to every session."""
        if message_ids:
            self.broadcast(ServerEventType.MESSAGES_EXPIRED, {"messageIds": list(message_ids)})

    def disconnect(self, ctx: ConnectionContext) -> None:
        """
        Close the connection's protocol state.

        The session is removed before the departure is announced. A second
        call, or a stale connection whose user has already reconnected
        elsewhere, changes nothing and announces nothing.
        """
        if ctx.state is ConnectionState.CLOSED:
            return
        was_joined = ctx.state is ConnectionState.JOINED
        ctx.state = ConnectionState.CLOSED
        if not was_joined or ctx.user_id is None:
            return

        removed = self._registry.remove(ctx.user_id, ctx.connection)
        if removed is None:
            return
        self.broadcast(
            ServerEventType.USER_LEFT,
            {"userId": removed.user_id, "userName": removed.display_name},
            exclude_user_id=removed.user_id,
        )
        logger.info(
            "User left",
            extra={"user_id": removed.user_id, "active_count": len(self._registry)},
        )

    def broadcast(
        self,
        event: ServerEventType,
        data: Any,
        exclude_user_id: str | None = None,
    ) -> int:
        """
        Enqueue an event on every active session.

        Args:
            event: Server event type
            data: JSON-safe payload
            exclude_user_id: Session to skip, usually the originator

        Returns:
            int: Number of sessions the event was queued for
        """
        delivered = 0
        for session in self._registry.list_active():
            if session.user_id == exclude_user_id:
                continue
            try:
                session.connection.send(event.value, data)
            except Exception:
                logger.warning(
                    "Failed to queue event for session",
                    extra={"event": event.value, "user_id": session.user_id},
                    exc_info=True,
                )
                continue
            delivered += 1
        return delivered

    def _require_session(
        self,
        ctx: ConnectionContext,
        user_id: str,
        event: ClientEventType,
    ) -> SessionState:
        if ctx.state is not ConnectionState.JOINED:
            raise ValidationError(
                f"Join required before {event.value}",
                details={"state": ctx.state.value},
            )
        if user_id != ctx.user_id:
            raise PermissionDeniedError(
                "userId does not match this connection",
                requester_id=user_id,
            )
        session = self._registry.get(user_id)
        if session is None or session.connection is not ctx.connection:
            raise ValidationError(
                "Session is no longer active on this connection",
                field="userId",
            )
        return session

    def _fan_out_stored(
        self,
        ctx: ConnectionContext,
        event: ServerEventType,
        stored: MessageResponse,
        client_message_id: str | None,
        include_sender: bool,
    ) -> None:
        data = stored.to_wire()
        recipients = self.broadcast(event, data, exclude_user_id=ctx.user_id)
        if include_sender:
            ctx.connection.send(
                event.value,
                {**data, "clientMessageId": client_message_id} if client_message_id else data,
            )
            recipients += 1
        logger.info(
            "Message broadcast",
            extra={
                "event": event.value,
                "message_id": stored.id,
                "user_id": ctx.user_id,
                "recipients": recipients,
            },
        )
