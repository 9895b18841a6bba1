"""
In-memory registry of active chat sessions.

The registry is the single source of truth for who is online. Each entry
is written only by the handler processing that session's own events;
broadcast enumeration reads a list snapshot, so iteration is never
invalidated by a concurrent join or leave.

Dependencies: dataclasses
System role: Session ownership and online presence
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Protocol

from chatrelay.models.message import SessionSummary

logger = logging.getLogger(__name__)


class Connection(Protocol):
    """Transport handle owned by a session."""

    connection_id: str

    def send(self, event: str, data: Any) -> None:
        """Queue an event for delivery without blocking."""
        ...


@dataclass
class SessionState:
    """
    One active client connection plus its identity and liveness metadata.

    Attributes:
        user_id: Client-generated stable identifier
        display_name: Name unique among active sessions at assignment time
        connection: Owning reference to the transport connection
        joined_at: Time the join handshake completed
        last_seen_at: Time of the most recent liveness signal
    """

    user_id: str
    display_name: str
    connection: Connection
    joined_at: datetime
    last_seen_at: datetime

    def to_summary(self) -> SessionSummary:
        return SessionSummary(
            user_id=self.user_id,
            user_name=self.display_name,
            joined_at=self.joined_at,
            last_seen_at=self.last_seen_at,
        )


class SessionRegistry:
    """Mapping of user identity to connection state, ordered by insertion."""

    def __init__(self) -> None:
        self._sessions: dict[str, SessionState] = {}

    def put(self, user_id: str, state: SessionState) -> SessionState | None:
        """
        Register a session, replacing any previous session for the same user.

        The entry moves to the end of the insertion order.

        Returns:
            The replaced session, if any
        """
        previous = self._sessions.pop(user_id, None)
        self._sessions[user_id] = state
        if previous is not None and previous.connection is not state.connection:
            logger.info(
                "Session replaced by a newer connection",
                extra={
                    "user_id": user_id,
                    "old_connection": previous.connection.connection_id,
                    "new_connection": state.connection.connection_id,
                },
            )
        return previous

    def get(self, user_id: str) -> SessionState | None:
        return self._sessions.get(user_id)

    def remove(self, user_id: str, connection: Connection | None = None) -> SessionState | None:
        """
        Remove a session.

        When ``connection`` is given, the entry is only removed if it is still
        owned by that connection, so a stale connection closing cannot evict
        the user's newer session.

        Returns:
            The removed session, or None when nothing was removed
        """
        state = self._sessions.get(user_id)
        if state is None:
            return None
        if connection is not None and state.connection is not connection:
            return None
        return self._sessions.pop(user_id)

    def touch(self, user_id: str, now: datetime) -> bool:
        """Refresh ``last_seen_at``; returns False for unknown users."""
        state = self._sessions.get(user_id)
        if state is None:
            return False
        state.last_seen_at = now
        return True

    def list_active(self) -> list[SessionState]:
        """Snapshot of active sessions in insertion order."""
        return list(self._sessions.values())

    def active_names(self, exclude_user_id: str | None = None) -> set[str]:
        """Display names currently in use, optionally ignoring one user."""
        return {
            state.display_name.casefold()
            for state in self._sessions.values()
            if state.user_id != exclude_user_id
        }

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, user_id: object) -> bool:
        return user_id in self._sessions
