"""
WebSocket connection handle.

Each connection owns a bounded outbound FIFO queue drained by a single
writer task. ``send`` only enqueues, so broadcast fan-out never waits on a
slow client and frames reach each client in the order they were queued.
A client that lets its queue fill up is disconnected rather than allowed
to hold frames in memory without bound.

Dependencies: asyncio, fastapi
System role: Per-connection outbound delivery
"""

import asyncio
import logging
import uuid
from typing import Any

from fastapi import WebSocket, status

logger = logging.getLogger(__name__)

_CLOSE = object()


class WebSocketConnection:
    """
    Outbound side of one WebSocket.

    Args:
        websocket: Accepted FastAPI WebSocket
        close_timeout: Seconds to wait for queued frames on close
        max_pending: Queued frames allowed before the client is dropped
    """

    def __init__(self, websocket: WebSocket, close_timeout: float = 5.0, max_pending: int = 1000) -> None:
        self.connection_id = uuid.uuid4().hex
        self._websocket = websocket
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=max_pending)
        self._close_timeout = close_timeout
        self._writer: asyncio.Task | None = None
        self._abort_task: asyncio.Task | None = None
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    def start(self) -> None:
        """Start the writer task."""
        if self._writer is None:
            self._writer = asyncio.create_task(
                self._drain(), name=f"ws-writer-{self.connection_id}"
            )

    def send(self, event: str, data: Any) -> None:
        """Queue a frame; frames sent after close are dropped."""
        if self._closed:
            return
        try:
            self._queue.put_nowait({"event": event, "data": data})
        except asyncio.QueueFull:
            self._abort()

    async def close(self) -> None:
        """Stop accepting frames and let the writer flush what is queued."""
        if self._closed:
            if self._abort_task is not None:
                await self._abort_task
            return
        self._closed = True
        if self._writer is None:
            return
        try:
            self._queue.put_nowait(_CLOSE)
        except asyncio.QueueFull:
            self._writer.cancel()
            return
        try:
            await asyncio.wait_for(self._writer, timeout=self._close_timeout)
        except asyncio.TimeoutError:
            logger.warning(
                "WebSocket writer did not flush in time",
                extra={"connection_id": self.connection_id, "pending": self._queue.qsize()},
            )

    def _abort(self) -> None:
        self._closed = True
        logger.warning(
            "Outbound queue full, disconnecting slow client",
            extra={"connection_id": self.connection_id, "max_pending": self._queue.maxsize},
        )
        if self._writer is not None:
            self._writer.cancel()
        self._abort_task = asyncio.create_task(
            self._close_socket(), name=f"ws-abort-{self.connection_id}"
        )

    async def _close_socket(self) -> None:
        try:
            await self._websocket.close(code=status.WS_1013_TRY_AGAIN_LATER)
        except Exception as e:
            logger.debug(
                "WebSocket already closed",
                extra={"connection_id": self.connection_id, "error_msg": str(e)},
            )

    async def _drain(self) -> None:
        while True:
            frame = await self._queue.get()
            if frame is _CLOSE:
                return
            try:
                await self._websocket.send_json(frame)
            except Exception as e:
                # Peer is gone; the receive loop will observe the disconnect.
                self._closed = True
                logger.debug(
                    "WebSocket send failed, dropping outbound frames",
                    extra={"connection_id": self.connection_id, "error_msg": str(e)},
                )
                return
