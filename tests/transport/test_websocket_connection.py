"""
Test suite for the per-connection outbound queue.

System role: Verification of ordered delivery and slow-client handling
"""

import asyncio

import pytest

from chatrelay.transport.websocket_connection import WebSocketConnection


class RecordingWebSocket:
    """WebSocket stand-in whose sends block until released."""

    def __init__(self, released: bool = True) -> None:
        self.sent: list[dict] = []
        self.close_codes: list[int] = []
        self.release = asyncio.Event()
        if released:
            self.release.set()

    async def send_json(self, frame) -> None:
        await self.release.wait()
        self.sent.append(frame)

    async def close(self, code: int = 1000) -> None:
        self.close_codes.append(code)


class TestDelivery:
    """Test suite for queued delivery."""

    @pytest.mark.asyncio
    async def test_close_should_flush_frames_in_order(self) -> None:
        # Arrange
        websocket = RecordingWebSocket()
        connection = WebSocketConnection(websocket)
        connection.start()

        # Act
        for index in range(3):
            connection.send("chat_message", {"n": index})
        await connection.close()

        # Assert
        assert [frame["data"]["n"] for frame in websocket.sent] == [0, 1, 2]
        assert websocket.close_codes == []

    @pytest.mark.asyncio
    async def test_send_after_close_should_be_dropped(self) -> None:
        websocket = RecordingWebSocket()
        connection = WebSocketConnection(websocket)
        connection.start()
        await connection.close()

        connection.send("chat_message", {"n": 1})

        assert websocket.sent == []
        assert connection.pending == 0


class TestSlowClient:
    """Test suite for clients that stop reading."""

    @pytest.mark.asyncio
    async def test_full_queue_should_disconnect_client(self) -> None:
        # Arrange
        websocket = RecordingWebSocket(released=False)
        connection = WebSocketConnection(websocket, max_pending=3)
        connection.start()
        connection.send("chat_message", {"n": 0})
        await asyncio.sleep(0)

        # Act
        for index in range(1, 10):
            connection.send("chat_message", {"n": index})
        await connection.close()

        # Assert
        assert connection.closed is True
        assert connection.pending == 3
        assert websocket.close_codes == [1013]
        websocket.release.set()
        await asyncio.sleep(0)
        assert websocket.sent == []

    @pytest.mark.asyncio
    async def test_close_with_full_queue_should_not_raise(self) -> None:
        websocket = RecordingWebSocket(released=False)
        connection = WebSocketConnection(websocket, max_pending=2)
        connection.start()
        connection.send("chat_message", {"n": 0})
        await asyncio.sleep(0)
        connection.send("chat_message", {"n": 1})
        connection.send("chat_message", {"n": 2})

        await connection.close()

        assert connection.closed is True
        assert websocket.close_codes == []

    @pytest.mark.asyncio
    async def test_close_should_give_up_on_stalled_writer(self) -> None:
        websocket = RecordingWebSocket(released=False)
        connection = WebSocketConnection(websocket, close_timeout=0.01)
        connection.start()
        connection.send("chat_message", {"n": 0})

        await connection.close()
        websocket.release.set()
        await asyncio.sleep(0)

        assert websocket.sent == []
