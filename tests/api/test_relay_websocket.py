"""
Test suite for the relay WebSocket endpoint.

Drives the real /ws route through the TestClient: join hydration, chat
fan-out, departures and protocol errors.

System role: Verification of the real-time relay protocol end to end
"""


def receive_until(ws, event: str, limit: int = 10) -> dict:
    """Read frames until one of the given event type arrives."""
    for _ in range(limit):
        frame = ws.receive_json()
        if frame["event"] == event:
            return frame["data"]
    raise AssertionError(f"no {event} frame received")


def join(ws, user_id: str, user_name: str) -> list[dict]:
    ws.send_json({"event": "join", "data": {"userId": user_id, "userName": user_name}})
    return [ws.receive_json() for _ in range(3)]


class TestJoin:
    """Test suite for the join handshake."""

    def test_join_should_hydrate_in_order(self, client) -> None:
        with client.websocket_connect("/ws") as ws:
            frames = join(ws, "u1", "Amber Sky")

        assert [f["event"] for f in frames] == ["name_assigned", "active_users", "message_history"]
        assert frames[0]["data"] == {"userId": "u1", "userName": "Amber Sky"}
        assert [u["userId"] for u in frames[1]["data"]] == ["u1"]
        assert frames[2]["data"] == []

    def test_join_should_announce_to_existing_sessions(self, client) -> None:
        with client.websocket_connect("/ws") as first:
            join(first, "u1", "Amber Sky")
            with client.websocket_connect("/ws") as second:
                frames = join(second, "u2", "Blue Fox")

                joined = receive_until(first, "user_joined")

        assert joined == {"userId": "u2", "userName": "Blue Fox"}
        assert {u["userId"] for u in frames[1]["data"]} == {"u1", "u2"}


class TestChat:
    """Test suite for chat message fan-out."""

    def test_chat_message_should_reach_every_session_with_one_id(self, client) -> None:
        # Arrange
        with client.websocket_connect("/ws") as first:
            join(first, "u1", "Amber Sky")
            with client.websocket_connect("/ws") as second:
                join(second, "u2", "Blue Fox")
                receive_until(first, "user_joined")

                # Act
                second.send_json(
                    {
                        "event": "chat_message",
                        "data": {"userId": "u2", "message": "  hola  ", "sourceLang": "es", "clientMessageId": "c-1"},
                    }
                )
                own = receive_until(second, "chat_message")
                other = receive_until(first, "chat_message")

        # Assert
        assert own["id"] == other["id"]
        assert own["message"] == "hola"
        assert own["sourceLang"] == "ES"
        assert own["userName"] == "Blue Fox"
        assert own["clientMessageId"] == "c-1"
        assert "clientMessageId" not in other

    def test_history_should_include_earlier_messages(self, client) -> None:
        with client.websocket_connect("/ws") as ws:
            join(ws, "u1", "Amber Sky")
            ws.send_json({"event": "chat_message", "data": {"userId": "u1", "message": "first"}})
            receive_until(ws, "chat_message")

        with client.websocket_connect("/ws") as ws:
            frames = join(ws, "u2", "Blue Fox")

        assert [m["message"] for m in frames[2]["data"]] == ["first"]

    def test_departure_should_broadcast_user_left(self, client) -> None:
        with client.websocket_connect("/ws") as first:
            join(first, "u1", "Amber Sky")
            with client.websocket_connect("/ws") as second:
                join(second, "u2", "Blue Fox")
                receive_until(first, "user_joined")

            left = receive_until(first, "user_left")

        assert left == {"userId": "u2", "userName": "Blue Fox"}


class TestProtocolErrors:
    """Test suite for malformed and unexpected frames."""

    def test_invalid_json_should_return_error_and_keep_connection(self, client) -> None:
        with client.websocket_connect("/ws") as ws:
            ws.send_text("{not json")
            error = receive_until(ws, "error")
            frames = join(ws, "u1", "Amber Sky")

        assert error["code"] == "INVALID_JSON"
        assert frames[0]["event"] == "name_assigned"

    def test_binary_frame_should_return_error_and_keep_connection(self, client) -> None:
        with client.websocket_connect("/ws") as ws:
            ws.send_bytes(b"\x00\x01")
            error = receive_until(ws, "error")
            frames = join(ws, "u1", "Amber Sky")

        assert error["code"] == "INVALID_FRAME"
        assert frames[0]["event"] == "name_assigned"

    def test_unknown_event_should_return_error(self, client) -> None:
        with client.websocket_connect("/ws") as ws:
            ws.send_json({"event": "dance", "data": {}})
            error = receive_until(ws, "error")

        assert error["code"] == "UNKNOWN_EVENT"
        assert error["details"]["event"] == "dance"

    def test_chat_before_join_should_be_rejected(self, client) -> None:
        with client.websocket_connect("/ws") as ws:
            ws.send_json({"event": "chat_message", "data": {"userId": "u1", "message": "hi"}})
            error = receive_until(ws, "error")

        assert error["code"] == "VALIDATION_ERROR"
        assert client.get("/api/message-history").json()["total"] == 0
