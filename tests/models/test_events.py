"""
Test suite for relay event parsing.

System role: Verification of boundary validation for client frames
"""

import pytest

from chatrelay.core.exceptions import UnknownEventError, ValidationError
from chatrelay.models.events import (
    ChatMessagePayload,
    ClientEventType,
    FileSharedPayload,
    JoinPayload,
    parse_client_event,
)


class TestParseClientEvent:
    """Test suite for parse_client_event()."""

    def test_parse_client_event_should_build_join_payload(self) -> None:
        event_type, payload = parse_client_event({"event": "join", "data": {"userId": "u1", "userName": "Ann"}})

        assert event_type is ClientEventType.JOIN
        assert isinstance(payload, JoinPayload)
        assert payload.user_id == "u1"
        assert payload.user_name == "Ann"

    def test_parse_client_event_should_default_source_lang(self) -> None:
        _, payload = parse_client_event({"event": "chat_message", "data": {"userId": "u1", "message": "hi"}})

        assert isinstance(payload, ChatMessagePayload)
        assert payload.source_lang == "EN"
        assert payload.client_message_id is None

    def test_parse_client_event_should_reject_overlong_source_lang(self) -> None:
        data = {"userId": "u1", "message": "hi", "sourceLang": "x" * 17}

        with pytest.raises(ValidationError) as exc_info:
            parse_client_event({"event": "chat_message", "data": data})

        assert any(err["loc"] == "sourceLang" for err in exc_info.value.details["errors"])

    def test_parse_client_event_should_accept_mime_type_spellings(self) -> None:
        data = {
            "userId": "u1",
            "files": [{"fileId": "f1", "name": "a.pdf", "mimeType": "application/pdf", "url": "https://x/a.pdf"}],
        }

        _, payload = parse_client_event({"event": "file_shared", "data": data})

        assert isinstance(payload, FileSharedPayload)
        assert payload.files[0].mimetype == "application/pdf"

    def test_parse_client_event_should_reject_unknown_event(self) -> None:
        with pytest.raises(UnknownEventError) as exc_info:
            parse_client_event({"event": "typing", "data": {}})

        assert exc_info.value.code == "UNKNOWN_EVENT"

    @pytest.mark.parametrize("frame", [None, [], "join", {"event": "join", "data": "u1"}])
    def test_parse_client_event_should_reject_malformed_frames(self, frame) -> None:
        with pytest.raises(ValidationError):
            parse_client_event(frame)

    def test_parse_client_event_should_list_field_errors(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            parse_client_event({"event": "delete_message", "data": {"userId": "u1"}})

        errors = exc_info.value.details["errors"]
        assert any(err["loc"] == "messageId" for err in errors)

    def test_parse_client_event_should_require_user_id(self) -> None:
        with pytest.raises(ValidationError):
            parse_client_event({"event": "heartbeat", "data": {}})
