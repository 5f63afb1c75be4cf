"""Unit tests for log event processors."""

from wellness.config.logging_config import REDACTED, build_processors, redact_event, short_id, stamp_service


class TestRedaction:

    def test_credentials_and_chat_text_blanked(self) -> None:
        event = redact_event(None, "info", {
            "event": "Login failed",
            "password": "hunter22",
            "access_token": "abc",
            "message_content": "I feel awful",
            "attempts": 2,
        })

        assert event["password"] == REDACTED
        assert event["access_token"] == REDACTED
        assert event["message_content"] == REDACTED
        assert event["attempts"] == 2
        assert event["event"] == "Login failed"

    def test_nested_values(self) -> None:
        event = redact_event(None, "info", {
            "request": {"headers": {"Authorization": "Bearer x"}, "path": "/api/v1/chat/message"},
            "items": [{"secret_key": "s"}],
        })

        assert event["request"]["headers"]["Authorization"] == REDACTED
        assert event["request"]["path"] == "/api/v1/chat/message"
        assert event["items"] == [{"secret_key": REDACTED}]


class TestProcessors:

    def test_service_stamp(self) -> None:
        event = stamp_service(None, "info", {"event": "x"})

        assert event["service"] == "wellness-backend"
        assert event["version"]

    def test_renderer_by_environment(self) -> None:
        json_names = [type(p).__name__ for p in build_processors(json_output=True)]
        console_names = [type(p).__name__ for p in build_processors(json_output=False)]

        assert json_names[-1] == "JSONRenderer"
        assert console_names[-1] == "ConsoleRenderer"

    def test_short_id(self) -> None:
        assert short_id("0123456789abcdef") == "01234567..."
        assert short_id(None) == "-"
