"""
Integration Tests for Chat API

Sessions, messages, history, export and stats over HTTP. No LLM keys
are configured, so replies come from canned fallbacks.
"""

from uuid import uuid4

from fastapi.testclient import TestClient

CHAT = "/api/v1/chat"


def _send(client: TestClient, headers: dict, message: str, session_id=None) -> dict:
    payload = {"message": message}
    if session_id:
        payload["session_id"] = session_id
    response = client.post(f"{CHAT}/message", json=payload, headers=headers)
    assert response.status_code == 200, response.text
    return response.json()


class TestSendMessage:
    """Test suite for POST /chat/message."""

    def test_message_starts_session(self, client: TestClient, auth_headers: dict) -> None:
        body = _send(client, auth_headers, "I've been stressed about exams")

        assert body["ai_response"]["source"] == "fallback"
        assert body["ai_response"]["crisis_detected"] is False
        assert body["ai_response"]["emergency_resources"] is None
        assert body["user_message"]["content"] == "I've been stressed about exams"

        history = client.get(f"{CHAT}/sessions/{body['session_id']}/messages", headers=auth_headers)
        assert history.status_code == 200
        assert [m["sender"] for m in history.json()["messages"]] == ["user", "ai"]

    def test_second_message_same_session(self, client: TestClient, auth_headers: dict) -> None:
        first = _send(client, auth_headers, "hello")

        _send(client, auth_headers, "still here", session_id=first["session_id"])

        history = client.get(f"{CHAT}/sessions/{first['session_id']}/messages", headers=auth_headers).json()
        assert history["session"]["message_count"] == 4
        assert [m["content"] for m in history["messages"]][::2] == ["hello", "still here"]

    def test_unknown_session(self, client: TestClient, auth_headers: dict) -> None:
        response = client.post(
            f"{CHAT}/message",
            json={"message": "hi", "session_id": str(uuid4())},
            headers=auth_headers,
        )

        assert response.status_code == 404
        assert response.json()["code"] == "NOT_FOUND"

    def test_validation(self, client: TestClient, auth_headers: dict) -> None:
        empty = client.post(f"{CHAT}/message", json={"message": ""}, headers=auth_headers)
        too_long = client.post(f"{CHAT}/message", json={"message": "x" * 2001}, headers=auth_headers)

        assert empty.status_code == 400
        assert empty.json()["details"][0]["field"] == "message"
        assert too_long.status_code == 400

    def test_blank_message_rejected(self, client: TestClient, auth_headers: dict) -> None:
        """Whitespace-only text fails validation and creates no session."""
        response = client.post(f"{CHAT}/message", json={"message": "    \n\t"}, headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"
        assert client.get(f"{CHAT}/sessions", headers=auth_headers).json()["sessions"] == []

    def test_message_trimmed(self, client: TestClient, auth_headers: dict) -> None:
        body = _send(client, auth_headers, "  hello there  ")

        assert body["user_message"]["content"] == "hello there"

    def test_requires_auth(self, client: TestClient) -> None:
        response = client.post(f"{CHAT}/message", json={"message": "hi"})

        assert response.status_code == 401


class TestSessions:
    """Session creation, listing and deletion."""

    def test_create_empty_session(self, client: TestClient, auth_headers: dict) -> None:
        response = client.post(f"{CHAT}/sessions", json={"title": "Exam week"}, headers=auth_headers)

        assert response.status_code == 201
        body = response.json()
        assert body["session"]["title"] == "Exam week"
        assert body["session"]["message_count"] == 0
        assert body["initial_response"] is None

    def test_create_with_initial_message(self, client: TestClient, auth_headers: dict) -> None:
        response = client.post(
            f"{CHAT}/sessions", json={"initial_message": "Hi there"}, headers=auth_headers
        )

        body = response.json()
        assert body["session"]["title"].startswith("Chat Session ")
        assert body["initial_response"]["session_id"] == body["session"]["id"]

    def test_blank_initial_message_rejected(self, client: TestClient, auth_headers: dict) -> None:
        response = client.post(f"{CHAT}/sessions", json={"initial_message": "   "}, headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    def test_list_sessions(self, client: TestClient, auth_headers: dict) -> None:
        _send(client, auth_headers, "first")
        _send(client, auth_headers, "second")

        body = client.get(f"{CHAT}/sessions", params={"limit": 1}, headers=auth_headers).json()

        assert len(body["sessions"]) == 1
        assert body["sessions"][0]["last_message"]["sender"] == "ai"
        assert body["pagination"] == {
            "page": 1,
            "limit": 1,
            "total_pages": 2,
            "total_count": 2,
            "has_next_page": True,
            "has_prev_page": False,
        }

    def test_other_users_session_hidden(self, client: TestClient, auth_headers: dict, register_user) -> None:
        session_id = _send(client, auth_headers, "mine")["session_id"]
        other = {"Authorization": f"Bearer {register_user()['tokens']['access_token']}"}

        assert client.get(f"{CHAT}/sessions/{session_id}/messages", headers=other).status_code == 404
        assert client.delete(f"{CHAT}/sessions/{session_id}", headers=other).status_code == 404
        assert client.get(f"{CHAT}/sessions", headers=other).json()["sessions"] == []

    def test_delete_session(self, client: TestClient, auth_headers: dict) -> None:
        session_id = _send(client, auth_headers, "bye")["session_id"]

        deleted = client.delete(f"{CHAT}/sessions/{session_id}", headers=auth_headers)
        again = client.delete(f"{CHAT}/sessions/{session_id}", headers=auth_headers)

        assert deleted.status_code == 204
        assert again.status_code == 404


class TestCrisisCheckExportStats:
    """Stateless analysis, export and statistics."""

    def test_crisis_check_stores_nothing(self, client: TestClient, auth_headers: dict) -> None:
        response = client.post(
            f"{CHAT}/crisis-check", json={"message": "I feel hopeless"}, headers=auth_headers
        )

        body = response.json()
        assert body["crisis"]["detected"] is True
        assert body["crisis"]["level"] == "medium"
        assert body["emergency_resources"]["crisis_lines"]
        assert client.get(f"{CHAT}/sessions", headers=auth_headers).json()["sessions"] == []

    def test_crisis_check_blank(self, client: TestClient, auth_headers: dict) -> None:
        response = client.post(f"{CHAT}/crisis-check", json={"message": "   "}, headers=auth_headers)

        assert response.status_code == 400

    def test_export(self, client: TestClient, auth_headers: dict) -> None:
        _send(client, auth_headers, "export me")

        response = client.get(f"{CHAT}/export", headers=auth_headers)

        assert response.status_code == 200
        assert response.headers["Content-Disposition"].startswith('attachment; filename="wellness-chat-export-')
        body = response.json()
        assert body["total_sessions"] == 1
        assert len(body["sessions"][0]["messages"]) == 2

    def test_stats(self, client: TestClient, auth_headers: dict) -> None:
        _send(client, auth_headers, "count me")

        body = client.get(f"{CHAT}/stats", headers=auth_headers).json()

        assert body["user"] == {"total_sessions": 1, "total_messages": 2, "recent_sessions": 1}
        assert body["service"]["messages_processed"] >= 1
