"""
Integration Tests for User Profile API
"""

from fastapi.testclient import TestClient

USERS = "/api/v1/users"


class TestProfile:
    """Profile reads and updates."""

    def test_get_profile(self, client: TestClient, auth_headers: dict) -> None:
        response = client.get(f"{USERS}/profile", headers=auth_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["anonymous"] is True
        assert body["wellness_summary"] == {
            "assessment_count": 0,
            "mood_entries": 0,
            "recent_crisis_events": 0,
            "total_sessions": 0,
        }

    def test_set_email_makes_account_named(self, client: TestClient, auth_headers: dict) -> None:
        response = client.put(
            f"{USERS}/profile", json={"email": "New@Example.com"}, headers=auth_headers
        )

        assert response.status_code == 200
        assert response.json()["email"] == "new@example.com"
        assert response.json()["anonymous"] is False

    def test_email_in_use(self, client: TestClient, auth_headers: dict, register_user) -> None:
        register_user(email="taken@example.com", password="a-long-passphrase")

        response = client.put(
            f"{USERS}/profile", json={"email": "taken@example.com"}, headers=auth_headers
        )

        assert response.status_code == 400
        assert response.json()["code"] == "CONFLICT"

    def test_profile_preferences_merged(self, client: TestClient, auth_headers: dict) -> None:
        response = client.put(
            f"{USERS}/profile",
            json={"preferences": {"theme": "dark", "notifications": {"daily_checkin": False}}},
            headers=auth_headers,
        )

        preferences = response.json()["preferences"]
        assert preferences["theme"] == "dark"
        assert preferences["language"] == "en"
        assert preferences["notifications"] == {"daily_checkin": False, "crisis_alerts": True}


class TestPreferences:
    """PUT /users/preferences."""

    def test_update(self, client: TestClient, auth_headers: dict) -> None:
        response = client.put(
            f"{USERS}/preferences",
            json={"language": "es", "privacy": {"analytics": True}},
            headers=auth_headers,
        )

        assert response.status_code == 200
        preferences = response.json()["preferences"]
        assert preferences["language"] == "es"
        assert preferences["privacy"] == {"data_sharing": False, "analytics": True}

    def test_invalid_theme(self, client: TestClient, auth_headers: dict) -> None:
        response = client.put(f"{USERS}/preferences", json={"theme": "neon"}, headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"


class TestDeleteAccount:
    """DELETE /users/account."""

    def test_wrong_confirmation(self, client: TestClient, auth_headers: dict) -> None:
        response = client.request(
            "DELETE", f"{USERS}/account", json={"confirmation": "yes please"}, headers=auth_headers
        )

        assert response.status_code == 400
        assert "DELETE_MY_ACCOUNT" in response.json()["details"]

    def test_account_anonymized(self, client: TestClient, auth_headers: dict) -> None:
        client.post("/api/v1/chat/message", json={"message": "remember this"}, headers=auth_headers)

        response = client.request(
            "DELETE", f"{USERS}/account", json={"confirmation": "DELETE_MY_ACCOUNT"}, headers=auth_headers
        )

        assert response.status_code == 200
        assert response.json()["message"] == "Account has been anonymized and deactivated"
        me = client.get("/api/v1/auth/me", headers=auth_headers)
        assert me.status_code == 401
        assert me.json()["error"] == "User not found or inactive"
