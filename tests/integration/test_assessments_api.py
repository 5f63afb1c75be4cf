"""
Integration Tests for Assessments API

Mood check-ins and PHQ-9 / GAD-7 screenings over HTTP.
"""

from fastapi.testclient import TestClient

ASSESSMENTS = "/api/v1/assessments"


class TestMood:
    """Mood check-ins and history."""

    def test_record_mood(self, client: TestClient, auth_headers: dict) -> None:
        response = client.post(
            f"{ASSESSMENTS}/mood",
            json={"mood": 7, "energy": 5, "notes": "ok day"},
            headers=auth_headers,
        )

        assert response.status_code == 201
        body = response.json()
        assert body["type"] == "mood"
        assert body["data"]["mood"] == 7
        assert body["data"]["notes"] == "ok day"

    def test_mood_out_of_range(self, client: TestClient, auth_headers: dict) -> None:
        response = client.post(f"{ASSESSMENTS}/mood", json={"mood": 11}, headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    def test_mood_history_averages(self, client: TestClient, auth_headers: dict) -> None:
        client.post(f"{ASSESSMENTS}/mood", json={"mood": 4, "anxiety": 6}, headers=auth_headers)
        client.post(f"{ASSESSMENTS}/mood", json={"mood": 8, "anxiety": 2}, headers=auth_headers)

        body = client.get(f"{ASSESSMENTS}/mood/history", headers=auth_headers).json()

        assert body["summary"]["total"] == 2
        assert body["summary"]["avg_mood"] == 6.0
        assert body["summary"]["avg_anxiety"] == 4.0
        assert body["summary"]["avg_energy"] == 0
        assert body["date_range"]["days"] == 30


class TestScreenings:
    """PHQ-9 and GAD-7."""

    def test_phq9_severity(self, client: TestClient, auth_headers: dict) -> None:
        response = client.post(
            f"{ASSESSMENTS}/phq9", json={"responses": [2, 2, 2, 2, 2, 1, 1, 0, 0]}, headers=auth_headers
        )

        assert response.status_code == 201
        body = response.json()
        assert body["score"] == 12
        assert body["severity"] == "moderate"
        assert body["resources"]["crisis_lines"][0]["contact"] == "988"
        assert body["emergency_resources"] is None

    def test_phq9_self_harm_item(self, client: TestClient, auth_headers: dict) -> None:
        """Any non-zero answer on item 9 returns emergency resources."""
        response = client.post(
            f"{ASSESSMENTS}/phq9", json={"responses": [0, 0, 0, 0, 0, 0, 0, 0, 1]}, headers=auth_headers
        )

        body = response.json()
        assert body["severity"] == "minimal"
        assert body["resources"] is None
        assert body["emergency_resources"]["crisis_lines"]

        profile = client.get("/api/v1/users/profile", headers=auth_headers).json()
        assert profile["wellness_summary"]["recent_crisis_events"] == 1
        assert profile["wellness_summary"]["assessment_count"] == 1

    def test_phq9_wrong_length(self, client: TestClient, auth_headers: dict) -> None:
        response = client.post(f"{ASSESSMENTS}/phq9", json={"responses": [1] * 8}, headers=auth_headers)

        assert response.status_code == 400

    def test_phq9_answer_out_of_range(self, client: TestClient, auth_headers: dict) -> None:
        response = client.post(f"{ASSESSMENTS}/phq9", json={"responses": [4] * 9}, headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    def test_gad7(self, client: TestClient, auth_headers: dict) -> None:
        response = client.post(f"{ASSESSMENTS}/gad7", json={"responses": [3] * 7}, headers=auth_headers)

        assert response.status_code == 201
        assert response.json()["score"] == 21
        assert response.json()["severity"] == "severe"


class TestHistoryAndForms:

    def test_history_filter(self, client: TestClient, auth_headers: dict) -> None:
        client.post(f"{ASSESSMENTS}/mood", json={"mood": 5}, headers=auth_headers)
        client.post(f"{ASSESSMENTS}/gad7", json={"responses": [1] * 7}, headers=auth_headers)

        everything = client.get(f"{ASSESSMENTS}/history", headers=auth_headers).json()
        gad_only = client.get(f"{ASSESSMENTS}/history", params={"type": "gad7"}, headers=auth_headers).json()

        assert everything["summary"]["by_type"] == {"mood": 1, "gad7": 1}
        assert [a["type"] for a in gad_only["assessments"]] == ["gad7"]

    def test_forms(self, client: TestClient, auth_headers: dict) -> None:
        forms = client.get(f"{ASSESSMENTS}/forms", headers=auth_headers).json()["forms"]

        assert len(forms["phq9"]["questions"]) == 9
        assert len(forms["gad7"]["questions"]) == 7
        assert forms["mood"]["fields"]["mood"] == {"min": 1, "max": 10, "required": True}
