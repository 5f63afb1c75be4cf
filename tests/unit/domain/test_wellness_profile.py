"""
Unit Tests for Wellness Profile

Tests list caps, crisis windows and assessment filtering on the
profile document.
"""

from datetime import timedelta

from wellness.domain.clock import utc_now
from wellness.domain.models import WellnessProfile
from wellness.domain.models.wellness_profile import (
    CRISIS_EXCERPT_LENGTH,
    MAX_CRISIS_EVENTS,
    MAX_MOOD_HISTORY,
)


class TestWellnessProfile:
    """Test suite for WellnessProfile."""

    def test_from_empty(self) -> None:
        profile = WellnessProfile.from_dict(None)

        assert profile.to_dict() == {"assessments": [], "mood_history": [], "crisis_events": []}

    def test_mood_history_capped(self) -> None:
        profile = WellnessProfile()

        for i in range(MAX_MOOD_HISTORY + 5):
            profile.add_mood_entry("neutral", 0.0, session_id=str(i))

        assert len(profile.mood_history) == MAX_MOOD_HISTORY
        assert profile.mood_history[0]["session_id"] == "5"

    def test_crisis_events_capped_and_excerpted(self) -> None:
        profile = WellnessProfile()

        for _ in range(MAX_CRISIS_EVENTS + 3):
            profile.add_crisis_event("high", ["suicide"], excerpt="x" * 500)

        assert len(profile.crisis_events) == MAX_CRISIS_EVENTS
        assert len(profile.crisis_events[-1]["excerpt"]) == CRISIS_EXCERPT_LENGTH

    def test_recent_crisis_count_window(self) -> None:
        """Only events from the last seven days count."""
        now = utc_now()
        profile = WellnessProfile()
        profile.add_crisis_event("low", ["give up"], "old", timestamp=now - timedelta(days=8))
        profile.add_crisis_event("medium", ["hopeless"], "new", timestamp=now - timedelta(days=2))

        assert profile.recent_crisis_count(now=now) == 1
        assert profile.recent_crisis_count(days=30, now=now) == 2

    def test_roundtrip_through_dict(self) -> None:
        profile = WellnessProfile()
        profile.add_mood_entry("positive", 0.42)

        restored = WellnessProfile.from_dict(profile.to_dict())

        assert restored.mood_history == profile.mood_history

    def test_assessments_since_newest_first(self) -> None:
        now = utc_now()
        profile = WellnessProfile()
        profile.add_assessment({"type": "mood", "timestamp": (now - timedelta(days=40)).isoformat()})
        profile.add_assessment({"type": "phq9", "timestamp": (now - timedelta(days=3)).isoformat()})
        profile.add_assessment({"type": "mood", "timestamp": (now - timedelta(days=1)).isoformat()})

        recent = profile.assessments_since(now - timedelta(days=30))
        moods = profile.assessments_since(now - timedelta(days=30), assessment_type="mood")

        assert [e["type"] for e in recent] == ["mood", "phq9"]
        assert len(moods) == 1
