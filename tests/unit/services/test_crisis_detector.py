"""
Unit Tests for Crisis Detector

Tests keyword and pattern matching, level grading and the
recent-history escalation.
"""

import pytest

from wellness.domain.enums import CrisisLevel
from wellness.services.safety import CrisisDetector


class TestCrisisDetector:
    """Test suite for CrisisDetector."""

    @pytest.fixture
    def detector(self) -> CrisisDetector:
        return CrisisDetector()

    def test_neutral_message_not_detected(self, detector: CrisisDetector) -> None:
        result = detector.detect("I had a pretty normal day at school.")

        assert not result.detected
        assert result.level == CrisisLevel.NONE
        assert result.triggers == []
        assert result.confidence == 0.0

    def test_empty_message_not_detected(self, detector: CrisisDetector) -> None:
        assert not detector.detect("").detected
        assert not detector.detect("   ").detected

    def test_high_risk_keyword_is_high(self, detector: CrisisDetector) -> None:
        """High-risk keywords grade HIGH regardless of confidence."""
        result = detector.detect("I keep thinking about suicide")

        assert result.detected
        assert result.level == CrisisLevel.HIGH
        assert "suicide" in result.triggers

    def test_pattern_match_recorded(self, detector: CrisisDetector) -> None:
        result = detector.detect("I want to kill myself")

        assert result.detected
        assert "kill myself" in result.triggers
        assert "pattern_1" in result.triggers
        assert result.level == CrisisLevel.HIGH

    def test_medium_risk_keyword_is_medium(self, detector: CrisisDetector) -> None:
        result = detector.detect("I feel hopeless")

        assert result.detected
        assert result.level == CrisisLevel.MEDIUM
        assert result.triggers == ["hopeless"]

    def test_single_low_keyword_is_low(self, detector: CrisisDetector) -> None:
        result = detector.detect("Sometimes I just want to give up")

        assert result.detected
        assert result.level == CrisisLevel.LOW
        assert result.triggers == ["give up"]

    def test_recent_crisis_history_escalates_level(self, detector: CrisisDetector) -> None:
        result = detector.detect("Sometimes I just want to give up", recent_crisis_count=2)

        assert result.level == CrisisLevel.MEDIUM
        assert result.triggers[-1] == CrisisDetector.RECENT_HISTORY_TRIGGER

    def test_history_alone_does_not_trigger(self, detector: CrisisDetector) -> None:
        """Past crises never flag an otherwise safe message."""
        result = detector.detect("Exams went okay today", recent_crisis_count=3)

        assert not result.detected
        assert result.level == CrisisLevel.NONE

    def test_immediacy_words_recorded(self, detector: CrisisDetector) -> None:
        result = detector.detect("I want to give up tonight")

        assert "immediate_tonight" in result.triggers
        assert result.confidence > 0.1

    def test_immediacy_words_alone_do_not_trigger(self, detector: CrisisDetector) -> None:
        result = detector.detect("I'm going to the cinema tonight")

        assert not result.detected

    def test_keyword_inside_longer_word_ignored(self, detector: CrisisDetector) -> None:
        """Phrases must stand on their own ('skill myself' is not 'kill myself')."""
        assert not detector.detect("I need to skill myself up for the job").detected
        assert not detector.detect("We baked pillsbury rolls").detected

    def test_case_insensitive(self, detector: CrisisDetector) -> None:
        assert detector.detect("I FEEL WORTHLESS").detected

    def test_curly_apostrophe_normalized(self, detector: CrisisDetector) -> None:
        result = detector.detect("I can’t go on like this")

        assert result.detected
        assert "can't go on" in result.triggers

    def test_confidence_capped(self, detector: CrisisDetector) -> None:
        result = detector.detect(
            "I feel hopeless and worthless, I want to die, I will kill myself tonight, "
            "I'm going to end it all now, nobody cares, life isn't worth living, "
            "I have nothing to live for and nobody would miss me"
        )

        assert result.confidence == 1.0
        assert result.level == CrisisLevel.HIGH

    def test_to_dict(self, detector: CrisisDetector) -> None:
        data = detector.detect("I feel hopeless").to_dict()

        assert data == {
            "detected": True,
            "level": "medium",
            "confidence": 0.1,
            "triggers": ["hopeless"],
        }
