"""
Unit Tests for Sentiment Analyzer
"""

import pytest

from wellness.domain.enums import SentimentLabel
from wellness.domain.models import SentimentAnalysis
from wellness.services.sentiment import SentimentAnalyzer


class TestSentimentAnalyzer:
    """Test suite for SentimentAnalyzer."""

    @pytest.fixture
    def analyzer(self) -> SentimentAnalyzer:
        return SentimentAnalyzer()

    def test_positive_message(self, analyzer: SentimentAnalyzer) -> None:
        result = analyzer.analyze("I am so happy and grateful today")

        assert result.label.is_positive
        assert result.score > 0.05
        words = {i.word for i in result.indicators}
        assert {"happy", "grateful"} <= words

    def test_negative_message(self, analyzer: SentimentAnalyzer) -> None:
        result = analyzer.analyze("Everything is terrible and awful")

        assert result.label == SentimentLabel.VERY_NEGATIVE
        assert result.score < -0.5

    def test_anxiety_indicators(self, analyzer: SentimentAnalyzer) -> None:
        result = analyzer.analyze("I feel anxious and on edge before exams")

        assert result.has_anxiety_indicators
        anxiety_words = [i.word for i in result.indicators if i.indicator_type == "anxiety"]
        assert anxiety_words == ["anxious", "on edge"]

    def test_empty_message_is_neutral(self, analyzer: SentimentAnalyzer) -> None:
        result = analyzer.analyze("")

        assert result.label == SentimentLabel.NEUTRAL
        assert result.score == 0.0
        assert result.indicators == []

    def test_keywords_match_whole_words(self, analyzer: SentimentAnalyzer) -> None:
        """'wellness' must not count as the positive word 'well'."""
        result = analyzer.analyze("We had a wellness seminar")

        assert all(i.word != "well" for i in result.indicators)

    def test_score_clamped(self, analyzer: SentimentAnalyzer) -> None:
        result = analyzer.analyze("Happy great excited proud grateful hopeful content peaceful")

        assert result.score <= 1.0

    @pytest.mark.parametrize("score,expected", [
        (0.9, SentimentLabel.VERY_POSITIVE),
        (0.3, SentimentLabel.POSITIVE),
        (0.05, SentimentLabel.NEUTRAL),
        (0.0, SentimentLabel.NEUTRAL),
        (-0.05, SentimentLabel.NEUTRAL),
        (-0.3, SentimentLabel.NEGATIVE),
        (-0.9, SentimentLabel.VERY_NEGATIVE),
    ])
    def test_label_bands(self, score: float, expected: SentimentLabel) -> None:
        assert SentimentAnalyzer.label_for(score) == expected


class TestSentimentAnalysis:
    """Derived values on the analysis result."""

    def test_storage_label_collapses(self) -> None:
        assert SentimentLabel.VERY_POSITIVE.storage_value == SentimentLabel.POSITIVE
        assert SentimentLabel.VERY_NEGATIVE.storage_value == SentimentLabel.NEGATIVE
        assert SentimentLabel.NEUTRAL.storage_value == SentimentLabel.NEUTRAL

    def test_normalized_score(self) -> None:
        assert SentimentAnalysis(score=-1.0).normalized_score == 0.0
        assert SentimentAnalysis(score=0.0).normalized_score == 0.5
        assert SentimentAnalysis(score=1.0).normalized_score == 1.0
