"""
Unit Tests for Fallback Response Selection

The order in which canned replies are picked is safety relevant:
crisis first, always.
"""

import pytest

from wellness.domain.enums import CrisisLevel, SentimentLabel
from wellness.domain.models import CrisisAnalysis, SentimentAnalysis, SentimentIndicator
from wellness.services.chat.fallback_responses import (
    ANXIETY_RESPONSE,
    CRISIS_RESPONSE,
    DEFAULT_RESPONSE,
    EMOTIONAL_TOPICS,
    PHYSICAL_TOPICS,
    POSITIVE_RESPONSE,
    VERY_NEGATIVE_RESPONSE,
    select_fallback_response,
)

NO_CRISIS = CrisisAnalysis()
NEUTRAL = SentimentAnalysis()
VERY_NEGATIVE = SentimentAnalysis(score=-0.8, label=SentimentLabel.VERY_NEGATIVE)
POSITIVE = SentimentAnalysis(score=0.4, label=SentimentLabel.POSITIVE)


def _topic(topics, name: str) -> str:
    return next(t.response for t in topics if t.topic == name)


class TestSelectFallbackResponse:
    """Test suite for select_fallback_response."""

    def test_crisis_wins_over_everything(self) -> None:
        crisis = CrisisAnalysis(detected=True, level=CrisisLevel.LOW, triggers=["give up"])

        reply = select_fallback_response("I have a headache and I'm so happy", crisis, POSITIVE)

        assert reply == CRISIS_RESPONSE
        assert "988" in reply

    def test_physical_before_very_negative(self) -> None:
        reply = select_fallback_response("My head hurts so much", NO_CRISIS, VERY_NEGATIVE)

        assert reply == _topic(PHYSICAL_TOPICS, "headache")

    @pytest.mark.parametrize("message,topic", [
        ("I'm so exhausted", "tired"),
        ("I feel sick", "sick"),
        ("another migraine", "headache"),
    ])
    def test_physical_topics(self, message: str, topic: str) -> None:
        assert select_fallback_response(message, NO_CRISIS, NEUTRAL) == _topic(PHYSICAL_TOPICS, topic)

    def test_very_negative_before_emotional_topics(self) -> None:
        reply = select_fallback_response("I'm so sad", NO_CRISIS, VERY_NEGATIVE)

        assert reply == VERY_NEGATIVE_RESPONSE

    def test_anxiety_keyword(self) -> None:
        reply = select_fallback_response("My anxiety is bad today", NO_CRISIS, NEUTRAL)

        assert reply == ANXIETY_RESPONSE.response

    def test_anxiety_indicator_without_keyword(self) -> None:
        sentiment = SentimentAnalysis(indicators=[SentimentIndicator("anxiety", "nervous")])

        reply = select_fallback_response("I'm nervous about tomorrow", NO_CRISIS, sentiment)

        assert reply == ANXIETY_RESPONSE.response

    @pytest.mark.parametrize("message,topic", [
        ("I've been depressed", "depressed"),
        ("So much stress at school", "stress"),
        ("I feel lonely", "lonely"),
    ])
    def test_emotional_topics(self, message: str, topic: str) -> None:
        assert select_fallback_response(message, NO_CRISIS, NEUTRAL) == _topic(EMOTIONAL_TOPICS, topic)

    def test_positive(self) -> None:
        assert select_fallback_response("Had a nice day", NO_CRISIS, POSITIVE) == POSITIVE_RESPONSE

    def test_default(self) -> None:
        assert select_fallback_response("What's up", NO_CRISIS, NEUTRAL) == DEFAULT_RESPONSE
