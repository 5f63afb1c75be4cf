"""Unit tests for recommendation selection."""

from wellness.domain.enums import CrisisLevel, SentimentLabel
from wellness.domain.models import CrisisAnalysis, SentimentAnalysis, SentimentIndicator
from wellness.services.chat.recommendations import build_recommendations


def _types(recommendations: list[dict]) -> list[str]:
    return [r["type"] for r in recommendations]


class TestBuildRecommendations:

    def test_neutral_has_none(self) -> None:
        assert build_recommendations(SentimentAnalysis(), CrisisAnalysis()) == []

    def test_crisis_comes_first(self) -> None:
        crisis = CrisisAnalysis(detected=True, level=CrisisLevel.HIGH, triggers=["suicide"])
        sentiment = SentimentAnalysis(score=-0.7, label=SentimentLabel.VERY_NEGATIVE)

        recommendations = build_recommendations(sentiment, crisis)

        assert _types(recommendations) == ["immediate_action", "mood_support"]
        assert recommendations[0]["priority"] == "high"

    def test_anxiety(self) -> None:
        sentiment = SentimentAnalysis(
            score=-0.2,
            label=SentimentLabel.NEGATIVE,
            indicators=[SentimentIndicator("anxiety", "worried")],
        )

        assert _types(build_recommendations(sentiment, CrisisAnalysis())) == [
            "mood_support",
            "anxiety_management",
        ]

    def test_positive(self) -> None:
        sentiment = SentimentAnalysis(score=0.6, label=SentimentLabel.VERY_POSITIVE)

        recommendations = build_recommendations(sentiment, CrisisAnalysis())

        assert _types(recommendations) == ["positive_reinforcement"]
        assert recommendations[0]["priority"] == "low"
