"""
Sentiment Analyzer

Labels chat messages with a polarity score and a five-way sentiment
label. TextBlob supplies the base polarity; a small lexicon of
wellness-specific words nudges it and is reported back as
indicators (e.g. anxiety words drive anxiety-management tips).
"""

import re

from textblob import TextBlob

from wellness.config.logging_config import get_logger
from wellness.domain.enums import SentimentLabel
from wellness.domain.models import SentimentAnalysis, SentimentIndicator

logger = get_logger(__name__)


def _phrase(word: str) -> re.Pattern:
    return re.compile(rf"\b{re.escape(word)}\b", re.IGNORECASE)


class SentimentAnalyzer:
    """
    TextBlob polarity plus wellness keyword adjustments.

    Score bands:
        > 0.5  very_positive
        > 0.05 positive
        < -0.5 very_negative
        < -0.05 negative
        otherwise neutral
    """

    POSITIVE_KEYWORDS: tuple[str, ...] = (
        "happy", "good", "better", "great", "fine", "well", "excited",
        "hopeful", "grateful", "proud", "accomplished", "content", "peaceful",
    )
    ANXIETY_KEYWORDS: tuple[str, ...] = (
        "anxious", "worried", "panic", "scared", "frightened", "nervous",
        "overwhelmed", "stressed", "tense", "on edge", "racing thoughts",
    )

    POSITIVE_ADJUSTMENT = 0.1
    ANXIETY_ADJUSTMENT = -0.05

    VERY_THRESHOLD = 0.5
    NEUTRAL_BAND = 0.05

    def __init__(self) -> None:
        self._positive = [(w, _phrase(w)) for w in self.POSITIVE_KEYWORDS]
        self._anxiety = [(w, _phrase(w)) for w in self.ANXIETY_KEYWORDS]

    def analyze(self, text: str) -> SentimentAnalysis:
        """
        Analyze sentiment of one message.

        Args:
            text: Raw message text

        Returns:
            SentimentAnalysis with score in [-1, 1]
        """
        if not text or not text.strip():
            return SentimentAnalysis()

        base = float(TextBlob(text).sentiment.polarity)

        indicators: list[SentimentIndicator] = []
        adjustment = 0.0
        for word, pattern in self._positive:
            if pattern.search(text):
                indicators.append(SentimentIndicator("positive", word))
                adjustment += self.POSITIVE_ADJUSTMENT
        for word, pattern in self._anxiety:
            if pattern.search(text):
                indicators.append(SentimentIndicator("anxiety", word))
                adjustment += self.ANXIETY_ADJUSTMENT

        score = max(-1.0, min(1.0, base + adjustment))
        label = self.label_for(score)

        logger.debug(
            "Sentiment analyzed",
            label=label.value,
            indicator_count=len(indicators),
        )

        return SentimentAnalysis(score=score, label=label, indicators=indicators)

    @classmethod
    def label_for(cls, score: float) -> SentimentLabel:
        if score > cls.VERY_THRESHOLD:
            return SentimentLabel.VERY_POSITIVE
        if score > cls.NEUTRAL_BAND:
            return SentimentLabel.POSITIVE
        if score < -cls.VERY_THRESHOLD:
            return SentimentLabel.VERY_NEGATIVE
        if score < -cls.NEUTRAL_BAND:
            return SentimentLabel.NEGATIVE
        return SentimentLabel.NEUTRAL
