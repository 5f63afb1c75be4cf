"""
Message Analysis Results

Value objects produced by crisis detection and sentiment
analysis for a single chat message.
"""

from dataclasses import dataclass, field

from wellness.domain.enums import CrisisLevel, SentimentLabel


@dataclass
class CrisisAnalysis:
    """
    Result of crisis detection on one message.

    Attributes:
        detected: Whether any crisis keyword or pattern matched
        level: Severity verdict (NONE when not detected)
        confidence: Accumulated match weight, capped at 1.0
        triggers: Matched keywords, pattern ids and context markers
    """

    detected: bool = False
    level: CrisisLevel = CrisisLevel.NONE
    confidence: float = 0.0
    triggers: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "detected": self.detected,
            "level": self.level.value,
            "confidence": round(self.confidence, 3),
            "triggers": list(self.triggers),
        }


@dataclass
class SentimentIndicator:
    """A keyword that adjusted the sentiment score."""

    indicator_type: str  # positive, anxiety
    word: str

    def to_dict(self) -> dict:
        return {"type": self.indicator_type, "word": self.word}


@dataclass
class SentimentAnalysis:
    """
    Result of sentiment analysis on one message.

    Attributes:
        score: Polarity in [-1.0, 1.0]
        label: Five-way sentiment label
        indicators: Keywords that moved the score
    """

    score: float = 0.0
    label: SentimentLabel = SentimentLabel.NEUTRAL
    indicators: list[SentimentIndicator] = field(default_factory=list)

    @property
    def storage_label(self) -> SentimentLabel:
        """Three-way label persisted on messages."""
        return self.label.storage_value

    @property
    def normalized_score(self) -> float:
        """Score mapped from [-1, 1] onto [0, 1]."""
        return round((self.score + 1.0) / 2.0, 4)

    @property
    def has_anxiety_indicators(self) -> bool:
        return any(i.indicator_type == "anxiety" for i in self.indicators)

    def to_dict(self) -> dict:
        return {
            "score": round(self.score, 3),
            "label": self.label.value,
            "indicators": [i.to_dict() for i in self.indicators],
        }
