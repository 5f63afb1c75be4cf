"""Domain models package."""

from wellness.domain.models.analysis import (
    CrisisAnalysis,
    SentimentAnalysis,
    SentimentIndicator,
)
from wellness.domain.models.wellness_profile import WellnessProfile

__all__ = [
    "CrisisAnalysis",
    "SentimentAnalysis",
    "SentimentIndicator",
    "WellnessProfile",
]
