"""
Wellness Profile Domain Model

The per-user JSON document holding assessment results, the mood
trail derived from chat sentiment, and recent crisis events.
Each list is capped so the document stays small.

PRIVACY: Crisis event excerpts are message content and follow the
same retention rules as chat messages.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Optional

from wellness.domain.clock import parse_timestamp, utc_now

MAX_ASSESSMENTS = 100
MAX_MOOD_HISTORY = 50
MAX_CRISIS_EVENTS = 20
CRISIS_EXCERPT_LENGTH = 100


@dataclass
class WellnessProfile:
    """
    Mutable view over a user's wellness_profile JSON column.

    Mutators return nothing; callers write to_dict() back to the
    model so SQLAlchemy sees a new value.
    """

    assessments: list[dict] = field(default_factory=list)
    mood_history: list[dict] = field(default_factory=list)
    crisis_events: list[dict] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "WellnessProfile":
        data = data or {}
        return cls(
            assessments=list(data.get("assessments", [])),
            mood_history=list(data.get("mood_history", [])),
            crisis_events=list(data.get("crisis_events", [])),
        )

    def to_dict(self) -> dict:
        return {
            "assessments": list(self.assessments),
            "mood_history": list(self.mood_history),
            "crisis_events": list(self.crisis_events),
        }

    def add_assessment(self, entry: dict) -> None:
        self.assessments.append(entry)
        self.assessments = self.assessments[-MAX_ASSESSMENTS:]

    def add_mood_entry(
        self,
        sentiment: str,
        score: float,
        session_id: Optional[str] = None,
        timestamp: Optional[datetime] = None,
    ) -> None:
        self.mood_history.append({
            "timestamp": (timestamp or utc_now()).isoformat(),
            "sentiment": sentiment,
            "score": round(score, 3),
            "session_id": session_id,
        })
        self.mood_history = self.mood_history[-MAX_MOOD_HISTORY:]

    def add_crisis_event(
        self,
        level: str,
        triggers: list[str],
        excerpt: str,
        session_id: Optional[str] = None,
        timestamp: Optional[datetime] = None,
    ) -> None:
        self.crisis_events.append({
            "timestamp": (timestamp or utc_now()).isoformat(),
            "level": level,
            "triggers": list(triggers),
            "excerpt": excerpt[:CRISIS_EXCERPT_LENGTH],
            "session_id": session_id,
        })
        self.crisis_events = self.crisis_events[-MAX_CRISIS_EVENTS:]

    def recent_crisis_count(self, days: int = 7, now: Optional[datetime] = None) -> int:
        """Number of crisis events recorded in the last `days` days."""
        cutoff = (now or utc_now()) - timedelta(days=days)
        return sum(
            1 for event in self.crisis_events
            if "timestamp" in event and parse_timestamp(event["timestamp"]) >= cutoff
        )

    def assessments_since(
        self,
        since: datetime,
        assessment_type: Optional[str] = None,
    ) -> list[dict]:
        """Assessments newer than `since`, newest first."""
        selected = [
            entry for entry in self.assessments
            if parse_timestamp(entry["timestamp"]) >= since
            and (assessment_type is None or entry.get("type") == assessment_type)
        ]
        return sorted(selected, key=lambda e: e["timestamp"], reverse=True)
