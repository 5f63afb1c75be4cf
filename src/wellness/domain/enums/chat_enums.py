"""
Chat Enumerations

Standardized values for chat sessions, messages and
the sentiment/crisis verdicts attached to messages.
"""

from enum import StrEnum


class SessionType(StrEnum):
    """Purpose of a chat session."""

    GENERAL_SUPPORT = "general_support"
    CRISIS_INTERVENTION = "crisis_intervention"
    ASSESSMENT = "assessment"
    CHECK_IN = "check_in"


class SessionStatus(StrEnum):
    """
    Chat session lifecycle states.

    CRISIS_ESCALATED is set as soon as any message in the
    session is flagged by crisis detection and is never reverted.
    """

    ACTIVE = "active"
    COMPLETED = "completed"
    ABANDONED = "abandoned"
    CRISIS_ESCALATED = "crisis_escalated"


class MessageSender(StrEnum):
    """Author of a message."""

    USER = "user"
    AI = "ai"
    SYSTEM = "system"


class MessageType(StrEnum):
    """Kind of message payload."""

    TEXT = "text"
    ASSESSMENT = "assessment"
    CRISIS_ALERT = "crisis_alert"
    RESOURCE = "resource"
    SYSTEM_MESSAGE = "system_message"


class SentimentLabel(StrEnum):
    """
    Sentiment classification.

    The five-way label is returned to clients. Persisted
    messages collapse it to positive/negative/neutral.
    """

    VERY_POSITIVE = "very_positive"
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"
    VERY_NEGATIVE = "very_negative"

    @property
    def storage_value(self) -> "SentimentLabel":
        """Collapse to the three values stored on messages."""
        if self in (SentimentLabel.VERY_POSITIVE, SentimentLabel.POSITIVE):
            return SentimentLabel.POSITIVE
        if self in (SentimentLabel.VERY_NEGATIVE, SentimentLabel.NEGATIVE):
            return SentimentLabel.NEGATIVE
        return SentimentLabel.NEUTRAL

    @property
    def is_positive(self) -> bool:
        return self in (SentimentLabel.VERY_POSITIVE, SentimentLabel.POSITIVE)

    @property
    def is_negative(self) -> bool:
        return self in (SentimentLabel.VERY_NEGATIVE, SentimentLabel.NEGATIVE)


class CrisisLevel(StrEnum):
    """
    Crisis severity verdict for a message.

    NONE means no crisis language was detected. CRITICAL is
    reserved for manual escalation and never produced by the
    keyword detector.
    """

    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    def escalate(self) -> "CrisisLevel":
        """Step one level up; HIGH and CRITICAL stay where they are."""
        if self == CrisisLevel.LOW:
            return CrisisLevel.MEDIUM
        if self == CrisisLevel.MEDIUM:
            return CrisisLevel.HIGH
        return self
