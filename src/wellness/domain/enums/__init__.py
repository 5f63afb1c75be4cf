"""Domain enums package."""

from wellness.domain.enums.assessment_type import AssessmentSeverity, AssessmentType
from wellness.domain.enums.chat_enums import (
    CrisisLevel,
    MessageSender,
    MessageType,
    SentimentLabel,
    SessionStatus,
    SessionType,
)

__all__ = [
    "AssessmentSeverity",
    "AssessmentType",
    "CrisisLevel",
    "MessageSender",
    "MessageType",
    "SentimentLabel",
    "SessionStatus",
    "SessionType",
]
