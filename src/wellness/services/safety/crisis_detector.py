"""
Crisis Detector

Flags possible self-harm and suicide language in chat messages
using a fixed keyword list and phrase patterns, then grades the
result into a crisis level.

SAFETY-CRITICAL: False negatives are worse than false positives.
Any keyword or pattern match marks the message as a crisis; context
words only raise confidence and never trigger detection on their own.

LEGAL_REVIEW_REQUIRED: Keyword lists and level thresholds have
clinical implications and must be reviewed before changes ship.
"""

import re

from wellness.config.logging_config import get_logger
from wellness.domain.enums import CrisisLevel
from wellness.domain.models import CrisisAnalysis

logger = get_logger(__name__)


def _phrase(keyword: str) -> re.Pattern:
    return re.compile(rf"(?<![a-z]){re.escape(keyword)}(?![a-z])", re.IGNORECASE)


class CrisisDetector:
    """
    Keyword and pattern based crisis detection.

    Scoring:
    - each crisis keyword adds 0.10 and is recorded as a trigger
    - each crisis pattern adds 0.15 and is recorded as pattern_<n>
    - each escalating word (always, never, ...) adds 0.05
    - each immediacy word (tonight, now, ...) adds 0.10 and is
      recorded as immediate_<word>

    Levels (only when detected):
    - HIGH: a high-risk keyword matched or confidence > 0.3
    - MEDIUM: a medium-risk keyword matched or confidence > 0.2
    - LOW: otherwise
    A crisis within the last week raises the level one step.

    Usage:
        detector = CrisisDetector()
        result = detector.detect("I feel hopeless", recent_crisis_count=0)
    """

    # CLINICAL_VALIDATION_REQUIRED
    CRISIS_KEYWORDS: tuple[str, ...] = (
        "suicide",
        "kill myself",
        "end my life",
        "want to die",
        "better off dead",
        "self-harm",
        "hurt myself",
        "cut myself",
        "overdose",
        "pills",
        "hopeless",
        "worthless",
        "nobody cares",
        "give up",
        "can't go on",
        "end it all",
        "no point",
        "done with life",
        "tired of living",
    )

    # (trigger name, compiled pattern, weight)
    CRISIS_PATTERNS: list[tuple[str, re.Pattern, float]] = [
        ("pattern_1", re.compile(r"\bI (want to|will|am going to) (kill|hurt|harm) myself", re.IGNORECASE), 0.15),
        ("pattern_2", re.compile(r"\bI'm (going to|planning to) (die|kill myself|end it)", re.IGNORECASE), 0.15),
        ("pattern_3", re.compile(r"life isn't worth living", re.IGNORECASE), 0.15),
        ("pattern_4", re.compile(r"\b(nobody|no one) would miss me", re.IGNORECASE), 0.15),
        ("pattern_5", re.compile(r"planning to (hurt|harm|kill)", re.IGNORECASE), 0.15),
        ("pattern_6", re.compile(r"have nothing to live for", re.IGNORECASE), 0.15),
        ("pattern_7", re.compile(r"ready to give up", re.IGNORECASE), 0.15),
    ]

    KEYWORD_WEIGHT = 0.10
    ESCALATING_WORDS: frozenset[str] = frozenset({
        "always", "never", "everything", "nothing", "everyone", "nobody",
    })
    ESCALATING_WEIGHT = 0.05
    IMMEDIATE_WORDS: tuple[str, ...] = ("tonight", "today", "now", "soon", "planning")
    IMMEDIATE_WEIGHT = 0.10

    HIGH_RISK_TRIGGERS: frozenset[str] = frozenset({
        "suicide", "kill myself", "end my life", "overdose",
    })
    MEDIUM_RISK_TRIGGERS: frozenset[str] = frozenset({
        "self-harm", "hurt myself", "hopeless", "worthless",
    })
    HIGH_CONFIDENCE = 0.3
    MEDIUM_CONFIDENCE = 0.2

    RECENT_HISTORY_TRIGGER = "recent_crisis_history"

    _WORD_RE = re.compile(r"[a-z']+")

    def __init__(self) -> None:
        self._keyword_patterns = [(kw, _phrase(kw)) for kw in self.CRISIS_KEYWORDS]

    @staticmethod
    def _normalize(text: str) -> str:
        # Curly apostrophes from mobile keyboards
        return text.replace("’", "'").replace("‘", "'")

    def detect(self, text: str, recent_crisis_count: int = 0) -> CrisisAnalysis:
        """
        Analyze one message for crisis language.

        Args:
            text: Raw message text
            recent_crisis_count: Crisis events recorded for the user
                during the last 7 days

        Returns:
            CrisisAnalysis verdict
        """
        if not text or not text.strip():
            return CrisisAnalysis()

        normalized = self._normalize(text)
        triggers: list[str] = []
        confidence = 0.0
        detected = False

        for keyword, pattern in self._keyword_patterns:
            if pattern.search(normalized):
                detected = True
                triggers.append(keyword)
                confidence += self.KEYWORD_WEIGHT

        for name, pattern, weight in self.CRISIS_PATTERNS:
            if pattern.search(normalized):
                detected = True
                triggers.append(name)
                confidence += weight

        words = set(self._WORD_RE.findall(normalized.lower()))
        confidence += self.ESCALATING_WEIGHT * len(words & self.ESCALATING_WORDS)
        for word in self.IMMEDIATE_WORDS:
            if word in words:
                confidence += self.IMMEDIATE_WEIGHT
                triggers.append(f"immediate_{word}")

        level = CrisisLevel.NONE
        if detected:
            level = self._grade(triggers, confidence)
            if recent_crisis_count > 0:
                level = level.escalate()
                triggers.append(self.RECENT_HISTORY_TRIGGER)

            logger.info(
                "Crisis language detected",
                level=level.value,
                trigger_count=len(triggers),
                confidence=round(min(confidence, 1.0), 3),
            )

        return CrisisAnalysis(
            detected=detected,
            level=level,
            confidence=min(confidence, 1.0),
            triggers=triggers,
        )

    def _grade(self, triggers: list[str], confidence: float) -> CrisisLevel:
        trigger_set = set(triggers)
        if trigger_set & self.HIGH_RISK_TRIGGERS or confidence > self.HIGH_CONFIDENCE:
            return CrisisLevel.HIGH
        if trigger_set & self.MEDIUM_RISK_TRIGGERS or confidence > self.MEDIUM_CONFIDENCE:
            return CrisisLevel.MEDIUM
        return CrisisLevel.LOW
