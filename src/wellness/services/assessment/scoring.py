"""
Questionnaire Scoring

PHQ-9 (depression) and GAD-7 (anxiety) scoring and severity bands.

CLINICAL_REVIEW_REQUIRED: Bands and recommendation wording follow the
published scoring guides. Results are screening aids, not diagnoses.
"""

from dataclasses import dataclass
from typing import Sequence

from wellness.domain.enums import AssessmentSeverity, AssessmentType
from wellness.domain.errors import ValidationFailedError

MIN_ANSWER = 0
MAX_ANSWER = 3

PHQ9_ITEM_COUNT = 9
GAD7_ITEM_COUNT = 7

# Item 9 asks about thoughts of self-harm
PHQ9_SELF_HARM_ITEM = 8

PHQ9_RESOURCE_THRESHOLD = 10
PHQ9_ALERT_THRESHOLD = 15
GAD7_ALERT_THRESHOLD = 10

# (upper bound inclusive, severity, recommendation)
PHQ9_BANDS: tuple[tuple[int, AssessmentSeverity, str], ...] = (
    (4, AssessmentSeverity.MINIMAL,
     "Keep an eye on how you feel. Regular exercise, good sleep and stress "
     "management all help."),
    (9, AssessmentSeverity.MILD,
     "Consider talking with a healthcare professional about these symptoms. "
     "Self-care and counseling can help."),
    (14, AssessmentSeverity.MODERATE,
     "We recommend talking with a mental health professional about "
     "treatment options."),
    (19, AssessmentSeverity.MODERATELY_SEVERE,
     "Please reach out to a mental health professional soon. Professional "
     "support is strongly recommended."),
    (27, AssessmentSeverity.SEVERE,
     "Please seek professional help right away. Contact a mental health "
     "provider or crisis service."),
)

GAD7_BANDS: tuple[tuple[int, AssessmentSeverity, str], ...] = (
    (4, AssessmentSeverity.MINIMAL,
     "Your anxiety appears minimal. Keep up your healthy routines."),
    (9, AssessmentSeverity.MILD,
     "You may be feeling some anxiety. Relaxation techniques can help, and "
     "a healthcare professional can advise if it continues."),
    (14, AssessmentSeverity.MODERATE,
     "Moderate anxiety. Talking with a professional about options is "
     "recommended."),
    (21, AssessmentSeverity.SEVERE,
     "Severe anxiety. Please seek professional help soon; treatment can "
     "make a real difference."),
)


@dataclass(frozen=True)
class QuestionnaireScore:
    """Scored questionnaire result."""

    assessment_type: AssessmentType
    answers: tuple[int, ...]
    score: int
    severity: AssessmentSeverity
    recommendation: str

    def to_data(self) -> dict:
        """Payload stored under the assessment entry's `data` key."""
        return {
            "responses": list(self.answers),
            "score": self.score,
            "severity": self.severity.value,
            "recommendation": self.recommendation,
        }


def _validate(answers: Sequence[int], expected: int, name: str) -> tuple[int, ...]:
    if len(answers) != expected:
        raise ValidationFailedError(
            f"{name} requires exactly {expected} responses, each between "
            f"{MIN_ANSWER}-{MAX_ANSWER}"
        )
    for answer in answers:
        if isinstance(answer, bool) or not isinstance(answer, int) or not MIN_ANSWER <= answer <= MAX_ANSWER:
            raise ValidationFailedError(
                f"{name} responses must be integers between {MIN_ANSWER}-{MAX_ANSWER}"
            )
    return tuple(answers)


def _band(score: int, bands) -> tuple[AssessmentSeverity, str]:
    for upper, severity, recommendation in bands:
        if score <= upper:
            return severity, recommendation
    _, severity, recommendation = bands[-1]
    return severity, recommendation


def score_phq9(answers: Sequence[int]) -> QuestionnaireScore:
    """
    Score a PHQ-9 questionnaire.

    Raises:
        ValidationFailedError: Not exactly 9 answers in 0..3
    """
    validated = _validate(answers, PHQ9_ITEM_COUNT, "PHQ-9")
    score = sum(validated)
    severity, recommendation = _band(score, PHQ9_BANDS)
    return QuestionnaireScore(AssessmentType.PHQ9, validated, score, severity, recommendation)


def score_gad7(answers: Sequence[int]) -> QuestionnaireScore:
    """
    Score a GAD-7 questionnaire.

    Raises:
        ValidationFailedError: Not exactly 7 answers in 0..3
    """
    validated = _validate(answers, GAD7_ITEM_COUNT, "GAD-7")
    score = sum(validated)
    severity, recommendation = _band(score, GAD7_BANDS)
    return QuestionnaireScore(AssessmentType.GAD7, validated, score, severity, recommendation)


def phq9_self_harm_positive(result: QuestionnaireScore) -> bool:
    return result.answers[PHQ9_SELF_HARM_ITEM] > 0
