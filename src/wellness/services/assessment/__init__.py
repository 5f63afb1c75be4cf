"""Self-report assessments: mood check-ins, PHQ-9 and GAD-7."""

from wellness.services.assessment.assessment_service import AssessmentService
from wellness.services.assessment.scoring import (
    QuestionnaireScore,
    score_gad7,
    score_phq9,
)

__all__ = [
    "AssessmentService",
    "QuestionnaireScore",
    "score_gad7",
    "score_phq9",
]
