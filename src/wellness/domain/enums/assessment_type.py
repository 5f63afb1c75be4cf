"""
Assessment Enumerations

Self-report instruments supported by the assessments API
and the severity bands they score into.

CLINICAL_REVIEW_REQUIRED: Severity cut-offs follow the published
PHQ-9 and GAD-7 scoring guides and are screening aids, not diagnoses.
"""

from enum import StrEnum


class AssessmentType(StrEnum):
    """Supported assessment instruments."""

    MOOD = "mood"
    PHQ9 = "phq9"
    GAD7 = "gad7"


class AssessmentSeverity(StrEnum):
    """Severity band of a scored questionnaire."""

    MINIMAL = "minimal"
    MILD = "mild"
    MODERATE = "moderate"
    MODERATELY_SEVERE = "moderately_severe"
    SEVERE = "severe"
