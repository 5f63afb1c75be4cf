"""
Assessment Service

Mood check-ins and PHQ-9 / GAD-7 screenings. Results are stored on
the user's wellness profile (last 100 entries) rather than in a table
of their own.

SAFETY: A PHQ-9 with a non-zero answer on the self-harm item is
recorded as a crisis event and returns emergency resources,
whatever the total score.
"""

from datetime import timedelta
from typing import Optional, Sequence
from uuid import uuid4

from sqlalchemy.ext.asyncio import AsyncSession

from wellness.config.logging_config import get_logger, short_id
from wellness.domain.clock import utc_now
from wellness.domain.enums import AssessmentType, CrisisLevel
from wellness.domain.models import WellnessProfile
from wellness.infrastructure.database.models import UserModel
from wellness.infrastructure.database.repositories import UserRepository
from wellness.infrastructure.metrics import ASSESSMENTS_TOTAL, track_crisis_detection
from wellness.services.assessment.scoring import (
    GAD7_ALERT_THRESHOLD,
    PHQ9_ALERT_THRESHOLD,
    PHQ9_RESOURCE_THRESHOLD,
    QuestionnaireScore,
    phq9_self_harm_positive,
    score_gad7,
    score_phq9,
)
from wellness.services.safety import DEFAULT_RESOURCES, get_emergency_resources

logger = get_logger(__name__)

ANSWER_OPTIONS = [
    {"value": 0, "label": "Not at all"},
    {"value": 1, "label": "Several days"},
    {"value": 2, "label": "More than half the days"},
    {"value": 3, "label": "Nearly every day"},
]

ASSESSMENT_FORMS = {
    AssessmentType.MOOD.value: {
        "name": "Daily Mood Check-in",
        "description": "Quick check-in on your mood, energy and anxiety",
        "duration": "1-2 minutes",
        "frequency": "Daily",
        "fields": {
            "mood": {"min": 1, "max": 10, "required": True},
            "energy": {"min": 1, "max": 10, "required": False},
            "anxiety": {"min": 1, "max": 10, "required": False},
            "notes": {"max_length": 500, "required": False},
        },
    },
    AssessmentType.PHQ9.value: {
        "name": "PHQ-9 Depression Screening",
        "description": "Patient Health Questionnaire for depression screening",
        "duration": "3-5 minutes",
        "frequency": "Weekly or as needed",
        "prompt": "Over the last 2 weeks, how often have you been bothered by any of the following problems?",
        "questions": [
            "Little interest or pleasure in doing things",
            "Feeling down, depressed, or hopeless",
            "Trouble falling or staying asleep, or sleeping too much",
            "Feeling tired or having little energy",
            "Poor appetite or overeating",
            "Feeling bad about yourself, or that you are a failure or have let yourself or your family down",
            "Trouble concentrating on things, such as reading or watching television",
            "Moving or speaking so slowly that other people could have noticed, or being so fidgety or restless that you have been moving around a lot more than usual",
            "Thoughts that you would be better off dead, or of hurting yourself in some way",
        ],
        "options": ANSWER_OPTIONS,
    },
    AssessmentType.GAD7.value: {
        "name": "GAD-7 Anxiety Screening",
        "description": "Generalized Anxiety Disorder 7-item scale",
        "duration": "2-3 minutes",
        "frequency": "Weekly or as needed",
        "prompt": "Over the last 2 weeks, how often have you been bothered by the following problems?",
        "questions": [
            "Feeling nervous, anxious, or on edge",
            "Not being able to stop or control worrying",
            "Worrying too much about different things",
            "Trouble relaxing",
            "Being so restless that it is hard to sit still",
            "Becoming easily annoyed or irritable",
            "Feeling afraid as if something awful might happen",
        ],
        "options": ANSWER_OPTIONS,
    },
}

PROFESSIONAL_HELP = [
    "Contact your primary care doctor",
    "Find a local mental health provider",
    "Consider online therapy options",
]


def _public_entry(entry: dict) -> dict:
    data = entry.get("data", {})
    return {
        "id": entry.get("id"),
        "type": entry.get("type"),
        "timestamp": entry.get("timestamp"),
        "score": data.get("score"),
        "severity": data.get("severity"),
        "data": data,
    }


def _average(values: list[int]) -> float:
    if not values:
        return 0
    return round(sum(values) / len(values), 1)


class AssessmentService:
    """Records and summarizes self-report assessments."""

    async def record_mood(
        self,
        db: AsyncSession,
        user: UserModel,
        *,
        mood: int,
        energy: Optional[int] = None,
        anxiety: Optional[int] = None,
        notes: Optional[str] = None,
    ) -> dict:
        entry = self._new_entry(AssessmentType.MOOD, {
            "mood": mood,
            "energy": energy,
            "anxiety": anxiety,
            "notes": notes or "",
        })
        await self._store(db, user, entry)

        ASSESSMENTS_TOTAL.labels(assessment_type=AssessmentType.MOOD.value, severity="none").inc()
        logger.info("Mood assessment recorded", user_id=short_id(user.id))
        return _public_entry(entry)

    def mood_history(self, user: UserModel, *, days: int = 30, limit: int = 50) -> dict:
        """Mood check-ins of the last `days` days with averages."""
        now = utc_now()
        since = now - timedelta(days=days)
        profile = WellnessProfile.from_dict(user.wellness_profile)
        entries = profile.assessments_since(since, AssessmentType.MOOD.value)[:limit]

        moods = [e["data"]["mood"] for e in entries if e["data"].get("mood")]
        energies = [e["data"]["energy"] for e in entries if e["data"].get("energy")]
        anxieties = [e["data"]["anxiety"] for e in entries if e["data"].get("anxiety")]

        return {
            "assessments": [
                {
                    "id": e["id"],
                    "timestamp": e["timestamp"],
                    "mood": e["data"].get("mood"),
                    "energy": e["data"].get("energy"),
                    "anxiety": e["data"].get("anxiety"),
                    "notes": e["data"].get("notes", ""),
                }
                for e in entries
            ],
            "summary": {
                "total": len(entries),
                "avg_mood": _average(moods),
                "avg_energy": _average(energies),
                "avg_anxiety": _average(anxieties),
            },
            "date_range": {"from": since.isoformat(), "to": now.isoformat(), "days": days},
        }

    async def record_phq9(self, db: AsyncSession, user: UserModel, answers: Sequence[int]) -> dict:
        """
        Score and store a PHQ-9.

        Raises:
            ValidationFailedError: Invalid answers
        """
        result = score_phq9(answers)
        entry = self._new_entry(AssessmentType.PHQ9, result.to_data())
        self_harm = phq9_self_harm_positive(result)

        await self._store(db, user, entry, self_harm_result=result if self_harm else None)
        self._track(result, PHQ9_ALERT_THRESHOLD, user)

        response = _public_entry(entry)
        response["recommendation"] = result.recommendation
        response["resources"] = None
        if result.score >= PHQ9_RESOURCE_THRESHOLD:
            response["resources"] = {
                "crisis_lines": [DEFAULT_RESOURCES.crisis_lines[0].to_dict()],
                "professional_help": list(PROFESSIONAL_HELP),
            }
        response["emergency_resources"] = get_emergency_resources() if self_harm else None
        return response

    async def record_gad7(self, db: AsyncSession, user: UserModel, answers: Sequence[int]) -> dict:
        """
        Score and store a GAD-7.

        Raises:
            ValidationFailedError: Invalid answers
        """
        result = score_gad7(answers)
        entry = self._new_entry(AssessmentType.GAD7, result.to_data())

        await self._store(db, user, entry)
        self._track(result, GAD7_ALERT_THRESHOLD, user)

        response = _public_entry(entry)
        response["recommendation"] = result.recommendation
        return response

    def history(
        self,
        user: UserModel,
        *,
        assessment_type: Optional[AssessmentType] = None,
        days: int = 90,
        limit: int = 20,
    ) -> dict:
        now = utc_now()
        since = now - timedelta(days=days)
        profile = WellnessProfile.from_dict(user.wellness_profile)
        entries = profile.assessments_since(
            since, assessment_type.value if assessment_type else None
        )[:limit]

        by_type: dict[str, int] = {}
        for entry in entries:
            by_type[entry["type"]] = by_type.get(entry["type"], 0) + 1

        return {
            "assessments": [_public_entry(e) for e in entries],
            "summary": {"total": len(entries), "by_type": by_type},
            "date_range": {"from": since.isoformat(), "to": now.isoformat(), "days": days},
        }

    @staticmethod
    def forms() -> dict:
        return ASSESSMENT_FORMS

    @staticmethod
    def _new_entry(assessment_type: AssessmentType, data: dict) -> dict:
        return {
            "id": uuid4().hex,
            "type": assessment_type.value,
            "timestamp": utc_now().isoformat(),
            "data": data,
        }

    async def _store(
        self,
        db: AsyncSession,
        user: UserModel,
        entry: dict,
        self_harm_result: Optional[QuestionnaireScore] = None,
    ) -> None:
        profile = WellnessProfile.from_dict(user.wellness_profile)
        profile.add_assessment(entry)

        if self_harm_result is not None:
            level = CrisisLevel.HIGH if self_harm_result.answers[-1] >= 2 else CrisisLevel.MEDIUM
            profile.add_crisis_event(
                level.value,
                ["phq9_item_9"],
                excerpt="PHQ-9 self-harm item answered above zero",
            )
            track_crisis_detection(level.value)
            logger.warning(
                "PHQ-9 self-harm item positive",
                user_id=short_id(user.id),
                level=level.value,
            )

        user.wellness_profile = profile.to_dict()
        await UserRepository(db).save(user)

    @staticmethod
    def _track(result: QuestionnaireScore, alert_threshold: int, user: UserModel) -> None:
        ASSESSMENTS_TOTAL.labels(
            assessment_type=result.assessment_type.value,
            severity=result.severity.value,
        ).inc()

        if result.score >= alert_threshold:
            logger.warning(
                "High assessment score recorded",
                user_id=short_id(user.id),
                assessment_type=result.assessment_type.value,
                score=result.score,
                severity=result.severity.value,
            )
        else:
            logger.info(
                "Assessment recorded",
                user_id=short_id(user.id),
                assessment_type=result.assessment_type.value,
                severity=result.severity.value,
            )
