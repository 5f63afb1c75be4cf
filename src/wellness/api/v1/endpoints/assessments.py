"""
Assessment Endpoints

Mood check-ins, PHQ-9 and GAD-7 screenings, history and form
definitions.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from wellness.api.dependencies import get_assessment_service, get_current_user
from wellness.domain.enums import AssessmentType
from wellness.infrastructure.database import get_async_session
from wellness.infrastructure.database.models import UserModel
from wellness.services.assessment import AssessmentService

router = APIRouter()


# Request/Response Models

class MoodRequest(BaseModel):
    mood: int = Field(..., ge=1, le=10)
    energy: Optional[int] = Field(default=None, ge=1, le=10)
    anxiety: Optional[int] = Field(default=None, ge=1, le=10)
    notes: Optional[str] = Field(default=None, max_length=500)


class PHQ9Request(BaseModel):
    responses: list[int] = Field(..., min_length=9, max_length=9)

    class Config:
        json_schema_extra = {"example": {"responses": [1, 0, 2, 1, 0, 1, 0, 0, 0]}}


class GAD7Request(BaseModel):
    responses: list[int] = Field(..., min_length=7, max_length=7)


class AssessmentResponse(BaseModel):
    id: str
    type: str
    timestamp: str
    score: Optional[int] = None
    severity: Optional[str] = None
    data: dict
    recommendation: Optional[str] = None
    resources: Optional[dict] = None
    emergency_resources: Optional[dict] = None


class HistoryResponse(BaseModel):
    assessments: list[dict]
    summary: dict
    date_range: dict


@router.post(
    "/mood",
    response_model=AssessmentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Record a mood check-in",
)
async def record_mood(
    request: MoodRequest,
    user: UserModel = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
    assessments: AssessmentService = Depends(get_assessment_service),
) -> AssessmentResponse:
    entry = await assessments.record_mood(
        db,
        user,
        mood=request.mood,
        energy=request.energy,
        anxiety=request.anxiety,
        notes=request.notes,
    )
    return AssessmentResponse(**entry)


@router.get("/mood/history", response_model=HistoryResponse, summary="Mood check-in history")
async def mood_history(
    days: int = Query(default=30, ge=1, le=365),
    limit: int = Query(default=50, ge=1, le=100),
    user: UserModel = Depends(get_current_user),
    assessments: AssessmentService = Depends(get_assessment_service),
) -> HistoryResponse:
    return HistoryResponse(**assessments.mood_history(user, days=days, limit=limit))


@router.post(
    "/phq9",
    response_model=AssessmentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Submit a PHQ-9 depression screening",
)
async def submit_phq9(
    request: PHQ9Request,
    user: UserModel = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
    assessments: AssessmentService = Depends(get_assessment_service),
) -> AssessmentResponse:
    """
    Score a PHQ-9 (9 answers, each 0-3).

    Scores of 10 or more include professional-help resources. Any
    non-zero answer on item 9 also returns emergency resources.
    """
    return AssessmentResponse(**await assessments.record_phq9(db, user, request.responses))


@router.post(
    "/gad7",
    response_model=AssessmentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Submit a GAD-7 anxiety screening",
)
async def submit_gad7(
    request: GAD7Request,
    user: UserModel = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
    assessments: AssessmentService = Depends(get_assessment_service),
) -> AssessmentResponse:
    return AssessmentResponse(**await assessments.record_gad7(db, user, request.responses))


@router.get("/history", response_model=HistoryResponse, summary="Assessment history")
async def assessment_history(
    type: Optional[AssessmentType] = Query(default=None, description="mood, phq9 or gad7"),
    days: int = Query(default=90, ge=1, le=365),
    limit: int = Query(default=20, ge=1, le=100),
    user: UserModel = Depends(get_current_user),
    assessments: AssessmentService = Depends(get_assessment_service),
) -> HistoryResponse:
    return HistoryResponse(
        **assessments.history(user, assessment_type=type, days=days, limit=limit)
    )


@router.get("/forms", summary="Available assessment forms")
async def assessment_forms(
    assessments: AssessmentService = Depends(get_assessment_service),
) -> dict:
    return {"forms": assessments.forms()}
