"""
API v1 Router

Aggregates all v1 API endpoints.
"""

from fastapi import APIRouter

from wellness.api.v1.endpoints.assessments import router as assessments_router
from wellness.api.v1.endpoints.auth import router as auth_router
from wellness.api.v1.endpoints.chat import router as chat_router
from wellness.api.v1.endpoints.users import router as users_router

api_router = APIRouter()

# Include endpoint routers
api_router.include_router(
    auth_router,
    prefix="/auth",
    tags=["Auth"],
)

api_router.include_router(
    chat_router,
    prefix="/chat",
    tags=["Chat"],
)

api_router.include_router(
    users_router,
    prefix="/users",
    tags=["Users"],
)

api_router.include_router(
    assessments_router,
    prefix="/assessments",
    tags=["Assessments"],
)
