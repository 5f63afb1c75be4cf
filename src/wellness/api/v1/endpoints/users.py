"""
User Endpoints

Profile, preferences and account deletion for the authenticated user.
"""

from typing import Literal, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, EmailStr, Field
from sqlalchemy.ext.asyncio import AsyncSession

from wellness.api.dependencies import get_account_service, get_current_user
from wellness.infrastructure.database import get_async_session
from wellness.infrastructure.database.models import UserModel
from wellness.services.account import AccountService

router = APIRouter()


# Request/Response Models

class PreferencesUpdate(BaseModel):
    """Partial preferences; omitted fields keep their stored value."""

    theme: Optional[Literal["light", "dark", "auto"]] = None
    language: Optional[Literal["en", "es", "fr", "de", "it", "pt"]] = None
    timezone: Optional[str] = Field(default=None, max_length=64)
    notifications: Optional[dict[str, bool]] = None
    privacy: Optional[dict[str, bool]] = None


class ProfileUpdate(BaseModel):
    email: Optional[EmailStr] = None
    preferences: Optional[PreferencesUpdate] = None


class DeleteAccountRequest(BaseModel):
    confirmation: str = Field(..., description="Must be DELETE_MY_ACCOUNT")


class ProfileResponse(BaseModel):
    id: str
    email: Optional[str] = None
    anonymous: bool
    age: int
    preferences: dict
    created_at: Optional[str] = None
    last_login_at: Optional[str] = None
    wellness_summary: Optional[dict] = None


class PreferencesResponse(BaseModel):
    preferences: dict


class MessageResponse(BaseModel):
    message: str


@router.get("/profile", response_model=ProfileResponse, summary="Get profile")
async def get_profile(
    user: UserModel = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
    accounts: AccountService = Depends(get_account_service),
) -> ProfileResponse:
    return ProfileResponse(**await accounts.get_profile(db, user))


@router.put("/profile", response_model=ProfileResponse, summary="Update profile")
async def update_profile(
    request: ProfileUpdate,
    user: UserModel = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
    accounts: AccountService = Depends(get_account_service),
) -> ProfileResponse:
    """
    Update email and/or preferences.

    Adding an email to an anonymous account makes it a named account.
    """
    preferences = request.preferences.model_dump(exclude_none=True) if request.preferences else None
    await accounts.update_profile(db, user, email=request.email, preferences=preferences)
    return ProfileResponse(**await accounts.get_profile(db, user))


@router.put("/preferences", response_model=PreferencesResponse, summary="Update preferences")
async def update_preferences(
    request: PreferencesUpdate,
    user: UserModel = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
    accounts: AccountService = Depends(get_account_service),
) -> PreferencesResponse:
    preferences = await accounts.update_preferences(
        db, user, request.model_dump(exclude_none=True)
    )
    return PreferencesResponse(preferences=preferences)


@router.delete("/account", response_model=MessageResponse, summary="Delete account")
async def delete_account(
    request: DeleteAccountRequest,
    user: UserModel = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
    accounts: AccountService = Depends(get_account_service),
) -> MessageResponse:
    """
    Anonymize and deactivate the account.

    Message content is replaced, credentials are removed and the
    access token stops working.
    """
    await accounts.delete_account(db, user, request.confirmation)
    return MessageResponse(message="Account has been anonymized and deactivated")
