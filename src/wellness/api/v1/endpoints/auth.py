"""
Auth Endpoints

Registration, login, token refresh, logout and the current account.
"""

from typing import Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, EmailStr, Field
from sqlalchemy.ext.asyncio import AsyncSession

from wellness.api.dependencies import get_auth_service, get_current_user
from wellness.infrastructure.database import get_async_session
from wellness.infrastructure.database.models import UserModel
from wellness.services.auth import AuthService

router = APIRouter()


# Request/Response Models

class RegisterRequest(BaseModel):
    """Account registration."""

    age: int = Field(..., ge=13, le=120, description="Self-reported age")
    terms_accepted: bool = Field(..., description="Must be true")
    privacy_policy_accepted: bool = Field(default=False)
    anonymous: bool = Field(default=True, description="Create an account without credentials")
    email: Optional[EmailStr] = Field(default=None, description="Required when anonymous is false")
    password: Optional[str] = Field(default=None, max_length=128)

    class Config:
        json_schema_extra = {
            "example": {
                "age": 19,
                "terms_accepted": True,
                "privacy_policy_accepted": True,
                "anonymous": False,
                "email": "sam@example.com",
                "password": "a-long-passphrase",
            }
        }


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)


class RefreshRequest(BaseModel):
    refresh_token: str = Field(..., min_length=1)


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    refresh_token: Optional[str] = None


class UserResponse(BaseModel):
    id: str
    email: Optional[str] = None
    anonymous: bool
    age: int
    preferences: dict
    created_at: Optional[str] = None
    last_login_at: Optional[str] = None


class AuthResponse(BaseModel):
    """User plus issued tokens."""

    user: UserResponse
    tokens: TokenResponse


class MessageResponse(BaseModel):
    message: str


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new account",
)
async def register(
    request: RegisterRequest,
    db: AsyncSession = Depends(get_async_session),
    auth: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    """
    Create an anonymous or registered account.

    Anonymous accounts receive a 24 hour access token. Registered
    accounts receive a longer-lived access token and a refresh token.
    """
    result = await auth.register(
        db,
        age=request.age,
        terms_accepted=request.terms_accepted,
        privacy_policy_accepted=request.privacy_policy_accepted,
        anonymous=request.anonymous,
        email=request.email,
        password=request.password,
    )
    return AuthResponse(**result.to_dict())


@router.post("/login", response_model=AuthResponse, summary="Log in with email and password")
async def login(
    request: LoginRequest,
    db: AsyncSession = Depends(get_async_session),
    auth: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    """
    Authenticate a registered account.

    Repeated failures lock the account temporarily (423).
    """
    result = await auth.login(db, request.email, request.password)
    return AuthResponse(**result.to_dict())


@router.post("/refresh", response_model=TokenResponse, summary="Exchange a refresh token")
async def refresh(
    request: RefreshRequest,
    db: AsyncSession = Depends(get_async_session),
    auth: AuthService = Depends(get_auth_service),
) -> TokenResponse:
    result = await auth.refresh(db, request.refresh_token)
    return TokenResponse(**result.tokens())


@router.post("/logout", response_model=MessageResponse, summary="Log out")
async def logout(
    user: UserModel = Depends(get_current_user),
    auth: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    auth.logout(user)
    return MessageResponse(message="Logout successful")


@router.get("/me", response_model=UserResponse, summary="Current account")
async def me(user: UserModel = Depends(get_current_user)) -> UserResponse:
    return UserResponse(**user.to_public_dict())
