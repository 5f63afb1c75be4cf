"""
API Dependencies

Bearer authentication and service accessors for route handlers.
"""

from functools import lru_cache
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from wellness.domain.errors import AuthenticationError
from wellness.infrastructure.database import get_async_session
from wellness.infrastructure.database.models import UserModel
from wellness.infrastructure.database.repositories import UserRepository
from wellness.services.account import AccountService
from wellness.services.assessment import AssessmentService
from wellness.services.auth import AuthService, TokenService

bearer_scheme = HTTPBearer(auto_error=False)


@lru_cache()
def get_token_service() -> TokenService:
    return TokenService()


@lru_cache()
def get_auth_service() -> AuthService:
    return AuthService(token_service=get_token_service())


@lru_cache()
def get_assessment_service() -> AssessmentService:
    return AssessmentService()


@lru_cache()
def get_account_service() -> AccountService:
    return AccountService()


async def resolve_user(db: AsyncSession, token: str) -> UserModel:
    """
    Load the active user an access token belongs to.

    Raises:
        AuthenticationError: Token invalid/expired or user inactive/deleted
    """
    claims = get_token_service().verify_access_token(token)
    user = await UserRepository(db).get_active(claims.user_id)
    if user is None:
        raise AuthenticationError("User not found or inactive")
    return user


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_async_session),
) -> UserModel:
    """
    FastAPI dependency returning the authenticated user.

    Usage in endpoint:
        @router.get("/me")
        async def me(user: UserModel = Depends(get_current_user)):
            ...
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Access token required")
    return await resolve_user(db, credentials.credentials)
