"""
User Repository

Data access layer for user accounts.
"""

from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from wellness.infrastructure.database.models.user_model import UserModel
from wellness.infrastructure.database.repositories.base import BaseRepository


class UserRepository(BaseRepository[UserModel]):
    """
    Repository for user data access.

    Lookups exclude soft-deleted accounts.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize with user model."""
        super().__init__(UserModel, session)

    async def get_by_email(self, email: str) -> Optional[UserModel]:
        """
        Get user by email address (case-insensitive).

        Args:
            email: User email

        Returns:
            User if found, None otherwise
        """
        result = await self._session.execute(
            select(UserModel).where(
                UserModel.email == email.strip().lower(),
                UserModel.deleted_at.is_(None),
            )
        )
        return result.scalar_one_or_none()

    async def get_active(self, user_id: UUID) -> Optional[UserModel]:
        """
        Get a user that can still authenticate.

        Returns:
            User if active and not deleted, None otherwise
        """
        result = await self._session.execute(
            select(UserModel).where(
                UserModel.id == user_id,
                UserModel.is_active.is_(True),
                UserModel.deleted_at.is_(None),
            )
        )
        return result.scalar_one_or_none()

    async def email_taken(self, email: str, exclude_user_id: Optional[UUID] = None) -> bool:
        """Whether another account already uses this email."""
        query = select(UserModel.id).where(UserModel.email == email.strip().lower())
        if exclude_user_id is not None:
            query = query.where(UserModel.id != exclude_user_id)
        result = await self._session.execute(query.limit(1))
        return result.first() is not None
