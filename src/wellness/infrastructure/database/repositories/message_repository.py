"""
Message Repository

Data access for chat messages: chronological history reads,
recent-context reads for prompt building, and per-user counts.
"""

from typing import Optional, Sequence
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from wellness.infrastructure.database.models.message_model import MessageModel
from wellness.infrastructure.database.repositories.base import BaseRepository

ANONYMIZED_CONTENT = "[message removed]"


class MessageRepository(BaseRepository[MessageModel]):
    """Repository for message data access."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(MessageModel, session)

    async def list_for_session(
        self,
        session_id: UUID,
        *,
        skip: int = 0,
        limit: Optional[int] = 50,
    ) -> Sequence[MessageModel]:
        """Messages of a session in chronological order (limit=None for all)."""
        result = await self._session.execute(
            select(MessageModel)
            .where(MessageModel.session_id == session_id)
            .order_by(MessageModel.created_at.asc())
            .offset(skip)
            .limit(limit)
        )
        return result.scalars().all()

    async def recent_for_session(self, session_id: UUID, limit: int = 10) -> list[MessageModel]:
        """
        The latest `limit` messages of a session.

        Returns:
            Messages in chronological order (oldest of the window first)
        """
        result = await self._session.execute(
            select(MessageModel)
            .where(MessageModel.session_id == session_id)
            .order_by(MessageModel.created_at.desc())
            .limit(limit)
        )
        return list(reversed(result.scalars().all()))

    async def latest_for_session(self, session_id: UUID) -> Optional[MessageModel]:
        result = await self._session.execute(
            select(MessageModel)
            .where(MessageModel.session_id == session_id)
            .order_by(MessageModel.created_at.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def count_for_session(self, session_id: UUID) -> int:
        result = await self._session.execute(
            select(func.count()).select_from(MessageModel).where(
                MessageModel.session_id == session_id
            )
        )
        return result.scalar_one()

    async def count_for_user(self, user_id: UUID) -> int:
        result = await self._session.execute(
            select(func.count()).select_from(MessageModel).where(
                MessageModel.user_id == user_id
            )
        )
        return result.scalar_one()

    async def anonymize_for_user(self, user_id: UUID) -> int:
        """
        Replace the content of all of a user's messages.

        Returns:
            Number of messages anonymized
        """
        result = await self._session.execute(
            update(MessageModel)
            .where(MessageModel.user_id == user_id)
            .values(content=ANONYMIZED_CONTENT, ai_metadata={})
        )
        return result.rowcount
