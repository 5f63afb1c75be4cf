"""
Chat Session Repository

Owner-scoped queries for chat sessions. Every read takes the
owning user's id so one user can never load another's session.
"""

from datetime import datetime
from typing import Optional, Sequence
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from wellness.infrastructure.database.models.chat_session_model import ChatSessionModel
from wellness.infrastructure.database.models.message_model import MessageModel
from wellness.infrastructure.database.repositories.base import BaseRepository


class ChatSessionRepository(BaseRepository[ChatSessionModel]):
    """Repository for chat session data access."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(ChatSessionModel, session)

    async def get_owned(self, session_id: UUID, user_id: UUID) -> Optional[ChatSessionModel]:
        """
        Get a session only if it belongs to the user.

        Returns:
            Session if found and owned, None otherwise
        """
        result = await self._session.execute(
            select(ChatSessionModel).where(
                ChatSessionModel.id == session_id,
                ChatSessionModel.user_id == user_id,
            )
        )
        return result.scalar_one_or_none()

    async def list_for_user(
        self,
        user_id: UUID,
        *,
        skip: int = 0,
        limit: int = 10,
    ) -> Sequence[ChatSessionModel]:
        """Sessions ordered by most recent activity first."""
        result = await self._session.execute(
            select(ChatSessionModel)
            .where(ChatSessionModel.user_id == user_id)
            .order_by(ChatSessionModel.last_activity_at.desc(), ChatSessionModel.created_at.desc())
            .offset(skip)
            .limit(limit)
        )
        return result.scalars().all()

    async def list_all_for_user(self, user_id: UUID) -> Sequence[ChatSessionModel]:
        """Every session of the user, oldest first (used for export)."""
        result = await self._session.execute(
            select(ChatSessionModel)
            .where(ChatSessionModel.user_id == user_id)
            .order_by(ChatSessionModel.created_at.asc())
        )
        return result.scalars().all()

    async def count_for_user(self, user_id: UUID, *, since: Optional[datetime] = None) -> int:
        """Count the user's sessions, optionally only those created after `since`."""
        query = select(func.count()).select_from(ChatSessionModel).where(
            ChatSessionModel.user_id == user_id
        )
        if since is not None:
            query = query.where(ChatSessionModel.created_at >= since)
        result = await self._session.execute(query)
        return result.scalar_one()

    async def delete_owned(self, session_id: UUID, user_id: UUID) -> bool:
        """
        Delete a session and its messages.

        Returns:
            True if deleted, False if not found or not owned
        """
        owned = await self.get_owned(session_id, user_id)
        if owned is None:
            return False

        await self._session.execute(
            delete(MessageModel).where(MessageModel.session_id == session_id)
        )
        return await self.delete(session_id)
