"""
Unit Tests for Repositories

Owner filtering and anonymization against the in-memory database.
"""

from uuid import uuid4

from sqlalchemy.ext.asyncio import AsyncSession

from wellness.infrastructure.database.models import ChatSessionModel, MessageModel, UserModel
from wellness.infrastructure.database.repositories import (
    ChatSessionRepository,
    MessageRepository,
    UserRepository,
)
from wellness.infrastructure.database.repositories.message_repository import ANONYMIZED_CONTENT


async def _session_with_message(db: AsyncSession, user: UserModel) -> ChatSessionModel:
    session = await ChatSessionRepository(db).create(
        ChatSessionModel(user_id=user.id, title="Test session")
    )
    await MessageRepository(db).create(MessageModel(
        session_id=session.id,
        user_id=user.id,
        sender="user",
        content="private words",
        ai_metadata={"source": "fallback"},
    ))
    return session


class TestRepositories:
    """Test suite for the concrete repositories."""

    async def test_get_by_id(self, db_session: AsyncSession, user: UserModel) -> None:
        repo = UserRepository(db_session)

        assert (await repo.get_by_id(user.id)).id == user.id
        assert await repo.get_by_id(uuid4()) is None

    async def test_get_owned_filters_by_user(self, db_session, user) -> None:
        session = await _session_with_message(db_session, user)
        repo = ChatSessionRepository(db_session)

        assert await repo.get_owned(session.id, user.id) is not None
        assert await repo.get_owned(session.id, uuid4()) is None

    async def test_delete_owned(self, db_session, user) -> None:
        session = await _session_with_message(db_session, user)
        repo = ChatSessionRepository(db_session)

        assert not await repo.delete_owned(session.id, uuid4())
        assert await repo.delete_owned(session.id, user.id)
        assert await repo.count_for_user(user.id) == 0

    async def test_anonymize_messages(self, db_session, user) -> None:
        session = await _session_with_message(db_session, user)
        session_id = session.id
        messages = MessageRepository(db_session)

        updated = await messages.anonymize_for_user(user.id)
        db_session.expire_all()
        latest = await messages.latest_for_session(session_id)

        assert updated == 1
        assert latest.content == ANONYMIZED_CONTENT
        assert latest.ai_metadata == {}

    async def test_email_lookup_case_insensitive(self, db_session, user) -> None:
        user.email = "someone@example.com"
        await UserRepository(db_session).save(user)

        found = await UserRepository(db_session).get_by_email("Someone@Example.com")

        assert found is not None and found.id == user.id
        assert await UserRepository(db_session).email_taken("someone@example.com")
        assert not await UserRepository(db_session).email_taken(
            "someone@example.com", exclude_user_id=user.id
        )
