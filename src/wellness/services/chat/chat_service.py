"""
Chat Service

Coordinates the complete chat pipeline for one user message:

Session → Crisis + Sentiment → Context → Prompt → Provider chain
(or canned fallback) → Persistence → Profile updates → Response

ARCHITECTURE: REST endpoints and the WebSocket channel both call
process_message, so every message goes through the same safety
checks and is stored the same way.

SAFETY: Crisis detection always runs before generation and its
verdict is returned with emergency resources even when the reply
comes from a canned fallback.
"""

import time
from dataclasses import dataclass, field
from datetime import timedelta
from functools import lru_cache
from typing import Callable, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from wellness.config.logging_config import get_logger, short_id
from wellness.domain.clock import as_utc, utc_now
from wellness.domain.enums import (
    MessageSender,
    MessageType,
    SessionStatus,
    SessionType,
)
from wellness.domain.errors import NotFoundError
from wellness.domain.models import CrisisAnalysis, SentimentAnalysis, WellnessProfile
from wellness.infrastructure.database.models import (
    ChatSessionModel,
    MessageModel,
    UserModel,
)
from wellness.infrastructure.database.repositories import (
    ChatSessionRepository,
    MessageRepository,
)
from wellness.infrastructure.llm import (
    ContentFilterError,
    LLMProvider,
    LLMProviderError,
    LLMResponse,
    RateLimitError,
    get_provider_chain,
)
from wellness.infrastructure.metrics import (
    CHAT_PROCESSING_DURATION,
    CHAT_RESPONSE_SOURCE_TOTAL,
    track_crisis_detection,
    track_llm_result,
)
from wellness.infrastructure.monitoring import capture_crisis_event
from wellness.services.chat.fallback_responses import select_fallback_response
from wellness.services.chat.recommendations import build_recommendations
from wellness.services.prompt import PromptBuilder
from wellness.services.safety import CrisisDetector, get_emergency_resources
from wellness.services.sentiment import SentimentAnalyzer

logger = get_logger(__name__)

CONTEXT_WINDOW = 10

SOURCE_FALLBACK = "fallback"
SOURCE_FALLBACK_ERROR = "fallback_error"


@dataclass
class ChatResult:
    """
    Everything produced for one processed user message.

    Attributes:
        session: Session the exchange was stored in
        user_message: Persisted user message
        ai_message: Persisted companion reply
        source: gemini, openai, fallback or fallback_error
        sentiment: Sentiment verdict for the user message
        crisis: Crisis verdict for the user message
        recommendations: Coping suggestions
        emergency_resources: Crisis resources (only when crisis detected)
        processing_time_ms: Wall time for the whole pipeline
    """

    session: ChatSessionModel
    user_message: MessageModel
    ai_message: MessageModel
    source: str
    sentiment: SentimentAnalysis
    crisis: CrisisAnalysis
    recommendations: list[dict] = field(default_factory=list)
    emergency_resources: Optional[dict] = None
    processing_time_ms: int = 0

    @property
    def reply(self) -> str:
        return self.ai_message.content

    def to_dict(self) -> dict:
        """Response payload shared by REST and WebSocket."""
        return {
            "session_id": str(self.session.id),
            "user_message": self.user_message.to_dict(),
            "ai_response": {
                "id": str(self.ai_message.id),
                "content": self.ai_message.content,
                "sender": self.ai_message.sender,
                "source": self.source,
                "sentiment": self.sentiment.to_dict(),
                "crisis_detected": self.crisis.detected,
                "crisis_level": self.crisis.level.value,
                "crisis_triggers": list(self.crisis.triggers),
                "recommendations": self.recommendations,
                "emergency_resources": self.emergency_resources,
                "timestamp": as_utc(self.ai_message.created_at).isoformat(),
                "processing_time_ms": self.processing_time_ms,
            },
        }


@dataclass
class ServiceStats:
    """In-process counters since the service was created."""

    messages_processed: int = 0
    crisis_detected: int = 0
    ai_responses: int = 0
    fallback_responses: int = 0
    total_response_time_ms: int = 0
    started_at: float = field(default_factory=time.monotonic)

    @property
    def average_response_time_ms(self) -> float:
        if not self.messages_processed:
            return 0.0
        return round(self.total_response_time_ms / self.messages_processed, 1)

    def to_dict(self) -> dict:
        return {
            "messages_processed": self.messages_processed,
            "crisis_detected": self.crisis_detected,
            "ai_responses": self.ai_responses,
            "fallback_responses": self.fallback_responses,
            "average_response_time_ms": self.average_response_time_ms,
            "uptime_seconds": round(time.monotonic() - self.started_at, 1),
        }


class ChatService:
    """
    Main entry point for chat features.

    Usage:
        service = ChatService()
        result = await service.process_message(db, user, "hi", session_id=None)
    """

    def __init__(
        self,
        crisis_detector: Optional[CrisisDetector] = None,
        sentiment_analyzer: Optional[SentimentAnalyzer] = None,
        prompt_builder: Optional[PromptBuilder] = None,
        provider_chain: Optional[Callable[[], list[LLMProvider]]] = None,
    ) -> None:
        """
        Initialize with analysis services.

        Args:
            crisis_detector: Crisis detector
            sentiment_analyzer: Sentiment analyzer
            prompt_builder: Prompt builder
            provider_chain: Callable returning providers to try in order
        """
        self._crisis = crisis_detector or CrisisDetector()
        self._sentiment = sentiment_analyzer or SentimentAnalyzer()
        self._prompts = prompt_builder or PromptBuilder()
        self._provider_chain = provider_chain or get_provider_chain
        self._stats = ServiceStats()

    @property
    def stats(self) -> ServiceStats:
        return self._stats

    # =========================================================================
    # SESSIONS
    # =========================================================================

    async def create_session(
        self,
        db: AsyncSession,
        user: UserModel,
        title: Optional[str] = None,
        session_type: SessionType = SessionType.GENERAL_SUPPORT,
    ) -> ChatSessionModel:
        """Create an empty session owned by the user."""
        now = utc_now()
        session = ChatSessionModel(
            user_id=user.id,
            title=title or f"Chat Session {now:%Y-%m-%d %H:%M}",
            session_type=session_type.value,
            status=SessionStatus.ACTIVE.value,
            message_count=0,
            crisis_events=[],
            sentiment_history=[],
            session_metadata={},
            created_at=now,
            updated_at=now,
            last_activity_at=now,
        )
        session = await ChatSessionRepository(db).create(session)

        logger.info(
            "Chat session created",
            session_id=short_id(session.id),
            user_id=short_id(user.id),
        )
        return session

    async def get_owned_session(
        self,
        db: AsyncSession,
        user: UserModel,
        session_id: UUID,
    ) -> ChatSessionModel:
        """
        Load a session of the user.

        Raises:
            NotFoundError: If the session does not exist or is not owned
        """
        session = await ChatSessionRepository(db).get_owned(session_id, user.id)
        if session is None:
            raise NotFoundError("Chat session not found")
        return session

    async def list_sessions(
        self,
        db: AsyncSession,
        user: UserModel,
        *,
        page: int = 1,
        limit: int = 10,
    ) -> tuple[list[dict], int]:
        """
        Sessions with their latest message, newest activity first.

        Returns:
            Tuple of (session dictionaries, total session count)
        """
        sessions_repo = ChatSessionRepository(db)
        messages_repo = MessageRepository(db)

        sessions = await sessions_repo.list_for_user(
            user.id, skip=(page - 1) * limit, limit=limit
        )
        total = await sessions_repo.count_for_user(user.id)

        items = []
        for session in sessions:
            entry = session.to_dict()
            last = await messages_repo.latest_for_session(session.id)
            entry["last_message"] = last.to_dict() if last else None
            items.append(entry)
        return items, total

    async def get_messages(
        self,
        db: AsyncSession,
        user: UserModel,
        session_id: UUID,
        *,
        page: int = 1,
        limit: int = 50,
    ) -> tuple[ChatSessionModel, list[MessageModel], int]:
        """
        Chronological messages of an owned session.

        Raises:
            NotFoundError: If the session is not owned by the user
        """
        session = await self.get_owned_session(db, user, session_id)
        messages_repo = MessageRepository(db)
        messages = await messages_repo.list_for_session(
            session.id, skip=(page - 1) * limit, limit=limit
        )
        total = await messages_repo.count_for_session(session.id)
        return session, list(messages), total

    async def delete_session(self, db: AsyncSession, user: UserModel, session_id: UUID) -> None:
        """
        Delete an owned session together with its messages.

        Raises:
            NotFoundError: If the session is not owned by the user
        """
        deleted = await ChatSessionRepository(db).delete_owned(session_id, user.id)
        if not deleted:
            raise NotFoundError("Chat session not found")

        logger.info(
            "Chat session deleted",
            session_id=short_id(session_id),
            user_id=short_id(user.id),
        )

    # =========================================================================
    # MESSAGE PIPELINE
    # =========================================================================

    async def process_message(
        self,
        db: AsyncSession,
        user: UserModel,
        text: str,
        session_id: Optional[UUID] = None,
    ) -> ChatResult:
        """
        Run one user message through the full pipeline.

        Args:
            db: Database session (committed by the caller)
            user: Authenticated user
            text: Message text
            session_id: Existing session, or None to start a new one

        Returns:
            ChatResult with both persisted messages

        Raises:
            NotFoundError: If session_id is not owned by the user
        """
        started = time.perf_counter()
        self._stats.messages_processed += 1

        logger.info(
            "Processing chat message",
            user_id=short_id(user.id),
            message_length=len(text),
        )

        profile = WellnessProfile.from_dict(user.wellness_profile)

        # Step 1: Analysis
        crisis = self._crisis.detect(text, recent_crisis_count=profile.recent_crisis_count())
        sentiment = self._sentiment.analyze(text)

        # Step 2: Session
        if session_id is not None:
            session = await self.get_owned_session(db, user, session_id)
        else:
            session_type = (
                SessionType.CRISIS_INTERVENTION if crisis.detected else SessionType.GENERAL_SUPPORT
            )
            session = await self.create_session(
                db, user, title=f"Chat {utc_now():%Y-%m-%d}", session_type=session_type
            )

        # Step 3: Context and prompt
        messages_repo = MessageRepository(db)
        context = await messages_repo.recent_for_session(session.id, limit=CONTEXT_WINDOW)
        prompt = self._prompts.build(text, sentiment, crisis, context_messages=context)

        # Step 4: Generation
        user_created_at = utc_now()
        llm_response, source = await self._generate(prompt)
        if llm_response is None:
            reply = select_fallback_response(text, crisis, sentiment)
            self._stats.fallback_responses += 1
        else:
            reply = llm_response.content
            self._stats.ai_responses += 1
        CHAT_RESPONSE_SOURCE_TOTAL.labels(source=source).inc()

        recommendations = build_recommendations(sentiment, crisis)

        # Step 5: Persistence
        user_message = await messages_repo.create(MessageModel(
            session_id=session.id,
            user_id=user.id,
            sender=MessageSender.USER.value,
            message_type=MessageType.TEXT.value,
            content=text,
            sentiment=sentiment.storage_label.value,
            sentiment_score=sentiment.normalized_score,
            crisis_detected=crisis.detected,
            crisis_severity=crisis.level.value if crisis.detected else None,
            flagged=crisis.detected,
            ai_metadata={},
            created_at=user_created_at,
        ))
        ai_message = await messages_repo.create(MessageModel(
            session_id=session.id,
            user_id=user.id,
            sender=MessageSender.AI.value,
            message_type=MessageType.TEXT.value,
            content=reply,
            crisis_detected=False,
            flagged=False,
            ai_metadata=self._ai_metadata(llm_response, source, recommendations),
            created_at=max(utc_now(), user_created_at + timedelta(microseconds=1)),
        ))

        now = utc_now()
        session.message_count = (session.message_count or 0) + 2
        session.last_activity_at = now
        session.updated_at = now
        session.record_sentiment(sentiment.score, sentiment.label.value, timestamp=now)

        profile.add_mood_entry(
            sentiment.label.value,
            sentiment.score,
            session_id=str(session.id),
            timestamp=now,
        )

        if crisis.detected:
            self._record_crisis(session, profile, user_message, crisis, text)

        user.wellness_profile = profile.to_dict()
        await ChatSessionRepository(db).save(session)

        # Step 6: Response
        elapsed = time.perf_counter() - started
        elapsed_ms = int(elapsed * 1000)
        self._stats.total_response_time_ms += elapsed_ms
        CHAT_PROCESSING_DURATION.observe(elapsed)

        logger.info(
            "Chat message processed",
            session_id=short_id(session.id),
            source=source,
            crisis=crisis.detected,
            sentiment=sentiment.label.value,
            duration_ms=elapsed_ms,
        )

        return ChatResult(
            session=session,
            user_message=user_message,
            ai_message=ai_message,
            source=source,
            sentiment=sentiment,
            crisis=crisis,
            recommendations=recommendations,
            emergency_resources=get_emergency_resources() if crisis.detected else None,
            processing_time_ms=elapsed_ms,
        )

    def analyze_only(self, user: UserModel, text: str) -> dict:
        """
        Crisis and sentiment verdicts for a message without storing anything.
        """
        profile = WellnessProfile.from_dict(user.wellness_profile)
        crisis = self._crisis.detect(text, recent_crisis_count=profile.recent_crisis_count())
        sentiment = self._sentiment.analyze(text)

        return {
            "crisis": crisis.to_dict(),
            "sentiment": sentiment.to_dict(),
            "recommendations": build_recommendations(sentiment, crisis),
            "emergency_resources": get_emergency_resources() if crisis.detected else None,
        }

    def _record_crisis(
        self,
        session: ChatSessionModel,
        profile: WellnessProfile,
        user_message: MessageModel,
        crisis: CrisisAnalysis,
        text: str,
    ) -> None:
        self._stats.crisis_detected += 1

        session.status = SessionStatus.CRISIS_ESCALATED.value
        session.record_crisis_event(crisis.level.value, crisis.triggers, message_id=user_message.id)
        profile.add_crisis_event(
            crisis.level.value,
            crisis.triggers,
            excerpt=text,
            session_id=str(session.id),
        )

        track_crisis_detection(crisis.level.value)
        capture_crisis_event(crisis.level.value, str(session.id), crisis.triggers)

        logger.warning(
            "Crisis escalation recorded",
            session_id=short_id(session.id),
            level=crisis.level.value,
        )

    async def _generate(self, prompt) -> tuple[Optional[LLMResponse], str]:
        """
        Walk the provider chain.

        Returns:
            (response, source); response is None when a canned
            fallback must be used
        """
        chain = self._provider_chain()
        if not chain:
            return None, SOURCE_FALLBACK

        for provider in chain:
            started = time.perf_counter()
            try:
                response = await provider.generate(prompt)
            except LLMProviderError as e:
                track_llm_result(provider.provider_name, _status_for(e), time.perf_counter() - started)
                logger.warning(
                    "LLM provider failed, trying next",
                    provider=provider.provider_name,
                    error_type=type(e).__name__,
                )
                continue

            track_llm_result(provider.provider_name, "success", time.perf_counter() - started)
            return response, provider.provider_name

        logger.error("All LLM providers failed, using fallback response")
        return None, SOURCE_FALLBACK_ERROR

    @staticmethod
    def _ai_metadata(
        response: Optional[LLMResponse],
        source: str,
        recommendations: list[dict],
    ) -> dict:
        metadata = {
            "source": source,
            "recommendation_types": [r["type"] for r in recommendations],
        }
        if response is not None:
            metadata.update(response.ai_metadata())
        return metadata

    # =========================================================================
    # EXPORT AND STATS
    # =========================================================================

    async def export_user_data(self, db: AsyncSession, user: UserModel) -> dict:
        """All sessions of the user with their full message history."""
        messages_repo = MessageRepository(db)
        sessions = await ChatSessionRepository(db).list_all_for_user(user.id)

        exported = []
        for session in sessions:
            messages = await messages_repo.list_for_session(session.id, limit=None)
            entry = session.to_dict()
            entry["messages"] = [m.to_dict() for m in messages]
            exported.append(entry)

        logger.info(
            "Chat data exported",
            user_id=short_id(user.id),
            session_count=len(exported),
        )
        return {
            "export_date": utc_now().isoformat(),
            "user_id": str(user.id),
            "total_sessions": len(exported),
            "sessions": exported,
        }

    async def user_stats(self, db: AsyncSession, user: UserModel) -> dict:
        sessions_repo = ChatSessionRepository(db)
        return {
            "user": {
                "total_sessions": await sessions_repo.count_for_user(user.id),
                "total_messages": await MessageRepository(db).count_for_user(user.id),
                "recent_sessions": await sessions_repo.count_for_user(
                    user.id, since=utc_now() - timedelta(days=7)
                ),
            },
            "service": self._stats.to_dict(),
        }


def _status_for(error: LLMProviderError) -> str:
    if isinstance(error, RateLimitError):
        return "rate_limited"
    if isinstance(error, ContentFilterError):
        return "filtered"
    return "error"


@lru_cache()
def get_chat_service() -> ChatService:
    """
    Get the process-wide chat service.

    Returns:
        ChatService: Singleton chat service
    """
    return ChatService()
