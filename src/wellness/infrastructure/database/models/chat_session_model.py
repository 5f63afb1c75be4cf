"""
Chat Session Database Model

A conversation between one user and the companion. Messages live
in their own table; the session keeps counters, crisis events and
a short sentiment trail for quick summaries.

PRIVACY: Sessions are only ever read through owner-filtered queries.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import JSON, DateTime, ForeignKey, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from wellness.domain.clock import as_utc, utc_now
from wellness.domain.enums import SessionStatus, SessionType
from wellness.infrastructure.database.connection import Base

MAX_SENTIMENT_HISTORY = 50


class ChatSessionModel(Base):
    """
    Chat session table ORM model.

    Table: chat_sessions
    """

    __tablename__ = "chat_sessions"

    id: Mapped[UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid4,
        doc="Unique session identifier"
    )
    user_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        doc="Owning user"
    )

    title: Mapped[str] = mapped_column(String(100), nullable=False)
    session_type: Mapped[str] = mapped_column(
        String(32),
        default=SessionType.GENERAL_SUPPORT.value,
        nullable=False,
        doc="general_support, crisis_intervention, assessment, check_in"
    )
    status: Mapped[str] = mapped_column(
        String(32),
        default=SessionStatus.ACTIVE.value,
        index=True,
        nullable=False,
        doc="active, completed, abandoned, crisis_escalated"
    )
    message_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    crisis_events: Mapped[list] = mapped_column(
        JSON,
        default=list,
        nullable=False,
        doc="Crisis detections raised in this session"
    )
    sentiment_history: Mapped[list] = mapped_column(
        JSON,
        default=list,
        nullable=False,
        doc="Recent user message sentiment scores"
    )
    session_metadata: Mapped[dict] = mapped_column(
        "metadata",
        JSON,
        default=dict,
        nullable=False,
        doc="Additional session metadata"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
        index=True,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        onupdate=utc_now,
        nullable=False,
    )
    last_activity_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
        index=True,
        doc="Timestamp of the latest message"
    )
    ended_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    user = relationship("UserModel", back_populates="chat_sessions", lazy="raise")
    messages = relationship(
        "MessageModel",
        back_populates="session",
        lazy="raise",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<ChatSessionModel(id={self.id}, status='{self.status}')>"

    def record_sentiment(self, score: float, label: str, timestamp: Optional[datetime] = None) -> None:
        history = list(self.sentiment_history or [])
        history.append({
            "timestamp": (timestamp or utc_now()).isoformat(),
            "score": round(score, 3),
            "label": label,
        })
        self.sentiment_history = history[-MAX_SENTIMENT_HISTORY:]

    def record_crisis_event(self, level: str, triggers: list[str], message_id: Optional[UUID] = None) -> None:
        events = list(self.crisis_events or [])
        events.append({
            "timestamp": utc_now().isoformat(),
            "level": level,
            "triggers": list(triggers),
            "message_id": str(message_id) if message_id else None,
        })
        self.crisis_events = events

    @property
    def average_sentiment(self) -> Optional[float]:
        """Mean polarity over the recorded sentiment trail."""
        history = self.sentiment_history or []
        if not history:
            return None
        return round(sum(entry["score"] for entry in history) / len(history), 3)

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "title": self.title,
            "session_type": self.session_type,
            "status": self.status,
            "message_count": self.message_count,
            "average_sentiment": self.average_sentiment,
            "crisis_event_count": len(self.crisis_events or []),
            "created_at": as_utc(self.created_at).isoformat(),
            "last_activity_at": as_utc(self.last_activity_at).isoformat(),
            "ended_at": as_utc(self.ended_at).isoformat() if self.ended_at else None,
        }
