"""
Message Database Model

One chat message, authored by the user, the AI companion or the
system. User messages carry the sentiment and crisis verdicts
computed when they were received.

PRIVACY: Message content is sensitive and must never be logged.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import JSON, Boolean, DateTime, Float, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from wellness.domain.clock import as_utc, utc_now
from wellness.domain.enums import MessageType
from wellness.infrastructure.database.connection import Base


class MessageModel(Base):
    """
    Message table ORM model.

    Table: messages
    """

    __tablename__ = "messages"

    id: Mapped[UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid4,
        doc="Unique message identifier"
    )
    session_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("chat_sessions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    sender: Mapped[str] = mapped_column(String(16), nullable=False, doc="user, ai, system")
    message_type: Mapped[str] = mapped_column(
        String(32),
        default=MessageType.TEXT.value,
        nullable=False,
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)

    # Analysis verdicts (user messages)
    sentiment: Mapped[Optional[str]] = mapped_column(
        String(16),
        nullable=True,
        doc="positive, negative, neutral"
    )
    sentiment_score: Mapped[Optional[float]] = mapped_column(
        Float,
        nullable=True,
        doc="Sentiment mapped onto [0, 1]"
    )
    crisis_detected: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False, index=True)
    crisis_severity: Mapped[Optional[str]] = mapped_column(
        String(16),
        nullable=True,
        doc="low, medium, high, critical"
    )
    flagged: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    ai_metadata: Mapped[dict] = mapped_column(
        JSON,
        default=dict,
        nullable=False,
        doc="Provider, model, latency and recommendation details"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
        index=True,
    )

    session = relationship("ChatSessionModel", back_populates="messages", lazy="raise")

    def __repr__(self) -> str:
        return f"<MessageModel(id={self.id}, sender='{self.sender}')>"

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "session_id": str(self.session_id),
            "sender": self.sender,
            "message_type": self.message_type,
            "content": self.content,
            "sentiment": self.sentiment,
            "sentiment_score": self.sentiment_score,
            "crisis_detected": self.crisis_detected,
            "crisis_severity": self.crisis_severity,
            "created_at": as_utc(self.created_at).isoformat(),
        }
