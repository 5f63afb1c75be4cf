"""
User Database Model

SQLAlchemy ORM model for user accounts. Anonymous accounts have
no email or password; registered accounts log in with both.

SECURITY: Only password hashes are stored. Email is lower-cased
before storage and never logged.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import JSON, Boolean, DateTime, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from wellness.domain.clock import as_utc, utc_now
from wellness.infrastructure.database.connection import Base


def default_preferences() -> dict:
    return {
        "theme": "light",
        "language": "en",
        "notifications": {"daily_checkin": True, "crisis_alerts": True},
        "privacy": {"data_sharing": False, "analytics": False},
    }


class UserModel(Base):
    """
    User table ORM model.

    Table: users
    """

    __tablename__ = "users"

    id: Mapped[UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid4,
        doc="Unique user identifier"
    )

    # Authentication
    email: Mapped[Optional[str]] = mapped_column(
        String(255),
        unique=True,
        nullable=True,
        index=True,
        doc="Lower-cased email (null for anonymous users)"
    )
    password_hash: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
        doc="passlib hash (null for anonymous users)"
    )
    anonymous: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
        doc="Whether the account was created without credentials"
    )

    # Eligibility and consent
    age: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        doc="Self-reported age (13-120)"
    )
    terms_accepted: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    privacy_policy_accepted: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # Status and lockout
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        index=True,
        nullable=False,
        doc="Whether account is active"
    )
    login_attempts: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
        doc="Consecutive failed login attempts"
    )
    lock_until: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        doc="Account locked until this time"
    )
    is_anonymized: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
        doc="Personal data removed after account deletion"
    )

    # JSON documents
    preferences: Mapped[dict] = mapped_column(
        JSON,
        default=default_preferences,
        nullable=False,
        doc="Theme, language, notification and privacy preferences"
    )
    wellness_profile: Mapped[dict] = mapped_column(
        JSON,
        default=dict,
        nullable=False,
        doc="Assessments, mood history and crisis events"
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
        doc="Account creation timestamp"
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        onupdate=utc_now,
        nullable=False,
        doc="Last update timestamp"
    )
    last_login_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        doc="Last successful login"
    )
    deleted_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        index=True,
        doc="Soft delete timestamp"
    )

    chat_sessions = relationship(
        "ChatSessionModel",
        back_populates="user",
        lazy="raise",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<UserModel(id={self.id}, anonymous={self.anonymous})>"

    def is_locked(self, now: Optional[datetime] = None) -> bool:
        """Whether the lockout window is still open."""
        lock_until = as_utc(self.lock_until)
        return lock_until is not None and lock_until > (now or utc_now())

    def to_public_dict(self) -> dict:
        """Account fields safe to return to the account owner."""
        return {
            "id": str(self.id),
            "email": self.email,
            "anonymous": self.anonymous,
            "age": self.age,
            "preferences": self.preferences or {},
            "created_at": as_utc(self.created_at).isoformat() if self.created_at else None,
            "last_login_at": as_utc(self.last_login_at).isoformat() if self.last_login_at else None,
        }
