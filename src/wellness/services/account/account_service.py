"""
Account Service

Profile reads and updates, preference merging and account deletion.

PRIVACY: Deleting an account anonymizes it instead of removing rows:
credentials and the wellness profile are cleared, the account is
deactivated, and the content of every message is replaced.
"""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from wellness.config.logging_config import get_logger, short_id
from wellness.domain.clock import utc_now
from wellness.domain.errors import ConflictError, ValidationFailedError
from wellness.domain.models import WellnessProfile
from wellness.infrastructure.database.models import UserModel
from wellness.infrastructure.database.repositories import (
    ChatSessionRepository,
    MessageRepository,
    UserRepository,
)

logger = get_logger(__name__)

DELETE_CONFIRMATION = "DELETE_MY_ACCOUNT"


def merge_preferences(current: Optional[dict], updates: dict) -> dict:
    """
    Merge preference updates into the stored document.

    Nested dictionaries (notifications, privacy) are merged key by key;
    None values in `updates` are ignored.
    """
    merged = dict(current or {})
    for key, value in updates.items():
        if value is None:
            continue
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = {**merged[key], **value}
        else:
            merged[key] = value
    return merged


class AccountService:
    """User-facing account management."""

    async def get_profile(self, db: AsyncSession, user: UserModel) -> dict:
        profile = WellnessProfile.from_dict(user.wellness_profile)
        data = user.to_public_dict()
        data["wellness_summary"] = {
            "assessment_count": len(profile.assessments),
            "mood_entries": len(profile.mood_history),
            "recent_crisis_events": profile.recent_crisis_count(),
            "total_sessions": await ChatSessionRepository(db).count_for_user(user.id),
        }
        return data

    async def update_profile(
        self,
        db: AsyncSession,
        user: UserModel,
        *,
        email: Optional[str] = None,
        preferences: Optional[dict] = None,
    ) -> UserModel:
        """
        Update email and/or preferences.

        Setting an email turns an anonymous account into a named one.

        Raises:
            ConflictError: Email already used by another account
        """
        users = UserRepository(db)

        if email is not None:
            normalized = email.strip().lower()
            if await users.email_taken(normalized, exclude_user_id=user.id):
                raise ConflictError("Email already in use")
            user.email = normalized
            user.anonymous = False

        if preferences:
            user.preferences = merge_preferences(user.preferences, preferences)

        user.updated_at = utc_now()
        await users.save(user)

        logger.info("Profile updated", user_id=short_id(user.id), email_changed=email is not None)
        return user

    async def update_preferences(self, db: AsyncSession, user: UserModel, updates: dict) -> dict:
        user.preferences = merge_preferences(user.preferences, updates)
        user.updated_at = utc_now()
        await UserRepository(db).save(user)

        logger.info("Preferences updated", user_id=short_id(user.id), keys=sorted(updates))
        return user.preferences

    async def delete_account(self, db: AsyncSession, user: UserModel, confirmation: str) -> None:
        """
        Anonymize and deactivate the account.

        Raises:
            ValidationFailedError: Confirmation phrase does not match
        """
        if confirmation != DELETE_CONFIRMATION:
            raise ValidationFailedError(
                "Account deletion requires confirmation",
                details=f"Please provide confirmation: {DELETE_CONFIRMATION}",
            )

        anonymized = await MessageRepository(db).anonymize_for_user(user.id)

        now = utc_now()
        user.email = None
        user.password_hash = None
        user.anonymous = True
        user.is_active = False
        user.is_anonymized = True
        user.wellness_profile = {}
        user.deleted_at = now
        user.updated_at = now
        await UserRepository(db).save(user)

        logger.info(
            "Account anonymized",
            user_id=short_id(user.id),
            messages_anonymized=anonymized,
        )
