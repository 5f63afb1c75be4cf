"""
Authentication Service

Registration, login with account lockout, token refresh and logout.

Anonymous accounts get an access token only. Registered accounts
(email + password) also get a refresh token.

SECURITY:
- Failed logins are counted per account; reaching the threshold
  locks the account for the configured window
- Lockout state is committed even though the request fails
- Emails and passwords are never logged
"""

from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from wellness.config import get_settings
from wellness.config.settings import SecuritySettings
from wellness.config.logging_config import get_logger, short_id
from wellness.domain.clock import as_utc, utc_now
from wellness.domain.errors import (
    AccountLockedError,
    AuthenticationError,
    ConflictError,
    ValidationFailedError,
)
from wellness.infrastructure.database.models import UserModel
from wellness.infrastructure.database.models.user_model import default_preferences
from wellness.infrastructure.database.repositories import UserRepository
from wellness.infrastructure.metrics import AUTH_EVENTS_TOTAL
from wellness.services.auth.passwords import hash_password, needs_rehash, verify_password
from wellness.services.auth.token_service import TokenService

logger = get_logger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


@dataclass
class AuthResult:
    """User plus the tokens issued for it."""

    user: UserModel
    access_token: str
    expires_in: int
    refresh_token: Optional[str] = None

    def tokens(self) -> dict:
        tokens = {
            "access_token": self.access_token,
            "token_type": "bearer",
            "expires_in": self.expires_in,
        }
        if self.refresh_token:
            tokens["refresh_token"] = self.refresh_token
        return tokens

    def to_dict(self) -> dict:
        return {"user": self.user.to_public_dict(), "tokens": self.tokens()}


class AuthService:
    """
    Account authentication flows.

    Usage:
        auth = AuthService()
        result = await auth.login(db, "a@example.com", "secret123")
    """

    def __init__(
        self,
        token_service: Optional[TokenService] = None,
        security: Optional[SecuritySettings] = None,
    ) -> None:
        self._tokens = token_service or TokenService()
        self._security = security or get_settings().security

    @property
    def tokens(self) -> TokenService:
        return self._tokens

    async def register(
        self,
        db: AsyncSession,
        *,
        age: int,
        terms_accepted: bool,
        privacy_policy_accepted: bool = False,
        anonymous: bool = True,
        email: Optional[str] = None,
        password: Optional[str] = None,
    ) -> AuthResult:
        """
        Create an account.

        Raises:
            ValidationFailedError: Terms not accepted, credentials missing
                for a registered account, or credentials sent for an
                anonymous one
            ConflictError: Email already registered
        """
        if not terms_accepted:
            raise ValidationFailedError("Terms of service must be accepted")

        if anonymous:
            if email or password:
                raise ValidationFailedError(
                    "Anonymous accounts cannot have an email or password"
                )
        else:
            if not email or not password:
                raise ValidationFailedError(
                    "Email and password are required for non-anonymous accounts"
                )
            self._check_password(password)

        users = UserRepository(db)
        normalized_email = email.strip().lower() if email else None
        if normalized_email and await users.email_taken(normalized_email):
            raise ConflictError("An account with this email already exists")

        now = utc_now()
        user = await users.create(UserModel(
            email=normalized_email,
            password_hash=hash_password(password) if password else None,
            anonymous=anonymous,
            age=age,
            terms_accepted=terms_accepted,
            privacy_policy_accepted=privacy_policy_accepted,
            is_active=True,
            login_attempts=0,
            is_anonymized=False,
            preferences=default_preferences(),
            wellness_profile={},
            created_at=now,
            updated_at=now,
        ))

        AUTH_EVENTS_TOTAL.labels(event="register").inc()
        logger.info("User registered", user_id=short_id(user.id), anonymous=anonymous)

        return self._issue(user)

    async def login(self, db: AsyncSession, email: str, password: str) -> AuthResult:
        """
        Authenticate with email and password.

        Raises:
            AuthenticationError: Unknown email or wrong password
            AccountLockedError: Account is inside its lockout window
        """
        users = UserRepository(db)
        user = await users.get_by_email(email)
        if user is None or not user.is_active or user.password_hash is None:
            AUTH_EVENTS_TOTAL.labels(event="login_failed").inc()
            raise AuthenticationError(INVALID_CREDENTIALS)

        now = utc_now()
        if user.is_locked(now):
            AUTH_EVENTS_TOTAL.labels(event="account_locked").inc()
            remaining = int((as_utc(user.lock_until) - now).total_seconds())
            raise AccountLockedError(retry_after_seconds=max(remaining, 1))

        if user.lock_until is not None:
            # Lockout window has passed
            user.lock_until = None
            user.login_attempts = 0

        if not verify_password(password, user.password_hash):
            await self._record_failure(db, user, now)
            raise AuthenticationError(INVALID_CREDENTIALS)

        if needs_rehash(user.password_hash):
            user.password_hash = hash_password(password)

        user.login_attempts = 0
        user.lock_until = None
        user.last_login_at = now
        await users.save(user)

        AUTH_EVENTS_TOTAL.labels(event="login_success").inc()
        logger.info("User logged in", user_id=short_id(user.id))

        return self._issue(user)

    async def refresh(self, db: AsyncSession, refresh_token: str) -> AuthResult:
        """
        Exchange a refresh token for a new token pair.

        Raises:
            AuthenticationError: Token invalid or expired, or user inactive
        """
        claims = self._tokens.verify_refresh_token(refresh_token)
        user = await UserRepository(db).get_active(claims.user_id)
        if user is None:
            raise AuthenticationError("User not found or inactive")

        AUTH_EVENTS_TOTAL.labels(event="refresh").inc()
        logger.info("Token refreshed", user_id=short_id(user.id))
        return self._issue(user)

    def logout(self, user: UserModel) -> None:
        # Tokens are stateless; clients discard them
        AUTH_EVENTS_TOTAL.labels(event="logout").inc()
        logger.info("User logged out", user_id=short_id(user.id))

    async def _record_failure(self, db: AsyncSession, user: UserModel, now) -> None:
        user.login_attempts = (user.login_attempts or 0) + 1
        locked = user.login_attempts >= self._security.max_login_attempts
        if locked:
            user.lock_until = now + timedelta(minutes=self._security.lockout_minutes)

        # Persist the counter even though the request fails
        await db.commit()

        AUTH_EVENTS_TOTAL.labels(event="login_failed").inc()
        if locked:
            logger.warning(
                "Account locked after failed logins",
                user_id=short_id(user.id),
                attempts=user.login_attempts,
            )
        else:
            logger.info(
                "Login failed",
                user_id=short_id(user.id),
                attempts=user.login_attempts,
            )

    def _check_password(self, password: str) -> None:
        if len(password) < self._security.password_min_length:
            raise ValidationFailedError(
                f"Password must be at least {self._security.password_min_length} characters long"
            )

    def _issue(self, user: UserModel) -> AuthResult:
        access = self._tokens.create_access_token(user.id, anonymous=user.anonymous)
        refresh = None if user.anonymous else self._tokens.create_refresh_token(user.id).token
        return AuthResult(
            user=user,
            access_token=access.token,
            expires_in=access.expires_in,
            refresh_token=refresh,
        )
