"""
Token Service

Issues and verifies JWTs with python-jose.

Access tokens are signed with WELLNESS_JWT_SECRET_KEY and carry the
issuer and audience. Refresh tokens use a separate secret so one can
never be replayed as the other.

SECURITY: Token values are never logged.
"""

from dataclasses import dataclass
from datetime import timedelta
from typing import Optional
from uuid import UUID

from jose import ExpiredSignatureError, JWTError, jwt

from wellness.config import get_settings
from wellness.config.settings import JWTSettings
from wellness.config.logging_config import get_logger
from wellness.domain.clock import utc_now
from wellness.domain.errors import AuthenticationError

logger = get_logger(__name__)

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


@dataclass(frozen=True)
class TokenClaims:
    """Verified claims of a token."""

    user_id: UUID
    anonymous: bool
    token_type: str


@dataclass(frozen=True)
class IssuedToken:
    token: str
    expires_in: int  # seconds


class TokenService:
    """
    JWT issue/verify helper.

    Usage:
        tokens = TokenService()
        issued = tokens.create_access_token(user.id, anonymous=True)
        claims = tokens.verify_access_token(issued.token)
    """

    def __init__(self, settings: Optional[JWTSettings] = None) -> None:
        self._settings = settings or get_settings().jwt

    def access_token_lifetime(self, anonymous: bool) -> timedelta:
        if anonymous:
            return timedelta(hours=self._settings.anonymous_access_token_expire_hours)
        return timedelta(days=self._settings.access_token_expire_days)

    def create_access_token(self, user_id: UUID, anonymous: bool) -> IssuedToken:
        lifetime = self.access_token_lifetime(anonymous)
        token = self._encode(
            user_id,
            anonymous,
            ACCESS_TOKEN_TYPE,
            lifetime,
            self._settings.secret_key.get_secret_value(),
        )
        return IssuedToken(token=token, expires_in=int(lifetime.total_seconds()))

    def create_refresh_token(self, user_id: UUID) -> IssuedToken:
        lifetime = timedelta(days=self._settings.refresh_token_expire_days)
        token = self._encode(
            user_id,
            False,
            REFRESH_TOKEN_TYPE,
            lifetime,
            self._settings.refresh_secret_key.get_secret_value(),
        )
        return IssuedToken(token=token, expires_in=int(lifetime.total_seconds()))

    def verify_access_token(self, token: str) -> TokenClaims:
        """
        Verify an access token.

        Raises:
            AuthenticationError: If the token is expired, malformed,
                signed with another key or not an access token
        """
        return self._decode(
            token,
            self._settings.secret_key.get_secret_value(),
            ACCESS_TOKEN_TYPE,
        )

    def verify_refresh_token(self, token: str) -> TokenClaims:
        return self._decode(
            token,
            self._settings.refresh_secret_key.get_secret_value(),
            REFRESH_TOKEN_TYPE,
        )

    def _encode(
        self,
        user_id: UUID,
        anonymous: bool,
        token_type: str,
        lifetime: timedelta,
        key: str,
    ) -> str:
        now = utc_now()
        claims = {
            "sub": str(user_id),
            "anonymous": anonymous,
            "type": token_type,
            "iat": now,
            "exp": now + lifetime,
            "iss": self._settings.issuer,
            "aud": self._settings.audience,
        }
        return jwt.encode(claims, key, algorithm=self._settings.algorithm)

    def _decode(self, token: str, key: str, expected_type: str) -> TokenClaims:
        try:
            payload = jwt.decode(
                token,
                key,
                algorithms=[self._settings.algorithm],
                audience=self._settings.audience,
                issuer=self._settings.issuer,
            )
        except ExpiredSignatureError:
            raise AuthenticationError("Token expired")
        except JWTError as e:
            logger.debug("Token rejected", token_type=expected_type, reason=str(e))
            raise AuthenticationError("Invalid token")

        if payload.get("type") != expected_type:
            raise AuthenticationError("Invalid token")

        try:
            user_id = UUID(payload["sub"])
        except (KeyError, TypeError, ValueError):
            raise AuthenticationError("Invalid token")

        return TokenClaims(
            user_id=user_id,
            anonymous=bool(payload.get("anonymous", False)),
            token_type=expected_type,
        )
