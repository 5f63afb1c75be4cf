"""
Rate Limiting Middleware

Token bucket rate limiting for API protection.

Three bucket families per client:
- standard: every API path not listed below
- chat: /api/v1/chat (LLM calls are expensive), keyed by the
  bearer token's user when it verifies, else by IP
- auth: /api/v1/auth (slows down credential guessing)

Health, metrics and docs are never limited.
"""

import asyncio
import math
import time
from collections import defaultdict
from dataclasses import dataclass
from typing import Callable, Optional

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from wellness.config.settings import RateLimitSettings
from wellness.config.logging_config import get_logger
from wellness.domain.errors import AuthenticationError
from wellness.infrastructure.metrics import RATE_LIMIT_EXCEEDED
from wellness.services.auth.token_service import TokenService

logger = get_logger(__name__)

BUCKET_STANDARD = "standard"
BUCKET_CHAT = "chat"
BUCKET_AUTH = "auth"


@dataclass
class RateLimitConfig:
    """Rate limit configuration."""

    # Requests per minute per bucket family
    requests_per_minute: int = 100
    chat_requests_per_minute: int = 30
    auth_requests_per_minute: int = 10

    # Burst allowance (tokens above limit)
    burst_size: int = 5

    # Idle buckets are dropped after this many seconds
    idle_bucket_seconds: float = 600.0
    cleanup_interval_seconds: float = 300.0

    @classmethod
    def from_settings(cls, settings: RateLimitSettings) -> "RateLimitConfig":
        return cls(
            requests_per_minute=settings.requests_per_minute,
            chat_requests_per_minute=settings.chat_requests_per_minute,
            auth_requests_per_minute=settings.auth_requests_per_minute,
            burst_size=settings.burst_size,
        )

    def per_minute(self, bucket: str) -> int:
        if bucket == BUCKET_CHAT:
            return self.chat_requests_per_minute
        if bucket == BUCKET_AUTH:
            return self.auth_requests_per_minute
        return self.requests_per_minute


class TokenBucket:
    """Token bucket for rate limiting."""

    def __init__(
        self,
        rate: float,  # Tokens per second
        capacity: int,  # Maximum tokens
    ) -> None:
        self.rate = rate
        self.capacity = capacity
        self.tokens = float(capacity)
        self.last_update = time.monotonic()
        self._lock = asyncio.Lock()

    async def acquire(self, tokens: int = 1) -> bool:
        """
        Attempt to acquire tokens.

        Returns True if tokens acquired, False if rate limited.
        """
        async with self._lock:
            now = time.monotonic()
            elapsed = now - self.last_update

            self.tokens = min(self.capacity, self.tokens + elapsed * self.rate)
            self.last_update = now

            if self.tokens >= tokens:
                self.tokens -= tokens
                return True

            return False

    @property
    def available_tokens(self) -> int:
        return int(self.tokens)

    @property
    def retry_after_seconds(self) -> int:
        """Seconds until one more token is available."""
        missing = max(0.0, 1.0 - self.tokens)
        return max(1, math.ceil(missing / self.rate))


class RateLimiter:
    """
    Rate limiter using token bucket algorithm.

    Maintains separate buckets per (bucket family, client identifier).
    """

    def __init__(self, config: Optional[RateLimitConfig] = None) -> None:
        self.config = config or RateLimitConfig()
        self._buckets: dict[str, dict[str, TokenBucket]] = {
            family: defaultdict(lambda family=family: self._create_bucket(family))
            for family in (BUCKET_STANDARD, BUCKET_CHAT, BUCKET_AUTH)
        }
        self._last_cleanup = time.monotonic()

    def _create_bucket(self, family: str) -> TokenBucket:
        per_minute = self.config.per_minute(family)
        return TokenBucket(rate=per_minute / 60.0, capacity=per_minute + self.config.burst_size)

    async def check_rate_limit(
        self,
        client_id: str,
        bucket: str = BUCKET_STANDARD,
    ) -> tuple[bool, int, int]:
        """
        Check if request is within rate limit.

        Returns:
            Tuple of (allowed, remaining_tokens, retry_after_seconds)
        """
        self._maybe_cleanup()

        token_bucket = self._buckets[bucket][client_id]
        allowed = await token_bucket.acquire()

        if not allowed:
            RATE_LIMIT_EXCEEDED.labels(bucket=bucket).inc()
            logger.warning(
                "Rate limit exceeded",
                client_id=client_id[:12] + "...",
                bucket=bucket,
            )

        return allowed, token_bucket.available_tokens, token_bucket.retry_after_seconds

    def _maybe_cleanup(self) -> None:
        now = time.monotonic()
        if now - self._last_cleanup < self.config.cleanup_interval_seconds:
            return
        self._last_cleanup = now
        self.cleanup_inactive_buckets(now)

    def cleanup_inactive_buckets(self, now: Optional[float] = None) -> int:
        """Remove buckets that haven't been used recently."""
        now = now if now is not None else time.monotonic()
        removed = 0
        for buckets in self._buckets.values():
            inactive_keys = [
                key for key, bucket in buckets.items()
                if now - bucket.last_update > self.config.idle_bucket_seconds
            ]
            for key in inactive_keys:
                del buckets[key]
            removed += len(inactive_keys)
        return removed


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    FastAPI middleware for rate limiting.

    Never blocks /health, /metrics or the API docs.
    """

    EXEMPT_PATHS = frozenset({
        "/",
        "/health",
        "/health/live",
        "/health/ready",
        "/metrics",
        "/docs",
        "/openapi.json",
    })

    def __init__(
        self,
        app,
        config: Optional[RateLimitConfig] = None,
        api_prefix: str = "/api/v1",
        token_service: Optional[TokenService] = None,
    ) -> None:
        super().__init__(app)
        self.limiter = RateLimiter(config)
        self._tokens = token_service or TokenService()
        self._chat_prefix = f"{api_prefix}/chat"
        self._auth_prefix = f"{api_prefix}/auth"

    async def dispatch(
        self,
        request: Request,
        call_next: Callable,
    ) -> Response:
        path = request.url.path

        if path in self.EXEMPT_PATHS or path.startswith("/docs"):
            return await call_next(request)

        bucket = self._bucket_for(path)
        client_id = self._get_client_id(request, bucket)

        allowed, remaining, retry_after = await self.limiter.check_rate_limit(client_id, bucket)

        if not allowed:
            return JSONResponse(
                status_code=429,
                content={
                    "error": "Too many requests, please try again later",
                    "code": "RATE_LIMITED",
                },
                headers={
                    "X-RateLimit-Remaining": "0",
                    "Retry-After": str(retry_after),
                },
            )

        response = await call_next(request)
        response.headers["X-RateLimit-Remaining"] = str(remaining)
        return response

    def _bucket_for(self, path: str) -> str:
        if path.startswith(self._chat_prefix):
            return BUCKET_CHAT
        if path.startswith(self._auth_prefix):
            return BUCKET_AUTH
        return BUCKET_STANDARD

    def _get_client_id(self, request: Request, bucket: str = BUCKET_STANDARD) -> str:
        """
        Chat requests with a valid bearer token share one bucket per
        user across addresses. Everything else is keyed by client IP,
        honouring the first X-Forwarded-For hop.
        """
        if bucket == BUCKET_CHAT:
            user_key = self._bearer_subject(request)
            if user_key:
                return f"user:{user_key}"

        forwarded = request.headers.get("X-Forwarded-For")
        if forwarded:
            client_ip = forwarded.split(",")[0].strip()
        else:
            client_ip = request.client.host if request.client else "unknown"

        return f"ip:{client_ip}"

    def _bearer_subject(self, request: Request) -> Optional[str]:
        scheme, _, token = request.headers.get("Authorization", "").partition(" ")
        if scheme.lower() != "bearer" or not token:
            return None
        try:
            return str(self._tokens.verify_access_token(token.strip()).user_id)
        except AuthenticationError:
            # Rejected later by the auth dependency; limit by IP meanwhile
            return None
