"""
Unit Tests for Rate Limiter

Token bucket behaviour per client and bucket family.
"""

import time

import pytest

from wellness.api.middleware.rate_limiter import (
    BUCKET_AUTH,
    BUCKET_CHAT,
    BUCKET_STANDARD,
    RateLimitConfig,
    RateLimiter,
)
from wellness.config.settings import RateLimitSettings


class TestRateLimiter:
    """Test suite for RateLimiter."""

    @pytest.fixture
    def limiter(self) -> RateLimiter:
        return RateLimiter(RateLimitConfig(
            requests_per_minute=3,
            chat_requests_per_minute=2,
            auth_requests_per_minute=1,
            burst_size=1,
        ))

    async def test_allows_up_to_capacity(self, limiter: RateLimiter) -> None:
        """Capacity is the per-minute limit plus the burst allowance."""
        results = [await limiter.check_rate_limit("ip:1", BUCKET_STANDARD) for _ in range(5)]

        assert [allowed for allowed, _, _ in results] == [True, True, True, True, False]

    async def test_retry_after_when_limited(self, limiter: RateLimiter) -> None:
        await limiter.check_rate_limit("ip:1", BUCKET_AUTH)
        await limiter.check_rate_limit("ip:1", BUCKET_AUTH)

        allowed, remaining, retry_after = await limiter.check_rate_limit("ip:1", BUCKET_AUTH)

        assert not allowed
        assert remaining == 0
        assert 1 <= retry_after <= 60

    async def test_clients_independent(self, limiter: RateLimiter) -> None:
        for _ in range(3):
            await limiter.check_rate_limit("ip:1", BUCKET_CHAT)

        allowed, _, _ = await limiter.check_rate_limit("ip:2", BUCKET_CHAT)

        assert allowed

    async def test_buckets_independent(self, limiter: RateLimiter) -> None:
        for _ in range(2):
            await limiter.check_rate_limit("ip:1", BUCKET_AUTH)

        allowed, _, _ = await limiter.check_rate_limit("ip:1", BUCKET_STANDARD)

        assert allowed

    async def test_cleanup_drops_idle_buckets(self, limiter: RateLimiter) -> None:
        await limiter.check_rate_limit("ip:1", BUCKET_STANDARD)
        await limiter.check_rate_limit("ip:2", BUCKET_CHAT)

        assert limiter.cleanup_inactive_buckets(time.monotonic()) == 0
        assert limiter.cleanup_inactive_buckets(time.monotonic() + 601) == 2

    def test_config_from_settings(self) -> None:
        settings = RateLimitSettings(
            requests_per_minute=50,
            chat_requests_per_minute=20,
            auth_requests_per_minute=5,
            burst_size=2,
        )

        config = RateLimitConfig.from_settings(settings)

        assert config.per_minute(BUCKET_STANDARD) == 50
        assert config.per_minute(BUCKET_CHAT) == 20
        assert config.per_minute(BUCKET_AUTH) == 5
        assert config.burst_size == 2
