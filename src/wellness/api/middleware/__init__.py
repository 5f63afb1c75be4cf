"""HTTP middleware."""

from wellness.api.middleware.error_handler import ErrorHandlerMiddleware
from wellness.api.middleware.rate_limiter import (
    RateLimitConfig,
    RateLimiter,
    RateLimitMiddleware,
)
from wellness.api.middleware.security_headers import SecurityHeadersMiddleware

__all__ = [
    "ErrorHandlerMiddleware",
    "RateLimitConfig",
    "RateLimiter",
    "RateLimitMiddleware",
    "SecurityHeadersMiddleware",
]
