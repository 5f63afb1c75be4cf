"""Monitoring infrastructure package."""

from wellness.infrastructure.monitoring.sentry_integration import (
    before_send,
    capture_crisis_event,
    init_sentry,
)

__all__ = [
    "before_send",
    "capture_crisis_event",
    "init_sentry",
]
