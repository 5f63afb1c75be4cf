"""
Wellness Logging Configuration

structlog on top of stdlib logging. Every event carries the request's
correlation id (bound by ErrorHandlerMiddleware), the service name and
version. Development renders to the console; every other environment
emits one JSON object per line.

SECURITY: Chat text, passwords and tokens never reach a log line.
Values under matching keys are replaced before rendering, and user ids
go through `short_id`.
"""

import logging
import sys
from typing import Any, Optional
from uuid import UUID

import structlog

from wellness import __version__
from wellness.config.settings import Settings

SERVICE_NAME = "wellness-backend"
REDACTED = "[REDACTED]"

# Substrings of event keys whose values are never rendered
REDACTED_KEY_PARTS: frozenset[str] = frozenset({
    "password",
    "token",
    "secret",
    "api_key",
    "apikey",
    "authorization",
    "bearer",
    "credential",
    "private_key",
    "content",
    "message_text",
})

QUIET_LOGGERS = ("uvicorn.access", "httpx", "httpcore", "openai", "aiosqlite")


def _is_redacted_key(key: str) -> bool:
    key_lower = key.lower()
    return any(part in key_lower for part in REDACTED_KEY_PARTS)


def _scrub(key: str, value: Any) -> Any:
    if _is_redacted_key(key):
        return REDACTED
    if isinstance(value, dict):
        return {k: _scrub(k, v) for k, v in value.items()}
    if isinstance(value, list):
        return [_scrub(key, item) for item in value]
    return value


def redact_event(logger: logging.Logger, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """Processor: blank out credentials and chat text, nested dicts included."""
    return {key: _scrub(key, value) for key, value in event_dict.items()}


def stamp_service(logger: logging.Logger, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    event_dict["service"] = SERVICE_NAME
    event_dict["version"] = __version__
    return event_dict


def build_processors(json_output: bool) -> list[Any]:
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        redact_event,
        stamp_service,
    ]

    if json_output:
        processors.extend([
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ])
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    return processors


def configure_logging(settings: Settings) -> None:
    """
    Wire structlog and the root logger. Called once from the app lifespan.
    """
    structlog.configure(
        processors=build_processors(json_output=settings.env != "development"),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, settings.log_level.upper()),
    )

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def short_id(value: Optional[UUID | str]) -> str:
    """First 8 characters of an id, for log lines."""
    if value is None:
        return "-"
    return str(value)[:8] + "..."


def bind_correlation_id(correlation_id: str) -> None:
    """Attach the request's correlation id to every event logged in this context."""
    structlog.contextvars.bind_contextvars(correlation_id=correlation_id)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
