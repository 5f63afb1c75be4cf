"""Metrics infrastructure package."""

from wellness.infrastructure.metrics.prometheus_metrics import (
    # Chat metrics
    CHAT_MESSAGES_TOTAL,
    CHAT_RESPONSE_SOURCE_TOTAL,
    CHAT_PROCESSING_DURATION,
    # Safety metrics
    CRISIS_DETECTIONS_TOTAL,
    ASSESSMENTS_TOTAL,
    # LLM metrics
    LLM_REQUESTS_TOTAL,
    LLM_LATENCY,
    # API metrics
    HTTP_REQUESTS_TOTAL,
    HTTP_REQUEST_DURATION,
    WEBSOCKET_CONNECTIONS,
    RATE_LIMIT_EXCEEDED,
    AUTH_EVENTS_TOTAL,
    # Helpers
    track_llm_result,
    track_crisis_detection,
    update_system_info,
    # Router
    metrics_router,
)

__all__ = [
    "CHAT_MESSAGES_TOTAL",
    "CHAT_RESPONSE_SOURCE_TOTAL",
    "CHAT_PROCESSING_DURATION",
    "CRISIS_DETECTIONS_TOTAL",
    "ASSESSMENTS_TOTAL",
    "LLM_REQUESTS_TOTAL",
    "LLM_LATENCY",
    "HTTP_REQUESTS_TOTAL",
    "HTTP_REQUEST_DURATION",
    "WEBSOCKET_CONNECTIONS",
    "RATE_LIMIT_EXCEEDED",
    "AUTH_EVENTS_TOTAL",
    "track_llm_result",
    "track_crisis_detection",
    "update_system_info",
    "metrics_router",
]
