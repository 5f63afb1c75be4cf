"""
Prometheus Metrics

Metrics for wellness backend observability.
Exposed at /metrics for Prometheus scraping.

ARCHITECTURE: Metrics are decoupled from business logic.
Only increment/observe; never block on metrics operations.
"""

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    REGISTRY,
    Counter,
    Gauge,
    Histogram,
    Info,
    generate_latest,
)
from fastapi import APIRouter, Response

from wellness import __version__

# =============================================================================
# CHAT METRICS
# =============================================================================

CHAT_MESSAGES_TOTAL = Counter(
    "wellness_chat_messages_total",
    "Chat messages processed",
    ["channel"],  # rest, websocket
)

CHAT_RESPONSE_SOURCE_TOTAL = Counter(
    "wellness_chat_response_source_total",
    "Replies by source",
    ["source"],  # gemini, openai, fallback, fallback_error
)

CHAT_PROCESSING_DURATION = Histogram(
    "wellness_chat_processing_seconds",
    "End-to-end chat message processing time",
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0],
)

# =============================================================================
# SAFETY METRICS
# =============================================================================

CRISIS_DETECTIONS_TOTAL = Counter(
    "wellness_crisis_detections_total",
    "Messages flagged by crisis detection",
    ["level"],  # low, medium, high
)

ASSESSMENTS_TOTAL = Counter(
    "wellness_assessments_total",
    "Assessments submitted",
    ["assessment_type", "severity"],
)

# =============================================================================
# LLM METRICS
# =============================================================================

LLM_REQUESTS_TOTAL = Counter(
    "wellness_llm_requests_total",
    "Total LLM requests by provider",
    ["provider", "status"],  # success, error, rate_limited, filtered
)

LLM_LATENCY = Histogram(
    "wellness_llm_latency_seconds",
    "LLM response latency",
    ["provider"],
    buckets=[0.1, 0.25, 0.5, 1.0, 2.0, 5.0, 10.0],
)

# =============================================================================
# API METRICS
# =============================================================================

HTTP_REQUESTS_TOTAL = Counter(
    "wellness_http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status_code"],
)

HTTP_REQUEST_DURATION = Histogram(
    "wellness_http_request_duration_seconds",
    "HTTP request duration",
    ["method", "endpoint"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)

WEBSOCKET_CONNECTIONS = Gauge(
    "wellness_websocket_connections",
    "Active WebSocket connections",
)

RATE_LIMIT_EXCEEDED = Counter(
    "wellness_rate_limit_exceeded_total",
    "Rate limit exceeded events",
    ["bucket"],  # standard, chat, auth
)

AUTH_EVENTS_TOTAL = Counter(
    "wellness_auth_events_total",
    "Authentication events",
    ["event"],  # register, login_success, login_failed, account_locked, refresh
)

# =============================================================================
# SYSTEM INFO
# =============================================================================

SYSTEM_INFO = Info(
    "wellness_system",
    "Wellness backend information",
)


def track_llm_result(provider: str, status: str, duration_seconds: float) -> None:
    """Record the outcome and latency of one provider call."""
    LLM_REQUESTS_TOTAL.labels(provider=provider, status=status).inc()
    LLM_LATENCY.labels(provider=provider).observe(duration_seconds)


def track_crisis_detection(level: str) -> None:
    CRISIS_DETECTIONS_TOTAL.labels(level=level).inc()


def update_system_info(environment: str, version: str = __version__) -> None:
    """Update system info metric with current environment."""
    SYSTEM_INFO.info({
        "version": version,
        "environment": environment,
    })


# =============================================================================
# METRICS ENDPOINT
# =============================================================================

metrics_router = APIRouter(tags=["metrics"])


@metrics_router.get("/metrics")
async def metrics() -> Response:
    """
    Prometheus metrics endpoint.

    Returns metrics in Prometheus text format for scraping.
    """
    return Response(
        content=generate_latest(REGISTRY),
        media_type=CONTENT_TYPE_LATEST,
    )
