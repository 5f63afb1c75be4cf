"""
Health Check Endpoints

Kubernetes-style health probes for production deployments.

ARCHITECTURE: Health checks must never fail the application.
They report status for orchestration decisions. A missing LLM
provider only degrades the service (replies fall back to canned
text); an unreachable database makes it not ready.
"""

import time

from fastapi import APIRouter, Response
from pydantic import BaseModel

from wellness import __version__
from wellness.config import get_settings
from wellness.config.logging_config import get_logger
from wellness.domain.clock import utc_now
from wellness.infrastructure.database import get_db_manager
from wellness.infrastructure.llm import get_provider_chain

logger = get_logger(__name__)

router = APIRouter(prefix="/health", tags=["health"])


class HealthStatus(BaseModel):
    """Health check response."""

    status: str  # healthy, degraded, unhealthy
    timestamp: str
    version: str = __version__
    environment: str
    checks: dict[str, dict] = {}


@router.get("", response_model=HealthStatus)
async def health_summary(response: Response) -> HealthStatus:
    """
    Health summary of all components.

    Returns 503 only when a component is unhealthy.
    """
    checks = {
        "database": await _check_database(),
        "llm": _check_llm(),
    }

    statuses = [c["status"] for c in checks.values()]
    if "unhealthy" in statuses:
        overall_status = "unhealthy"
        response.status_code = 503
    elif "degraded" in statuses:
        overall_status = "degraded"
    else:
        overall_status = "healthy"

    return HealthStatus(
        status=overall_status,
        timestamp=utc_now().isoformat(),
        environment=get_settings().env,
        checks=checks,
    )


@router.get("/live", response_model=HealthStatus)
async def liveness() -> HealthStatus:
    """
    Liveness probe.

    This should ALWAYS return 200 unless the process is deadlocked.
    """
    return HealthStatus(
        status="healthy",
        timestamp=utc_now().isoformat(),
        environment=get_settings().env,
        checks={"process": {"status": "alive"}},
    )


@router.get("/ready", response_model=HealthStatus)
async def readiness(response: Response) -> HealthStatus:
    """
    Readiness probe.

    Returns 503 when the database cannot be reached.
    """
    db_status = await _check_database()
    ready = db_status["status"] == "healthy"
    if not ready:
        response.status_code = 503

    return HealthStatus(
        status="healthy" if ready else "unhealthy",
        timestamp=utc_now().isoformat(),
        environment=get_settings().env,
        checks={"database": db_status, "llm": _check_llm()},
    )


async def _check_database() -> dict:
    """Check database connectivity."""
    db = get_db_manager()
    if not db.is_initialized:
        return {"status": "unhealthy", "message": "Database not initialized"}

    start = time.perf_counter()
    healthy = await db.health_check()
    latency = int((time.perf_counter() - start) * 1000)

    if not healthy:
        logger.warning("Database health check failed")
        return {"status": "unhealthy", "message": "Database connection failed"}
    return {"status": "healthy", "latency_ms": latency}


def _check_llm() -> dict:
    """Report which LLM providers are configured (no network call)."""
    providers = [p.provider_name for p in get_provider_chain()]
    if not providers:
        return {
            "status": "degraded",
            "message": "No LLM provider configured, using fallback responses",
        }
    return {"status": "healthy", "providers": providers}
