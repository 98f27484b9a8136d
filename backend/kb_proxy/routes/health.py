"""Health check endpoints."""

import time
from datetime import datetime, timezone

import httpx
import structlog
from fastapi import APIRouter, Depends

from kb_proxy import __version__
from kb_proxy.config import Settings, get_settings
from kb_proxy.dependencies import get_http_client
from kb_proxy.models.schemas import HealthResponse, HealthStatus, ComponentHealth

router = APIRouter()
logger = structlog.get_logger()

PROBE_TIMEOUT_SECONDS = 5.0


def check_configuration(settings: Settings) -> ComponentHealth:
    """Check that chat credentials and the knowledge base id are set."""
    missing = settings.missing_chat_settings()
    if missing:
        return ComponentHealth(
            name="configuration",
            status=HealthStatus.UNHEALTHY,
            message=f"Missing: {', '.join(missing)}",
        )
    return ComponentHealth(name="configuration", status=HealthStatus.HEALTHY)


async def check_context_api(
    http_client: httpx.AsyncClient,
    settings: Settings,
) -> ComponentHealth:
    """Check that the knowledge-base service answers at all."""
    start = time.perf_counter()

    try:
        await http_client.get(settings.context_api_base_url, timeout=PROBE_TIMEOUT_SECONDS)
        latency = (time.perf_counter() - start) * 1000
        return ComponentHealth(
            name="context_api",
            status=HealthStatus.HEALTHY,
            latency_ms=round(latency, 2),
        )
    except httpx.RequestError as e:
        latency = (time.perf_counter() - start) * 1000
        return ComponentHealth(
            name="context_api",
            status=HealthStatus.DEGRADED,
            latency_ms=round(latency, 2),
            message=str(e) or e.__class__.__name__,
        )


@router.get("/health", response_model=HealthResponse)
async def health_check(
    settings: Settings = Depends(get_settings),
    http_client: httpx.AsyncClient = Depends(get_http_client),
) -> HealthResponse:
    """
    Comprehensive health check endpoint.

    Returns status of:
    - Configuration (credentials and knowledge base id)
    - Context API reachability
    """
    components = [
        check_configuration(settings),
        await check_context_api(http_client, settings),
    ]

    statuses = [c.status for c in components]
    if all(s == HealthStatus.HEALTHY for s in statuses):
        overall = HealthStatus.HEALTHY
    elif any(s == HealthStatus.UNHEALTHY for s in statuses):
        overall = HealthStatus.UNHEALTHY
    else:
        overall = HealthStatus.DEGRADED

    response = HealthResponse(
        status=overall,
        version=__version__,
        environment=settings.app_env,
        timestamp=datetime.now(timezone.utc),
        components=components,
    )

    logger.info("Health check completed", status=overall.value)
    return response


@router.get("/health/live")
async def liveness() -> dict[str, str]:
    """Liveness probe - always returns ok if server is running."""
    return {"status": "ok"}


@router.get("/health/ready")
async def readiness(settings: Settings = Depends(get_settings)) -> dict[str, str]:
    """Readiness probe - checks that chat can be served."""
    missing = settings.missing_chat_settings()
    if missing:
        return {"status": "not_ready", "reason": f"missing configuration: {', '.join(missing)}"}

    return {"status": "ready"}
