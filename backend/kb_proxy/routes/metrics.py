"""Metrics and observability endpoints."""

from datetime import datetime, timezone

import structlog
from fastapi import APIRouter

from kb_proxy.models.schemas import LatencyMetrics, MetricsResponse, RelayMetricsResponse
from kb_proxy.modules.observability import (
    get_latency_stats,
    get_metrics_summary,
    reset_latency_stats,
    reset_relay_metrics,
)

router = APIRouter()
logger = structlog.get_logger()


@router.get("", response_model=MetricsResponse)
async def get_metrics() -> MetricsResponse:
    """
    Get request counts by endpoint and latency percentiles.
    """
    latency_stats = get_latency_stats()
    latency = None
    if latency_stats["count"] > 0:
        latency = LatencyMetrics(
            p50_ms=latency_stats["p50"],
            p90_ms=latency_stats["p90"],
            p99_ms=latency_stats["p99"],
            avg_ms=latency_stats["avg"],
        )

    requests_by_endpoint = {
        endpoint: data["count"]
        for endpoint, data in latency_stats["by_endpoint"].items()
    }

    return MetricsResponse(
        requests_total=latency_stats["count"],
        requests_by_endpoint=requests_by_endpoint,
        latency=latency,
        since=latency_stats["since"],
    )


@router.get("/relay", response_model=RelayMetricsResponse)
async def get_relay_metrics() -> RelayMetricsResponse:
    """
    Get relay outcome counters:
    - Chat outcomes (answered, empty retrieval, misconfigured, failed)
    - Upstream failures by status code
    """
    return RelayMetricsResponse(**get_metrics_summary())


@router.delete("/reset")
async def reset_metrics() -> dict:
    """Reset all collected metrics. Use with caution."""
    reset_latency_stats()
    reset_relay_metrics()

    logger.warning("Metrics reset by user")
    return {"status": "reset", "timestamp": datetime.now(timezone.utc).isoformat()}
