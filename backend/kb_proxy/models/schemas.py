"""Pydantic schemas for API requests and responses."""

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ============ Health ============

class HealthStatus(str, Enum):
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


class ComponentHealth(BaseModel):
    name: str
    status: HealthStatus
    latency_ms: float | None = None
    message: str | None = None


class HealthResponse(BaseModel):
    status: HealthStatus
    version: str
    environment: str
    timestamp: datetime = Field(default_factory=_utcnow)
    components: list[ComponentHealth] = []


# ============ Chat ============

class ChatRequest(BaseModel):
    query: str = Field(..., min_length=1)


class ChatResponse(BaseModel):
    answer: str


# ============ Errors ============

class ErrorResponse(BaseModel):
    error: str


# ============ Metrics ============

class LatencyMetrics(BaseModel):
    p50_ms: float
    p90_ms: float
    p99_ms: float
    avg_ms: float


class MetricsResponse(BaseModel):
    requests_total: int
    requests_by_endpoint: dict[str, int] = {}
    latency: LatencyMetrics | None = None
    since: datetime | None = None


class RelayMetricsResponse(BaseModel):
    total_chats: int
    chat_outcomes: dict[str, int] = {}
    empty_retrieval_rate: float
    upstream_failures: dict[str, int] = {}
    failures_by_operation: dict[str, int] = {}
