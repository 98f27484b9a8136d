"""Pydantic models and schemas."""

from kb_proxy.models.schemas import (
    HealthResponse,
    ChatRequest,
    ChatResponse,
    ErrorResponse,
    MetricsResponse,
    RelayMetricsResponse,
)

__all__ = [
    "HealthResponse",
    "ChatRequest",
    "ChatResponse",
    "ErrorResponse",
    "MetricsResponse",
    "RelayMetricsResponse",
]
