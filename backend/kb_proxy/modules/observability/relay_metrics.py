"""
Relay outcome counters.

Lightweight in-memory counters for how chat requests ended and how upstream
calls failed. Counts only; no request data is kept.

Usage:
    from kb_proxy.modules.observability.relay_metrics import (
        record_chat_outcome,
        record_upstream_failure,
        get_metrics_summary,
    )

    record_chat_outcome(ChatOutcome.ANSWERED)
    record_upstream_failure("list_knowledge_bases", 404)

Thread Safety:
    All counters are updated under a threading.Lock.

Note:
    Metrics are in-memory only and reset on server restart.
"""

import threading
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import structlog

logger = structlog.get_logger()


class ChatOutcome(str, Enum):
    ANSWERED = "answered"
    EMPTY_RETRIEVAL = "empty_retrieval"
    MISCONFIGURED = "misconfigured"
    FAILED = "failed"


@dataclass
class RelayMetrics:
    """
    In-memory counters for relay behavior.

    Attributes:
        chat_outcomes: Chat requests by outcome
        upstream_failures: Failed upstream calls keyed by status code,
            or "transport" when no response was received
        failures_by_operation: Failed upstream calls keyed by client operation
    """
    chat_outcomes: Counter = field(default_factory=Counter)
    upstream_failures: Counter = field(default_factory=Counter)
    failures_by_operation: Counter = field(default_factory=Counter)

    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    @property
    def total_chats(self) -> int:
        return sum(self.chat_outcomes.values())

    @property
    def empty_retrieval_rate(self) -> float:
        """Share of chat requests answered without calling the model."""
        if self.total_chats == 0:
            return 0.0
        return self.chat_outcomes[ChatOutcome.EMPTY_RETRIEVAL.value] / self.total_chats

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_chats": self.total_chats,
            "chat_outcomes": {
                outcome.value: self.chat_outcomes[outcome.value] for outcome in ChatOutcome
            },
            "empty_retrieval_rate": round(self.empty_retrieval_rate, 4),
            "upstream_failures": dict(self.upstream_failures),
            "failures_by_operation": dict(self.failures_by_operation),
        }


# Global metrics instance
_metrics = RelayMetrics()


def reset_relay_metrics() -> None:
    """Reset all relay counters to zero."""
    with _metrics._lock:
        _metrics.chat_outcomes.clear()
        _metrics.upstream_failures.clear()
        _metrics.failures_by_operation.clear()

    logger.info("Relay metrics reset")


def record_chat_outcome(outcome: ChatOutcome) -> None:
    with _metrics._lock:
        _metrics.chat_outcomes[outcome.value] += 1


def record_upstream_failure(operation: str, status_code: int | None) -> None:
    """
    Count a failed upstream call.

    Args:
        operation: Route or client operation that failed
        status_code: Upstream status, None for transport failures
    """
    key = str(status_code) if status_code is not None else "transport"
    with _metrics._lock:
        _metrics.upstream_failures[key] += 1
        _metrics.failures_by_operation[operation] += 1


def get_metrics_summary() -> dict[str, Any]:
    return _metrics.to_dict()
