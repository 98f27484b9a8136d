"""Observability module for logging and metrics."""

import logging

import structlog
from structlog.processors import TimeStamper

# Map string log levels to Python logging constants
LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def setup_logging(log_level: str = "INFO") -> None:
    """Configure structured logging."""
    level = LOG_LEVELS.get(log_level.upper(), logging.INFO)

    # ConsoleRenderer formats exceptions itself
    if level == logging.DEBUG:
        renderers = [structlog.dev.ConsoleRenderer()]
    else:
        renderers = [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            TimeStamper(fmt="iso"),
            *renderers,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


from kb_proxy.modules.observability.latency import (  # noqa: E402
    track_latency,
    get_latency_stats,
    reset_latency_stats,
)
from kb_proxy.modules.observability.relay_metrics import (  # noqa: E402
    ChatOutcome,
    get_metrics_summary,
    record_chat_outcome,
    record_upstream_failure,
    reset_relay_metrics,
)

__all__ = [
    "setup_logging",
    "track_latency",
    "get_latency_stats",
    "reset_latency_stats",
    "ChatOutcome",
    "get_metrics_summary",
    "record_chat_outcome",
    "record_upstream_failure",
    "reset_relay_metrics",
]
