"""
Observability Infrastructure

Structured logging, correlation tracking and Prometheus metrics for the
bay scheduling engine.
"""

import contextvars
import functools
import logging
import sys
import time
import uuid
from collections.abc import Callable
from typing import Any, TypeVar

import structlog
from prometheus_client import Counter, Histogram, start_http_server

from .config import settings

# Context variables for correlation tracking
correlation_id_var: contextvars.ContextVar[str] = contextvars.ContextVar(
    "correlation_id", default=""
)
user_id_var: contextvars.ContextVar[str] = contextvars.ContextVar("user_id", default="")

F = TypeVar("F", bound=Callable[..., Any])

# Prometheus metrics
REQUEST_COUNT = Counter(
    "bay_scheduler_http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"],
)

REQUEST_DURATION = Histogram(
    "bay_scheduler_http_request_duration_seconds",
    "HTTP request duration",
    ["method", "endpoint"],
)

LAYOUT_DURATION = Histogram(
    "bay_scheduler_layout_duration_seconds",
    "Time spent computing axes and schedule bars",
    ["operation"],
)

DRAG_OUTCOMES = Counter(
    "bay_scheduler_drag_outcomes_total",
    "Drag and drop outcomes by result",
    ["kind", "outcome"],
)

DEGRADED_PLACEMENTS = Counter(
    "bay_scheduler_degraded_track_placements_total",
    "Schedules placed on an occupied track because every track was busy",
)


class CorrelationIdProcessor:
    """Structlog processor to add correlation ID to all log entries."""

    def __call__(
        self, logger: Any, name: str, event_dict: dict[str, Any]
    ) -> dict[str, Any]:
        correlation_id = correlation_id_var.get("")
        user_id = user_id_var.get("")

        if correlation_id:
            event_dict["correlation_id"] = correlation_id
        if user_id:
            event_dict["user_id"] = user_id

        return event_dict


def setup_structured_logging() -> None:
    """Configure structured logging with JSON output and correlation tracking."""

    log_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        CorrelationIdProcessor(),
        structlog.processors.TimeStamper(fmt="ISO"),
        structlog.processors.add_log_level,
        structlog.stdlib.add_logger_name,
    ]

    if settings.LOG_FORMAT == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(colors=settings.ENVIRONMENT == "local")
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)


def set_correlation_id(correlation_id: str | None = None) -> str:
    """Set correlation ID for request tracking."""
    if correlation_id is None:
        correlation_id = str(uuid.uuid4())

    correlation_id_var.set(correlation_id)
    return correlation_id


def set_user_id(user_id: str) -> None:
    """Set user ID for request tracking."""
    user_id_var.set(user_id)


def get_correlation_id() -> str:
    """Get current correlation ID."""
    return correlation_id_var.get("")


def record_drag_outcome(kind: str, outcome: str) -> None:
    if settings.ENABLE_METRICS:
        DRAG_OUTCOMES.labels(kind=kind, outcome=outcome).inc()


def monitor_layout(operation: str) -> Callable[[F], F]:
    """Time a synchronous layout computation into LAYOUT_DURATION."""

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            start_time = time.perf_counter()
            try:
                return func(*args, **kwargs)
            finally:
                if settings.ENABLE_METRICS:
                    LAYOUT_DURATION.labels(operation=operation).observe(
                        time.perf_counter() - start_time
                    )

        return wrapper  # type: ignore[return-value]

    return decorator


def setup_metrics() -> None:
    """Expose Prometheus metrics on METRICS_PORT."""
    if not settings.ENABLE_METRICS:
        return

    try:
        start_http_server(settings.METRICS_PORT)
    except OSError as e:
        get_logger(__name__).warning(
            "Metrics server not started", port=settings.METRICS_PORT, error=str(e)
        )


def initialize_observability() -> None:
    """Initialize all observability components."""
    setup_structured_logging()
    setup_metrics()

    logger = get_logger("observability")
    logger.info(
        "Observability system initialized",
        log_level=settings.LOG_LEVEL,
        log_format=settings.LOG_FORMAT,
        metrics_enabled=settings.ENABLE_METRICS,
        metrics_port=settings.METRICS_PORT if settings.ENABLE_METRICS else None,
    )
