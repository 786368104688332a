"""Structured logging and tracing for the Bitpin SDK.

The SDK only emits: it logs through a lazily created structlog logger and
opens spans on the globally registered OpenTelemetry tracer provider.
Applications opt into the JSON log pipeline with ``configure_telemetry``.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

import structlog
from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

if TYPE_CHECKING:
    from collections.abc import Generator, MutableMapping

    from .config import TelemetryConfig

SDK_NAME = "bitpin-sdk"
SDK_VERSION = "0.1.0"

REDACTED = "***"
SENSITIVE_KEYS = frozenset(
    {"authorization", "access_token", "refresh_token", "api_key", "secret_key", "access", "refresh"}
)

_tracer: trace.Tracer | None = None
_logger: structlog.BoundLogger | None = None


def get_tracer() -> trace.Tracer:
    """Get or create the SDK tracer."""
    global _tracer
    if _tracer is None:
        _tracer = trace.get_tracer(SDK_NAME, SDK_VERSION)
    return _tracer


def get_logger() -> structlog.BoundLogger:
    """Get or create the SDK logger."""
    global _logger
    if _logger is None:
        _logger = structlog.get_logger(SDK_NAME)
    return _logger


def redact_secrets(
    _logger: Any, _method: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """structlog processor masking credential values in log events."""
    for key in event_dict:
        if key.lower() in SENSITIVE_KEYS and event_dict[key]:
            event_dict[key] = REDACTED
    return event_dict


def log_level(name: str) -> int:
    """Map a level name to its ``logging`` number; unknown names mean INFO."""
    return logging.getLevelNamesMapping().get(name.upper(), logging.INFO)


def configure_telemetry(config: TelemetryConfig) -> None:
    """Install the SDK's structlog pipeline and tracer.

    With telemetry disabled, spans go to a no-op tracer and structlog is
    left as configured by the application.

    Args:
        config: Telemetry configuration.
    """
    global _tracer, _logger

    if not config.enabled:
        _tracer = trace.NoOpTracer()
        return

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            redact_secrets,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level(config.log_level)),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
    _tracer = trace.get_tracer(config.service_name, SDK_VERSION)
    _logger = structlog.get_logger(config.service_name)


@contextmanager
def trace_operation(
    name: str,
    *,
    attributes: dict[str, Any] | None = None,
) -> Generator[trace.Span, None, None]:
    """Run a block inside a span tagged with the SDK version.

    Exceptions mark the span as failed and are re-raised.

    Args:
        name: Span name.
        attributes: Extra span attributes.

    Yields:
        The active span.
    """
    with get_tracer().start_as_current_span(name) as span:
        span.set_attribute("bitpin.sdk.version", SDK_VERSION)
        for key, value in (attributes or {}).items():
            span.set_attribute(key, value)
        try:
            yield span
        except Exception as e:
            span.set_status(Status(StatusCode.ERROR, str(e)))
            span.record_exception(e)
            raise


def record_response(span: trace.Span, status_code: int) -> None:
    """Tag a request span with the HTTP status; non-2xx marks it failed."""
    span.set_attribute("http.status_code", status_code)
    if not 200 <= status_code < 300:
        span.set_status(Status(StatusCode.ERROR, f"HTTP {status_code}"))
