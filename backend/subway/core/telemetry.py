"""OpenTelemetry distributed tracing configuration."""

import threading
from collections.abc import Generator
from contextlib import contextmanager
from typing import TYPE_CHECKING

import structlog
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http._log_exporter import OTLPLogExporter
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk._logs import LoggerProvider
from opentelemetry.sdk._logs.export import BatchLogRecordProcessor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.trace import SpanKind, Status, StatusCode

from subway import __version__
from subway.core.config import require_config, settings

if TYPE_CHECKING:
    from opentelemetry.trace.span import Span

logger = structlog.get_logger(__name__)

# Lazily created per process (uvicorn workers fork before lifespan runs)
_tracer_provider: TracerProvider | None = None
_tracer_provider_lock = threading.Lock()
_logger_provider: LoggerProvider | None = None
_logger_provider_lock = threading.Lock()


def _service_resource() -> Resource:
    return Resource(
        attributes={
            "service.name": settings.OTEL_SERVICE_NAME,
            "service.version": __version__,
            "deployment.environment": settings.OTEL_ENVIRONMENT,
        }
    )


def get_tracer_provider() -> TracerProvider | None:
    """
    Get or create TracerProvider (lazy initialization for fork-safety).

    Returns:
        TracerProvider if OTEL is enabled, None otherwise
    """
    if not settings.OTEL_ENABLED:
        return None

    global _tracer_provider  # noqa: PLW0603
    if _tracer_provider is None:
        with _tracer_provider_lock:
            if _tracer_provider is None:  # Double-checked locking
                _tracer_provider = _create_tracer_provider()
    return _tracer_provider


def _create_tracer_provider() -> TracerProvider:
    """
    Create TracerProvider with an OTLP exporter when an endpoint is configured.

    Raises:
        ValueError: If the traces endpoint is missing in production
    """
    if not settings.DEBUG:
        require_config("OTEL_EXPORTER_OTLP_TRACES_ENDPOINT")

    provider = TracerProvider(resource=_service_resource())

    if settings.OTEL_EXPORTER_OTLP_TRACES_ENDPOINT:
        headers = parse_otlp_headers(settings.OTEL_EXPORTER_OTLP_HEADERS or "")
        otlp_exporter = OTLPSpanExporter(
            endpoint=settings.OTEL_EXPORTER_OTLP_TRACES_ENDPOINT,
            headers=headers,
        )
        provider.add_span_processor(BatchSpanProcessor(otlp_exporter))

        logger.info(
            "otel_tracer_provider_created",
            endpoint=settings.OTEL_EXPORTER_OTLP_TRACES_ENDPOINT,
            service_name=settings.OTEL_SERVICE_NAME,
            environment=settings.OTEL_ENVIRONMENT,
        )
    else:
        logger.warning("otel_no_traces_endpoint_configured", message="traces will not be exported")

    return provider


def parse_otlp_headers(headers_str: str) -> dict[str, str]:
    """
    Parse OTLP headers from comma-separated key=value pairs.

    Example:
        >>> parse_otlp_headers("Authorization=Bearer token123,X-Custom=value")
        {'Authorization': 'Bearer token123', 'X-Custom': 'value'}
    """
    if not headers_str or not headers_str.strip():
        return {}

    headers = {}
    for raw_pair in headers_str.split(","):
        pair = raw_pair.strip()
        if "=" in pair:
            key, value = pair.split("=", 1)
            headers[key.strip()] = value.strip()
        elif pair:
            logger.warning("otel_malformed_header", pair=pair)

    return headers


def shutdown_tracer_provider() -> None:
    """Flush pending spans. Safe to call when no provider was created."""
    if _tracer_provider is not None:
        _tracer_provider.shutdown()
        logger.info("otel_tracer_provider_shutdown")


def get_logger_provider() -> LoggerProvider | None:
    """
    Get or create LoggerProvider (lazy initialization for fork-safety).

    Returns:
        LoggerProvider if OTEL is enabled, None otherwise
    """
    if not settings.OTEL_ENABLED:
        return None

    global _logger_provider  # noqa: PLW0603
    if _logger_provider is None:
        with _logger_provider_lock:
            if _logger_provider is None:  # Double-checked locking
                _logger_provider = _create_logger_provider()
    return _logger_provider


def _create_logger_provider() -> LoggerProvider:
    """Create LoggerProvider. The OTLP logs endpoint is optional, stdout logging works without it."""
    provider = LoggerProvider(resource=_service_resource())

    if settings.OTEL_EXPORTER_OTLP_LOGS_ENDPOINT:
        headers = parse_otlp_headers(settings.OTEL_EXPORTER_OTLP_HEADERS or "")
        otlp_exporter = OTLPLogExporter(
            endpoint=settings.OTEL_EXPORTER_OTLP_LOGS_ENDPOINT,
            headers=headers,
        )
        provider.add_log_record_processor(BatchLogRecordProcessor(otlp_exporter))

        logger.info(
            "otel_logger_provider_created",
            endpoint=settings.OTEL_EXPORTER_OTLP_LOGS_ENDPOINT,
            log_level=settings.OTEL_LOG_LEVEL,
        )
    else:
        logger.warning("otel_no_logs_endpoint_configured", message="logs will not be exported to OTLP")

    return provider


def shutdown_logger_provider() -> None:
    """Flush pending log records. Safe to call when no provider was created."""
    if _logger_provider is not None:
        _logger_provider.shutdown()  # type: ignore[no-untyped-call]
        logger.info("otel_logger_provider_shutdown")


# OpenTelemetry attribute values can be primitives or lists of primitives
AttributeValue = str | int | float | bool | list[str] | list[int] | list[float] | list[bool]


@contextmanager
def service_span(
    name: str,
    service: str,
    kind: SpanKind = SpanKind.INTERNAL,
    **attributes: AttributeValue,
) -> Generator["Span"]:
    """Context manager for service operation spans with explicit status.

    Sets StatusCode.OK on successful completion. On failure the SDK records
    the exception and sets StatusCode.ERROR before the exception propagates.

    The tracer is acquired at call time so the provider installed during
    application startup (or by a test fixture) is the one used.

    Args:
        name: Span name (e.g., "line.create")
        service: Service name for the peer.service attribute (e.g., "line-service")
        kind: Span kind
        **attributes: Additional span attributes

    Example:
        with service_span("line.get", "line-service", **{"line.id": line_id}) as span:
            line = await repository.find_by_id(line_id)
    """
    tracer = trace.get_tracer(__name__)
    span_attributes = {
        "peer.service": service,
        **attributes,
    }
    with tracer.start_as_current_span(
        name,
        kind=kind,
        attributes=span_attributes,
    ) as span:
        yield span
        span.set_status(Status(StatusCode.OK))
