"""Observability module for OpenTelemetry tracing, Prometheus metrics, and logging."""

from prouter.observability.context import (
    RequestContext,
    current_request_context,
    request_context,
    set_request_context,
)
from prouter.observability.logging import JsonFormatter, configure_logging
from prouter.observability.metrics import (
    RESOLVE_LATENCY,
    RESPONSES,
    get_metrics,
    get_metrics_content_type,
    record_outcome,
    track_latency,
)
from prouter.observability.tracing import (
    RequestSpanMiddleware,
    TraceContextMiddleware,
    configure_trace_exporter,
    create_span,
    get_tracer,
    init_tracing,
)


__all__ = [
    "RESOLVE_LATENCY",
    "RESPONSES",
    "JsonFormatter",
    "RequestContext",
    "RequestSpanMiddleware",
    "TraceContextMiddleware",
    "configure_logging",
    "configure_trace_exporter",
    "create_span",
    "current_request_context",
    "get_metrics",
    "get_metrics_content_type",
    "get_tracer",
    "init_tracing",
    "record_outcome",
    "request_context",
    "set_request_context",
    "track_latency",
]
