"""Prometheus metrics for served responses."""

from __future__ import annotations

from contextlib import contextmanager
import time
from typing import TYPE_CHECKING

from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest


if TYPE_CHECKING:
    from collections.abc import Generator


RESPONSES = Counter(
    "prouter_responses_total",
    "Responses by resolution outcome",
    ["outcome"],
)

RESOLVE_LATENCY = Histogram(
    "prouter_resolve_seconds",
    "Time spent resolving the tenant and matching the request path",
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
)

OUTCOMES = ("markdown", "file", "index", "directory", "not_found", "error")


def record_outcome(outcome: str) -> None:
    """Count one response under ``outcome``."""
    if outcome not in OUTCOMES:
        raise ValueError(f"Unknown response outcome: {outcome}")
    RESPONSES.labels(outcome=outcome).inc()


@contextmanager
def track_latency(histogram: Histogram = RESOLVE_LATENCY) -> Generator[None, None, None]:
    """Observe the wall time of the wrapped block."""
    start = time.perf_counter()
    try:
        yield
    finally:
        histogram.observe(time.perf_counter() - start)


def get_metrics() -> bytes:
    """Render the default registry in Prometheus text format."""
    return generate_latest()


def get_metrics_content_type() -> str:
    return CONTENT_TYPE_LATEST
