"""Unit tests for observability module."""

import json
import logging

from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from opentelemetry.trace import StatusCode
from prometheus_client import REGISTRY
import pytest

from prouter.observability import (
    JsonFormatter,
    RequestSpanMiddleware,
    TraceContextMiddleware,
    create_span,
    current_request_context,
    get_metrics,
    get_metrics_content_type,
    record_outcome,
    set_request_context,
    tracing as tracing_module,
)
from prouter.observability.context import request_context


def _record(msg: str, **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="prouter.site",
        level=logging.INFO,
        pathname="site.py",
        lineno=1,
        msg=msg,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.fixture
def span_exporter(monkeypatch):
    exporter = InMemorySpanExporter()
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(exporter))
    monkeypatch.setitem(tracing_module._tracer_holder, "tracer", provider.get_tracer("tests"))
    return exporter


@pytest.fixture(autouse=True)
def reset_request_context():
    token = request_context.set(None)
    yield
    request_context.reset(token)


class TestRequestContext:
    def test_context_is_created_outside_a_request(self):
        ctx = current_request_context()

        assert len(ctx.trace_id) == 32
        assert len(ctx.span_id) == 16
        assert ctx.log_fields() == {"trace_id": ctx.trace_id, "span_id": ctx.span_id}

    def test_missing_trace_id_starts_a_new_trace(self):
        first = set_request_context(None, tenant="acme")
        second = set_request_context(None, tenant="acme")

        assert first.trace_id != second.trace_id
        assert current_request_context() is second

    def test_span_keeps_request_fields(self, span_exporter):
        bound = set_request_context("c" * 32, tenant="acme", host="acme.example.com")

        with create_span("tenant.resolve") as span:
            inner = current_request_context()

        assert inner.span_id == format(span.get_span_context().span_id, "016x")
        assert inner.span_id != bound.span_id
        assert (inner.trace_id, inner.tenant, inner.host) == ("c" * 32, "acme", "acme.example.com")


class TestJsonFormatter:
    def test_format_includes_trace_context_and_component(self):
        set_request_context("a" * 32, tenant="acme", host="acme.example.com")

        data = json.loads(JsonFormatter().format(_record("Received request")))

        assert data["message"] == "Received request"
        assert data["level"] == "INFO"
        assert data["trace_id"] == "a" * 32
        assert data["component"] == "site"
        assert data["tenant"] == "acme"
        assert data["host"] == "acme.example.com"

    def test_format_includes_request_fields(self):
        data = json.loads(
            JsonFormatter().format(_record("Received request", method="GET", url="http://acme/x", host="acme"))
        )

        assert data["method"] == "GET"
        assert data["url"] == "http://acme/x"
        assert data["host"] == "acme"
        assert "args" not in data

    def test_format_truncates_and_redacts(self):
        data = json.loads(JsonFormatter().format(_record("x" * 5000, authorization="Bearer abc")))

        assert data["message"].endswith("...")
        assert data["authorization"] == "[REDACTED]"

    def test_json_default_handles_paths_and_bytes(self, tmp_path):
        formatter = JsonFormatter()

        assert formatter._json_default(tmp_path) == str(tmp_path)
        assert formatter._json_default(b"ok") == "ok"
        assert formatter._json_default({2, 1}) == [1, 2]


class TestMetrics:
    def test_record_outcome_increments_counter(self):
        before = REGISTRY.get_sample_value("prouter_responses_total", {"outcome": "file"}) or 0.0

        record_outcome("file")

        assert REGISTRY.get_sample_value("prouter_responses_total", {"outcome": "file"}) == before + 1

    def test_record_outcome_rejects_unknown_outcome(self):
        with pytest.raises(ValueError, match="Unknown response outcome"):
            record_outcome("teapot")

    def test_metrics_exposition(self):
        assert b"prouter_resolve_seconds" in get_metrics()
        assert get_metrics_content_type().startswith("text/plain")


class TestTracing:
    def test_create_span_records_errors(self, span_exporter):
        with pytest.raises(RuntimeError), create_span("files.match", attributes={"tenant.identifier": "acme"}):
            raise RuntimeError("walk failed")

        (span,) = span_exporter.get_finished_spans()
        assert span.name == "files.match"
        assert span.attributes["tenant.identifier"] == "acme"
        assert span.status.status_code == StatusCode.ERROR

    @pytest.mark.asyncio
    async def test_trace_context_middleware_tags_tenant(self):
        seen = {}

        async def app(scope, receive, send):
            seen["ctx"] = current_request_context()

        middleware = TraceContextMiddleware(app)
        scope = {"type": "http", "path": "/", "headers": [(b"host", b"acme.example.com"), (b"x-trace-id", b"f" * 32)]}

        await middleware(scope, None, None)

        assert seen["ctx"].tenant == "acme"
        assert seen["ctx"].host == "acme.example.com"
        assert seen["ctx"].trace_id == "f" * 32

    @pytest.mark.asyncio
    async def test_request_span_middleware_marks_error_status(self, span_exporter):
        async def app(scope, receive, send):
            await send({"type": "http.response.start", "status": 404, "headers": []})
            await send({"type": "http.response.body", "body": b"Site not found: ghost"})

        sent = []

        async def send(message):
            sent.append(message)

        scope = {
            "type": "http",
            "method": "GET",
            "scheme": "http",
            "path": "/",
            "query_string": b"",
            "headers": [(b"host", b"ghost.example.com")],
            "server": ("ghost.example.com", 80),
        }

        await RequestSpanMiddleware(app)(scope, None, send)

        (span,) = span_exporter.get_finished_spans()
        assert span.attributes["http.status_code"] == 404
        assert span.attributes["tenant.identifier"] == "ghost"
        assert span.status.status_code == StatusCode.ERROR
        assert len(sent) == 2
