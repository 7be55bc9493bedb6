"""Per-request context shared by log records and spans.

``TraceContextMiddleware`` binds a :class:`RequestContext` when a request
enters the app. Spans opened while serving it update the span id, and
``JsonFormatter`` reads the bound values into every record emitted on the way.
"""

from __future__ import annotations

from contextvars import ContextVar
from dataclasses import dataclass, replace
import secrets


@dataclass(frozen=True)
class RequestContext:
    trace_id: str
    span_id: str
    tenant: str = ""
    host: str = ""

    def log_fields(self) -> dict[str, str]:
        """Fields merged into structured log records; empty values are omitted."""
        fields = {"trace_id": self.trace_id, "span_id": self.span_id}
        if self.tenant:
            fields["tenant"] = self.tenant
        if self.host:
            fields["host"] = self.host
        return fields


request_context: ContextVar[RequestContext | None] = ContextVar("prouter_request_context", default=None)


def new_trace_id() -> str:
    return secrets.token_hex(16)


def new_span_id() -> str:
    return secrets.token_hex(8)


def current_request_context() -> RequestContext:
    """Return the bound context, binding a fresh one outside of a request."""
    ctx = request_context.get()
    if ctx is None:
        ctx = RequestContext(trace_id=new_trace_id(), span_id=new_span_id())
        request_context.set(ctx)
    return ctx


def set_request_context(trace_id: str | None = None, *, tenant: str = "", host: str = "") -> RequestContext:
    """Bind the context for the request being served.

    A missing ``trace_id`` starts a new trace; the span id always starts fresh.
    """
    ctx = RequestContext(trace_id=trace_id or new_trace_id(), span_id=new_span_id(), tenant=tenant, host=host)
    request_context.set(ctx)
    return ctx


def bind_span(span_id: str) -> None:
    """Point the current context at the innermost active span."""
    request_context.set(replace(current_request_context(), span_id=span_id))
