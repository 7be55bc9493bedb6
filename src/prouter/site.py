"""ASGI endpoint serving every tenant site.

Per request: resolve the tenant from the Host header, search its tree for the
request path, then let the dispatcher build the response. Resolution failures
become plain-text error responses; nothing is cached between requests.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

import anyio
from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response

from .dispatcher import ResponseDispatcher
from .errors import ProuterError, WriteFailure
from .matcher import FileMatcher
from .observability import create_span, record_outcome, track_latency
from .tenancy import TenantResolver


if TYPE_CHECKING:
    from starlette.types import Receive, Scope, Send


logger = logging.getLogger(__name__)


def _request_context(request: Request) -> dict[str, Any]:
    return {
        "method": request.method,
        "url": str(request.url),
        "host": request.headers.get("host", ""),
    }


class SiteHandler:
    """Resolves and serves one request against the serve root."""

    def __init__(
        self,
        serve_root: Path,
        *,
        resolver: TenantResolver | None = None,
        matcher: FileMatcher | None = None,
        dispatcher: ResponseDispatcher | None = None,
        logger: logging.Logger = logger,
    ) -> None:
        self.serve_root = Path(serve_root)
        self.logger = logger
        self.resolver = resolver or TenantResolver(self.serve_root, logger=logger.getChild("tenancy"))
        self.matcher = matcher or FileMatcher(logger=logger.getChild("matcher"))
        self.dispatcher = dispatcher or ResponseDispatcher(logger=logger.getChild("dispatcher"))

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        request = Request(scope, receive)
        response = await self.handle(request)
        try:
            await self._send(response, scope, receive, send)
        except WriteFailure as exc:
            # Headers may already be on the wire; there is no second response to send.
            self.logger.error(exc.detail, exc_info=exc, extra=_request_context(request))

    @staticmethod
    async def _send(response: Response, scope: Scope, receive: Receive, send: Send) -> None:
        try:
            await response(scope, receive, send)
        except OSError as exc:
            raise WriteFailure(f"Failed to write response: {exc}") from exc

    async def handle(self, request: Request) -> Response:
        context = _request_context(request)
        self.logger.info("Received request", extra=context)

        try:
            with track_latency():
                with create_span("tenant.resolve", attributes={"http.host": context["host"]}):
                    tenant = await anyio.to_thread.run_sync(self.resolver.resolve, context["host"])
                with create_span(
                    "files.match",
                    attributes={"tenant.identifier": tenant.identifier, "http.route": request.url.path},
                ) as span:
                    match = await anyio.to_thread.run_sync(self.matcher.find, tenant.root, request.url.path)
                    span.set_attribute("files.visited", match.visited)
                    span.set_attribute("files.found", match.found)
            dispatch = await self.dispatcher.dispatch(tenant, match, request.scope)
        except ProuterError as exc:
            record_outcome("not_found" if exc.status_code == 404 else "error")
            log = self.logger.warning if exc.status_code < 500 else self.logger.error
            log(
                "Request failed with %d: %s",
                exc.status_code,
                exc.detail,
                extra={**context, "status_code": exc.status_code, "file_path": exc.path},
            )
            return PlainTextResponse(exc.detail, status_code=exc.status_code)

        record_outcome(dispatch.outcome)
        return dispatch.response
