"""Composable builder for the multi-tenant site server."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from starlette.applications import Starlette
from starlette.responses import Response
from starlette.routing import Route

from .observability import (
    RequestSpanMiddleware,
    TraceContextMiddleware,
    configure_trace_exporter,
    get_metrics,
    get_metrics_content_type,
    init_tracing,
)
from .site import SiteHandler


if TYPE_CHECKING:
    from starlette.requests import Request

    from .config import Settings


logger = logging.getLogger(__name__)


class AppBuilder:
    """Builds the ASGI app from validated settings."""

    def __init__(self, settings: Settings, *, init_observability: bool = True) -> None:
        self.settings = settings
        self.init_observability = init_observability
        self.site_handler = SiteHandler(settings.serve_path)

    def build(self) -> Starlette:
        """Build and return the Starlette application."""
        if self.init_observability:
            init_tracing(service_name=self.settings.service_name)
            configure_trace_exporter(self.settings.otlp_endpoint)

        app = Starlette(
            debug=self.settings.log_level.lower() == "debug",
            routes=self._build_routes(),
        )
        app.add_middleware(RequestSpanMiddleware)
        app.add_middleware(TraceContextMiddleware)

        logger.info("Serving tenant sites from %s", self.settings.serve_path)
        return app

    def _build_routes(self) -> list[Route]:
        routes: list[Route] = []
        if self.settings.metrics_path:
            routes.append(Route(self.settings.metrics_path, endpoint=self._build_metrics_endpoint(), methods=["GET"]))
            logger.info("Prometheus metrics exposed at %s", self.settings.metrics_path)
        # Any method, any path: the site handler routes by host and path itself
        routes.append(Route("/{path:path}", endpoint=self.site_handler))
        return routes

    def _build_metrics_endpoint(self):
        async def metrics_endpoint(_: Request) -> Response:
            return Response(content=get_metrics(), media_type=get_metrics_content_type())

        return metrics_endpoint


def create_app(settings: Settings) -> Starlette:
    return AppBuilder(settings).build()
