"""Turns a file lookup outcome into an HTTP response.

Precedence, first applicable wins:

1. matched ``.md`` file   -> rendered Markdown page
2. matched other file     -> raw bytes, content type from the extension
3. ``index.md`` at root   -> rendered index page
4. anything else          -> directory file server (listing, index.html, 404)
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path
from typing import TYPE_CHECKING

import anyio
from starlette.exceptions import HTTPException
from starlette.responses import FileResponse, HTMLResponse, PlainTextResponse, Response

from .errors import RenderFailure, TraversalFailure
from .observability import create_span
from .render import MarkdownRenderer
from .static import DirectoryFiles
from .ui.page import PageTemplate


if TYPE_CHECKING:
    from starlette.types import Scope

    from .matcher import MatchResult
    from .tenancy import Tenant


logger = logging.getLogger(__name__)

INDEX_DOCUMENT = "index.md"


@dataclass(frozen=True)
class Dispatch:
    """A response plus the branch of the state machine that produced it."""

    response: Response
    outcome: str


class ResponseDispatcher:
    """Chooses between Markdown rendering, raw serving, the index page and the directory server."""

    def __init__(
        self,
        renderer: MarkdownRenderer | None = None,
        template: PageTemplate | None = None,
        *,
        logger: logging.Logger = logger,
    ) -> None:
        self.renderer = renderer or MarkdownRenderer()
        self.template = template or PageTemplate()
        self.logger = logger

    async def dispatch(self, tenant: Tenant, match: MatchResult, scope: Scope) -> Dispatch:
        candidate = match.candidate
        if candidate is not None:
            if candidate.is_markdown:
                return Dispatch(await self.render_markdown(candidate.path, candidate.path.stem), "markdown")
            return Dispatch(await self.serve_file(candidate.path), "file")

        index_path = tenant.root / INDEX_DOCUMENT
        if await anyio.to_thread.run_sync(index_path.is_file):
            self.logger.info("Serving index document", extra={"file_path": str(index_path)})
            return Dispatch(await self.render_markdown(index_path, "index"), "index")

        response = await self.serve_directory(tenant.root, scope)
        return Dispatch(response, "not_found" if response.status_code == 404 else "directory")

    def _render_page(self, path: Path, title: str) -> str:
        try:
            data = path.read_bytes()
        except OSError as exc:
            self.logger.error("Failed to read markdown file: %s", exc, extra={"file_path": str(path)})
            raise RenderFailure(f"Failed to read markdown file: {exc}", path=path) from exc

        try:
            fragment = self.renderer.render(data)
            return self.template.render(title, fragment)
        except Exception as exc:
            self.logger.error("Failed to render markdown file: %s", exc, extra={"file_path": str(path)})
            raise RenderFailure(f"Failed to render markdown file: {exc}", path=path) from exc

    async def render_markdown(self, path: Path, title: str) -> Response:
        """Render the Markdown document at ``path`` inside the page shell."""
        with create_span("markdown.render", attributes={"file.path": str(path)}):
            html = await anyio.to_thread.run_sync(self._render_page, path, title)
        return HTMLResponse(html)

    async def serve_file(self, path: Path) -> Response:
        """Serve ``path`` as-is; FileResponse supplies content type, ETag and Last-Modified."""
        try:
            stat_result = await anyio.to_thread.run_sync(path.stat)
        except OSError as exc:
            self.logger.error("Failed to stat file: %s", exc, extra={"file_path": str(path)})
            raise TraversalFailure(f"Failed to read file: {exc}", path=path) from exc
        return FileResponse(path, stat_result=stat_result)

    async def serve_directory(self, root: Path, scope: Scope) -> Response:
        """Delegate to the directory file server rooted at ``root``."""
        files = DirectoryFiles(root)
        try:
            return await files.get_response(files.get_path(scope), scope)
        except HTTPException as exc:
            self.logger.info(
                "Directory server answered %d", exc.status_code, extra={"file_path": str(root)}
            )
            return PlainTextResponse(exc.detail, status_code=exc.status_code, headers=exc.headers)
        except OSError as exc:
            self.logger.error("Failed to serve directory: %s", exc, extra={"file_path": str(root)})
            raise TraversalFailure(f"Failed to serve directory: {exc}", path=root) from exc
