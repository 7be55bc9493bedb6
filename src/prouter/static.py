"""Generic static serving for requests no tenant file answers."""

from __future__ import annotations

import os
import stat
from typing import TYPE_CHECKING

import anyio
from starlette.datastructures import URL
from starlette.responses import HTMLResponse, RedirectResponse, Response
from starlette.staticfiles import StaticFiles

from .ui.listing import ListingEntry, render_listing_html


if TYPE_CHECKING:
    from starlette.types import Scope


def list_directory(directory: str) -> list[ListingEntry]:
    with os.scandir(directory) as entries:
        return [ListingEntry(name=entry.name, is_dir=entry.is_dir()) for entry in entries]


class DirectoryFiles(StaticFiles):
    """``StaticFiles`` that lists directories lacking an ``index.html``.

    Everything else (file serving, ``index.html`` lookup, trailing slash
    redirects, 404/405 handling, symlink containment) is inherited.
    """

    def __init__(self, directory: str | os.PathLike[str]) -> None:
        super().__init__(directory=directory, html=True)

    async def get_response(self, path: str, scope: Scope) -> Response:
        if scope["method"] in ("GET", "HEAD"):
            listing = await self._listing_response(path, scope)
            if listing is not None:
                return listing
        return await super().get_response(path, scope)

    async def _listing_response(self, path: str, scope: Scope) -> Response | None:
        try:
            full_path, stat_result = await anyio.to_thread.run_sync(self.lookup_path, path)
        except OSError:
            # Let the inherited lookup map the error to its status code
            return None
        if stat_result is None or not stat.S_ISDIR(stat_result.st_mode):
            return None

        _, index_stat = await anyio.to_thread.run_sync(self.lookup_path, os.path.join(path, "index.html"))
        if index_stat is not None and stat.S_ISREG(index_stat.st_mode):
            return None

        if not scope["path"].endswith("/"):
            url = URL(scope=scope)
            return RedirectResponse(url=url.replace(path=url.path + "/"))

        entries = await anyio.to_thread.run_sync(list_directory, full_path)
        return HTMLResponse(render_listing_html(scope["path"], entries))
