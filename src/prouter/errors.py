"""Request resolution failures and the HTTP status each one maps to."""

from __future__ import annotations

from pathlib import Path


class ProuterError(Exception):
    """Base class for failures that end a request with an error response."""

    status_code: int = 500

    def __init__(self, detail: str, *, path: Path | str | None = None) -> None:
        super().__init__(detail)
        self.detail = detail
        self.path = str(path) if path is not None else None


class TenantNotFound(ProuterError):
    """No directory exists for the tenant derived from the request host."""

    status_code = 404

    def __init__(self, tenant: str, *, path: Path | str | None = None) -> None:
        super().__init__(f"Site not found: {tenant}", path=path)
        self.tenant = tenant


class EmptyTenant(ProuterError):
    """The tenant directory exists but holds no entries."""

    status_code = 404

    def __init__(self, tenant: str, *, path: Path | str | None = None) -> None:
        super().__init__(f"No files found in site: {tenant}", path=path)
        self.tenant = tenant


class TraversalFailure(ProuterError):
    """Listing or walking the tenant tree failed at the I/O level."""

    status_code = 500


class RenderFailure(ProuterError):
    """Reading or rendering a Markdown document failed."""

    status_code = 500


class WriteFailure(ProuterError):
    """Sending the response failed after it may have been partially written."""

    status_code = 500
