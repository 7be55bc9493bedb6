"""Host-based tenant resolution.

A tenant is named by the first label of the request host and owns the
directory of the same name under the serve root::

    acme.example.com  ->  <serve_root>/acme

Nothing is registered up front; the serve root listing is the registry and it
is consulted on every request.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
import os
from pathlib import Path

from .errors import EmptyTenant, TenantNotFound, TraversalFailure


logger = logging.getLogger(__name__)


def host_name(host: str) -> str:
    """Strip an optional ``:port`` suffix from a Host header value."""
    host = host.strip()
    if host.startswith("["):
        # IPv6 literal, e.g. "[::1]:8080"
        end = host.find("]")
        return host[: end + 1] if end != -1 else host
    return host.partition(":")[0]


def tenant_identifier(host: str) -> str:
    """Return the tenant identifier for a Host header value.

    The identifier is everything before the first ``.``; a host without a dot
    is its own identifier.

    Examples:
        >>> tenant_identifier("acme.example.com:8080")
        'acme'
        >>> tenant_identifier("localhost")
        'localhost'
    """
    return host_name(host).split(".", 1)[0]


def _is_valid_identifier(identifier: str) -> bool:
    if identifier in ("", ".", ".."):
        return False
    return "/" not in identifier and "\\" not in identifier and "\x00" not in identifier


@dataclass(frozen=True)
class Tenant:
    """A tenant and the directory its content is served from."""

    identifier: str
    root: Path


class TenantResolver:
    """Maps request hosts onto tenant directories below ``serve_root``."""

    def __init__(self, serve_root: Path, *, logger: logging.Logger = logger) -> None:
        self.serve_root = Path(serve_root)
        self.logger = logger

    def resolve(self, host: str) -> Tenant:
        """Resolve ``host`` to a tenant with a non-empty root directory.

        Raises:
            TenantNotFound: the tenant directory does not exist
            EmptyTenant: the tenant directory has no entries
            TraversalFailure: the tenant directory exists but cannot be listed
        """
        identifier = tenant_identifier(host)
        if not _is_valid_identifier(identifier):
            self.logger.error("Invalid tenant identifier", extra={"tenant": identifier, "host": host})
            raise TenantNotFound(identifier)

        root = self.serve_root / identifier
        if not root.exists():
            self.logger.error("Path does not exist", extra={"tenant": identifier, "file_path": str(root)})
            raise TenantNotFound(identifier, path=root)

        try:
            with os.scandir(root) as entries:
                has_entries = next(entries, None) is not None
        except OSError as exc:
            self.logger.error(
                "Failed to read directory: %s", exc, extra={"tenant": identifier, "file_path": str(root)}
            )
            raise TraversalFailure(f"Failed to read directory: {exc}", path=root) from exc

        if not has_entries:
            self.logger.error("No files found in directory", extra={"tenant": identifier, "file_path": str(root)})
            raise EmptyTenant(identifier, path=root)

        return Tenant(identifier=identifier, root=root)
