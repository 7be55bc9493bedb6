"""Extension-insensitive lookup of request paths inside a tenant tree.

A file answers a request when its path relative to the tenant root equals the
request path either with or without its final extension::

    about.md          answers  /about  and  /about.md
    docs/intro.html   answers  /docs/intro  and  /docs/intro.html

The walk is top-down; inside each directory files are visited in lexical order
before descending into sub-directories (also lexical). The first file that
matches wins and the walk stops there. Since an exact name sorts before any of
its extended siblings, an exact match always beats an extension-stripped one.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
import logging
import os
from pathlib import Path, PurePosixPath

from .errors import TraversalFailure


logger = logging.getLogger(__name__)


def normalize_request_path(url_path: str) -> str:
    """Strip leading and trailing slashes from a URL path."""
    return url_path.strip("/")


@dataclass(frozen=True)
class Candidate:
    """A file system entry below a tenant root."""

    path: Path
    relative: str
    is_dir: bool = False

    @property
    def logical_path(self) -> str:
        """Relative path with the final extension removed."""
        relative = PurePosixPath(self.relative)
        if not relative.suffix:
            return self.relative
        return relative.with_suffix("").as_posix()

    @property
    def extension(self) -> str:
        return PurePosixPath(self.relative).suffix

    @property
    def is_markdown(self) -> bool:
        return self.extension == ".md"

    def matches(self, request_path: str) -> bool:
        return self.logical_path == request_path or self.relative == request_path


@dataclass(frozen=True)
class MatchResult:
    """Outcome of a lookup: the matched candidate, or nothing."""

    candidate: Candidate | None = None
    visited: int = 0

    @property
    def found(self) -> bool:
        return self.candidate is not None


class FileMatcher:
    """Finds the file answering a request path below a tenant root."""

    def __init__(self, *, logger: logging.Logger = logger) -> None:
        self.logger = logger

    def iter_candidates(self, root: Path) -> Iterator[Candidate]:
        """Yield every entry below ``root`` in walk order.

        Files of a directory come first, then its sub-directories, which are
        descended into afterwards. Symlinked directories are listed but not
        followed.

        Raises:
            TraversalFailure: a directory could not be listed
        """

        def _on_error(exc: OSError) -> None:
            failing = exc.filename or root
            self.logger.error("Failed to walk directory: %s", exc, extra={"file_path": str(failing)})
            raise TraversalFailure(f"Failed to walk directory: {exc}", path=failing) from exc

        for dirpath, dirnames, filenames in os.walk(root, onerror=_on_error):
            dirnames.sort()
            current = Path(dirpath)
            for name in sorted(filenames):
                path = current / name
                yield Candidate(path=path, relative=path.relative_to(root).as_posix())
            for name in dirnames:
                path = current / name
                yield Candidate(path=path, relative=path.relative_to(root).as_posix(), is_dir=True)

    def find(self, root: Path, request_path: str) -> MatchResult:
        """Return the first file below ``root`` that answers ``request_path``."""
        root = Path(root)
        request_path = normalize_request_path(request_path)
        visited = 0
        for candidate in self.iter_candidates(root):
            if candidate.is_dir:
                continue
            visited += 1
            if candidate.matches(request_path):
                self.logger.info(
                    "Found requested file",
                    extra={"file_name": candidate.path.name, "file_path": str(candidate.path)},
                )
                return MatchResult(candidate=candidate, visited=visited)

        self.logger.debug("No file matches %r under %s (%d files visited)", request_path, root, visited)
        return MatchResult(visited=visited)
