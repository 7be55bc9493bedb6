"""Markdown to HTML conversion."""

from __future__ import annotations

import re
import xml.etree.ElementTree as etree
from typing import Any

import markdown
from markdown.extensions import Extension
from markdown.preprocessors import Preprocessor
from markdown.treeprocessors import Treeprocessor


DEFAULT_EXTENSIONS = (
    "extra",
    "toc",
    "sane_lists",
    "smarty",
    "pymdownx.tilde",
    "pymdownx.magiclink",
)

DEFAULT_EXTENSION_CONFIGS: dict[str, dict[str, Any]] = {
    # ~~text~~ only; a single tilde is literal text
    "pymdownx.tilde": {"subscript": False},
    "pymdownx.magiclink": {"hide_protocol": False},
}

LIST_ITEM_RE = re.compile(r"^ {0,3}(?:[*+-]|\d+\.)[ \t]+\S")


def is_relative_link(href: str) -> bool:
    """Return True for in-page anchors and same-site paths."""
    if href.startswith("#"):
        return True
    if href.startswith("/") and not href.startswith("//"):
        return True
    return href.startswith(("./", "../"))


class ListSpacingPreprocessor(Preprocessor):
    """Separate a list from the paragraph line right above it.

    Python-Markdown only starts a list after a blank line. A blank line is
    inserted before the first item of a list that directly follows text;
    items and lazy lines of an already open list are left untouched.
    """

    def run(self, lines: list[str]) -> list[str]:
        result: list[str] = []
        in_list = False
        for line in lines:
            if not line.strip():
                in_list = False
            elif LIST_ITEM_RE.match(line):
                if not in_list and result and result[-1].strip():
                    result.append("")
                in_list = True
            result.append(line)
        return result


class TargetBlankTreeprocessor(Treeprocessor):
    """Open every non-relative link in a new browsing context."""

    def run(self, root: etree.Element) -> None:
        for link in root.iter("a"):
            href = link.get("href")
            if href is None or is_relative_link(href):
                continue
            link.set("target", "_blank")
            link.set("rel", "noopener noreferrer")


class ProuterExtension(Extension):
    def extendMarkdown(self, md: markdown.Markdown) -> None:
        # After fenced_code (25) so code blocks are already stashed
        md.preprocessors.register(ListSpacingPreprocessor(md), "list_spacing", 22)
        # Lowest priority so links produced by inline patterns are already in the tree
        md.treeprocessors.register(TargetBlankTreeprocessor(md), "target_blank", 0)


class MarkdownRenderer:
    """Renders Markdown documents to HTML fragments.

    Heading ids come from the ``toc`` extension; ``extra`` adds tables, fenced
    code, footnotes, definition lists, abbreviations and attribute lists.
    ``smarty`` handles quotes and dashes, ``pymdownx.tilde`` strikethrough and
    ``pymdownx.magiclink`` bare URLs.
    A fresh ``markdown.Markdown`` instance is built per call because instances
    keep per-document state and renders happen on worker threads.
    """

    def __init__(
        self,
        extensions: tuple[str, ...] = DEFAULT_EXTENSIONS,
        extension_configs: dict[str, dict[str, Any]] | None = None,
    ) -> None:
        self.extensions = extensions
        self.extension_configs = DEFAULT_EXTENSION_CONFIGS if extension_configs is None else extension_configs

    def render(self, data: bytes | str) -> str:
        text = data.decode("utf-8", errors="replace") if isinstance(data, bytes) else data
        md = markdown.Markdown(
            extensions=[*self.extensions, ProuterExtension()],
            extension_configs={name: config for name, config in self.extension_configs.items() if name in self.extensions},
        )
        return md.convert(text)
