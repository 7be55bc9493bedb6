"""Directory listing page."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from urllib.parse import quote

from jinja2 import Environment


LISTING_TEMPLATE = """<!DOCTYPE html>
<html>
  <head>
    <meta charset="utf-8" />
    <title>{{ title }}</title>
    <meta name="viewport" content="width=device-width, initial-scale=1.0" />
  </head>
  <body>
    <pre>
{% for entry in entries %}<a href="{{ entry.href }}">{{ entry.label }}</a>
{% endfor %}</pre>
  </body>
</html>
"""


@dataclass(frozen=True)
class ListingEntry:
    name: str
    is_dir: bool

    @property
    def label(self) -> str:
        return f"{self.name}/" if self.is_dir else self.name

    @property
    def href(self) -> str:
        return quote(self.name) + ("/" if self.is_dir else "")


_environment = Environment(autoescape=True)
_template = _environment.from_string(LISTING_TEMPLATE)


def render_listing_html(title: str, entries: Sequence[ListingEntry]) -> str:
    """Render ``entries`` as a plain list of relative links."""
    ordered = sorted(entries, key=lambda entry: (not entry.is_dir, entry.name.lower()))
    return _template.render(title=title, entries=ordered)
