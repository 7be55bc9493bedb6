"""HTML page shell wrapped around rendered Markdown."""

from __future__ import annotations

from jinja2 import Environment
from markupsafe import Markup


PAGE_TEMPLATE = """<!DOCTYPE html>
<html>
  <head>
    <meta charset="utf-8" />
    <title>{{ title }}</title>
    <meta name="viewport" content="width=device-width, initial-scale=1.0" />
    <style>
      body {
        background-color: #0d1117;
        color: #f0f6fc;
        font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", "Noto Sans",
          Helvetica, Arial, sans-serif, "Apple Color Emoji", "Segoe UI Emoji";
        display: flex;
        flex-direction: column;
        padding: 0.5rem;
      }

      h1,
      h2 {
        border-bottom: 1px solid #3d444db3;
        padding-bottom: 0.3rem;
      }
    </style>
  </head>
  <body>
    {{ content }}
  </body>
</html>
"""


class PageTemplate:
    """Wraps an HTML fragment in the dark themed page shell.

    The title is escaped; the fragment is trusted, pre-rendered HTML and is
    inserted verbatim.
    """

    def __init__(self, source: str = PAGE_TEMPLATE) -> None:
        self._environment = Environment(autoescape=True)
        self._template = self._environment.from_string(source)

    def render(self, title: str, content: str) -> str:
        return self._template.render(title=title, content=Markup(content))
