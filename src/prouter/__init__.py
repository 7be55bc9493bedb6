"""Multi-tenant static content server with on-the-fly Markdown rendering."""

__version__ = "0.1.0"
