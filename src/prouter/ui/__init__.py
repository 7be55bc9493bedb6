"""HTML rendering for served pages and directory listings."""
