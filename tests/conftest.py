"""Shared test fixtures and configuration."""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
import os
from pathlib import Path

import pytest
from starlette.testclient import TestClient

from prouter.app_builder import AppBuilder
from prouter.config import Settings


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep PROUTER_* variables from the developer shell out of the tests."""
    for key in list(os.environ):
        if key.upper().startswith("PROUTER_"):
            monkeypatch.delenv(key)


@pytest.fixture
def serve_root(tmp_path: Path) -> Path:
    root = tmp_path / "public"
    root.mkdir()
    return root


@pytest.fixture
def make_site(serve_root: Path) -> Callable[[str, Mapping[str, str | bytes]], Path]:
    """Create ``serve_root/<tenant>`` populated with ``{relative path: content}``."""

    def _make_site(tenant: str, files: Mapping[str, str | bytes]) -> Path:
        root = serve_root / tenant
        root.mkdir(parents=True, exist_ok=True)
        for relative, content in files.items():
            path = root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                path.write_bytes(content)
            else:
                path.write_text(content, encoding="utf-8")
        return root

    return _make_site


@pytest.fixture
def settings(serve_root: Path) -> Settings:
    return Settings(serve_path=serve_root)


@pytest.fixture
def builder(settings: Settings) -> AppBuilder:
    return AppBuilder(settings, init_observability=False)


@pytest.fixture
def client(builder: AppBuilder) -> Iterator[TestClient]:
    with TestClient(builder.build()) as test_client:
        yield test_client
