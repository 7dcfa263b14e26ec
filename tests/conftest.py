# tests/conftest.py

"""Shared pytest fixtures for all feed_search tests."""

from collections.abc import Generator
from pathlib import Path

import pytest

from src.config.settings import Settings


@pytest.fixture(autouse=True)
def isolated_dirs(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch,
) -> Generator[None, None, None]:
    """Point logs/ and results/ at a per-test temp directory."""
    monkeypatch.setattr(Settings, "LOGS_DIR", tmp_path / "logs")
    monkeypatch.setattr(Settings, "RESULTS_DIR", tmp_path / "results")
    yield
