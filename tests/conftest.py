"""Pytest configuration for repository test runs."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest
import structlog


def pytest_sessionstart() -> None:
    """Add src directory to sys.path for test imports."""
    project_root = Path(__file__).resolve().parent.parent
    src_path = project_root / "src"
    if str(src_path) not in sys.path:
        sys.path.insert(0, str(src_path))


@pytest.fixture(autouse=True)
def _reset_structlog_configuration():
    """Drop logging configuration bound to a per-test captured stream."""
    yield
    import core.logging_config as logging_config

    structlog.reset_defaults()
    logging_config._CONFIGURED_LEVEL = None
