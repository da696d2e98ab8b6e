"""Shared fixtures for configuration tests."""

from __future__ import annotations

from collections.abc import Callable, Generator
from pathlib import Path

import pytest

from dmarc_viewer.core.logging import reset_logging

REQUIRED_IMAP_YAML = """
imap:
  host: imap.test.com
  username: test@test.com
  password: testpass
"""


@pytest.fixture
def write_config(tmp_path: Path) -> Callable[[str], Path]:
    """Return a helper that writes YAML text to a temporary config file."""

    def _write(content: str, name: str = "config.yaml") -> Path:
        config_file = tmp_path / name
        config_file.write_text(content, encoding="utf-8")
        return config_file

    return _write


@pytest.fixture
def minimal_config(write_config: Callable[[str], Path]) -> Path:
    """Config file with only the required IMAP fields."""
    return write_config(REQUIRED_IMAP_YAML)


@pytest.fixture(autouse=True)
def _reset_structlog() -> Generator[None, None, None]:
    """Leave structlog unconfigured between tests."""
    reset_logging()
    yield
    reset_logging()
