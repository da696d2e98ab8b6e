"""
Validator - semantic checks on a materialized ResolvedConfig.

Checks run in a fixed order and the first failure wins. The messages are
read by operators on stderr and matched by tests, so they must not change.
"""

from __future__ import annotations

from typing import Final

from dmarc_viewer.config.models import ResolvedConfig
from dmarc_viewer.core.exceptions import ConfigValidationError

VALID_LOG_LEVELS: Final[tuple[str, ...]] = ("debug", "info", "warn", "error")
VALID_LOG_FORMATS: Final[tuple[str, ...]] = ("json", "text")


def validate(config: ResolvedConfig) -> None:
    """Check required fields and enumerated values.

    Args:
        config: Materialized configuration

    Raises:
        ConfigValidationError: On the first failing check
    """
    required = (
        ("imap.host", config.imap.host),
        ("imap.username", config.imap.username),
        ("imap.password", config.imap.password),
        ("database.path", config.database.path),
    )
    for key, value in required:
        if not value:
            raise ConfigValidationError(f"{key} is required")

    if config.logging.level not in VALID_LOG_LEVELS:
        raise ConfigValidationError(
            f"invalid log level: {config.logging.level} (must be debug, info, warn, or error)"
        )

    if config.logging.format not in VALID_LOG_FORMATS:
        raise ConfigValidationError(
            f"invalid log format: {config.logging.format} (must be json or text)"
        )
