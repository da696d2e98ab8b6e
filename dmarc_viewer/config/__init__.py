"""Layered configuration: defaults < YAML file < DMARC_ environment < CLI flags."""

from dmarc_viewer.config.loader import ConfigLoader, load, load_with_flags
from dmarc_viewer.config.models import (
    DatabaseConfig,
    IMAPConfig,
    LoggingConfig,
    ResolvedConfig,
    SyncConfig,
    WebConfig,
)

__all__ = [
    "ConfigLoader",
    "DatabaseConfig",
    "IMAPConfig",
    "LoggingConfig",
    "ResolvedConfig",
    "SyncConfig",
    "WebConfig",
    "load",
    "load_with_flags",
]
