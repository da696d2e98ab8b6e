"""
Defaults Registry and known configuration keys.

A ConfigKey is a lower-case dotted path ``section.field`` naming one leaf
setting. The registry is rebuilt on every call to register_defaults() so that
each resolution owns its own copy; nothing here is shared mutable state.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Final, NewType

ConfigKey = NewType("ConfigKey", str)


class Layer(str, Enum):
    """Configuration source layers, lowest priority first."""

    DEFAULT = "default"
    FILE = "file"
    ENV = "env"
    CLI = "cli"


# Highest priority first
LAYER_PRIORITY: Final[tuple[Layer, ...]] = (Layer.CLI, Layer.ENV, Layer.FILE, Layer.DEFAULT)


# =============================================================================
# Known Keys
# =============================================================================

SECTIONS: Final[tuple[str, ...]] = ("imap", "database", "web", "sync", "logging")

KNOWN_KEYS: Final[tuple[ConfigKey, ...]] = tuple(
    ConfigKey(key)
    for key in (
        "imap.host",
        "imap.port",
        "imap.username",
        "imap.password",
        "imap.folder",
        "imap.use_tls",
        "database.path",
        "web.host",
        "web.port",
        "sync.interval",
        "sync.on_startup",
        "logging.level",
        "logging.format",
    )
)

# No defaults: an absent value must surface as a validation error
REQUIRED_KEYS: Final[tuple[ConfigKey, ...]] = (
    ConfigKey("imap.host"),
    ConfigKey("imap.username"),
    ConfigKey("imap.password"),
)

# Alternate section spellings accepted in environment variable names
SECTION_ALIASES: Final[dict[str, str]] = {"log": "logging"}

_DEFAULTS: Final[tuple[tuple[str, Any], ...]] = (
    # IMAP
    ("imap.port", 993),
    ("imap.folder", "INBOX"),
    ("imap.use_tls", True),
    # Database
    ("database.path", "./dmarc-reports.db"),
    # Web
    ("web.host", "localhost"),
    ("web.port", 8080),
    # Sync
    ("sync.interval", "15m"),
    ("sync.on_startup", True),
    # Logging
    ("logging.level", "info"),
    ("logging.format", "text"),
)


def normalize_key(raw: str) -> ConfigKey:
    """Normalize a dotted key to its canonical lower-case form."""
    return ConfigKey(".".join(part.strip().lower() for part in raw.split(".")))


def make_key(section: str, field: str) -> ConfigKey:
    """Build a ConfigKey from a section and a field name."""
    return normalize_key(f"{section}.{field}")


def split_key(key: ConfigKey) -> tuple[str, str]:
    """Split ``section.field`` into its two parts."""
    section, _, field = key.partition(".")
    return section, field


def is_known_key(key: str) -> bool:
    """Return True if key names a leaf setting the application understands."""
    return key in KNOWN_KEYS


def register_defaults() -> dict[ConfigKey, Any]:
    """Return a fresh mapping of every optional key to its baseline value.

    Returns:
        New dict on every call; callers may mutate it freely.
    """
    return {ConfigKey(key): value for key, value in _DEFAULTS}
