"""
Configuration data types and the Materializer.

Patterns Applied:
- Pydantic BaseModel for configuration validation (frozen, lax coercion)
- Namespaced ConfigTypeError instead of leaking pydantic.ValidationError

Raw values arrive as strings (environment), YAML scalars (file) or parsed
flag values (CLI). Pydantic's lax mode turns "993" into 993 and "false" into
False; anything it cannot convert becomes a ConfigTypeError naming the key.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from datetime import timedelta
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from dmarc_viewer.config.registry import REQUIRED_KEYS, SECTIONS, ConfigKey, is_known_key, split_key
from dmarc_viewer.core.exceptions import ConfigTypeError

# =============================================================================
# Durations
# =============================================================================

_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h)")

_UNIT_SECONDS: Final[dict[str, float]] = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "μs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}


def parse_duration(text: str) -> timedelta:
    """Parse a duration string such as "15m", "1h30m", "1.5h" or "300ms".

    Args:
        text: One or more <number><unit> groups, optionally signed, with no
            surrounding whitespace. A bare "0" is also accepted.

    Returns:
        The duration as a timedelta

    Raises:
        ValueError: If text is not a valid duration or is out of range
    """
    raw = text
    sign = 1
    if raw[:1] in ("+", "-"):
        sign = -1 if raw[0] == "-" else 1
        raw = raw[1:]

    if raw == "0":
        return timedelta(0)
    if not raw:
        raise ValueError(f"invalid duration {text!r}")

    total = 0.0
    position = 0
    while position < len(raw):
        match = _DURATION_PART.match(raw, position)
        if match is None:
            raise ValueError(f"invalid duration {text!r}")
        number, unit = match.groups()
        total += float(number) * _UNIT_SECONDS[unit]
        position = match.end()

    try:
        return timedelta(seconds=sign * total)
    except OverflowError as e:
        raise ValueError(f"invalid duration {text!r}") from e


# =============================================================================
# Sections
# =============================================================================


class _Section(BaseModel):
    model_config = ConfigDict(frozen=True, coerce_numbers_to_str=True)


class IMAPConfig(_Section):
    """IMAP server connection settings."""

    host: str = ""
    port: int
    username: str = ""
    password: str = Field(default="", repr=False)
    folder: str
    use_tls: bool


class DatabaseConfig(_Section):
    """Report store settings."""

    path: str


class WebConfig(_Section):
    """Web dashboard bind address."""

    host: str
    port: int


class SyncConfig(_Section):
    """Mailbox sync schedule.

    The interval stays a string (e.g. "15m") but must parse as a duration.
    """

    interval: str
    on_startup: bool

    @field_validator("interval")
    @classmethod
    def interval_is_duration(cls, v: str) -> str:
        """Reject intervals the sync scheduler could not parse."""
        parse_duration(v)
        return v

    @property
    def interval_delta(self) -> timedelta:
        """The sync interval as a timedelta."""
        return parse_duration(self.interval)


class LoggingConfig(_Section):
    """Log level (debug, info, warn, error) and format (json, text)."""

    level: str
    format: str


class ResolvedConfig(BaseModel):
    """Complete, immutable application configuration.

    Built once at startup and handed to every other component.
    """

    model_config = ConfigDict(frozen=True)

    imap: IMAPConfig
    database: DatabaseConfig
    web: WebConfig
    sync: SyncConfig
    logging: LoggingConfig


# =============================================================================
# Materializer
# =============================================================================

# Reported type names where the field annotation alone would mislead
_EXPECTED_TYPES: Final[dict[str, str]] = {"sync.interval": "duration"}

_SECTION_MODELS: Final[dict[str, type[_Section]]] = {
    "imap": IMAPConfig,
    "database": DatabaseConfig,
    "web": WebConfig,
    "sync": SyncConfig,
    "logging": LoggingConfig,
}


def expected_type(key: str) -> str:
    """Name of the type a key must convert to (e.g. "int" for imap.port)."""
    if key in _EXPECTED_TYPES:
        return _EXPECTED_TYPES[key]
    section, field = split_key(ConfigKey(key))
    model = _SECTION_MODELS.get(section)
    if model is None or field not in model.model_fields:
        return "value"
    annotation = model.model_fields[field].annotation
    return getattr(annotation, "__name__", str(annotation))


def materialize(values: Mapping[ConfigKey, Any]) -> ResolvedConfig:
    """Convert the merged key/value mapping into a ResolvedConfig.

    Required keys that no layer set become empty strings, leaving the
    "is required" diagnosis to the validator.

    Args:
        values: Merged mapping of ConfigKey to raw value

    Returns:
        Frozen ResolvedConfig

    Raises:
        ConfigTypeError: If a value cannot be converted to its field type
    """
    tree: dict[str, dict[str, Any]] = {section: {} for section in SECTIONS}
    for key in REQUIRED_KEYS:
        section, field = split_key(key)
        tree[section][field] = ""

    for key, value in values.items():
        if not is_known_key(key):
            continue
        section, field = split_key(key)
        tree[section][field] = value

    try:
        return ResolvedConfig.model_validate(tree)
    except ValidationError as e:
        # Fields validate in declaration order, so the first error is stable
        location = e.errors()[0]["loc"]
        key = ".".join(str(part) for part in location[:2])
        raise ConfigTypeError(key, values.get(ConfigKey(key)), expected_type(key)) from e
