"""
DMARC Report Viewer - Custom Exceptions

Every configuration failure is fatal: nothing here is retried or recovered.
Each stage raises its own error kind and the loader prefixes it with context
before re-raising, so the operator sees e.g.
"config validation failed: imap.host is required".

Anti-Patterns Avoided:
- Exception shadowing: ConfigTypeError / ConfigValidationError instead of
  the builtin TypeError or the pydantic ValidationError
"""

from __future__ import annotations

from typing import Any


class DmarcViewerError(Exception):
    """Base exception for the DMARC Report Viewer.

    All custom exceptions inherit from this base class.
    """


class ConfigError(DmarcViewerError):
    """Base exception for configuration resolution failures.

    Attributes:
        message: The stage's own description of the failure.
        context: Optional prefix added by the caller (e.g. "config validation failed").
    """

    def __init__(self, message: str) -> None:
        """
        Initialize ConfigError with a message.

        Args:
            message: Human-readable description of the error.
        """
        super().__init__(message)
        self.message = message
        self.context: str | None = None

    def add_context(self, context: str) -> ConfigError:
        """Prefix the error with the caller's context and return it for re-raising."""
        self.context = context
        return self

    def __str__(self) -> str:
        """Return the wrapped message shown to operators."""
        if self.context:
            return f"{self.context}: {self.message}"
        return self.message


class ConfigParseError(ConfigError):
    """Raised when the YAML config file cannot be read or parsed."""

    def __init__(self, path: str, message: str) -> None:
        """Initialize ConfigParseError.

        Args:
            path: Config file that failed to parse
            message: Underlying diagnostic (usually the YAML error text)
        """
        self.path = path
        super().__init__(message)


class CLIParseError(ConfigError):
    """Raised when command-line flags are unknown or malformed."""


class ConfigTypeError(ConfigError):
    """Raised when a value is present but cannot be converted to its field type.

    Attributes:
        key: Dotted config key (e.g. "imap.port")
        raw_value: The value as it came from its source layer
        expected: Name of the expected type
    """

    def __init__(self, key: str, raw_value: Any, expected: str) -> None:
        self.key = key
        self.raw_value = raw_value
        self.expected = expected
        super().__init__(f"{key}: cannot convert {raw_value!r} to {expected}")


class ConfigValidationError(ConfigError):
    """Raised when a required field is empty or an enumerated field is invalid."""
