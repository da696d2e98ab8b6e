"""
DMARC Report Viewer - Structured Logging Module

Logging is configured from the resolved configuration, so nothing is set up
until resolution has finished. Entries emitted before that point are held by
the caller and logged afterwards.

- configure_logging(level, fmt): maps logging.level ("warn" -> WARNING) and
  logging.format ("json" or "text") onto a structlog processor chain; later
  calls are no-ops
- get_logger(name): bound logger whose entries carry service="dmarc-viewer"
"""

import logging
import sys
from typing import Any

import structlog
from structlog.typing import EventDict

SERVICE_NAME = "dmarc-viewer"

# Config log levels -> stdlib levels ("warn" is the config spelling)
LOG_LEVELS: dict[str, int] = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}

# Module-level flag for one-time configuration
_configured: bool = False


def add_service_info(
    logger: logging.Logger,  # noqa: ARG001 - Required by structlog interface
    method_name: str,  # noqa: ARG001 - Required by structlog interface
    event_dict: EventDict,
) -> EventDict:
    """Add service metadata to every log entry.

    Args:
        logger: The logger instance (unused but required by structlog interface)
        method_name: The log method name (unused but required by structlog interface)
        event_dict: The event dictionary to modify

    Returns:
        Modified event dictionary with service info
    """
    event_dict["service"] = SERVICE_NAME
    return event_dict


def resolve_level(level: str) -> int:
    """Map a config log level to a stdlib logging level (INFO when unknown)."""
    return LOG_LEVELS.get(level.lower(), logging.INFO)


def configure_logging(
    level: str = "info",
    fmt: str = "text",
) -> None:
    """Configure structlog for the application.

    Must be called exactly ONCE, after the configuration has been resolved.

    Args:
        level: Config log level (debug, info, warn, error)
        fmt: Config log format (json for production, text for a console)
    """
    global _configured

    # Later calls keep the first configuration
    if _configured:
        return

    stdlib_level = resolve_level(level)

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=stdlib_level,
    )

    renderer: Any
    if fmt == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            add_service_info,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(stdlib_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    _configured = True


def get_logger(name: str) -> Any:
    """Get a structured logger instance.

    Args:
        name: Logger name (typically module name)

    Returns:
        structlog BoundLogger instance
    """
    return structlog.get_logger(name)


def reset_logging() -> None:
    """Reset logging configuration for testing."""
    global _configured
    _configured = False
    structlog.reset_defaults()
