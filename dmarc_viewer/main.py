"""
DMARC Report Viewer - Main Application Entry Point

Resolves the configuration before anything else starts. A configuration
error prints one line to stderr and exits with status 1; no traceback is
shown.

Usage:
    dmarc-viewer --config config.yaml --log-level debug
    python -m dmarc_viewer --imap-host imap.example.com
"""

from __future__ import annotations

import sys
from collections.abc import Mapping, Sequence

from dmarc_viewer.config.loader import ConfigLoader
from dmarc_viewer.config.models import ResolvedConfig
from dmarc_viewer.core.exceptions import ConfigError
from dmarc_viewer.core.logging import configure_logging, get_logger


def mask_password(password: str) -> str:
    """Mask a password for display, keeping only its first and last characters."""
    if not password:
        return ""
    if len(password) <= 2:
        return "***"
    return f"{password[0]}***{password[-1]}"


def render_summary(config: ResolvedConfig) -> str:
    """Human-readable configuration summary with the password masked."""
    lines = [
        "=== DMARC Report Viewer Configuration ===",
        "",
        "IMAP Configuration:",
        f"  Host:     {config.imap.host}",
        f"  Port:     {config.imap.port}",
        f"  Username: {config.imap.username}",
        f"  Password: {mask_password(config.imap.password)}",
        f"  Folder:   {config.imap.folder}",
        f"  Use TLS:  {str(config.imap.use_tls).lower()}",
        "",
        "Database Configuration:",
        f"  Path: {config.database.path}",
        "",
        "Web Server Configuration:",
        f"  Host: {config.web.host}",
        f"  Port: {config.web.port}",
        "",
        "Sync Configuration:",
        f"  Interval:   {config.sync.interval}",
        f"  On Startup: {str(config.sync.on_startup).lower()}",
        "",
        "Logging Configuration:",
        f"  Level:  {config.logging.level}",
        f"  Format: {config.logging.format}",
        "",
        "Configuration loaded successfully!",
    ]
    return "\n".join(lines)


def main(
    argv: Sequence[str] | None = None,
    environ: Mapping[str, str] | None = None,
) -> int:
    """Resolve configuration, set up logging and print the summary.

    Args:
        argv: Arguments without the program name. Defaults to sys.argv[1:].
        environ: Environment to read. Defaults to os.environ.

    Returns:
        Process exit status (0 on success, 1 on a configuration error)
    """
    loader = ConfigLoader(environ=environ)
    try:
        config = loader.load_with_flags(argv)
    except ConfigError as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return 1

    configure_logging(level=config.logging.level, fmt=config.logging.format)
    logger = get_logger(__name__)

    # Provenance only; values may hold secrets
    logger.info(
        "configuration_loaded",
        sources={key: layer.value for key, layer in sorted(loader.sources.items())},
    )
    if loader.missing_config_file:
        logger.warning("config_file_not_found", path=loader.missing_config_file)
    if loader.ignored_keys:
        logger.warning("unknown_config_keys_ignored", keys=loader.ignored_keys)

    print(render_summary(config))
    return 0


def run() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
