"""DMARC Report Viewer: layered configuration core.

This package resolves the application configuration from:
- Built-in defaults
- An optional YAML file
- DMARC_-prefixed environment variables
- Explicitly supplied command-line flags

The result is a validated, immutable ResolvedConfig handed to the IMAP sync,
report parser, storage and web components at startup.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
