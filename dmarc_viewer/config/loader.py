"""
Configuration Loader - runs the layered resolution pipeline.

Pipeline (strict order):
1. Defaults registry
2. YAML file (optional)
3. DMARC_ environment variables
4. Explicitly supplied CLI flags (load_with_flags only)
5. Materialize into ResolvedConfig
6. Validate

Every stage error is fatal. The loader prefixes it with context and
re-raises the same exception kind.

Pattern: one ConfigLoader per invocation, no module-level registry, so
independent resolutions (and parallel tests) never share state.
"""

from __future__ import annotations

import os
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from dmarc_viewer.config.cli import load_flags
from dmarc_viewer.config.env_loader import DEFAULT_ENV_PREFIX, load_env
from dmarc_viewer.config.file_loader import load_file
from dmarc_viewer.config.merge import merge_layers, unknown_keys
from dmarc_viewer.config.models import ResolvedConfig, materialize
from dmarc_viewer.config.registry import ConfigKey, Layer, register_defaults
from dmarc_viewer.config.validation import validate
from dmarc_viewer.core.exceptions import (
    CLIParseError,
    ConfigParseError,
    ConfigTypeError,
    ConfigValidationError,
)


class ConfigLoader:
    """Resolves one ResolvedConfig from defaults, file, environment and flags.

    Usage:
        loader = ConfigLoader()
        config = loader.load_with_flags(sys.argv[1:])

    Attributes:
        env_prefix: Environment variable prefix
        environ: Snapshot of the environment taken at construction
        defaults: This loader's own defaults registry
        sources: Winning layer per key, filled by the last resolution
        ignored_keys: Unknown keys seen in the file or environment
        missing_config_file: Config path that was requested but does not exist
    """

    def __init__(
        self,
        env_prefix: str = DEFAULT_ENV_PREFIX,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self.env_prefix = env_prefix
        self.environ: dict[str, str] = dict(os.environ if environ is None else environ)
        self.defaults = register_defaults()
        self.sources: dict[ConfigKey, Layer] = {}
        self.ignored_keys: list[ConfigKey] = []
        self.missing_config_file: str | None = None

    def load(self, config_file: str | Path | None) -> ResolvedConfig:
        """Resolve defaults, file and environment (no CLI layer).

        Args:
            config_file: YAML file path; empty or None skips the file layer

        Returns:
            Validated ResolvedConfig

        Raises:
            ConfigParseError: Malformed config file
            ConfigTypeError: Value of the wrong type
            ConfigValidationError: Missing required or invalid enumerated value
        """
        file_values = self._read_file(config_file)
        return self._resolve(file_values, cli_present={})

    def load_with_flags(self, argv: Sequence[str] | None = None) -> ResolvedConfig:
        """Resolve all four layers; --config selects the file.

        Args:
            argv: Arguments without the program name. Defaults to sys.argv[1:].

        Returns:
            Validated ResolvedConfig

        Raises:
            CLIParseError: Unknown flag or malformed flag value
            ConfigParseError: Malformed config file
            ConfigTypeError: Value of the wrong type
            ConfigValidationError: Missing required or invalid enumerated value
        """
        try:
            flags = load_flags(argv)
        except CLIParseError as e:
            e.add_context("failed to parse flags")
            raise

        file_values = self._read_file(flags.config_file)
        return self._resolve(file_values, cli_present=flags.present_values)

    def _read_file(self, config_file: str | Path | None) -> dict[ConfigKey, Any]:
        self.missing_config_file = None
        if config_file and not Path(config_file).exists():
            self.missing_config_file = str(config_file)
            return {}
        try:
            return load_file(config_file)
        except ConfigParseError as e:
            e.add_context("failed to read config file")
            raise

    def _resolve(
        self,
        file_values: Mapping[ConfigKey, Any],
        cli_present: Mapping[ConfigKey, Any],
    ) -> ResolvedConfig:
        env_values = load_env(self.env_prefix, self.environ)

        layered = merge_layers(self.defaults, file_values, env_values, cli_present)
        self.sources = {key: entry.source for key, entry in layered.items()}
        self.ignored_keys = unknown_keys(file_values, env_values)

        try:
            config = materialize({key: entry.value for key, entry in layered.items()})
        except ConfigTypeError as e:
            e.add_context("failed to unmarshal config")
            raise

        try:
            validate(config)
        except ConfigValidationError as e:
            e.add_context("config validation failed")
            raise

        return config


def load(
    config_file: str | Path | None,
    environ: Mapping[str, str] | None = None,
) -> ResolvedConfig:
    """Resolve configuration from defaults, file and environment."""
    return ConfigLoader(environ=environ).load(config_file)


def load_with_flags(
    argv: Sequence[str] | None = None,
    environ: Mapping[str, str] | None = None,
) -> ResolvedConfig:
    """Resolve configuration from all four layers."""
    return ConfigLoader(environ=environ).load_with_flags(argv)
