"""
CLI Overlay - command-line flags with explicit presence tracking.

Every flag is registered with argparse.SUPPRESS as its argparse default, so
the parsed namespace only contains flags the user actually typed. That set
of names is the presence set; the documented flag defaults are recorded
separately and never overlay lower layers. Comparing a parsed value against
its default would be wrong when a user explicitly passes the default value.
"""

from __future__ import annotations

import argparse
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Final, NoReturn

from dmarc_viewer.config.registry import ConfigKey
from dmarc_viewer.core.exceptions import CLIParseError

DEFAULT_CONFIG_FILE: Final[str] = "config.yaml"

TRUE_VALUES: Final[frozenset[str]] = frozenset({"1", "t", "true", "y", "yes", "on"})
FALSE_VALUES: Final[frozenset[str]] = frozenset({"0", "f", "false", "n", "no", "off"})


@dataclass(frozen=True, slots=True)
class FlagSpec:
    """One command-line flag bound to one config key.

    Attributes:
        flag: Long option name (e.g. "--imap-host")
        key: Config key the flag overlays
        kind: Value type (str, int or bool)
        default: Documented no-op default, reported in --help only
        help: Help text
    """

    flag: str
    key: ConfigKey
    kind: type
    default: Any
    help: str


FLAG_SPECS: Final[tuple[FlagSpec, ...]] = (
    FlagSpec("--imap-host", ConfigKey("imap.host"), str, "", "IMAP server host"),
    FlagSpec("--imap-port", ConfigKey("imap.port"), int, 0, "IMAP server port"),
    FlagSpec("--imap-username", ConfigKey("imap.username"), str, "", "IMAP username"),
    FlagSpec("--imap-password", ConfigKey("imap.password"), str, "", "IMAP password"),
    FlagSpec("--imap-folder", ConfigKey("imap.folder"), str, "", "IMAP folder"),
    FlagSpec("--imap-use-tls", ConfigKey("imap.use_tls"), bool, True, "Use TLS for IMAP connection"),
    FlagSpec("--database", ConfigKey("database.path"), str, "", "Database file path"),
    FlagSpec("--web-host", ConfigKey("web.host"), str, "", "Web server host"),
    FlagSpec("--web-port", ConfigKey("web.port"), int, 0, "Web server port"),
    FlagSpec("--sync-interval", ConfigKey("sync.interval"), str, "", "Sync interval (e.g., 15m)"),
    FlagSpec("--sync-on-startup", ConfigKey("sync.on_startup"), bool, False, "Run sync on startup"),
    FlagSpec("--log-level", ConfigKey("logging.level"), str, "", "Log level (debug, info, warn, error)"),
    FlagSpec("--log-format", ConfigKey("logging.format"), str, "", "Log format (json, text)"),
)


@dataclass(frozen=True, slots=True)
class FlagOverlay:
    """Result of parsing argv.

    Attributes:
        values: Every flag's value, falling back to its documented default
        present: Keys whose flags were explicitly supplied
        config_file: Value of --config
    """

    values: dict[ConfigKey, Any]
    present: frozenset[ConfigKey]
    config_file: str

    @property
    def present_values(self) -> dict[ConfigKey, Any]:
        """Only the explicitly supplied flags, ready to overlay lower layers."""
        return {key: value for key, value in self.values.items() if key in self.present}


class _RaisingArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises CLIParseError instead of exiting."""

    def error(self, message: str) -> NoReturn:
        raise CLIParseError(message)


def parse_bool(raw: str) -> bool:
    """Parse a boolean flag value such as "true", "0" or "off"."""
    normalized = raw.strip().lower()
    if normalized in TRUE_VALUES:
        return True
    if normalized in FALSE_VALUES:
        return False
    raise argparse.ArgumentTypeError(f"invalid boolean value: {raw!r}")


def build_parser(prog: str = "dmarc-viewer") -> argparse.ArgumentParser:
    """Build the flag parser.

    Args:
        prog: Program name shown in usage and error text

    Returns:
        Parser whose namespace only holds explicitly supplied flags (plus --config)
    """
    parser = _RaisingArgumentParser(
        prog=prog,
        description="DMARC Report Viewer",
        argument_default=argparse.SUPPRESS,
        allow_abbrev=False,
    )
    parser.add_argument(
        "--config",
        default=DEFAULT_CONFIG_FILE,
        metavar="PATH",
        help="Path to config file (default: %(default)s)",
    )
    for spec in FLAG_SPECS:
        if spec.kind is bool:
            # Bare "--imap-use-tls" means true; "--imap-use-tls=false" is accepted too
            parser.add_argument(
                spec.flag,
                dest=spec.key,
                type=parse_bool,
                nargs="?",
                const=True,
                metavar="BOOL",
                help=f"{spec.help} (default: {str(spec.default).lower()})",
            )
        else:
            parser.add_argument(
                spec.flag,
                dest=spec.key,
                type=spec.kind,
                metavar=spec.kind.__name__.upper(),
                help=spec.help,
            )
    return parser


def load_flags(argv: Sequence[str] | None = None) -> FlagOverlay:
    """Parse argv into flag values and the set of explicitly supplied keys.

    Args:
        argv: Arguments without the program name. Defaults to sys.argv[1:].

    Returns:
        FlagOverlay with values, presence set and config file path

    Raises:
        CLIParseError: On unknown flags or malformed values
    """
    parser = build_parser()
    namespace = parser.parse_args(None if argv is None else list(argv))

    supplied = dict(vars(namespace))
    config_file = supplied.pop("config")

    values: dict[ConfigKey, Any] = {spec.key: spec.default for spec in FLAG_SPECS}
    values.update(supplied)

    return FlagOverlay(
        values=values,
        present=frozenset(ConfigKey(key) for key in supplied),
        config_file=config_file,
    )
