"""
Environment Overlay - DMARC_-prefixed variables to ConfigKeys.

``DMARC_IMAP_USE_TLS`` becomes ``imap.use_tls``: the section is matched
against the known sections (longest first) and the remainder is kept whole
as the field name, so underscores inside field names survive. Values are
captured as raw strings; type coercion happens during materialization.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Final

from dmarc_viewer.config.registry import SECTION_ALIASES, SECTIONS, ConfigKey, make_key

DEFAULT_ENV_PREFIX: Final[str] = "DMARC_"

_SECTION_PREFIXES: Final[tuple[str, ...]] = tuple(
    sorted((*SECTIONS, *SECTION_ALIASES), key=len, reverse=True)
)


def env_name_to_key(name: str) -> ConfigKey:
    """Convert a prefix-stripped variable name to a dotted ConfigKey.

    Args:
        name: Variable name without the prefix (e.g. "IMAP_USE_TLS")

    Returns:
        ConfigKey such as "imap.use_tls". Names outside any known section
        fall back to replacing every underscore with a dot.
    """
    lowered = name.lower()
    for section in _SECTION_PREFIXES:
        if lowered.startswith(f"{section}_") and len(lowered) > len(section) + 1:
            field = lowered[len(section) + 1 :]
            return make_key(SECTION_ALIASES.get(section, section), field)
    return ConfigKey(lowered.replace("_", "."))


def _is_alias(name: str) -> bool:
    lowered = name.lower()
    return any(lowered.startswith(f"{alias}_") for alias in SECTION_ALIASES)


def load_env(
    prefix: str = DEFAULT_ENV_PREFIX,
    environ: Mapping[str, str] | None = None,
) -> dict[ConfigKey, str]:
    """Collect every prefixed environment variable as a raw string overlay.

    Empty values are treated as unset. When both a canonical name and an
    alias map to the same key (DMARC_LOGGING_LEVEL and DMARC_LOG_LEVEL),
    the canonical name wins.

    Args:
        prefix: Variable name prefix, including the trailing underscore
        environ: Environment to scan. Defaults to os.environ.

    Returns:
        Mapping of ConfigKey to the variable's string value
    """
    source = os.environ if environ is None else environ
    canonical: dict[ConfigKey, str] = {}
    aliased: dict[ConfigKey, str] = {}

    for name in sorted(source):
        if not name.startswith(prefix):
            continue
        value = source[name]
        if value == "":
            continue
        stripped = name[len(prefix) :]
        target = aliased if _is_alias(stripped) else canonical
        target[env_name_to_key(stripped)] = value

    return {**aliased, **canonical}
