"""
File Loader - YAML config document to flat ConfigKey mapping.

The document is parsed into an untyped tree (yaml.safe_load) and flattened,
so only leaves the document actually sets produce entries. A section such as

    imap:
      host: imap.example.com

yields only ``imap.host``; ``imap.use_tls`` stays absent and the default
remains visible underneath.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]

from dmarc_viewer.config.registry import ConfigKey
from dmarc_viewer.core.exceptions import ConfigParseError


def flatten_document(document: Mapping[Any, Any], prefix: str = "") -> dict[ConfigKey, Any]:
    """Flatten a nested YAML mapping into dotted, lower-case keys.

    Null leaves and empty sections are skipped: they set nothing.

    Args:
        document: Parsed YAML mapping (or a nested section of one)
        prefix: Dotted prefix of the enclosing section

    Returns:
        Mapping of ConfigKey to the raw YAML value
    """
    flat: dict[ConfigKey, Any] = {}
    for name, value in document.items():
        key = f"{prefix}{str(name).strip().lower()}"
        if isinstance(value, Mapping):
            flat.update(flatten_document(value, prefix=f"{key}."))
        elif value is not None:
            flat[ConfigKey(key)] = value
    return flat


def load_file(path: str | Path | None) -> dict[ConfigKey, Any]:
    """Read the config file at path and return the keys it sets.

    Args:
        path: Config file path. Empty or None disables the file layer.

    Returns:
        Mapping of every key present in the document. Empty when path is
        empty or the file does not exist (callers decide whether to report
        a missing file).

    Raises:
        ConfigParseError: If the file cannot be read, is not valid YAML,
            or its top level is not a mapping
    """
    if not path:
        return {}

    config_path = Path(path)
    try:
        text = config_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return {}
    except OSError as e:
        msg = f"cannot read {config_path}: {e.strerror or e}"
        raise ConfigParseError(str(config_path), msg) from e

    try:
        document = yaml.safe_load(text)
    except yaml.YAMLError as e:
        msg = f"invalid YAML in {config_path}: {e}"
        raise ConfigParseError(str(config_path), msg) from e

    if document is None:
        return {}
    if not isinstance(document, Mapping):
        msg = f"{config_path}: top level must be a mapping, got {type(document).__name__}"
        raise ConfigParseError(str(config_path), msg)

    return flatten_document(document)
