"""
Merge Engine - per-key overlay of the four configuration layers.

Each known key resolves atomically to the value of the highest-priority
layer that has an entry for it: CLI > ENV > FILE > DEFAULT. Keys the
application does not know (typos, renamed fields) are ignored.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from dmarc_viewer.config.registry import KNOWN_KEYS, LAYER_PRIORITY, ConfigKey, Layer, is_known_key


@dataclass(frozen=True, slots=True)
class LayeredValue:
    """Resolved value for one key tagged with the layer that set it."""

    value: Any
    source: Layer


def merge_layers(
    defaults: Mapping[ConfigKey, Any],
    file: Mapping[ConfigKey, Any],
    env: Mapping[ConfigKey, Any],
    cli_present: Mapping[ConfigKey, Any],
) -> dict[ConfigKey, LayeredValue]:
    """Resolve every known key to its winning layer.

    Args:
        defaults: Defaults registry
        file: Keys set by the config file
        env: Keys set by environment variables
        cli_present: Keys set by explicitly supplied flags only

    Returns:
        Mapping of known keys to LayeredValue. Keys no layer sets are absent.
    """
    entries_by_layer: dict[Layer, Mapping[ConfigKey, Any]] = {
        Layer.CLI: cli_present,
        Layer.ENV: env,
        Layer.FILE: file,
        Layer.DEFAULT: defaults,
    }

    resolved: dict[ConfigKey, LayeredValue] = {}
    for key in KNOWN_KEYS:
        for layer in LAYER_PRIORITY:
            entries = entries_by_layer[layer]
            if key in entries:
                resolved[key] = LayeredValue(value=entries[key], source=layer)
                break
    return resolved


def merge(
    defaults: Mapping[ConfigKey, Any],
    file: Mapping[ConfigKey, Any],
    env: Mapping[ConfigKey, Any],
    cli_present: Mapping[ConfigKey, Any],
) -> dict[ConfigKey, Any]:
    """Same as merge_layers() but without provenance."""
    layered = merge_layers(defaults, file, env, cli_present)
    return {key: entry.value for key, entry in layered.items()}


def unknown_keys(*layers: Mapping[ConfigKey, Any]) -> list[ConfigKey]:
    """Return the sorted, de-duplicated keys no known setting matches."""
    return sorted({key for layer in layers for key in layer if not is_known_key(key)})
