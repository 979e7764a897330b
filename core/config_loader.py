"""Decode configuration and data mappings from TOML, JSON or YAML files."""
from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Dict, Mapping

import json
import tomllib

try:  # Optional dependency for YAML support
    import yaml
except ModuleNotFoundError:  # pragma: no cover - exercised when PyYAML absent
    yaml = None


def _read_toml(path: Path) -> Any:
    with path.open("rb") as handle:
        return tomllib.load(handle)


def _read_json(path: Path) -> Any:
    with path.open("r", encoding="utf-8") as handle:
        return json.load(handle)


def _read_yaml(path: Path) -> Any:
    if yaml is None:
        raise RuntimeError(
            f"PyYAML is required to read {path.name}. Install with `pip install modrelease[yaml]`."
        )
    with path.open("r", encoding="utf-8") as handle:
        return yaml.safe_load(handle)


_READERS: Dict[str, Callable[[Path], Any]] = {
    ".toml": _read_toml,
    ".json": _read_json,
    ".yaml": _read_yaml,
    ".yml": _read_yaml,
}


def load_config_file(path: Path) -> Mapping[str, Any]:
    """Decode ``path`` by suffix and require a mapping at the root.

    Raises ``ValueError`` for an unknown suffix and ``TypeError`` when the
    document is a list or scalar. ``OSError`` and decoder errors propagate so
    callers can word them for their own file.
    """

    suffix = path.suffix.lower()
    reader = _READERS.get(suffix)
    if reader is None:
        raise ValueError(
            f"Unsupported file extension '{suffix}' for {path.name}. Supported: {', '.join(sorted(_READERS))}"
        )

    data = reader(path)
    if not isinstance(data, Mapping):
        raise TypeError(f"'{path}' must contain a mapping at the root")
    return data


def merge_mappings(base: Mapping[str, Any], overlay: Mapping[str, Any]) -> Dict[str, Any]:
    """Deep merge ``overlay`` onto ``base``; nested tables merge key by key."""

    result: Dict[str, Any] = dict(base)
    for key, value in overlay.items():
        existing = result.get(key)
        if isinstance(existing, Mapping) and isinstance(value, Mapping):
            result[key] = merge_mappings(existing, value)
        else:
            result[key] = value
    return result


__all__ = [
    "load_config_file",
    "merge_mappings",
]
