"""Release settings resolved from configuration files and the environment."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Mapping
import os

from core.config_loader import load_config_file, merge_mappings

from .errors import FatalExternal, InvalidInput
from .versioning import DEFAULT_VERSION

CONFIG_ENV = "MODRELEASE_CONFIG"
CONFIG_FILENAME = "modrelease.toml"
LAUNCH_MODES = ("ask", "always", "never")

DEFAULTS: Mapping[str, Any] = {
    "release": {
        "info_file": "info.json",
        "changelog_file": "changelog.txt",
        "default_version": DEFAULT_VERSION,
    },
    "factorio": {
        "command": [],
        "launch": "ask",
    },
}


@dataclass
class ReleaseSettings:
    info_file: str = "info.json"
    changelog_file: str = "changelog.txt"
    default_version: str = DEFAULT_VERSION
    factorio_command: List[str] = field(default_factory=list)
    launch: str = "ask"
    source: Path | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], *, source: Path | None = None) -> "ReleaseSettings":
        merged = merge_mappings(DEFAULTS, data)
        release = merged["release"]
        factorio = merged["factorio"]

        command = factorio.get("command") or []
        if isinstance(command, str):
            command = command.split()
        if not isinstance(command, list) or not all(isinstance(part, str) for part in command):
            raise InvalidInput("factorio.command must be a string or a list of strings")

        launch = str(factorio.get("launch", "ask")).lower()
        if launch not in LAUNCH_MODES:
            raise InvalidInput(f"factorio.launch must be one of: {', '.join(LAUNCH_MODES)}")

        return cls(
            info_file=str(release["info_file"]),
            changelog_file=str(release["changelog_file"]),
            default_version=str(release["default_version"]),
            factorio_command=list(command),
            launch=launch,
            source=source,
        )


def resolve_config_path(mod_dir: Path, explicit: Path | None = None) -> Path | None:
    """Pick the configuration file: CLI > environment > mod directory."""

    if explicit is not None:
        return explicit
    env_value = os.environ.get(CONFIG_ENV)
    if env_value:
        return Path(env_value).expanduser()
    candidate = mod_dir / CONFIG_FILENAME
    return candidate if candidate.is_file() else None


def load_settings(mod_dir: Path, explicit: Path | None = None) -> ReleaseSettings:
    path = resolve_config_path(mod_dir, explicit)
    if path is None:
        return ReleaseSettings.from_mapping({})
    if not path.is_file():
        raise FatalExternal(f"Configuration file not found: {path}")
    try:
        data = load_config_file(path)
    except (OSError, ValueError, TypeError, RuntimeError) as exc:
        raise FatalExternal(f"Failed to load config {path}: {exc}") from exc
    return ReleaseSettings.from_mapping(data, source=path)


__all__ = [
    "CONFIG_ENV",
    "CONFIG_FILENAME",
    "LAUNCH_MODES",
    "ReleaseSettings",
    "load_settings",
    "resolve_config_path",
]
