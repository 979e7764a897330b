"""Reading and writing the mod's ``info.json`` and ``changelog.txt``."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping
import json

from core.config_loader import load_config_file

from .errors import FatalExternal


@dataclass
class ModInfo:
    """Metadata from a mod's ``info.json``."""

    name: str | None
    version: str | None
    title: str | None = None
    factorio_version: str | None = None
    raw: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ModInfo":
        def optional_text(key: str) -> str | None:
            value = data.get(key)
            return str(value) if value is not None else None

        return cls(
            name=optional_text("name"),
            version=optional_text("version"),
            title=optional_text("title"),
            factorio_version=optional_text("factorio_version"),
            raw=dict(data),
        )

    @property
    def label(self) -> str:
        return self.title or self.name or "mod"


def load_mod_info(path: Path) -> ModInfo:
    try:
        data = load_config_file(path)
    except FileNotFoundError as exc:
        raise FatalExternal(f"{path.name} not found in {path.parent}") from exc
    except json.JSONDecodeError as exc:
        raise FatalExternal(f"{path.name} is not valid JSON: {exc}") from exc
    except (OSError, TypeError, ValueError) as exc:
        raise FatalExternal(f"Could not read {path}: {exc}") from exc
    return ModInfo.from_mapping(data)


def write_mod_version(path: Path, info: ModInfo, version: str) -> ModInfo:
    """Persist ``version`` into ``info.json``, keeping the other keys in order."""

    data = dict(info.raw)
    data["version"] = version
    try:
        path.write_text(json.dumps(data, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
    except OSError as exc:
        raise FatalExternal(f"Could not write {path}: {exc}") from exc
    return ModInfo.from_mapping(data)


def read_changelog(path: Path) -> str:
    if not path.exists():
        return ""
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise FatalExternal(f"{path.name} is not a valid text file: {exc}") from exc


def write_changelog(path: Path, text: str) -> None:
    try:
        path.write_text(text, encoding="utf-8")
    except OSError as exc:
        raise FatalExternal(f"Could not write {path}: {exc}") from exc


__all__ = [
    "ModInfo",
    "load_mod_info",
    "read_changelog",
    "write_changelog",
    "write_mod_version",
]
