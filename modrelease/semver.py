"""Semantic version parsing, cleaning, increments and precedence."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple
import re

_IDENTIFIERS = r"[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*"

STRICT_RE = re.compile(
    r"^(?P<major>0|[1-9]\d*)\.(?P<minor>0|[1-9]\d*)\.(?P<patch>0|[1-9]\d*)"
    rf"(?:-(?P<pre>{_IDENTIFIERS}))?"
    rf"(?:\+(?P<build>{_IDENTIFIERS}))?$"
)

# Tolerates surrounding whitespace, a leading "v" or "=", leading zeros and a
# prerelease glued to the patch number.
LOOSE_RE = re.compile(
    r"^[v=\s]*(?P<major>\d+)\.(?P<minor>\d+)\.(?P<patch>\d+)"
    rf"(?:(?:-|(?=[0-9A-Za-z]))(?P<pre>{_IDENTIFIERS}))?"
    rf"(?:\+(?P<build>{_IDENTIFIERS}))?$"
)

INCREMENTS = ("patch", "minor", "major")


def _normalize_identifier(identifier: str) -> str:
    return str(int(identifier)) if identifier.isdigit() else identifier


@dataclass(frozen=True)
class SemVer:
    """Semantic version with optional prerelease and build identifiers."""

    major: int
    minor: int
    patch: int
    prerelease: Tuple[str, ...] = ()
    build: Tuple[str, ...] = ()

    @classmethod
    def parse(cls, text: str, *, loose: bool = False) -> "SemVer":
        """Parse ``text``; raise ValueError when it is not a semantic version."""

        pattern = LOOSE_RE if loose else STRICT_RE
        match = pattern.match(text.strip() if loose else text)
        if not match:
            raise ValueError(f"Version {text} is not a valid semver.")
        pre = match.group("pre")
        build = match.group("build")
        return cls(
            major=int(match.group("major")),
            minor=int(match.group("minor")),
            patch=int(match.group("patch")),
            prerelease=tuple(_normalize_identifier(part) for part in pre.split(".")) if pre else (),
            build=tuple(build.split(".")) if build else (),
        )

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            text = f"{text}-{'.'.join(self.prerelease)}"
        if self.build:
            text = f"{text}+{'.'.join(self.build)}"
        return text

    def bumped(self, which: str) -> "SemVer":
        """Bump major/minor/patch, resetting lower components and metadata."""

        if which == "major":
            return SemVer(self.major + 1, 0, 0)
        if which == "minor":
            return SemVer(self.major, self.minor + 1, 0)
        if which == "patch":
            return SemVer(self.major, self.minor, self.patch + 1)
        raise ValueError(f"Unknown increment '{which}', expected one of: {', '.join(INCREMENTS)}")

    def precedence_key(self) -> tuple:
        """Sort key implementing semver precedence (build metadata ignored)."""

        if not self.prerelease:
            pre_key: tuple = (1,)
        else:
            pre_key = (
                0,
                tuple((0, int(part), "") if part.isdigit() else (1, 0, part) for part in self.prerelease),
            )
        return (self.major, self.minor, self.patch, pre_key)


def parse_version(text: str | None) -> SemVer | None:
    """Loosely parse ``text``, returning ``None`` for anything that is not a version."""

    if not text:
        return None
    try:
        return SemVer.parse(text, loose=True)
    except ValueError:
        return None


def valid(text: str | None) -> bool:
    return parse_version(text) is not None


def clean(text: str | None) -> str | None:
    """Return the canonical rendering of ``text`` or ``None`` when it is invalid."""

    version = parse_version(text)
    return str(version) if version is not None else None


def increment(text: str, which: str) -> str:
    version = parse_version(text)
    if version is None:
        raise ValueError(f"Version {text} is not a valid semver.")
    return str(version.bumped(which))


def compare(left: str, right: str) -> int:
    """Compare two versions by precedence: -1, 0 or 1."""

    parsed_left = parse_version(left)
    parsed_right = parse_version(right)
    if parsed_left is None or parsed_right is None:
        invalid = left if parsed_left is None else right
        raise ValueError(f"Version {invalid} is not a valid semver.")
    left_key = parsed_left.precedence_key()
    right_key = parsed_right.precedence_key()
    return (left_key > right_key) - (left_key < right_key)


def lte(left: str, right: str) -> bool:
    return compare(left, right) <= 0


__all__ = [
    "INCREMENTS",
    "SemVer",
    "clean",
    "compare",
    "increment",
    "lte",
    "parse_version",
    "valid",
]
