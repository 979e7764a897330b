"""Negotiation of the next release version with the user."""
from __future__ import annotations

from core.console import Console

from . import prompts, semver
from .errors import UserAbort
from .prompts import Choice, Prompter

DEFAULT_VERSION = "1.0.0"
CUSTOM_VERSION = "custom"


def _semver_validator(value: str) -> bool | str:
    return True if semver.valid(value) else f"Version {value} is not a valid semver."


class VersionNegotiator:
    """Resolve the authoritative next version through a short series of questions."""

    def __init__(self, prompter: Prompter, console: Console, *, default_version: str = DEFAULT_VERSION):
        self._prompter = prompter
        self._console = console
        self._default_version = default_version

    def validate_version(self, candidate: str | None) -> str:
        """Return a valid version, asking for one when ``candidate`` is missing or invalid.

        A version whose cleaned form differs from the raw text is only replaced
        after the user agrees to the conversion.
        """

        version = candidate
        if not version or not version.strip() or not semver.valid(version):
            if version:
                self._console.warn(f"Version {version} is not a valid semver.")
            version = self._prompter.ask(
                prompts.text(
                    "Version" if candidate else "Custom Version",
                    default=candidate or self._default_version,
                    validate=_semver_validator,
                )
            )

        cleaned = semver.clean(version)
        if cleaned != version:
            convert = self._prompter.ask(
                prompts.confirm(f"Convert {version} to cleaned version {cleaned}?", default=True)
            )
            if convert:
                version = cleaned
        return version

    def next_version(self, current: str | None) -> str:
        validated = self.validate_version(current)
        if validated != current:
            self._console.debug(f"Current version resolved to {validated}, skipping increment menu")
            return validated

        next_patch = semver.increment(current, "patch")
        next_minor = semver.increment(current, "minor")
        next_major = semver.increment(current, "major")
        choice = self._prompter.ask(
            prompts.select(
                "Version",
                [
                    Choice(f"Current: v{current}", current),
                    Choice(f"Patch: v{next_patch}", next_patch),
                    Choice(f"Minor: v{next_minor}", next_minor),
                    Choice(f"Major: v{next_major}", next_major),
                    Choice("Custom", CUSTOM_VERSION),
                ],
                default=next_patch,
            )
        )
        chosen = self.validate_version(None if choice == CUSTOM_VERSION else choice)

        if semver.lte(chosen, current):
            proceed = self._prompter.ask(
                prompts.confirm(f"Version {chosen} is not greater than {current}. Continue?", default=True)
            )
            if not proceed:
                raise UserAbort()
        self._console.info(f"Next version: v{chosen}")
        return chosen


__all__ = ["CUSTOM_VERSION", "DEFAULT_VERSION", "VersionNegotiator"]
