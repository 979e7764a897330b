"""Top-level release workflow wiring the negotiation steps to the mod files."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from core.command_runner import CommandError, CommandRunner
from core.console import Console

from . import prompts
from .changelog import ChangelogEntry, ChangelogEntryResolver, apply_entry
from .errors import FatalExternal
from .mod_info import ModInfo, load_mod_info, read_changelog, write_changelog, write_mod_version
from .prompts import Prompter
from .settings import ReleaseSettings
from .versioning import VersionNegotiator


@dataclass
class ReleaseResult:
    mod: ModInfo
    version: str
    entry: ChangelogEntry
    info_updated: bool = False
    changelog_updated: bool = False
    launched: bool = False


class ReleaseWorkflow:
    """Negotiate the version, secure the patch notes and persist both."""

    def __init__(
        self,
        prompter: Prompter,
        console: Console,
        runner: CommandRunner,
        settings: ReleaseSettings,
        *,
        negotiator: VersionNegotiator | None = None,
        resolver: ChangelogEntryResolver | None = None,
        allow_launch: bool = True,
    ) -> None:
        self._prompter = prompter
        self._console = console
        self._runner = runner
        self._settings = settings
        self._negotiator = negotiator or VersionNegotiator(
            prompter, console, default_version=settings.default_version
        )
        self._resolver = resolver or ChangelogEntryResolver(prompter, console)
        self._allow_launch = allow_launch

    @property
    def dry_run(self) -> bool:
        return self._console.dry_run

    def run(self, mod_dir: Path) -> ReleaseResult:
        info_path = mod_dir / self._settings.info_file
        changelog_path = mod_dir / self._settings.changelog_file

        mod = load_mod_info(info_path)
        self._console.info(f"Preparing release of {mod.label} (current version: {mod.version or 'unset'})")

        version = self._negotiator.next_version(mod.version)
        changelog = read_changelog(changelog_path)
        if not changelog:
            self._console.debug(f"{changelog_path.name} is empty or missing")
        entry = self._resolver.get_patch_notes(changelog, version)

        result = ReleaseResult(mod=mod, version=version, entry=entry)
        if version != mod.version:
            result.info_updated = True
            if self.dry_run:
                self._console.dry(f"Would set version {version} in {info_path}")
            else:
                result.mod = write_mod_version(info_path, mod, version)
                self._console.info(f"Updated {info_path.name} to v{version}")

        if entry.authored:
            result.changelog_updated = True
            if self.dry_run:
                self._console.dry(f"Would write patch notes for v{version} to {changelog_path}")
            else:
                write_changelog(changelog_path, apply_entry(changelog, entry))
                self._console.info(f"Wrote patch notes for v{version} to {changelog_path.name}")

        result.launched = self._maybe_launch(mod_dir)
        return result

    def _maybe_launch(self, mod_dir: Path) -> bool:
        command = self._settings.factorio_command
        if not self._allow_launch or not command or self._settings.launch == "never":
            return False
        if self._settings.launch == "ask":
            launch = self._prompter.ask(prompts.confirm("Would you like to launch factorio?", default=True))
            if not launch:
                return False
        try:
            self._runner.run(command, cwd=mod_dir, note="launch factorio", stream=True)
        except CommandError as exc:
            raise FatalExternal(str(exc)) from exc
        return True


__all__ = ["ReleaseResult", "ReleaseWorkflow"]
