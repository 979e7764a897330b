"""Command line interface for the mod release tool."""
from __future__ import annotations

from argparse import ArgumentParser, Namespace
from pathlib import Path
from typing import Any, Iterable, List
import sys

from core.command_runner import RecordingCommandRunner, SubprocessCommandRunner
from core.config_loader import load_config_file
from core.console import Console

from . import semver
from .changelog import find_block
from .errors import EntryNotFound, ExitCode, FatalExternal, InvalidInput, ReleaseError, UserAbort
from .mod_info import load_mod_info, read_changelog
from .prompts import Prompter, QuestionaryPrompter, ScriptedPrompter
from .settings import ReleaseSettings, load_settings
from .workflow import ReleaseWorkflow


def _make_runner(dry_run: bool) -> SubprocessCommandRunner | RecordingCommandRunner:
    return RecordingCommandRunner() if dry_run else SubprocessCommandRunner()


def _load_answers(path: Path) -> List[Any]:
    try:
        data = load_config_file(path)
    except (OSError, ValueError, TypeError, RuntimeError) as exc:
        raise FatalExternal(f"Failed to load answers {path}: {exc}") from exc
    answers = data.get("answers")
    if not isinstance(answers, list):
        raise InvalidInput(f"Answers file '{path}' must define an 'answers' list")
    return answers


def _make_prompter(args: Namespace) -> Prompter:
    answers_path = getattr(args, "answers", None)
    if answers_path:
        return ScriptedPrompter(_load_answers(Path(answers_path)))
    return QuestionaryPrompter()


def _emit_dry_run_output(runner: RecordingCommandRunner, console: Console) -> None:
    for line in runner.iter_formatted():
        console.dry(line)


def _parse_arguments(argv: Iterable[str]) -> Namespace:
    parser = ArgumentParser(prog="modrelease", description="Interactive release helper for Factorio mods")
    parser.add_argument("-c", "--config", type=Path, default=None, help="Path to a release configuration file")
    parser.add_argument(
        "-l",
        "--log",
        choices=["none", "error", "info", "debug"],
        default=None,
        help="Set log level (default: info)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug output")
    subparsers = parser.add_subparsers(dest="command", required=True)

    release_parser = subparsers.add_parser("release", help="Pick the next version and confirm its patch notes")
    release_parser.add_argument("mod_dir", nargs="?", default=".", type=Path, help="Mod directory (default: .)")
    release_parser.add_argument("-n", "--dry-run", action="store_true", help="Do not write files or launch anything")
    release_parser.add_argument("--answers", metavar="FILE", help="Answer prompts from FILE instead of the terminal")
    release_parser.add_argument("--no-launch", action="store_true", help="Never offer to launch Factorio")

    check_parser = subparsers.add_parser("check", help="Verify the changelog has a valid entry for a version")
    check_parser.add_argument("mod_dir", nargs="?", default=".", type=Path, help="Mod directory (default: .)")
    check_parser.add_argument("--version", dest="version", help="Version to check (default: version in info.json)")

    next_parser = subparsers.add_parser("next", help="Print the next version for an increment")
    next_parser.add_argument("mod_dir", nargs="?", default=".", type=Path, help="Mod directory (default: .)")
    next_parser.add_argument("increment", choices=list(semver.INCREMENTS), help="Component to increment")

    return parser.parse_args(list(argv))


def _log_level(args: Namespace) -> str:
    if args.log:
        return args.log
    return "debug" if args.verbose else "info"


def main(argv: Iterable[str] | None = None) -> int:
    args = _parse_arguments(sys.argv[1:] if argv is None else argv)
    console = Console(level=_log_level(args), dry_run=getattr(args, "dry_run", False))

    try:
        settings = load_settings(args.mod_dir, args.config)
        if settings.source:
            console.debug(f"Loaded configuration from {settings.source}")
        if args.command == "release":
            return _handle_release(args, console, settings)
        if args.command == "check":
            return _handle_check(args, console, settings)
        if args.command == "next":
            return _handle_next(args, console, settings)
    except UserAbort as exc:
        console.warn(str(exc))
        return int(exc.exit_code)
    except ReleaseError as exc:
        console.error(str(exc))
        return int(exc.exit_code)
    raise ValueError(f"Unknown command: {args.command}")


def _handle_release(args: Namespace, console: Console, settings: ReleaseSettings) -> int:
    runner = _make_runner(args.dry_run)
    workflow = ReleaseWorkflow(
        _make_prompter(args),
        console,
        runner,
        settings,
        allow_launch=not args.no_launch,
    )
    result = workflow.run(args.mod_dir)
    if isinstance(runner, RecordingCommandRunner):
        _emit_dry_run_output(runner, console)
    console.show(f"Release v{result.version} of {result.mod.label} is ready")
    return int(ExitCode.SUCCESS)


def _handle_check(args: Namespace, console: Console, settings: ReleaseSettings) -> int:
    mod = load_mod_info(args.mod_dir / settings.info_file)
    raw = args.version or mod.version
    version = semver.clean(raw)
    if version is None:
        raise InvalidInput(f"Version {raw} is not a valid semver.")

    block = find_block(read_changelog(args.mod_dir / settings.changelog_file), version)
    if block is None:
        raise EntryNotFound(version)
    if block.error is not None:
        raise block.error
    console.info(f"Patch notes for v{version} found in {settings.changelog_file}")
    console.show(block.entry.text)
    return int(ExitCode.SUCCESS)


def _handle_next(args: Namespace, console: Console, settings: ReleaseSettings) -> int:
    mod = load_mod_info(args.mod_dir / settings.info_file)
    if not semver.valid(mod.version):
        raise InvalidInput(f"Version {mod.version} in {settings.info_file} is not a valid semver.")
    console.show(semver.increment(mod.version, args.increment))
    return int(ExitCode.SUCCESS)


__all__ = ["main"]
