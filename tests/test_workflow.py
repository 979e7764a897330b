from __future__ import annotations

from datetime import date
from pathlib import Path
import io
import json
import tempfile
import unittest
from contextlib import redirect_stdout

from core.command_runner import CommandError, CommandResult, CommandRunner, RecordingCommandRunner
from core.console import Console
from modrelease.changelog import SEPARATOR, ChangelogEntryResolver, find_entry
from modrelease.errors import FatalExternal, UserAbort
from modrelease.prompts import ScriptedPrompter
from modrelease.settings import ReleaseSettings
from modrelease.workflow import ReleaseWorkflow

EXISTING = f"{SEPARATOR}\nVersion: 1.2.3\nDate: 01.09.2026\n  Features:\n    - First.\n"


def notes(version: str) -> str:
    return f"{SEPARATOR}\nVersion: {version}\nDate: 17.10.2026\n  Bugfixes:\n    - Fixed.\n\""


class FailingRunner(CommandRunner):
    def run(self, command, **kwargs):
        raise CommandError(CommandResult(command=command, returncode=3, stdout="", stderr="", streamed=True))


class ReleaseWorkflowTests(unittest.TestCase):
    def setUp(self) -> None:
        self.temp_dir = tempfile.TemporaryDirectory()
        self.mod_dir = Path(self.temp_dir.name)
        (self.mod_dir / "info.json").write_text(json.dumps({"name": "belt-tools", "version": "1.2.3"}, indent=2))
        (self.mod_dir / "changelog.txt").write_text(EXISTING)

    def tearDown(self) -> None:
        self.temp_dir.cleanup()

    def run_workflow(self, answers, *, settings=None, dry_run=False, runner=None, allow_launch=True):
        prompter = ScriptedPrompter(answers)
        console = Console(level="none", dry_run=dry_run)
        resolver = ChangelogEntryResolver(prompter, console, clock=lambda: date(2026, 10, 17))
        workflow = ReleaseWorkflow(
            prompter,
            console,
            runner or RecordingCommandRunner(),
            settings or ReleaseSettings(),
            resolver=resolver,
            allow_launch=allow_launch,
        )
        with redirect_stdout(io.StringIO()) as out:
            result = workflow.run(self.mod_dir)
        return result, prompter, out.getvalue()

    def read_info(self) -> dict:
        return json.loads((self.mod_dir / "info.json").read_text())

    def test_patch_release_writes_version_and_notes(self) -> None:
        result, prompter, _ = self.run_workflow(["Patch: v1.2.4", notes("1.2.4"), True])
        self.assertEqual(result.version, "1.2.4")
        self.assertTrue(result.info_updated)
        self.assertTrue(result.changelog_updated)
        self.assertFalse(result.launched)
        self.assertEqual(prompter.remaining, 0)
        self.assertEqual(self.read_info()["version"], "1.2.4")
        changelog = (self.mod_dir / "changelog.txt").read_text()
        self.assertTrue(changelog.startswith(f"{SEPARATOR}\nVersion: 1.2.4\n"))
        self.assertNotIn('"', changelog)
        self.assertIsNotNone(find_entry(changelog, "1.2.3"))

    def test_rerelease_with_existing_notes_writes_nothing(self) -> None:
        result, _, _ = self.run_workflow(["Current: v1.2.3", True, True])
        self.assertFalse(result.info_updated)
        self.assertFalse(result.changelog_updated)
        self.assertEqual((self.mod_dir / "changelog.txt").read_text(), EXISTING)

    def test_dry_run_leaves_files_untouched(self) -> None:
        before = (self.mod_dir / "info.json").read_text()
        result, _, output = self.run_workflow(["Minor: v1.3.0", notes("1.3.0"), True], dry_run=True)
        self.assertTrue(result.info_updated)
        self.assertTrue(result.changelog_updated)
        self.assertEqual((self.mod_dir / "info.json").read_text(), before)
        self.assertEqual((self.mod_dir / "changelog.txt").read_text(), EXISTING)
        self.assertIn("[DRY] Would set version 1.3.0", output)

    def test_missing_changelog_is_created(self) -> None:
        (self.mod_dir / "changelog.txt").unlink()
        self.run_workflow(["Major: v2.0.0", notes("2.0.0"), True])
        changelog = (self.mod_dir / "changelog.txt").read_text()
        self.assertEqual(find_entry(changelog, "2.0.0").body, ("  Bugfixes:", "    - Fixed."))

    def test_launch_prompt_runs_command(self) -> None:
        runner = RecordingCommandRunner()
        settings = ReleaseSettings(factorio_command=["factorio", "--mod-directory", "mods"])
        result, prompter, _ = self.run_workflow(
            ["Current: v1.2.3", True, True, True], settings=settings, runner=runner
        )
        self.assertTrue(result.launched)
        self.assertEqual(prompter.asked[-1].message, "Would you like to launch factorio?")
        self.assertEqual(runner.commands[0].command, ["factorio", "--mod-directory", "mods"])
        self.assertEqual(runner.commands[0].cwd, str(self.mod_dir))

    def test_launch_declined(self) -> None:
        runner = RecordingCommandRunner()
        settings = ReleaseSettings(factorio_command=["factorio"])
        result, _, _ = self.run_workflow(["Current: v1.2.3", True, True, False], settings=settings, runner=runner)
        self.assertFalse(result.launched)
        self.assertEqual(runner.commands, [])

    def test_launch_always_and_disabled(self) -> None:
        runner = RecordingCommandRunner()
        settings = ReleaseSettings(factorio_command=["factorio"], launch="always")
        result, _, _ = self.run_workflow(["Current: v1.2.3", True, True], settings=settings, runner=runner)
        self.assertTrue(result.launched)

        runner = RecordingCommandRunner()
        result, _, _ = self.run_workflow(
            ["Current: v1.2.3", True, True], settings=settings, runner=runner, allow_launch=False
        )
        self.assertFalse(result.launched)
        self.assertEqual(runner.commands, [])

    def test_launch_failure_is_fatal(self) -> None:
        settings = ReleaseSettings(factorio_command=["factorio"], launch="always")
        with self.assertRaises(FatalExternal):
            self.run_workflow(["Current: v1.2.3", True, True], settings=settings, runner=FailingRunner())

    def test_abort_writes_nothing(self) -> None:
        before = (self.mod_dir / "info.json").read_text()
        with self.assertRaises(UserAbort):
            self.run_workflow(["Patch: v1.2.4", None])
        self.assertEqual((self.mod_dir / "info.json").read_text(), before)
        self.assertEqual((self.mod_dir / "changelog.txt").read_text(), EXISTING)

    def test_missing_info_json(self) -> None:
        (self.mod_dir / "info.json").unlink()
        with self.assertRaises(FatalExternal):
            self.run_workflow([])


if __name__ == "__main__":
    unittest.main()
