from __future__ import annotations

import unittest
from unittest.mock import MagicMock, patch

from modrelease import prompts
from modrelease.errors import InvalidInput, UserAbort
from modrelease.prompts import Choice, QuestionaryPrompter, ScriptedPrompter

CHOICES = [Choice("Patch: v1.0.1", "1.0.1"), Choice("Custom", "custom")]


class ScriptedPrompterTests(unittest.TestCase):
    def test_answers_in_order(self) -> None:
        prompter = ScriptedPrompter(["hello", True, "Custom"])
        self.assertEqual(prompter.ask(prompts.text("Name")), "hello")
        self.assertTrue(prompter.ask(prompts.confirm("Sure?")))
        self.assertEqual(prompter.ask(prompts.select("Version", CHOICES)), "custom")
        self.assertEqual(prompter.remaining, 0)
        self.assertEqual(len(prompter.asked), 3)

    def test_select_by_value(self) -> None:
        prompter = ScriptedPrompter(["1.0.1"])
        self.assertEqual(prompter.ask(prompts.select("Version", CHOICES)), "1.0.1")

    def test_unknown_select_answer(self) -> None:
        prompter = ScriptedPrompter(["2.0.0"])
        with self.assertRaises(InvalidInput):
            prompter.ask(prompts.select("Version", CHOICES))

    def test_confirm_requires_bool(self) -> None:
        prompter = ScriptedPrompter(["yes"])
        with self.assertRaises(InvalidInput):
            prompter.ask(prompts.confirm("Sure?"))

    def test_none_is_cancellation(self) -> None:
        prompter = ScriptedPrompter([None])
        with self.assertRaises(UserAbort):
            prompter.ask(prompts.text("Name"))

    def test_exhausted_script(self) -> None:
        prompter = ScriptedPrompter([])
        with self.assertRaises(InvalidInput) as ctx:
            prompter.ask(prompts.text("Name"))
        self.assertIn("Name", str(ctx.exception))

    def test_validation_hook_runs_once(self) -> None:
        prompter = ScriptedPrompter(["bad", "good"])
        prompt = prompts.text("Value", validate=lambda value: value == "good" or "must be good")
        with self.assertRaises(InvalidInput) as ctx:
            prompter.ask(prompt)
        self.assertIn("must be good", str(ctx.exception))
        self.assertEqual(prompter.ask(prompt), "good")


class QuestionaryPrompterTests(unittest.TestCase):
    @patch("modrelease.prompts.questionary")
    def test_confirm(self, mock_questionary) -> None:
        mock_questionary.confirm.return_value.ask.return_value = False
        self.assertFalse(QuestionaryPrompter().ask(prompts.confirm("Sure?", default=True)))
        mock_questionary.confirm.assert_called_once_with("Sure?", default=True)

    @patch("modrelease.prompts.questionary")
    def test_text_passes_validation_and_multiline(self, mock_questionary) -> None:
        mock_questionary.text.return_value.ask.return_value = "notes"
        validator = MagicMock(return_value=True)
        answer = QuestionaryPrompter().ask(prompts.text("Notes", default="tpl", validate=validator, multiline=True))
        self.assertEqual(answer, "notes")
        mock_questionary.text.assert_called_once_with("Notes", default="tpl", validate=validator, multiline=True)

    @patch("modrelease.prompts.questionary")
    def test_select_maps_choices_and_default(self, mock_questionary) -> None:
        mock_questionary.Choice.side_effect = lambda title, value: MagicMock(title=title, value=value)
        mock_questionary.select.return_value.ask.return_value = "custom"
        answer = QuestionaryPrompter().ask(prompts.select("Version", CHOICES, default="1.0.1"))
        self.assertEqual(answer, "custom")
        _, kwargs = mock_questionary.select.call_args
        self.assertEqual([choice.value for choice in kwargs["choices"]], ["1.0.1", "custom"])
        self.assertEqual(kwargs["default"].value, "1.0.1")

    @patch("modrelease.prompts.questionary")
    def test_cancel_raises_user_abort(self, mock_questionary) -> None:
        mock_questionary.text.return_value.ask.return_value = None
        with self.assertRaises(UserAbort):
            QuestionaryPrompter().ask(prompts.text("Name"))


if __name__ == "__main__":
    unittest.main()
