"""Interactive input collaborators.

The release components only describe *what* they want to ask through a
:class:`Prompt`; a :class:`Prompter` decides how the question reaches the user.
"""
from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Iterable, List, Protocol, Sequence, Tuple, Union

import questionary

from .errors import InvalidInput, UserAbort

Validator = Callable[[str], Union[bool, str]]


class PromptKind(str, Enum):
    TEXT = "text"
    SELECT = "select"
    CONFIRM = "confirm"


@dataclass(frozen=True)
class Choice:
    title: str
    value: Any


@dataclass(frozen=True)
class Prompt:
    """Description of a single question."""

    kind: PromptKind
    message: str
    default: Any = None
    choices: Tuple[Choice, ...] = ()
    validate: Validator | None = None
    multiline: bool = False


def text(message: str, *, default: str = "", validate: Validator | None = None, multiline: bool = False) -> Prompt:
    return Prompt(PromptKind.TEXT, message, default=default, validate=validate, multiline=multiline)


def select(message: str, choices: Sequence[Choice], *, default: Any = None) -> Prompt:
    return Prompt(PromptKind.SELECT, message, default=default, choices=tuple(choices))


def confirm(message: str, *, default: bool = False) -> Prompt:
    return Prompt(PromptKind.CONFIRM, message, default=default)


class Prompter(Protocol):
    def ask(self, prompt: Prompt) -> Any:
        """Return the answer to ``prompt`` or raise :class:`UserAbort` on cancellation."""
        ...


class QuestionaryPrompter:
    """Prompter rendering questions in the terminal with :mod:`questionary`."""

    def _build(self, prompt: Prompt) -> questionary.Question:
        if prompt.kind is PromptKind.CONFIRM:
            return questionary.confirm(prompt.message, default=bool(prompt.default))
        if prompt.kind is PromptKind.SELECT:
            choices = [questionary.Choice(title=choice.title, value=choice.value) for choice in prompt.choices]
            default = next((choice for choice in choices if choice.value == prompt.default), None)
            return questionary.select(prompt.message, choices=choices, default=default)
        return questionary.text(
            prompt.message,
            default=prompt.default or "",
            validate=prompt.validate,
            multiline=prompt.multiline,
        )

    def ask(self, prompt: Prompt) -> Any:
        # questionary reports Ctrl-C as a ``None`` answer
        answer = self._build(prompt).ask()
        if answer is None:
            raise UserAbort()
        return answer


@dataclass
class ScriptedPrompter:
    """Prompter answering from a fixed list, for unattended runs and tests.

    ``None`` in the script stands for a cancelled prompt. Select answers may
    name either a choice value or a choice title.
    """

    answers: Iterable[Any]
    asked: List[Prompt] = field(default_factory=list)

    def __post_init__(self) -> None:
        self._pending = deque(self.answers)

    @property
    def remaining(self) -> int:
        return len(self._pending)

    def ask(self, prompt: Prompt) -> Any:
        self.asked.append(prompt)
        if not self._pending:
            raise InvalidInput(f"No scripted answer left for prompt: {prompt.message}")
        answer = self._pending.popleft()
        if answer is None:
            raise UserAbort()

        if prompt.kind is PromptKind.CONFIRM:
            if not isinstance(answer, bool):
                raise InvalidInput(f"Expected yes/no answer for '{prompt.message}', got {answer!r}")
            return answer

        if prompt.kind is PromptKind.SELECT:
            for choice in prompt.choices:
                if answer == choice.value or answer == choice.title:
                    return choice.value
            titles = ", ".join(choice.title for choice in prompt.choices)
            raise InvalidInput(f"Answer {answer!r} is not one of: {titles}")

        value = str(answer)
        if prompt.validate is not None:
            verdict = prompt.validate(value)
            if verdict is not True:
                reason = verdict if isinstance(verdict, str) else "invalid answer"
                raise InvalidInput(f"{prompt.message}: {reason}")
        return value


__all__ = [
    "Choice",
    "Prompt",
    "PromptKind",
    "Prompter",
    "QuestionaryPrompter",
    "ScriptedPrompter",
    "Validator",
    "confirm",
    "select",
    "text",
]
