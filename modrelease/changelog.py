"""Changelog entry grammar and the resolver that secures an entry for a release.

An entry in ``changelog.txt`` looks like::

    ---------------------------------------------------------------------------------------------------
    Version: 1.2.3
    Date: 17.10.2026
      Changes:
        - Something happened.

The separator is exactly 99 dashes. The block ends at a ``"`` (alone on a line
or trailing the last line of notes), at the next separator or at the end of
the document.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from typing import Callable, List, Sequence, Tuple
import re

from core.console import Console

from . import prompts
from .errors import EntryErrorKind, EntryNotFound, InvalidEntryFormat
from .prompts import Prompter

SEPARATOR = "-" * 99
TERMINATOR = '"'

_VERSION_PREFIX = "Version:"
_DATE_PREFIX = "Date:"
_BULLET = "-"
_VERSION_RE = re.compile(r"Version: (?P<version>\d\.\d\.\d)")
_DATE_RE = re.compile(
    r"Date: (?P<date>(?P<day>[0-2]?[0-9]|3[0-1])[./-](?P<month>1[0-2]|0?[0-9])[./-](?P<year>\d+))"
)


@dataclass(frozen=True)
class ChangelogEntry:
    """A dated, versioned block of release notes."""

    version: str
    date: str
    day: str
    month: str
    year: str
    body: Tuple[str, ...]
    authored: bool = False

    @property
    def text(self) -> str:
        """Canonical block text, without a terminator."""

        return "\n".join([SEPARATOR, f"Version: {self.version}", f"Date: {self.date}", *self.body])


@dataclass(frozen=True)
class ChangelogBlock:
    """A separator-delimited region of a changelog document."""

    start: int
    end: int
    line: int
    declared_version: str | None
    entry: ChangelogEntry | None = None
    error: InvalidEntryFormat | None = None


def _starts_separator(line: str) -> bool:
    return line.startswith(SEPARATOR)


def _parse_separator(line: str | None, line_no: int) -> None:
    if line is None:
        raise InvalidEntryFormat(EntryErrorKind.MISSING_SEPARATOR, line_no)
    if line == SEPARATOR:
        return
    if _starts_separator(line) or (line and set(line) == {"-"}):
        raise InvalidEntryFormat(EntryErrorKind.BAD_SEPARATOR, line_no, f"{len(line)} characters")
    raise InvalidEntryFormat(EntryErrorKind.MISSING_SEPARATOR, line_no, line)


def _parse_header(
    line: str | None,
    line_no: int,
    prefix: str,
    pattern: re.Pattern[str],
    missing: EntryErrorKind,
    bad: EntryErrorKind,
) -> re.Match[str]:
    if line is None or not line.startswith(prefix):
        raise InvalidEntryFormat(missing, line_no, line)
    match = pattern.fullmatch(line)
    if match is None:
        raise InvalidEntryFormat(bad, line_no, line)
    return match


def _parse_block(lines: Sequence[str], first_line: int, *, standalone: bool) -> ChangelogEntry:
    def at(index: int) -> str | None:
        return lines[index] if index < len(lines) else None

    _parse_separator(at(0), first_line)
    version = _parse_header(
        at(1), first_line + 1, _VERSION_PREFIX, _VERSION_RE,
        EntryErrorKind.MISSING_VERSION, EntryErrorKind.BAD_VERSION,
    )
    dated = _parse_header(
        at(2), first_line + 2, _DATE_PREFIX, _DATE_RE,
        EntryErrorKind.MISSING_DATE, EntryErrorKind.BAD_DATE,
    )

    body: List[str] = []
    for index in range(3, len(lines)):
        line = lines[index].rstrip()
        if _starts_separator(line):
            if standalone:
                raise InvalidEntryFormat(EntryErrorKind.TRAILING_CONTENT, first_line + index)
            break
        body.append(line)

    # Only the last non-blank line may carry the terminator.
    while body and not body[-1].strip():
        body.pop()
    if body and body[-1].endswith(TERMINATOR):
        body[-1] = body[-1][: -len(TERMINATOR)].rstrip()
    while body and not body[-1].strip():
        body.pop()
    leading = 0
    while body and not body[0].strip():
        body.pop(0)
        leading += 1
    if not body:
        raise InvalidEntryFormat(EntryErrorKind.EMPTY_BODY, first_line + 3)
    for offset, line in enumerate(body, start=3 + leading):
        if line.strip() == _BULLET:
            raise InvalidEntryFormat(EntryErrorKind.EMPTY_NOTE, first_line + offset, line)

    return ChangelogEntry(
        version=version.group("version"),
        date=dated.group("date"),
        day=dated.group("day"),
        month=dated.group("month"),
        year=dated.group("year"),
        body=tuple(body),
    )


def parse_entry(text: str) -> ChangelogEntry:
    """Parse a single authored entry; raise :class:`InvalidEntryFormat` on any deviation."""

    return _parse_block(text.strip().splitlines(), 1, standalone=True)


def scan_changelog(document: str) -> List[ChangelogBlock]:
    """Split ``document`` into separator-delimited blocks and parse each one."""

    lines = document.splitlines(keepends=True)
    offsets: List[int] = []
    position = 0
    for line in lines:
        offsets.append(position)
        position += len(line)

    starts = [index for index, line in enumerate(lines) if _starts_separator(line)]
    blocks: List[ChangelogBlock] = []
    for position_in_starts, first in enumerate(starts):
        last = starts[position_in_starts + 1] if position_in_starts + 1 < len(starts) else len(lines)
        block_lines = [line.rstrip("\r\n") for line in lines[first:last]]
        declared = None
        if len(block_lines) > 1 and block_lines[1].startswith(_VERSION_PREFIX):
            declared = block_lines[1][len(_VERSION_PREFIX):].strip()
        start = offsets[first]
        end = offsets[last] if last < len(lines) else len(document)
        try:
            entry = _parse_block(block_lines, first + 1, standalone=False)
        except InvalidEntryFormat as exc:
            blocks.append(ChangelogBlock(start, end, first + 1, declared, error=exc))
        else:
            blocks.append(ChangelogBlock(start, end, first + 1, declared, entry=entry))
    return blocks


def find_block(document: str, version: str) -> ChangelogBlock | None:
    """Return the first block for ``version``, preferring a well-formed one."""

    malformed: ChangelogBlock | None = None
    for block in scan_changelog(document):
        if block.entry is not None and block.entry.version == version:
            return block
        if block.entry is None and block.declared_version == version and malformed is None:
            malformed = block
    return malformed


def find_entry(document: str, version: str) -> ChangelogEntry | None:
    block = find_block(document, version)
    return block.entry if block is not None else None


def render_template(version: str, today: date) -> str:
    return "\n".join(
        [
            SEPARATOR,
            f"Version: {version}",
            f"Date: {today:%d.%m.%Y}",
            "  Changes:",
            "    - ",
            TERMINATOR,
        ]
    )


def apply_entry(document: str, entry: ChangelogEntry) -> str:
    """Return ``document`` with ``entry`` replacing the block for its version or prepended."""

    replacement = f"{entry.text}\n"
    block = find_block(document, entry.version)
    if block is not None:
        return document[: block.start] + replacement + document[block.end :]
    return replacement + document


def _entry_validator(version: str) -> Callable[[str], bool | str]:
    def validate(value: str) -> bool | str:
        try:
            entry = parse_entry(value)
        except InvalidEntryFormat as exc:
            return f"Invalid Patch Notes: {exc}"
        if entry.version != version:
            return f"Invalid Patch Notes: version must be {version}"
        return True

    return validate


class ChangelogEntryResolver:
    """Secure one well-formed changelog entry for the release version."""

    def __init__(self, prompter: Prompter, console: Console, *, clock: Callable[[], date] = date.today):
        self._prompter = prompter
        self._console = console
        self._clock = clock

    def edit_patch_notes(self, version: str, seed: str | None = None) -> str:
        answer = self._prompter.ask(
            prompts.text(
                f"Please provide the patch notes for v{version}",
                default=seed if seed is not None else render_template(version, self._clock()),
                validate=_entry_validator(version),
                multiline=True,
            )
        )
        return answer.strip()

    def _authored(self, text: str, version: str) -> ChangelogEntry:
        entry = parse_entry(text)
        if entry.version != version:
            raise EntryNotFound(version)
        return replace(entry, authored=True)

    def get_patch_notes(self, changelog: str, version: str) -> ChangelogEntry:
        block = find_block(changelog, version)
        entry = block.entry if block is not None else None
        if block is not None and block.error is not None:
            self._console.warn(f"Patch notes for v{version} are malformed, {block.error}")

        if entry is None:
            self._console.info(f"Valid patch notes for v{version} not found in changelog")
            entry = self._authored(self.edit_patch_notes(version), version)
        else:
            self._console.info(f"Patch notes for v{version} found in changelog")

        self._console.show("Current patch notes:")
        self._console.show(entry.text)
        correct = self._prompter.ask(prompts.confirm("Are the patch notes correct?", default=True))
        if not correct:
            edit = self._prompter.ask(prompts.confirm("Would you like to edit the patch notes?", default=True))
            if edit:
                entry = self._authored(self.edit_patch_notes(version, entry.text), version)
        return entry


__all__ = [
    "SEPARATOR",
    "TERMINATOR",
    "ChangelogBlock",
    "ChangelogEntry",
    "ChangelogEntryResolver",
    "apply_entry",
    "find_block",
    "find_entry",
    "parse_entry",
    "render_template",
    "scan_changelog",
]
