"""Typed errors raised by the release workflow.

Operations never terminate the process themselves. Each error carries the
exit code the command line driver returns when it reaches the top level.
"""
from __future__ import annotations

from enum import Enum, IntEnum


class ExitCode(IntEnum):
    SUCCESS = 0
    FATAL = 1
    USAGE = 2
    ABORTED = 128


class EntryErrorKind(str, Enum):
    """Why a changelog block does not satisfy the entry grammar."""

    MISSING_SEPARATOR = "missing_separator"
    BAD_SEPARATOR = "bad_separator"
    MISSING_VERSION = "missing_version"
    BAD_VERSION = "bad_version"
    MISSING_DATE = "missing_date"
    BAD_DATE = "bad_date"
    EMPTY_BODY = "empty_body"
    EMPTY_NOTE = "empty_note"
    TRAILING_CONTENT = "trailing_content"


_KIND_DESCRIPTIONS = {
    EntryErrorKind.MISSING_SEPARATOR: "entry must start with a line of 99 '-' characters",
    EntryErrorKind.BAD_SEPARATOR: "separator line must be exactly 99 '-' characters",
    EntryErrorKind.MISSING_VERSION: "expected a 'Version: X.Y.Z' line",
    EntryErrorKind.BAD_VERSION: "version must be three single digits, e.g. 'Version: 1.2.3'",
    EntryErrorKind.MISSING_DATE: "expected a 'Date: D.M.Y' line",
    EntryErrorKind.BAD_DATE: "date must be day, month and year separated by '.', '/' or '-'",
    EntryErrorKind.EMPTY_BODY: "entry needs at least one line of notes",
    EntryErrorKind.EMPTY_NOTE: "note bullet has no text",
    EntryErrorKind.TRAILING_CONTENT: "unexpected content after the end of the entry",
}


class ReleaseError(RuntimeError):
    """Base class for failures surfaced to the command line driver."""

    exit_code: ExitCode = ExitCode.FATAL


class InvalidInput(ReleaseError):
    """User supplied text failed validation and could not be asked again."""

    exit_code = ExitCode.USAGE


class EntryNotFound(ReleaseError):
    """No changelog entry exists for the requested version."""

    def __init__(self, version: str):
        super().__init__(f"No changelog entry found for v{version}")
        self.version = version


class InvalidEntryFormat(ReleaseError):
    """A changelog block violates the entry grammar."""

    def __init__(self, kind: EntryErrorKind, line: int | None = None, detail: str | None = None):
        message = _KIND_DESCRIPTIONS[kind]
        if line is not None:
            message = f"line {line}: {message}"
        if detail:
            message = f"{message} (got {detail!r})"
        super().__init__(message)
        self.kind = kind
        self.line = line
        self.detail = detail


class UserAbort(ReleaseError):
    """The user cancelled a prompt or declined to continue."""

    exit_code = ExitCode.ABORTED

    def __init__(self, message: str = "Aborting"):
        super().__init__(message)


class FatalExternal(ReleaseError):
    """A file, JSON document or external command failed underneath the workflow."""


__all__ = [
    "EntryErrorKind",
    "EntryNotFound",
    "ExitCode",
    "FatalExternal",
    "InvalidEntryFormat",
    "InvalidInput",
    "ReleaseError",
    "UserAbort",
]
