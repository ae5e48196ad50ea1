"""
Exceptions
==========

Error hierarchy shared by the parser, the document model and the
translation engine.

- MalformedDocumentError: input is not a structurally valid Taskfile.
  Reported to the caller; no output is produced.
- FatalTaskfileError: unsupported input policy or broken model invariant.
  Translation stops immediately; callers are expected to terminate.
"""

from typing import List, Optional


class Taskfile2D2Error(Exception):
    """Base class for all taskfile2d2 errors."""

    pass


class MalformedDocumentError(Taskfile2D2Error):
    """Exception raised when the input is not a valid Taskfile document."""

    def __init__(self, message: str, errors: Optional[List[str]] = None) -> None:
        super().__init__(message)
        self.errors: List[str] = list(errors or [])

    def __str__(self) -> str:
        if not self.errors:
            return super().__str__()
        return f"{super().__str__()}: {'; '.join(self.errors)}"


class FatalTaskfileError(Taskfile2D2Error):
    """Unrecoverable condition; a partial diagram must never be emitted."""

    pass


class UnsupportedVersionError(FatalTaskfileError):
    """Exception raised when the Taskfile schema version is not supported."""

    def __init__(self, version: Optional[str], supported: str) -> None:
        super().__init__(
            f"Only version {supported} Taskfiles are supported, got {version!r}"
        )
        self.version = version
        self.supported = supported


class ConflictingCommandsError(FatalTaskfileError):
    """Exception raised when a task declares both ``cmd`` and ``cmds``."""

    def __init__(self, task_name: Optional[str] = None) -> None:
        subject = f"task '{task_name}'" if task_name else "task"
        super().__init__(f"{subject} cannot have both cmd and cmds")
        self.task_name = task_name


class MalformedEntryError(FatalTaskfileError):
    """Exception raised when a dependency, command or variable entry has an unknown shape."""

    pass


class TranslationError(Taskfile2D2Error):
    """Exception raised when D2 generation fails."""

    pass
