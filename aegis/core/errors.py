"""
Setup error taxonomy.

Every provisioning step signals failure by raising one of these.
The step wrapper turns them into a failed StepResult, so the
pipeline itself never sees an exception.
"""

from __future__ import annotations


class SetupError(Exception):
    """Base class for all expected setup failures."""

    kind = "SetupError"


class PromptAborted(SetupError):
    """The operator cancelled an interactive prompt."""

    kind = "PromptAborted"


class SelectionInvalid(SetupError):
    """A menu returned a label that maps to no known key."""

    kind = "SelectionInvalid"


class CommandFailed(SetupError):
    """An external command exited non-zero or could not start."""

    kind = "CommandFailed"

    def __init__(self, message: str, command: str = "", stage: str = "") -> None:
        super().__init__(message)
        self.command = command
        self.stage = stage


class FilesystemError(SetupError):
    """Creating, writing, moving or chmod-ing a path failed."""

    kind = "FilesystemError"


class UnsupportedVariant(SetupError):
    """A variant key has no configuration handler."""

    kind = "UnsupportedVariant"


class GenerationError(SetupError):
    """Artifacts cannot be rendered from the current configuration."""

    kind = "GenerationError"


class ValidationError(SetupError):
    """A required configuration field is unset or invalid."""

    kind = "ValidationError"
