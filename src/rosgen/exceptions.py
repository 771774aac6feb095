"""Custom exceptions for the rosgen generation pipeline."""

from __future__ import annotations


class GenerationError(Exception):
    """Base exception for all project generation errors."""

    pass


class InvalidArgumentError(GenerationError, ValueError):
    """Raised when a caller supplies unusable input.

    Examples: absent data records, a template path equal to its output
    path, an empty or malformed staged-file path.
    """


class NotFoundError(GenerationError):
    """Raised when a required command, file or directory cannot be located.

    Attributes:
        target: The command name or path that could not be found.
    """

    def __init__(self, target: str, reason: str = "not found") -> None:
        self.target = target
        self.reason = reason
        super().__init__(f"Unable to locate '{target}': {reason}")


class FileIOError(GenerationError):
    """Raised when creating, reading or writing a file or directory fails."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"I/O error at '{path}': {reason}")


class TemplateError(GenerationError):
    """Raised when a template cannot be compiled or executed.

    Examples: invalid template syntax, a placeholder naming a field the
    data record does not have.
    """


class RenderProcessError(GenerationError):
    """Raised when the external rendering process exits unsuccessfully.

    Attributes:
        command: The command that was run.
        returncode: Its exit status.
        stderr: Captured standard error (possibly truncated).
    """

    def __init__(self, command: str, returncode: int, stderr: str = "") -> None:
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        message = f"Command '{command}' exited with status {returncode}"
        if stderr.strip():
            message += f": {stderr.strip()}"
        super().__init__(message)


class StageError(GenerationError):
    """Raised by the scaffolding orchestrator when one of its stages fails.

    The underlying error is available as ``__cause__``.

    Attributes:
        stage: Name of the stage that failed.
    """

    def __init__(self, stage: str, cause: Exception) -> None:
        self.stage = stage
        super().__init__(f"Stage '{stage}' failed: {cause}")


class DescriptionError(GenerationError):
    """Raised when an application description document cannot be loaded."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid description '{path}': {reason}")
