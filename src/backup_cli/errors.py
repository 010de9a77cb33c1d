from __future__ import annotations

from typing import Optional


class BackupError(Exception):
    """Base class for errors raised by the backup CLI."""


class InvalidTriggerSpec(BackupError):
    """Raised when the --trigger argument is empty or malformed."""


class EmptyTriggerList(InvalidTriggerSpec):
    """Raised when a trigger argument resolves to no trigger at all."""


class ModelNotFound(BackupError):
    """Raised when a trigger names no known backup model."""


class ModelParseError(BackupError):
    """Raised when the configuration or a model definition cannot be parsed."""


class ModelExecutionError(BackupError):
    """Raised by backup models to signal a failed run."""


class PathCreationError(BackupError):
    """Raised when a required directory cannot be created."""


class DecryptError(BackupError):
    """Raised when the external decryption tool fails."""


class CLIError(BackupError):
    """Top-level wrapper for any error escaping a command."""

    def __init__(self, message: str, category: str, original: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.category = category
        self.original = original

    @classmethod
    def wrap(cls, err: BaseException) -> "CLIError":
        if isinstance(err, CLIError):
            return err
        if isinstance(err, BackupError):
            category = type(err).__name__
        else:
            category = ModelExecutionError.__name__
        detail = str(err) or type(err).__name__
        if category != type(err).__name__:
            detail = f"{type(err).__name__}: {detail}"
        return cls(f"{category}: {detail}", category=category, original=err)
