from __future__ import annotations

from pathlib import Path


class DataFileError(Exception):
    """Base class for pydatafile errors."""


class NotFoundError(DataFileError):
    """Raised when a section or key does not exist."""


class AlreadyExistsError(DataFileError):
    """Raised when creating a section whose name is already taken."""


class DataFileIOError(DataFileError):
    """Raised when a data file cannot be opened for reading or writing."""

    def __init__(self, path: str | Path, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = Path(path)
        self.reason = reason


class ParseError(DataFileError):
    """Raised when stored text cannot be converted to the requested type."""


class InvalidStateError(DataFileError):
    """Raised when the document cannot perform an operation in its current state."""
