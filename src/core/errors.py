"""
Exceptions raised by the closed-files history.
"""


class ClosedFilesError(Exception):
    """Base class for closed-files history errors."""


class NotFoundError(ClosedFilesError, IndexError):
    """Requested index or path is not in the history."""


class FileMissingError(ClosedFilesError):
    """A remembered path no longer exists on disk."""

    def __init__(self, path: str):
        super().__init__(f"File no longer exists: {path}")
        self.path = path


class PersistenceError(ClosedFilesError):
    """Base class for save file problems."""

    def __init__(self, message: str, path: str | None = None):
        super().__init__(message)
        self.path = path


class PersistenceWriteError(PersistenceError):
    """The history could not be written (permissions, disk full, bad path)."""


class PersistenceParseError(PersistenceError):
    """The save file exists but is not a valid closed-files listing."""

    def __init__(self, message: str, path: str | None = None, line: int | None = None):
        if line is not None:
            message = f"line {line}: {message}"
        if path:
            message = f"{path}: {message}"
        super().__init__(message, path)
        self.line = line
