"""
User commands for the closed files history (reopen, forget, list).
"""

import logging
from collections.abc import Callable
from pathlib import Path

from core.closed_files import ClosedFilesHistory, normalize_path
from core.errors import FileMissingError, NotFoundError

logger = logging.getLogger(__name__)


def _log_message(message: str):
    logger.info("%s", message)


class ClosedFilesCommands:
    """Reopen and manage closed files.

    ``open_file`` is the host editor's primitive for showing a file; it
    returns True when the file was opened. ``notify`` shows a message to the
    user. Commands never raise for a missing entry or file; they report it
    through ``notify`` and leave the history unchanged.
    """

    def __init__(
        self,
        history: ClosedFilesHistory,
        open_file: Callable[[str], bool],
        notify: Callable[[str], None] | None = None,
    ):
        self.history = history
        self._open_file = open_file
        self._notify = notify or _log_message

    def open_nth(self, n: int = 1) -> bool:
        """Reopen the n-th most recently closed file (1 is the most recent)."""
        n = max(1, n)
        try:
            path = self.history.get_at(n - 1)
        except NotFoundError:
            self._notify(f"No closed file #{n} in history")
            return False
        return self._reopen(path)

    def open_named(self, path: str) -> bool:
        """Open ``path`` and forget it from the history."""
        if not path:
            return False
        return self._reopen(normalize_path(path))

    def _reopen(self, path: str) -> bool:
        try:
            self._check_exists(path)
        except FileMissingError as e:
            # Left in place; the user may remove it explicitly
            self._notify(str(e))
            return False

        if not self._open_file(path):
            self._notify(f"Could not open {path}")
            return False

        self.history.remove(path)
        return True

    @staticmethod
    def _check_exists(path: str):
        if not Path(path).is_file():
            raise FileMissingError(path)

    def remove(self, path: str) -> bool:
        """Forget a single file. Returns False if it was not in the history."""
        return self.history.remove(path) is not None

    def flush(self):
        """Forget every closed file."""
        self.history.clear()

    def list_files(self) -> list[str]:
        """Get the closed files, most recent first."""
        return self.history.snapshot()
