"""
Closed files history - tracks recently closed files, most recent first.
"""

import os
from collections.abc import Iterable, Iterator
from pathlib import Path

from PyQt6.QtCore import QObject, pyqtSignal

from core.errors import NotFoundError


def normalize_path(path: str) -> str:
    """Make a path absolute so the same file always maps to one entry."""
    return os.path.abspath(os.path.expanduser(path))


def display_name(filepath: str) -> str:
    """Get a display-friendly name for a file path."""
    path = Path(filepath)
    # Show filename and parent folder for context
    if path.parent.name:
        return f"{path.name}  —  {path.parent}"
    return path.name or filepath


class ClosedFilesHistory(QObject):
    """Ordered, deduplicated and optionally bounded list of closed file paths.

    Index 0 is the most recently closed file. Inserting a path that is
    already present moves it to the front. When ``max_saved_items`` is set,
    the oldest entries are dropped from the tail.
    """

    # Emitted after any mutation that changes the list
    changed = pyqtSignal()

    def __init__(self, max_saved_items: int | None = None, parent=None):
        super().__init__(parent)
        self._files: list[str] = []
        self._max_saved_items: int | None = None
        self.max_saved_items = max_saved_items

    @property
    def max_saved_items(self) -> int | None:
        """Cap on the history length, or None for unbounded."""
        return self._max_saved_items

    @max_saved_items.setter
    def max_saved_items(self, value: int | None):
        if value is not None:
            value = max(0, int(value))
        self._max_saved_items = value
        if self._truncate():
            self.changed.emit()

    def _truncate(self) -> bool:
        """Drop tail entries beyond the cap. Returns True if any were dropped."""
        if self._max_saved_items is None or len(self._files) <= self._max_saved_items:
            return False
        del self._files[self._max_saved_items :]
        return True

    def insert(self, path: str | None):
        """Record a closed file at the front of the history."""
        if not path:
            return

        # Remove if already in list (will be re-added at top)
        if path in self._files:
            self._files.remove(path)

        self._files.insert(0, path)
        self._truncate()
        self.changed.emit()

    def remove(self, path: str | None) -> str | None:
        """Remove a path. Returns the removed path, or None if it was absent."""
        if not path or path not in self._files:
            return None
        self._files.remove(path)
        self.changed.emit()
        return path

    def remove_at(self, index: int) -> str:
        """Remove and return the entry at ``index`` (0 is most recent)."""
        path = self.get_at(index)
        del self._files[index]
        self.changed.emit()
        return path

    def get_at(self, index: int) -> str:
        """Return the entry at ``index`` without removing it."""
        if index < 0 or index >= len(self._files):
            raise NotFoundError(f"No closed file at index {index}")
        return self._files[index]

    def clear(self):
        """Forget every closed file."""
        had_files = bool(self._files)
        self._files = []
        if had_files:
            self.changed.emit()

    def replace(self, paths: Iterable[str]):
        """Replace the whole history, e.g. with the contents of a save file.

        Empty entries are skipped and only the first occurrence of a
        duplicated path is kept, so the result honours the same invariants
        as a sequence of inserts.
        """
        files: list[str] = []
        for path in paths:
            if path and path not in files:
                files.append(path)
        self._files = files
        self._truncate()
        self.changed.emit()

    def snapshot(self) -> list[str]:
        """Get a copy of the history for display."""
        return self._files.copy()

    def __len__(self) -> int:
        return len(self._files)

    def __contains__(self, path: object) -> bool:
        return path in self._files

    def __iter__(self) -> Iterator[str]:
        return iter(self.snapshot())
