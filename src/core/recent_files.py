"""
Recent files manager - tracks and persists recently opened files.

This is the editor's own "Recent" list. It is separate from the closed
files history, which may seed it when it is empty.
"""

from collections.abc import Iterable
from pathlib import Path

from PyQt6.QtCore import QObject, QSettings, pyqtSignal


class RecentFilesManager(QObject):
    """Manages a list of recently opened files."""

    # Signal emitted when the recent files list changes
    files_changed = pyqtSignal()

    MAX_RECENT_FILES = 10

    def __init__(self, parent=None):
        super().__init__(parent)
        self.settings = QSettings("Backtrack", "Editor")
        self._recent_files: list[str] = []
        self._load()

    def _load(self):
        """Load recent files from settings."""
        files = self.settings.value("recent_files", [])
        if isinstance(files, str):
            # QSettings returns a bare string for single-item lists
            files = [files]
        if files:
            # Filter out files that no longer exist
            self._recent_files = [f for f in files if Path(f).exists()]
            self._save()
        else:
            self._recent_files = []

    def _save(self):
        """Save recent files to settings."""
        self.settings.setValue("recent_files", self._recent_files)

    def add_file(self, filepath: str):
        """Add a file to the top of the recent files list."""
        filepath = str(Path(filepath).resolve())

        if filepath in self._recent_files:
            self._recent_files.remove(filepath)
        self._recent_files.insert(0, filepath)
        self._recent_files = self._recent_files[: self.MAX_RECENT_FILES]

        self._save()
        self.files_changed.emit()

    def remove_file(self, filepath: str):
        """Remove a file from the recent files list."""
        filepath = str(Path(filepath).resolve())
        if filepath in self._recent_files:
            self._recent_files.remove(filepath)
            self._save()
            self.files_changed.emit()

    def seed(self, filepaths: Iterable[str]) -> int:
        """Fill an empty recent files list. Returns the number of files added.

        Does nothing when the list already has entries. Files that no longer
        exist are skipped.
        """
        if self._recent_files:
            return 0

        for filepath in filepaths:
            if len(self._recent_files) >= self.MAX_RECENT_FILES:
                break
            if not Path(filepath).exists():
                continue
            filepath = str(Path(filepath).resolve())
            if filepath not in self._recent_files:
                self._recent_files.append(filepath)

        if self._recent_files:
            self._save()
            self.files_changed.emit()
        return len(self._recent_files)

    def clear(self):
        """Clear all recent files."""
        self._recent_files = []
        self._save()
        self.files_changed.emit()

    def is_empty(self) -> bool:
        """Check whether the recent files list has no entries."""
        return not self._recent_files

    def get_files(self) -> list[str]:
        """Get the list of recent files."""
        return self._recent_files.copy()
