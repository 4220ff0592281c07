"""
Lifecycle controller - connects the closed files history to editor events.
"""

import logging
from enum import Enum, auto

from PyQt6.QtCore import QObject, pyqtSignal

from core.closed_files import ClosedFilesHistory, normalize_path
from core.errors import PersistenceParseError
from core.persistence import load_history, save_history
from core.recent_files import RecentFilesManager
from core.settings import SettingsManager

logger = logging.getLogger(__name__)


class EditorEvents(QObject):
    """Notifications a host editor emits for the closed files history.

    A host adapts its own buffer/tab system by emitting these signals:
    ``buffer_closed`` with the buffer's file path (or None for an unsaved
    buffer), ``file_opened`` for every file that becomes open however it was
    opened, and ``about_to_exit`` right before the process shuts down.
    """

    buffer_closed = pyqtSignal(object)
    file_opened = pyqtSignal(str)
    about_to_exit = pyqtSignal()


class ControllerState(Enum):
    STOPPED = auto()
    RUNNING = auto()


class ClosedFilesController(QObject):
    """Loads, records and saves the closed files history.

    While running, closed buffers are recorded, opened files are dropped from
    the history and the history is saved when the editor exits. Problems with
    the save file never raise; they are reported through ``warning``.
    """

    # User-visible, non-fatal problem (e.g. save file could not be written)
    warning = pyqtSignal(str)

    def __init__(
        self,
        history: ClosedFilesHistory,
        events: EditorEvents,
        settings: SettingsManager | None = None,
        recent_files: RecentFilesManager | None = None,
        parent=None,
    ):
        super().__init__(parent)
        self.history = history
        self.events = events
        self.settings = settings or SettingsManager()
        self.recent_files = recent_files
        self._state = ControllerState.STOPPED

    @property
    def state(self) -> ControllerState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state is ControllerState.RUNNING

    @property
    def save_path(self) -> str:
        return self.settings.get_save_path()

    def start(self):
        """Load the saved history and start listening to editor events."""
        if self.is_running:
            return

        self.history.max_saved_items = self.settings.get_max_saved_items()
        self.reload()

        self.events.buffer_closed.connect(self.on_buffer_closed)
        self.events.file_opened.connect(self.on_file_opened)
        self.events.about_to_exit.connect(self.on_about_to_exit)

        if self.recent_files is not None and self.settings.get_seed_recent_files():
            self._seed_recent_files()

        self._state = ControllerState.RUNNING
        logger.info("Closed files history started with %d entries", len(self.history))

    def stop(self):
        """Stop listening to editor events and save the history."""
        if not self.is_running:
            return

        self.events.buffer_closed.disconnect(self.on_buffer_closed)
        self.events.file_opened.disconnect(self.on_file_opened)
        self.events.about_to_exit.disconnect(self.on_about_to_exit)

        self.save()
        self._state = ControllerState.STOPPED
        logger.info("Closed files history stopped")

    def reload(self):
        """Replace the in-memory history with the contents of the save file.

        A corrupt save file is reported and the history starts empty; the
        file itself is left untouched until the next save.
        """
        try:
            paths = load_history(self.save_path)
        except PersistenceParseError as e:
            logger.warning("Ignoring corrupt closed files list: %s", e)
            self.warning.emit(f"Closed files list is corrupt and was not loaded: {e}")
            paths = []
        self.history.replace(paths)

    def save(self) -> bool:
        """Save the history. Returns False (and warns) if it could not be written."""
        error = save_history(self.history.snapshot(), self.save_path)
        if error:
            self.warning.emit(error)
            return False
        return True

    def _seed_recent_files(self):
        if not self.recent_files.is_empty():
            return
        added = self.recent_files.seed(self.history.snapshot())
        if added:
            logger.debug("Seeded %d recent files from closed files", added)

    # Options
    def set_save_path(self, path: str):
        """Change the save file; a running history reloads from it at once."""
        self.settings.set_save_path(path)
        if self.is_running:
            self.reload()

    def set_max_saved_items(self, count: int | None):
        """Change the history cap, dropping the oldest entries if needed."""
        self.settings.set_max_saved_items(count)
        self.history.max_saved_items = self.settings.get_max_saved_items()

    def set_seed_recent_files(self, enabled: bool):
        self.settings.set_seed_recent_files(enabled)

    # Editor events
    def on_buffer_closed(self, path: str | None):
        """Record a closed buffer that was visiting a file."""
        if not path:
            return
        self.history.insert(normalize_path(path))

    def on_file_opened(self, path: str):
        """An open file is not "recently closed" any more."""
        if not path:
            return
        self.history.remove(normalize_path(path))

    def on_about_to_exit(self):
        self.save()
