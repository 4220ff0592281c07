"""
Application settings for the editor and the closed files history.
"""

from pathlib import Path

from PyQt6.QtCore import QSettings

DEFAULT_MAX_SAVED_ITEMS = 20


def default_save_path() -> str:
    """Default location of the closed files save file."""
    return str(Path.home() / ".backtrack" / "closed-files")


class SettingsManager:
    """Manages application settings."""

    def __init__(self):
        self.settings = QSettings("Backtrack", "Editor")

    # Closed files settings
    def get_max_saved_items(self) -> int | None:
        """Get the cap on the closed files history (None means unbounded)."""
        try:
            value = self.settings.value("closed_files_max_saved_items", DEFAULT_MAX_SAVED_ITEMS)
            if value is None:
                return DEFAULT_MAX_SAVED_ITEMS
            value = int(value)
        except (ValueError, TypeError):
            return DEFAULT_MAX_SAVED_ITEMS
        # Negative values are stored for "unbounded"
        if value < 0:
            return None
        return value

    def set_max_saved_items(self, count: int | None):
        """Set the cap on the closed files history (None means unbounded)."""
        value = -1 if count is None else max(0, int(count))
        self.settings.setValue("closed_files_max_saved_items", value)

    def get_save_path(self) -> str:
        """Get the file the closed files history is saved to."""
        value = self.settings.value("closed_files_save_path", "")
        return value or default_save_path()

    def set_save_path(self, path: str):
        """Set the file the closed files history is saved to."""
        if path:
            path = str(Path(path).expanduser().absolute())
        self.settings.setValue("closed_files_save_path", path)

    def get_seed_recent_files(self) -> bool:
        """Get whether an empty recent files list is seeded from closed files."""
        return self.settings.value("closed_files_seed_recent", True, type=bool)

    def set_seed_recent_files(self, enabled: bool):
        """Set whether an empty recent files list is seeded from closed files."""
        self.settings.setValue("closed_files_seed_recent", enabled)

    # Window settings
    def get_geometry(self):
        """Get the saved main window geometry."""
        return self.settings.value("geometry")

    def set_geometry(self, geometry):
        """Save the main window geometry."""
        self.settings.setValue("geometry", geometry)
