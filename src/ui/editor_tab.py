"""
Editor tab widget - handles individual document editing.
"""

import logging
from pathlib import Path

from PyQt6.QtGui import QFont, QFontDatabase
from PyQt6.QtWidgets import QPlainTextEdit

logger = logging.getLogger(__name__)


class EditorTab(QPlainTextEdit):
    """A single editor tab for plain text editing."""

    def __init__(self, parent=None):
        super().__init__(parent)

        font = QFontDatabase.systemFont(QFontDatabase.SystemFont.FixedFont)
        if font.pointSize() <= 0:
            font = QFont(font.family(), 12)
        self.setFont(font)
        self.setLineWrapMode(QPlainTextEdit.LineWrapMode.NoWrap)

        self.filepath: str | None = None

    @property
    def display_name(self) -> str:
        """Tab title for this document."""
        if self.filepath:
            return Path(self.filepath).name
        return "Untitled"

    def load_file(self, filepath: str) -> str | None:
        """Load content from a file. Returns an error message on failure."""
        try:
            try:
                with open(filepath, encoding="utf-8") as f:
                    text = f.read()
            except UnicodeDecodeError:
                # Try with system default encoding
                with open(filepath) as f:
                    text = f.read()
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Could not open %s: %s", filepath, e)
            return f"Could not open {filepath}:\n{e}"

        self.filepath = filepath
        self.setPlainText(text)
        # Mark as unmodified after loading
        self.document().setModified(False)
        return None

    def save_file(self, filepath: str | None = None) -> str | None:
        """Save content to a file. Returns an error message on failure."""
        target = filepath or self.filepath
        if not target:
            return "No file name given"

        try:
            with open(target, "w", encoding="utf-8") as f:
                f.write(self.toPlainText())
        except OSError as e:
            logger.warning("Could not save %s: %s", target, e)
            return f"Could not save {target}:\n{e}"

        self.filepath = target
        # Mark document as unmodified after successful save
        self.document().setModified(False)
        return None
