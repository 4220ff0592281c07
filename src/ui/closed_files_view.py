"""
Closed files dialog - browse, reopen and forget recently closed files.
"""

from PyQt6.QtCore import QEvent, Qt
from PyQt6.QtWidgets import (
    QDialog,
    QLabel,
    QListWidget,
    QListWidgetItem,
    QVBoxLayout,
)

from core.closed_files import display_name
from core.commands import ClosedFilesCommands

# Only the first ten entries get a digit shortcut, whatever the history cap
DIGIT_SHORTCUTS = 10

HINT_TEXT = "0-9/Enter: open   D: forget   F: forget all   Q/Esc: close"


class ClosedFilesDialog(QDialog):
    """Interactive list of closed files.

    Keys: 0-9 open the entry with that number, Enter opens the selected
    entry, D or Delete forgets it, F forgets every entry and Q or Escape
    closes the dialog. The dialog closes after a file is opened.
    """

    def __init__(self, commands: ClosedFilesCommands, parent=None):
        super().__init__(parent)
        self.commands = commands
        self.setWindowTitle("Closed Files")
        self.setMinimumSize(520, 320)

        layout = QVBoxLayout(self)

        self.list_widget = QListWidget(self)
        self.list_widget.itemActivated.connect(self._on_item_activated)
        self.list_widget.installEventFilter(self)
        layout.addWidget(self.list_widget)

        self.empty_label = QLabel("No closed files", self)
        self.empty_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self.empty_label)

        self.hint_label = QLabel(HINT_TEXT, self)
        layout.addWidget(self.hint_label)

        self.commands.history.changed.connect(self.refresh)
        self.refresh()

    def refresh(self):
        """Rebuild the list from the history, keeping the selected row."""
        row = self.list_widget.currentRow()
        self.list_widget.clear()

        files = self.commands.list_files()
        for index, filepath in enumerate(files):
            prefix = f"[{index}]" if index < DIGIT_SHORTCUTS else "   "
            item = QListWidgetItem(f"{prefix}  {display_name(filepath)}")
            item.setData(Qt.ItemDataRole.UserRole, filepath)
            item.setToolTip(filepath)
            self.list_widget.addItem(item)

        self.empty_label.setVisible(not files)
        self.list_widget.setVisible(bool(files))
        if files:
            self.list_widget.setCurrentRow(min(max(row, 0), len(files) - 1))

    def selected_path(self) -> str | None:
        """Path of the selected entry, if any."""
        item = self.list_widget.currentItem()
        if item is None:
            return None
        return item.data(Qt.ItemDataRole.UserRole)

    def open_index(self, index: int) -> bool:
        """Open the entry at a 0-based list index."""
        if self.commands.open_nth(index + 1):
            self.accept()
            return True
        return False

    def open_selected(self) -> bool:
        row = self.list_widget.currentRow()
        if row < 0:
            return False
        return self.open_index(row)

    def remove_selected(self):
        path = self.selected_path()
        if path:
            self.commands.remove(path)

    def _on_item_activated(self, item: QListWidgetItem):
        self.open_index(self.list_widget.row(item))

    def _handle_key(self, event) -> bool:
        """Run the command bound to a key press. Returns True if handled."""
        key = event.key()
        text = event.text().lower()

        if len(text) == 1 and text in "0123456789":
            index = int(text)
            if index < min(DIGIT_SHORTCUTS, self.list_widget.count()):
                self.open_index(index)
            return True
        if key in (Qt.Key.Key_Return, Qt.Key.Key_Enter):
            self.open_selected()
            return True
        if text == "d" or key == Qt.Key.Key_Delete:
            self.remove_selected()
            return True
        if text == "f":
            self.commands.flush()
            return True
        if text == "q" or key == Qt.Key.Key_Escape:
            self.reject()
            return True
        return False

    def eventFilter(self, obj: object, event: QEvent) -> bool:
        """Take command keys before the list uses them for type-ahead search."""
        if obj is self.list_widget and event.type() == QEvent.Type.KeyPress:
            if self._handle_key(event):
                return True
        return super().eventFilter(obj, event)

    def keyPressEvent(self, event):
        if not self._handle_key(event):
            super().keyPressEvent(event)
