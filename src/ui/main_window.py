"""
Main application window with tabs, menus and the closed files history.
"""

import logging
from pathlib import Path

from PyQt6.QtGui import QAction, QKeySequence
from PyQt6.QtWidgets import (
    QApplication,
    QFileDialog,
    QMainWindow,
    QMessageBox,
    QTabWidget,
)

from core.closed_files import ClosedFilesHistory, display_name
from core.commands import ClosedFilesCommands
from core.lifecycle import ClosedFilesController, EditorEvents
from core.recent_files import RecentFilesManager
from core.settings import SettingsManager
from ui.closed_files_view import ClosedFilesDialog
from ui.editor_tab import EditorTab
from ui.settings_dialog import SettingsDialog

logger = logging.getLogger(__name__)

# Closed files listed directly in the File menu
CLOSED_MENU_ITEMS = 9

STATUS_TIMEOUT_MS = 5000


class MainWindow(QMainWindow):
    """Main application window.

    The window is the host side of the closed files history: closing a tab
    emits ``buffer_closed``, every file open emits ``file_opened`` and
    application shutdown emits ``about_to_exit`` on ``editor_events``.
    """

    def __init__(self, parent=None):
        super().__init__(parent)
        self.settings_manager = SettingsManager()
        self.recent_files = RecentFilesManager(self)

        self.editor_events = EditorEvents(self)
        self.closed_files = ClosedFilesHistory(parent=self)
        self.closed_files_ctrl = ClosedFilesController(
            self.closed_files,
            self.editor_events,
            self.settings_manager,
            self.recent_files,
            parent=self,
        )
        self.closed_files_ctrl.warning.connect(self.show_message)
        self.closed_file_commands = ClosedFilesCommands(
            self.closed_files, self._open_file_path, self.show_message
        )

        self._setup_ui()
        self._setup_menus()
        self._restore_geometry()

        self.recent_files.files_changed.connect(self._update_recent_menu)
        self.closed_files.changed.connect(self._update_closed_menu)

        app = QApplication.instance()
        if app is not None:
            app.aboutToQuit.connect(self.editor_events.about_to_exit)

        self.closed_files_ctrl.start()
        self._update_closed_menu()
        self.new_tab()

    def _setup_ui(self):
        """Initialize the main UI components."""
        self.setWindowTitle("Backtrack")
        self.setMinimumSize(300, 200)

        self.tab_widget = QTabWidget(self)
        self.tab_widget.setTabsClosable(True)
        self.tab_widget.setMovable(True)
        self.tab_widget.tabCloseRequested.connect(self.close_tab)
        self.tab_widget.currentChanged.connect(self._on_tab_changed)
        self.setCentralWidget(self.tab_widget)

        self.statusBar()

    def _setup_menus(self):
        """Create the menu bar and menus."""
        file_menu = self.menuBar().addMenu(self.tr("&File"))

        new_action = QAction(self.tr("New tab"), self)
        new_action.setShortcut(QKeySequence.StandardKey.New)
        new_action.triggered.connect(self.new_tab)
        file_menu.addAction(new_action)

        open_action = QAction(self.tr("Open"), self)
        open_action.setShortcut(QKeySequence.StandardKey.Open)
        open_action.triggered.connect(self.open_file)
        file_menu.addAction(open_action)

        # Recent files submenu
        self.recent_menu = file_menu.addMenu(self.tr("Recent"))
        self._update_recent_menu()

        file_menu.addSeparator()

        self.reopen_action = QAction(self.tr("Reopen Closed File"), self)
        self.reopen_action.setShortcut(QKeySequence("Ctrl+Shift+T"))
        self.reopen_action.triggered.connect(self.reopen_last_closed)
        file_menu.addAction(self.reopen_action)

        # Recently closed submenu
        self.closed_menu = file_menu.addMenu(self.tr("Recently Closed"))

        closed_list_action = QAction(self.tr("Closed Files…"), self)
        closed_list_action.setShortcut(QKeySequence("Ctrl+Shift+H"))
        closed_list_action.triggered.connect(self.show_closed_files)
        file_menu.addAction(closed_list_action)

        file_menu.addSeparator()

        save_action = QAction(self.tr("Save"), self)
        save_action.setShortcut(QKeySequence.StandardKey.Save)
        save_action.triggered.connect(self.save_file)
        file_menu.addAction(save_action)

        save_as_action = QAction(self.tr("Save as"), self)
        save_as_action.setShortcut(QKeySequence("Ctrl+Shift+S"))
        save_as_action.triggered.connect(self.save_file_as)
        file_menu.addAction(save_as_action)

        close_tab_action = QAction(self.tr("Close tab"), self)
        close_tab_action.setShortcut(QKeySequence.StandardKey.Close)
        close_tab_action.triggered.connect(
            lambda: self.close_tab(self.tab_widget.currentIndex())
        )
        file_menu.addAction(close_tab_action)

        file_menu.addSeparator()

        settings_action = QAction(self.tr("Settings…"), self)
        settings_action.triggered.connect(self._show_settings)
        file_menu.addAction(settings_action)

        exit_action = QAction(self.tr("Exit"), self)
        exit_action.setShortcut(QKeySequence("Ctrl+Q"))
        exit_action.triggered.connect(self.close)
        file_menu.addAction(exit_action)

    def _restore_geometry(self):
        """Restore window geometry from settings."""
        geometry = self.settings_manager.get_geometry()
        if not geometry or not self.restoreGeometry(geometry):
            self.resize(1000, 700)

    def _on_tab_changed(self, index: int):
        self._update_window_title()

    def _update_window_title(self):
        editor = self.current_editor()
        if editor and editor.filepath:
            self.setWindowTitle(f"{editor.display_name} - Backtrack")
        else:
            self.setWindowTitle("Backtrack")

    def show_message(self, message: str):
        """Show a non-fatal message to the user in the status bar."""
        logger.info("%s", message)
        self.statusBar().showMessage(message, STATUS_TIMEOUT_MS)

    # Recent files menu
    def _update_recent_menu(self):
        """Update the recent files menu."""
        self.recent_menu.clear()

        files = self.recent_files.get_files()
        if files:
            for i, filepath in enumerate(files):
                label = display_name(filepath)
                # Add number shortcut for first 9 files
                if i < 9:
                    label = f"&{i + 1}  {label}"

                action = QAction(label, self)
                action.setData(filepath)
                action.triggered.connect(self._open_recent_file)
                self.recent_menu.addAction(action)

            self.recent_menu.addSeparator()

            clear_action = QAction(self.tr("Clear Recent"), self)
            clear_action.triggered.connect(self.recent_files.clear)
            self.recent_menu.addAction(clear_action)
        else:
            no_recent = QAction(self.tr("No recent files"), self)
            no_recent.setEnabled(False)
            self.recent_menu.addAction(no_recent)

    def _open_recent_file(self):
        """Open a file from the recent files menu."""
        action = self.sender()
        if action:
            filepath = action.data()
            if Path(filepath).exists():
                self._open_file_path(filepath)
            else:
                # File no longer exists, remove from recent
                self.recent_files.remove_file(filepath)
                self.show_message(f"File no longer exists: {filepath}")

    # Closed files menu
    def _update_closed_menu(self):
        """Update the recently closed menu."""
        self.closed_menu.clear()

        files = self.closed_file_commands.list_files()
        self.reopen_action.setEnabled(bool(files))
        if not files:
            no_closed = QAction(self.tr("No closed files"), self)
            no_closed.setEnabled(False)
            self.closed_menu.addAction(no_closed)
            return

        for i, filepath in enumerate(files[:CLOSED_MENU_ITEMS]):
            action = QAction(f"&{i + 1}  {display_name(filepath)}", self)
            action.setData(i + 1)
            action.triggered.connect(self._open_closed_file)
            self.closed_menu.addAction(action)

        self.closed_menu.addSeparator()

        clear_action = QAction(self.tr("Clear Closed Files"), self)
        clear_action.triggered.connect(self.closed_file_commands.flush)
        self.closed_menu.addAction(clear_action)

    def _open_closed_file(self):
        """Open a file from the recently closed menu."""
        action = self.sender()
        if action:
            self.closed_file_commands.open_nth(action.data())

    def reopen_last_closed(self):
        """Reopen the most recently closed file."""
        return self.closed_file_commands.open_nth(1)

    def show_closed_files(self):
        """Show the closed files list."""
        dialog = ClosedFilesDialog(self.closed_file_commands, self)
        dialog.exec()
        dialog.deleteLater()

    def _show_settings(self):
        dialog = SettingsDialog(self.closed_files_ctrl, self)
        dialog.settings_changed.connect(self._on_settings_changed)
        dialog.exec()
        dialog.deleteLater()

    def _on_settings_changed(self):
        self._update_closed_menu()
        self.show_message(self.tr("Closed files settings saved"))

    # Tab management
    def new_tab(self) -> EditorTab:
        """Create a new editor tab."""
        editor = EditorTab(parent=self.tab_widget)
        index = self.tab_widget.addTab(editor, self.tr("Untitled"))
        self.tab_widget.setCurrentIndex(index)
        # Track document modifications for unsaved indicator
        editor.document().modificationChanged.connect(
            lambda modified: self._on_document_modified(editor, modified)
        )
        return editor

    def _on_document_modified(self, editor: EditorTab, modified: bool):
        """Update tab title to show unsaved indicator."""
        index = self.tab_widget.indexOf(editor)
        if index == -1:
            return
        title = editor.display_name
        self.tab_widget.setTabText(index, f"{title}*" if modified else title)

    def _find_tab(self, filepath: str) -> int:
        """Index of the tab showing ``filepath``, or -1."""
        target = Path(filepath).resolve()
        for i in range(self.tab_widget.count()):
            editor = self.tab_widget.widget(i)
            if isinstance(editor, EditorTab) and editor.filepath:
                if Path(editor.filepath).resolve() == target:
                    return i
        return -1

    def _prompt_save_changes(self, editor: EditorTab) -> bool:
        """Prompt user to save changes. Returns True if okay to close."""
        result = QMessageBox.warning(
            self,
            self.tr("Unsaved Changes"),
            self.tr(
                f"'{editor.display_name}' has unsaved changes.\n\n"
                "Do you want to save before closing?"
            ),
            QMessageBox.StandardButton.Save
            | QMessageBox.StandardButton.Discard
            | QMessageBox.StandardButton.Cancel,
            QMessageBox.StandardButton.Save,
        )

        if result == QMessageBox.StandardButton.Save:
            if editor.filepath:
                error = editor.save_file()
                if error:
                    QMessageBox.warning(self, self.tr("Save File"), error)
                    return False
            else:
                self.tab_widget.setCurrentWidget(editor)
                self.save_file_as()
            return not editor.document().isModified()

        # Discard returns True (ok to close), Cancel returns False
        return result == QMessageBox.StandardButton.Discard

    def close_tab(self, index: int):
        """Close the tab at the given index and remember its file."""
        editor = self.tab_widget.widget(index)
        if editor is None:
            return

        if editor.document().isModified() and not self._prompt_save_changes(editor):
            return  # User cancelled

        filepath = editor.filepath
        self.tab_widget.removeTab(index)
        editor.deleteLater()
        self.editor_events.buffer_closed.emit(filepath)

        # Create new tab if all tabs closed
        if self.tab_widget.count() == 0:
            self.new_tab()

    def current_editor(self) -> EditorTab | None:
        """Get the current editor tab."""
        return self.tab_widget.currentWidget()

    # File operations
    def open_file(self):
        """Open a file dialog and load the selected file."""
        filepath, _ = QFileDialog.getOpenFileName(
            self,
            self.tr("Open File"),
            "",
            self.tr("All Files (*);;Text Files (*.txt);;Markdown (*.md)"),
        )
        if filepath:
            self._open_file_path(filepath)

    def _open_file_path(self, filepath: str) -> bool:
        """Open a file in a tab. Returns True if the file is now open."""
        existing = self._find_tab(filepath)
        if existing != -1:
            self.tab_widget.setCurrentIndex(existing)
            self.editor_events.file_opened.emit(filepath)
            return True

        # Reuse a blank untitled tab instead of stacking a new one
        editor = self.current_editor()
        reuse = (
            editor is not None
            and not editor.filepath
            and not editor.document().isModified()
            and not editor.toPlainText()
        )
        if not reuse:
            editor = self.new_tab()

        error = editor.load_file(filepath)
        if error:
            if not reuse:
                self.tab_widget.removeTab(self.tab_widget.indexOf(editor))
                editor.deleteLater()
            self.show_message(error.replace("\n", " "))
            return False

        self.tab_widget.setTabText(self.tab_widget.indexOf(editor), editor.display_name)
        self._update_window_title()
        self.recent_files.add_file(filepath)
        self.editor_events.file_opened.emit(filepath)
        return True

    def save_file(self):
        """Save the current file."""
        editor = self.current_editor()
        if editor and editor.filepath:
            error = editor.save_file()
            if error:
                QMessageBox.warning(self, self.tr("Save File"), error)
                return
            self.recent_files.add_file(editor.filepath)
        else:
            self.save_file_as()

    def save_file_as(self):
        """Save the current file with a new name."""
        editor = self.current_editor()
        if not editor:
            return

        filepath, _ = QFileDialog.getSaveFileName(
            self,
            self.tr("Save File"),
            "",
            self.tr("All Files (*);;Text Files (*.txt);;Markdown (*.md)"),
        )
        if filepath:
            error = editor.save_file(filepath)
            if error:
                QMessageBox.warning(self, self.tr("Save File"), error)
                return
            self.tab_widget.setTabText(self.tab_widget.currentIndex(), editor.display_name)
            self._update_window_title()
            self.recent_files.add_file(filepath)
            # The saved file is open now
            self.editor_events.file_opened.emit(filepath)

    def closeEvent(self, event):
        """Save geometry and handle unsaved changes on close."""
        for i in range(self.tab_widget.count()):
            editor = self.tab_widget.widget(i)
            if editor.document().isModified():
                self.tab_widget.setCurrentIndex(i)
                if not self._prompt_save_changes(editor):
                    event.ignore()
                    return

        self.settings_manager.set_geometry(self.saveGeometry())
        self.closed_files_ctrl.save()
        event.accept()
