"""
Settings dialog for the closed files history.
"""

from PyQt6.QtCore import pyqtSignal
from PyQt6.QtWidgets import (
    QCheckBox,
    QDialog,
    QDialogButtonBox,
    QFileDialog,
    QFormLayout,
    QGroupBox,
    QHBoxLayout,
    QLineEdit,
    QPushButton,
    QSpinBox,
    QVBoxLayout,
)

from core.lifecycle import ClosedFilesController
from core.settings import DEFAULT_MAX_SAVED_ITEMS

MAX_SAVED_ITEMS_LIMIT = 999


class SettingsDialog(QDialog):
    """Dialog for closed files settings.

    Changes are applied through the controller so that a new save path is
    loaded immediately and a lower cap trims the history right away.
    """

    settings_changed = pyqtSignal()

    def __init__(self, controller: ClosedFilesController, parent=None):
        super().__init__(parent)
        self.controller = controller
        self.settings = controller.settings
        self.setWindowTitle("Settings")
        self.setMinimumWidth(480)

        self._setup_ui()
        self._load_settings()

    def _setup_ui(self):
        """Set up the dialog UI."""
        layout = QVBoxLayout(self)
        layout.setSpacing(16)

        group = QGroupBox("Closed Files")
        form = QFormLayout(group)

        # History cap
        cap_row = QHBoxLayout()
        self.max_items_spin = QSpinBox()
        self.max_items_spin.setRange(0, MAX_SAVED_ITEMS_LIMIT)
        cap_row.addWidget(self.max_items_spin)
        self.unlimited_checkbox = QCheckBox("Unlimited")
        self.unlimited_checkbox.toggled.connect(self.max_items_spin.setDisabled)
        cap_row.addWidget(self.unlimited_checkbox)
        cap_row.addStretch()
        form.addRow("Files to remember:", cap_row)

        # Save file location
        path_row = QHBoxLayout()
        self.save_path_edit = QLineEdit()
        path_row.addWidget(self.save_path_edit)
        self.browse_btn = QPushButton("Browse…")
        self.browse_btn.clicked.connect(self._browse_save_path)
        path_row.addWidget(self.browse_btn)
        form.addRow("Save file:", path_row)

        self.seed_checkbox = QCheckBox("Fill an empty Recent menu from closed files on startup")
        form.addRow(self.seed_checkbox)

        layout.addWidget(group)

        buttons = QDialogButtonBox(
            QDialogButtonBox.StandardButton.Ok | QDialogButtonBox.StandardButton.Cancel
        )
        buttons.accepted.connect(self._save_and_close)
        buttons.rejected.connect(self.reject)
        layout.addWidget(buttons)

    def _load_settings(self):
        """Load current settings into the UI."""
        max_items = self.settings.get_max_saved_items()
        self.unlimited_checkbox.setChecked(max_items is None)
        self.max_items_spin.setValue(
            DEFAULT_MAX_SAVED_ITEMS if max_items is None else min(max_items, MAX_SAVED_ITEMS_LIMIT)
        )
        self.max_items_spin.setDisabled(max_items is None)
        self.save_path_edit.setText(self.settings.get_save_path())
        self.seed_checkbox.setChecked(self.settings.get_seed_recent_files())

    def _browse_save_path(self):
        filepath, _ = QFileDialog.getSaveFileName(
            self, "Closed Files Save File", self.save_path_edit.text()
        )
        if filepath:
            self.save_path_edit.setText(filepath)

    def _apply_settings(self):
        """Apply settings without closing."""
        if self.unlimited_checkbox.isChecked():
            self.controller.set_max_saved_items(None)
        else:
            self.controller.set_max_saved_items(self.max_items_spin.value())

        save_path = self.save_path_edit.text().strip()
        if save_path and save_path != self.settings.get_save_path():
            self.controller.set_save_path(save_path)

        self.controller.set_seed_recent_files(self.seed_checkbox.isChecked())
        self.settings_changed.emit()

    def _save_and_close(self):
        """Save settings and close dialog."""
        self._apply_settings()
        self.accept()
