"""
Application setup and logging configuration.
"""

import logging
import os
import sys

from PyQt6.QtCore import QSettings, QtMsgType, qInstallMessageHandler
from PyQt6.QtWidgets import QApplication

from core.settings import DEFAULT_MAX_SAVED_ITEMS
from ui.main_window import MainWindow

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_QT_LOG_LEVELS = {
    QtMsgType.QtDebugMsg: logging.DEBUG,
    QtMsgType.QtInfoMsg: logging.INFO,
    QtMsgType.QtWarningMsg: logging.WARNING,
    QtMsgType.QtCriticalMsg: logging.ERROR,
    QtMsgType.QtFatalMsg: logging.CRITICAL,
}


def setup_logging():
    """Log to stderr; the level comes from BACKTRACK_LOG_LEVEL (default INFO)."""
    level_name = os.environ.get("BACKTRACK_LOG_LEVEL", "INFO").upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT)


def qt_message_handler(msg_type: QtMsgType, context, message: str):
    """Route Qt's own messages into the log."""
    logging.getLogger("qt").log(_QT_LOG_LEVELS.get(msg_type, logging.INFO), "%s", message)


def fix_corrupted_settings():
    """Fix any corrupted settings values."""
    settings = QSettings("Backtrack", "Editor")

    max_items = settings.value("closed_files_max_saved_items")
    if max_items is not None:
        try:
            int(max_items)
        except (ValueError, TypeError):
            logger.warning("Resetting invalid closed_files_max_saved_items %r", max_items)
            settings.setValue("closed_files_max_saved_items", DEFAULT_MAX_SAVED_ITEMS)


def run_app() -> int:
    """Initialize and run the application."""
    setup_logging()
    qInstallMessageHandler(qt_message_handler)

    app = QApplication(sys.argv)
    app.setApplicationName("Backtrack")
    app.setOrganizationName("Backtrack")

    fix_corrupted_settings()

    window = MainWindow()
    for filepath in app.arguments()[1:]:
        window._open_file_path(os.path.abspath(filepath))
    window.show()

    return app.exec()
