# =============================================================================
# tests/conftest.py — Shared pytest fixtures for Backtrack
# =============================================================================
#
# This file is auto-loaded by pytest before any test module runs.
# It provides:
#   - QApplication lifecycle management (one instance per session)
#   - Settings and home directory isolation for every test
#   - Temporary file helpers for closed files tests
#
# =============================================================================

import os
import sys

import pytest

# Headless runs: no window system needed
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


# ---------------------------------------------------------------------------
# QApplication singleton — PyQt6 requires exactly one per process
# ---------------------------------------------------------------------------


@pytest.fixture(scope="session")
def qapp():
    """
    Create or reuse a QApplication instance for the test session.

    PyQt6 enforces a single QApplication per process. If one already
    exists (e.g., from pytest-qt), we reuse it.
    """
    from PyQt6.QtWidgets import QApplication

    app = QApplication.instance()
    if app is None:
        app = QApplication([*sys.argv, "--platform", "offscreen"])
        app.setApplicationName("Backtrack-Tests")

    yield app


# ---------------------------------------------------------------------------
# Settings isolation — prevent tests from reading/writing real settings
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """
    Redirect QSettings and the home directory to a temp directory.

    The default closed files save path lives under the home directory, so
    both are redirected to keep tests away from real user data.
    """
    from PyQt6.QtCore import QSettings

    QSettings.setDefaultFormat(QSettings.Format.IniFormat)
    QSettings.setPath(
        QSettings.Format.IniFormat,
        QSettings.Scope.UserScope,
        str(tmp_path / "settings"),
    )
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))

    # Start every test from empty settings
    QSettings("Backtrack", "Editor").clear()


# ---------------------------------------------------------------------------
# Closed files helpers
# ---------------------------------------------------------------------------


@pytest.fixture
def save_file(tmp_path):
    """Path for a closed files save file (not created)."""
    return tmp_path / "state" / "closed-files"


@pytest.fixture
def make_files(tmp_path):
    """
    Factory fixture creating text files on disk.

    Usage:
        def test_something(make_files):
            a, b = make_files("a.txt", "b.txt")
    """

    def _factory(*names: str) -> list[str]:
        docs = tmp_path / "docs"
        docs.mkdir(exist_ok=True)
        paths = []
        for name in names:
            path = docs / name
            path.write_text(f"contents of {name}\n", encoding="utf-8")
            paths.append(str(path))
        return paths

    return _factory
