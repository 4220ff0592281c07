# =============================================================================
# tests/test_persistence.py — Tests for the closed files save file format
# =============================================================================

import logging
from datetime import datetime

import pytest

from core.errors import PersistenceParseError, PersistenceWriteError
from core.persistence import (
    dump_history,
    escape_path,
    load_history,
    parse_history,
    save_history,
    write_history,
)

# ---------------------------------------------------------------------------
# Format
# ---------------------------------------------------------------------------


class TestDump:
    """Tests for the generated text."""

    def test_header_has_timestamp(self):
        text = dump_history(["/a"], timestamp=datetime(2026, 10, 18, 20, 21, 0))
        first_line = text.splitlines()[0]
        assert first_line == ";;; Automatically generated by Backtrack on 2026-10-18 20:21:00."

    def test_one_record_per_line_in_order(self):
        text = dump_history(["/b", "/a"])
        lines = text.splitlines()
        start = lines.index("(closed-files")
        assert lines[start + 1 : start + 4] == [' "/b"', ' "/a"', " )"]

    def test_has_trailer(self):
        text = dump_history([])
        assert text.rstrip().endswith(";; End:")

    def test_escapes_special_characters(self):
        assert escape_path('/with "quote"') == '"/with \\"quote\\""'
        assert escape_path("/back\\slash") == '"/back\\\\slash"'
        assert escape_path("/new\nline") == '"/new\\nline"'
        assert escape_path("/bell\x07") == '"/bell\\u0007"'

    def test_non_ascii_written_as_is(self):
        assert escape_path("/home/zoë/naïve.txt") == '"/home/zoë/naïve.txt"'


class TestRoundTrip:
    """parse_history(dump_history(paths)) gives the same paths back."""

    @pytest.mark.parametrize(
        "paths",
        [
            [],
            ["/home/me/notes.md"],
            ["/c", "/b", "/a"],
            ['/tmp/with "quotes".txt', "/tmp/new\nline", "/tmp/tab\there"],
            ["C:\\Users\\me\\file.txt", "/tmp/semi;colon (paren).txt"],
            ["/tmp/\r\x00\x1f\x7f", "/home/zoë/日本語.txt"],
        ],
    )
    def test_round_trip(self, paths):
        assert parse_history(dump_history(paths)) == paths

    def test_round_trip_through_disk(self, save_file):
        paths = ['/x/"q"', "/y/multi\nline", "/z/plain"]
        write_history(paths, save_file)
        assert load_history(save_file) == paths


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


class TestParse:
    """Tests for the restrictive parser."""

    def test_accepts_literal_newline_in_string(self):
        assert parse_history('(closed-files "/a\nb")') == ["/a\nb"]

    def test_ignores_comments_and_whitespace(self):
        text = ';; comment\n\n  (closed-files ; inline\n "/a"\n\n "/b" )'
        assert parse_history(text) == ["/a", "/b"]

    def test_ignores_unknown_trailing_content(self):
        text = '(closed-files "/a")\n(future-section 1 2 3)\nanything at all'
        assert parse_history(text) == ["/a"]

    @pytest.mark.parametrize(
        "text",
        [
            "",
            ";; only a comment\n",
            '"/a"',
            "(setq closed-files '(\"/a\"))",
            '(other-list "/a")',
            '(closed-files "/a" 42)',
            '(closed-files "/a" (nested))',
            '(closed-files "/a"',
            '(closed-files "/a)',
            '(closed-files "/bad\\q")',
        ],
    )
    def test_rejects_malformed(self, text):
        with pytest.raises(PersistenceParseError):
            parse_history(text)

    def test_error_reports_line(self):
        text = ";;; header\n\n(closed-files\n \"/a\"\n bogus\n )\n"
        with pytest.raises(PersistenceParseError) as exc_info:
            parse_history(text, source="closed-files")
        assert exc_info.value.line == 5
        assert "line 5" in str(exc_info.value)
        assert "closed-files" in str(exc_info.value)

    def test_never_evaluates_content(self):
        with pytest.raises(PersistenceParseError):
            parse_history('(closed-files __import__("os"))')


# ---------------------------------------------------------------------------
# Loading and saving
# ---------------------------------------------------------------------------


class TestLoad:
    def test_missing_file_is_empty(self, tmp_path):
        assert load_history(tmp_path / "does-not-exist") == []

    def test_directory_is_empty(self, tmp_path):
        assert load_history(tmp_path) == []

    def test_undecodable_file_is_corrupt(self, tmp_path):
        path = tmp_path / "binary"
        path.write_bytes(b'(closed-files "/a\xff")')
        with pytest.raises(PersistenceParseError) as exc_info:
            load_history(path)
        assert exc_info.value.path == str(path)
        assert "UTF-8" in str(exc_info.value)

    def test_corrupt_file_raises(self, tmp_path):
        path = tmp_path / "corrupt"
        path.write_text("(closed-files \"/a\" oops", encoding="utf-8")
        with pytest.raises(PersistenceParseError) as exc_info:
            load_history(path)
        assert exc_info.value.path == str(path)


class TestSave:
    def test_creates_parent_directories(self, save_file):
        assert save_history(["/a"], save_file) is None
        assert save_file.exists()
        assert '"/a"' in save_file.read_text(encoding="utf-8")

    def test_overwrites_previous_contents(self, save_file):
        save_history(["/a", "/b"], save_file)
        save_history(["/c"], save_file)
        assert load_history(save_file) == ["/c"]

    def test_write_error_raises_from_write_history(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory", encoding="utf-8")
        with pytest.raises(PersistenceWriteError):
            write_history(["/a"], blocker / "closed-files")

    def test_save_history_reports_instead_of_raising(self, tmp_path, caplog):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory", encoding="utf-8")

        with caplog.at_level(logging.WARNING, logger="core.persistence"):
            error = save_history(["/a"], blocker / "closed-files")

        assert error is not None
        assert "Could not save closed files" in error
        assert any("Could not save closed files" in r.getMessage() for r in caplog.records)

    def test_undecodable_filename_survives_save(self, save_file):
        # os.fsdecode turns undecodable filename bytes into lone surrogates
        paths = ["/good", "/bad\udcff", "/other"]
        assert save_history(paths, save_file) is None
        assert load_history(save_file) == paths
        assert "\\udcff" in save_file.read_text(encoding="utf-8")
