"""
Save file format for the closed files history.

The history is stored as a small, human-readable listing::

    ;;; Automatically generated by Backtrack on 2026-10-18 20:21:00.

    (closed-files
     "/home/me/notes.md"
     "/home/me/todo.txt"
     )

    ;; Local Variables:
    ;; coding: utf-8
    ;; End:

Paths are double-quoted strings, most recent first. The file is read back
with a restrictive tokenizer that only understands this layout; it is never
evaluated.
"""

import logging
import re
from collections.abc import Iterable
from datetime import datetime
from pathlib import Path

from core.errors import PersistenceParseError, PersistenceWriteError

logger = logging.getLogger(__name__)

APP_NAME = "Backtrack"
LIST_SYMBOL = "closed-files"

HEADER = ";;; Automatically generated by {app} on {timestamp}.\n"
TRAILER = ";; Local Variables:\n;; coding: utf-8\n;; End:\n"

_SHORT_ESCAPES = {"\\": "\\\\", '"': '\\"', "\n": "\\n", "\r": "\\r", "\t": "\\t"}
_UNESCAPES = {"\\": "\\", '"': '"', "n": "\n", "r": "\r", "t": "\t"}

_NEEDS_ESCAPE = re.compile(r'[\\"\x00-\x1f\x7f\ud800-\udfff]')
_ESCAPE_SEQUENCE = re.compile(r"\\(u[0-9A-Fa-f]{4}|.)", re.DOTALL)

_TOKEN = re.compile(
    r"""
    (?P<space>\s+)
    |(?P<comment>;[^\n]*)
    |(?P<open>\()
    |(?P<close>\))
    |(?P<string>"(?:[^"\\]|\\.)*")
    |(?P<symbol>[^\s;()"]+)
    """,
    re.VERBOSE | re.DOTALL,
)


def escape_path(path: str) -> str:
    """Quote a path so that any character survives a round trip."""

    def _escape(match: re.Match) -> str:
        char = match.group(0)
        return _SHORT_ESCAPES.get(char, f"\\u{ord(char):04x}")

    return '"' + _NEEDS_ESCAPE.sub(_escape, path) + '"'


def unescape_path(token: str) -> str:
    """Decode a quoted string token produced by ``escape_path``."""

    def _unescape(match: re.Match) -> str:
        sequence = match.group(1)
        if sequence in _UNESCAPES:
            return _UNESCAPES[sequence]
        if len(sequence) == 5 and sequence[0] == "u":
            return chr(int(sequence[1:], 16))
        raise PersistenceParseError(f"unknown escape sequence '\\{sequence}'")

    return _ESCAPE_SEQUENCE.sub(_unescape, token[1:-1])


def dump_history(paths: Iterable[str], timestamp: datetime | None = None) -> str:
    """Build the complete save file text for a history."""
    timestamp = timestamp or datetime.now()
    lines = [
        HEADER.format(app=APP_NAME, timestamp=timestamp.strftime("%Y-%m-%d %H:%M:%S")),
        f"({LIST_SYMBOL}",
    ]
    lines.extend(f" {escape_path(path)}" for path in paths)
    lines.append(" )\n")
    lines.append(TRAILER)
    return "\n".join(lines)


def parse_history(text: str, source: str | None = None) -> list[str]:
    """Parse save file text back into an ordered list of paths.

    Anything after the closing parenthesis of the list is ignored.

    Raises:
        PersistenceParseError: The text is not a closed-files listing.
    """
    paths: list[str] = []
    expecting = "open"
    pos = 0
    line = 1

    while pos < len(text):
        match = _TOKEN.match(text, pos)
        if match is None:
            # Only an unterminated string fails to match any token
            raise PersistenceParseError("unterminated string", source, line)

        kind = match.lastgroup
        value = match.group(0)

        if kind not in ("space", "comment"):
            if expecting == "open":
                if kind != "open":
                    raise PersistenceParseError(f"expected '(' but found {value!r}", source, line)
                expecting = "symbol"
            elif expecting == "symbol":
                if kind != "symbol" or value != LIST_SYMBOL:
                    raise PersistenceParseError(
                        f"expected '{LIST_SYMBOL}' but found {value!r}", source, line
                    )
                expecting = "record"
            elif kind == "string":
                try:
                    paths.append(unescape_path(value))
                except PersistenceParseError as e:
                    raise PersistenceParseError(str(e), source, line) from None
            elif kind == "close":
                return paths
            else:
                raise PersistenceParseError(f"unexpected {value!r} in file list", source, line)

        line += value.count("\n")
        pos = match.end()

    if expecting == "open":
        raise PersistenceParseError(f"no ({LIST_SYMBOL} ...) form found", source, line)
    raise PersistenceParseError("unexpected end of file, missing ')'", source, line)


def write_history(paths: Iterable[str], destination: str | Path):
    """Write the history to ``destination`` in a single write.

    Raises:
        PersistenceWriteError: The file could not be written.
    """
    destination = Path(destination)
    try:
        data = dump_history(paths).encode("utf-8")
        destination.parent.mkdir(parents=True, exist_ok=True)
        with open(destination, "wb") as f:
            f.write(data)
    except (OSError, UnicodeError) as e:
        raise PersistenceWriteError(
            f"Could not save closed files to {destination}: {e}", str(destination)
        ) from e


def save_history(paths: Iterable[str], destination: str | Path) -> str | None:
    """Save the history, returning an error message instead of raising."""
    try:
        write_history(paths, destination)
    except PersistenceWriteError as e:
        logger.warning("%s", e)
        return str(e)
    logger.debug("Saved closed files to %s", destination)
    return None


def load_history(source: str | Path) -> list[str]:
    """Load a saved history.

    A missing or unreadable file is a normal first-run state and yields an
    empty list.

    Raises:
        PersistenceParseError: The file exists but is corrupt, including
            content that is not valid UTF-8.
    """
    source = Path(source)
    try:
        with open(source, encoding="utf-8") as f:
            text = f.read()
    except FileNotFoundError:
        logger.debug("No closed files saved at %s", source)
        return []
    except UnicodeDecodeError as e:
        raise PersistenceParseError(f"not valid UTF-8: {e}", str(source)) from e
    except OSError as e:
        logger.warning("Could not read closed files from %s: %s", source, e)
        return []

    return parse_history(text, str(source))
