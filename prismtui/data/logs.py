"""Log file listing and bounded content reads."""

from __future__ import annotations

import gzip
import io
from pathlib import Path

from ..errors import DataLoadError
from .types import LogEntry

MAX_LOG_BYTES = 10 * 1024 * 1024
MAX_LOG_LINES = 100_000
LATEST_LOG_NAME = "latest.log"
LOG_SUFFIXES: tuple[str, ...] = (".log", ".log.gz")


def _entry_sort_key(entry: LogEntry) -> tuple:
    if entry.name == LATEST_LOG_NAME:
        return (0, 0.0, "")
    if entry.modified is None:
        return (2, 0.0, entry.name)
    return (1, -entry.modified, entry.name)


def load_log_entries(directory: Path) -> list[LogEntry]:
    """List ``*.log``/``*.log.gz`` files: ``latest.log`` first, then newest."""
    if not directory.is_dir():
        return []
    try:
        children = list(directory.iterdir())
    except OSError as exc:
        raise DataLoadError(f"Failed to list {directory}: {exc}") from exc

    entries: list[LogEntry] = []
    for child in children:
        if not child.name.endswith(LOG_SUFFIXES):
            continue
        try:
            if not child.is_file():
                continue
            stat = child.stat()
        except OSError:
            continue
        entries.append(LogEntry(name=child.name, path=child, modified=stat.st_mtime, size=stat.st_size))
    entries.sort(key=_entry_sort_key)
    return entries


def load_log_content(path: Path) -> list[str]:
    """Read a log as lines, capped in bytes and line count.

    Gzip files are decompressed up to ``MAX_LOG_BYTES``; plain files read
    at most that many bytes too. Undecodable bytes are replaced.
    """
    try:
        if path.name.endswith(".gz"):
            with gzip.open(path, "rb") as handle:
                raw = handle.read(MAX_LOG_BYTES)
        else:
            with path.open("rb") as handle:
                raw = handle.read(MAX_LOG_BYTES)
    except (OSError, EOFError) as exc:
        raise DataLoadError(f"Failed to read {path.name}: {exc}") from exc

    lines: list[str] = []
    for line in io.StringIO(raw.decode("utf-8", errors="replace")):
        if len(lines) >= MAX_LOG_LINES:
            break
        lines.append(line.rstrip("\r\n"))
    return lines
