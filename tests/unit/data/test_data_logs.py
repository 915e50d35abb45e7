"""Log listing order and bounded log reads."""

from __future__ import annotations

import gzip
import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from prismtui.data import logs
from prismtui.data.logs import load_log_content, load_log_entries
from prismtui.data.types import LogEntry
from prismtui.errors import DataLoadError


class LogListingTests(unittest.TestCase):
    def test_latest_log_first_then_newest(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            for name, mtime in (
                ("2024-01-01-1.log.gz", 1000),
                ("2024-03-01-1.log.gz", 3000),
                ("latest.log", 10),
                ("debug.log", 2000),
                ("notes.txt", 4000),
            ):
                path = root / name
                path.write_bytes(b"x")
                os.utime(path, (mtime, mtime))
            (root / "crash.log").mkdir()

            entries = load_log_entries(root)

        self.assertEqual(
            [entry.name for entry in entries],
            ["latest.log", "2024-03-01-1.log.gz", "debug.log", "2024-01-01-1.log.gz"],
        )

    def test_missing_directory_is_empty(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            self.assertEqual(load_log_entries(Path(tmp) / "logs"), [])

    def test_formatted_size_units(self) -> None:
        def entry(size: int) -> LogEntry:
            return LogEntry(name="a.log", path=Path("a.log"), modified=None, size=size)

        self.assertEqual(entry(512).formatted_size(), "512 B")
        self.assertEqual(entry(2048).formatted_size(), "2.0 KB")
        self.assertEqual(entry(5 * 1024 * 1024).formatted_size(), "5.0 MB")
        self.assertEqual(entry(1).formatted_modified(), "")


class LogContentTests(unittest.TestCase):
    def test_reads_plain_and_gzip_logs_with_replacement(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            plain = Path(tmp) / "latest.log"
            plain.write_bytes(b"[INFO] hello\r\n[WARN] bad \xff byte\n")
            packed = Path(tmp) / "old.log.gz"
            packed.write_bytes(gzip.compress(b"one\ntwo\n"))

            self.assertEqual(load_log_content(plain), ["[INFO] hello", "[WARN] bad � byte"])
            self.assertEqual(load_log_content(packed), ["one", "two"])

    def test_line_and_byte_caps(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "big.log"
            path.write_text("".join(f"line {i}\n" for i in range(50)), encoding="utf-8")

            with mock.patch.object(logs, "MAX_LOG_LINES", 10):
                self.assertEqual(len(load_log_content(path)), 10)
            with mock.patch.object(logs, "MAX_LOG_BYTES", 14):
                self.assertEqual(load_log_content(path), ["line 0", "line 1"])

    def test_unreadable_log_raises(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(DataLoadError):
                load_log_content(Path(tmp) / "missing.log")


if __name__ == "__main__":
    unittest.main()
