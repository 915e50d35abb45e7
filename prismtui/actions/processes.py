"""Process table snapshots used to reconcile launched instances."""

from __future__ import annotations

from dataclasses import dataclass

import psutil


@dataclass(frozen=True)
class ProcessInfo:
    pid: int
    cmdline: tuple[str, ...]

    @property
    def joined(self) -> str:
        return " ".join(self.cmdline)


def snapshot_processes() -> list[ProcessInfo]:
    """Return every visible process with a non-empty command line.

    Processes that exit or deny access mid-scan are skipped.
    """
    snapshot: list[ProcessInfo] = []
    for process in psutil.process_iter(["pid", "cmdline"]):
        try:
            cmdline = process.info.get("cmdline") or ()
        except (psutil.NoSuchProcess, psutil.AccessDenied):
            continue
        if not cmdline:
            continue
        snapshot.append(ProcessInfo(pid=int(process.info["pid"]), cmdline=tuple(cmdline)))
    return snapshot
