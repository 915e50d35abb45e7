"""Match launched instances to live processes.

A launch only records intent; the launcher spawns the game itself, so the
game's pid is discovered by scanning command lines for the instance path.
Records leave the running table by one of two paths: a bound pid that
disappears (the game exited) or no match within the grace window (the
launch never produced a game process).
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from ..actions.processes import ProcessInfo
from ..data.types import Instance
from .state import RunningInstance

logger = logging.getLogger(__name__)

SCAN_INTERVAL_SECONDS = 2.0
LAUNCH_GRACE_SECONDS = 30.0
RUNTIME_MARKER = "java"


@dataclass
class ReconcileResult:
    bound: list[str] = field(default_factory=list)
    exited: list[str] = field(default_factory=list)
    failed_to_start: list[str] = field(default_factory=list)


def is_runtime_process(process: ProcessInfo) -> bool:
    return any(RUNTIME_MARKER in arg for arg in process.cmdline)


def scan_due(running: dict[str, RunningInstance], last_scan: float, now: float) -> bool:
    return bool(running) and now - last_scan >= SCAN_INTERVAL_SECONDS


def _match_pid(path: str, candidates: Sequence[ProcessInfo], paths_by_length: list[str]) -> int | None:
    """Return the pid whose command line names ``path`` most specifically.

    A process that also contains a longer instance path is left to that
    instance, so ``inst/foo`` never claims the game of ``inst/foo-2``.
    """
    for process in candidates:
        joined = process.joined
        if path not in joined:
            continue
        longer = next((other for other in paths_by_length if len(other) > len(path) and other in joined), None)
        if longer is None:
            return process.pid
    return None


def reconcile_running_instances(
    running: dict[str, RunningInstance],
    instances: Sequence[Instance],
    snapshot: Sequence[ProcessInfo],
    now: float,
    grace_seconds: float = LAUNCH_GRACE_SECONDS,
) -> ReconcileResult:
    """Update ``running`` in place against one process snapshot."""
    result = ReconcileResult()
    paths = {instance.id: str(instance.path) for instance in instances}
    candidates = [process for process in snapshot if is_runtime_process(process)]
    live_pids = {process.pid for process in snapshot}
    paths_by_length = sorted(paths.values(), key=len, reverse=True)

    for instance_id, record in list(running.items()):
        if record.pid is not None:
            if record.pid not in live_pids:
                del running[instance_id]
                result.exited.append(instance_id)
                logger.info("instance %s exited (pid %s)", instance_id, record.pid)
            continue

        path = paths.get(instance_id)
        pid = _match_pid(path, candidates, paths_by_length) if path else None
        if pid is not None:
            record.pid = pid
            result.bound.append(instance_id)
            logger.info("instance %s running as pid %s", instance_id, pid)
        elif now - record.launched_at > grace_seconds:
            del running[instance_id]
            result.failed_to_start.append(instance_id)
            logger.warning("instance %s produced no game process within %.0fs", instance_id, grace_seconds)
    return result
