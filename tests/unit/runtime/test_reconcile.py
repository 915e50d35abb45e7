"""Running-instance reconciliation against process snapshots."""

from __future__ import annotations

import unittest
from pathlib import Path

from prismtui.actions.processes import ProcessInfo
from prismtui.data.types import Instance
from prismtui.runtime.reconcile import (
    LAUNCH_GRACE_SECONDS,
    is_runtime_process,
    reconcile_running_instances,
    scan_due,
)
from prismtui.runtime.state import RunningInstance


def _instance(instance_id: str) -> Instance:
    return Instance(id=instance_id, name=instance_id, path=Path("/data/instances") / instance_id)


def _java(pid: int, instance_id: str) -> ProcessInfo:
    return ProcessInfo(pid=pid, cmdline=("/usr/bin/java", "-Xmx4G", f"-Dgame.dir=/data/instances/{instance_id}/.minecraft"))


class ReconcileTests(unittest.TestCase):
    def test_unmatched_launch_is_evicted_after_grace_window(self) -> None:
        instances = [_instance("pack")]
        running = {"pack": RunningInstance(pid=None, launched_at=0.0)}

        early = reconcile_running_instances(running, instances, [], now=LAUNCH_GRACE_SECONDS - 1)
        self.assertEqual(early.failed_to_start, [])
        self.assertIn("pack", running)

        late = reconcile_running_instances(running, instances, [], now=LAUNCH_GRACE_SECONDS + 1)
        self.assertEqual(late.failed_to_start, ["pack"])
        self.assertEqual(running, {})

    def test_bound_process_that_disappears_is_removed(self) -> None:
        instances = [_instance("pack")]
        running = {"pack": RunningInstance(pid=None, launched_at=0.0)}

        bound = reconcile_running_instances(running, instances, [_java(4242, "pack")], now=5.0)
        self.assertEqual(bound.bound, ["pack"])
        self.assertEqual(running["pack"].pid, 4242)

        # Bound records are never evicted by age while the pid lives.
        still = reconcile_running_instances(running, instances, [_java(4242, "pack")], now=500.0)
        self.assertEqual(still.exited, [])

        gone = reconcile_running_instances(running, instances, [], now=501.0)
        self.assertEqual(gone.exited, ["pack"])
        self.assertNotIn("pack", running)

    def test_longest_instance_path_claims_the_process(self) -> None:
        instances = [_instance("foo"), _instance("foo-2")]
        running = {
            "foo": RunningInstance(pid=None, launched_at=0.0),
            "foo-2": RunningInstance(pid=None, launched_at=0.0),
        }
        reconcile_running_instances(running, instances, [_java(7, "foo-2")], now=1.0)
        self.assertIsNone(running["foo"].pid)
        self.assertEqual(running["foo-2"].pid, 7)

    def test_non_runtime_processes_are_ignored(self) -> None:
        instances = [_instance("pack")]
        running = {"pack": RunningInstance(pid=None, launched_at=0.0)}
        launcher = ProcessInfo(pid=9, cmdline=("prismlauncher", "--launch", "/data/instances/pack"))
        self.assertFalse(is_runtime_process(launcher))
        reconcile_running_instances(running, instances, [launcher], now=1.0)
        self.assertIsNone(running["pack"].pid)

    def test_scan_due_only_with_running_instances(self) -> None:
        self.assertFalse(scan_due({}, 0.0, 100.0))
        running = {"pack": RunningInstance(pid=None, launched_at=0.0)}
        self.assertFalse(scan_due(running, 99.0, 100.0))
        self.assertTrue(scan_due(running, 97.0, 100.0))


if __name__ == "__main__":
    unittest.main()
