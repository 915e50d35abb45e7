"""Side-effecting operations: launching, killing, and opening things."""

from .file_ops import open_folder, open_in_editor
from .launch import build_launch_command, kill_process, launch_instance
from .processes import ProcessInfo, snapshot_processes

__all__ = [
    "ProcessInfo",
    "build_launch_command",
    "kill_process",
    "launch_instance",
    "open_folder",
    "open_in_editor",
    "snapshot_processes",
]
