"""Collaborator bundle the update engine calls for every side effect.

The engine never imports loaders or process helpers directly; tests swap
in fakes by building their own ``Collaborators``.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import ContextManager

from ..actions import file_ops, launch, processes
from ..actions.processes import ProcessInfo
from ..data import accounts, groups, instances, logs, servers
from ..data.launcher_config import LauncherPaths
from ..data.types import Account, Instance, LogEntry, Server
from . import config


@dataclass(frozen=True)
class Collaborators:
    load_instances: Callable[[], list[Instance]]
    load_accounts: Callable[[], list[Account]]
    load_servers: Callable[[Path], list[Server]]
    save_servers: Callable[[Path, Sequence[Server]], None]
    set_server_join: Callable[[Instance, bool, str | None], Instance]
    launch_instance: Callable[[str, str | None, str | None], None]
    kill_process: Callable[[int], None]
    open_folder: Callable[[Path], None]
    open_in_editor: Callable[[Path], None]
    load_log_entries: Callable[[Path], list[LogEntry]]
    load_log_content: Callable[[Path], list[str]]
    snapshot_processes: Callable[[], list[ProcessInfo]]
    save_preferences: Callable[[config.Preferences], None]
    launcher_logs_dir: Path


def default_collaborators(
    paths: LauncherPaths,
    *,
    launcher_command: str = launch.DEFAULT_LAUNCHER_COMMAND,
    suspend_tui: Callable[[], ContextManager[None]] | None = None,
) -> Collaborators:
    """Wire the real filesystem and process implementations for ``paths``."""

    def load_instances() -> list[Instance]:
        return instances.load_instances(paths.instances_dir, groups.load_groups(paths.groups_path))

    def load_accounts() -> list[Account]:
        return accounts.load_accounts(paths.accounts_path)

    def launch_instance(instance_id: str, account: str | None, server: str | None) -> None:
        launch.launch_instance(instance_id, account, server, launcher_command=launcher_command)

    def open_in_editor(path: Path) -> None:
        file_ops.open_in_editor(path, suspend_tui)

    return Collaborators(
        load_instances=load_instances,
        load_accounts=load_accounts,
        load_servers=servers.load_servers,
        save_servers=lambda path, entries: servers.save_servers(path, list(entries)),
        set_server_join=instances.set_server_join,
        launch_instance=launch_instance,
        kill_process=launch.kill_process,
        open_folder=file_ops.open_folder,
        open_in_editor=open_in_editor,
        load_log_entries=logs.load_log_entries,
        load_log_content=logs.load_log_content,
        snapshot_processes=processes.snapshot_processes,
        save_preferences=config.save_preferences,
        launcher_logs_dir=paths.logs_dir,
    )
