"""Readers and writers for the launcher's on-disk data."""

from .accounts import active_account_name, load_accounts
from .groups import load_groups
from .instances import load_instances, set_server_join
from .launcher_config import LauncherPaths, find_data_dir
from .logs import load_log_content, load_log_entries
from .servers import load_servers, save_servers
from .types import Account, Instance, LogEntry, Server, ServerJoin

__all__ = [
    "Account",
    "Instance",
    "LauncherPaths",
    "LogEntry",
    "Server",
    "ServerJoin",
    "active_account_name",
    "find_data_dir",
    "load_accounts",
    "load_groups",
    "load_instances",
    "load_log_content",
    "load_log_entries",
    "load_servers",
    "save_servers",
    "set_server_join",
]
