from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from ..data.types import Account, Instance, LogEntry, Server
from ..instance_model import GroupedInstances, SortMode
from .click_regions import ClickRegistry, DoubleClickTracker


class Screen(Enum):
    INSTANCES = "instances"
    ACCOUNTS = "accounts"
    SERVERS = "servers"
    LOGS = "logs"
    INSTANCE_DETAILS = "details"
    HELP = "help"


# Tab bar order; index is what ``SwitchTab`` carries.
TAB_SCREENS: tuple[Screen, ...] = (Screen.INSTANCES, Screen.ACCOUNTS, Screen.SERVERS, Screen.LOGS)


class InputMode(Enum):
    NORMAL = "normal"
    SEARCH = "search"
    LOG_SEARCH = "log_search"
    ADD_SERVER_NAME = "add_server_name"
    ADD_SERVER_ADDRESS = "add_server_address"
    EDIT_SERVER_NAME = "edit_server_name"
    EDIT_SERVER_ADDRESS = "edit_server_address"
    CONFIRM_DELETE = "confirm_delete"


SERVER_INPUT_MODES = frozenset(
    {
        InputMode.ADD_SERVER_NAME,
        InputMode.ADD_SERVER_ADDRESS,
        InputMode.EDIT_SERVER_NAME,
        InputMode.EDIT_SERVER_ADDRESS,
    }
)


class LogSource(Enum):
    INSTANCE = "instance"
    LAUNCHER = "launcher"


class LogLevel(Enum):
    """Detected line level; member order is detection priority."""

    ERROR = "ERROR"
    WARN = "WARN"
    INFO = "INFO"
    DEBUG = "DEBUG"


@dataclass
class RunningInstance:
    """A launch request; ``pid`` is bound once a matching process is seen."""

    pid: int | None
    launched_at: float


@dataclass
class ChordState:
    """Pending first key of a two-key chord; ``None`` means idle."""

    pending: str | None = None

    @property
    def awaiting(self) -> bool:
        return self.pending is not None

    def begin(self, key: str) -> None:
        self.pending = key

    def reset(self) -> None:
        self.pending = None


@dataclass
class AppState:
    data_dir: Path
    instances: list[Instance] = field(default_factory=list)
    accounts: list[Account] = field(default_factory=list)
    groups: list[GroupedInstances] = field(default_factory=list)
    collapsed_groups: set[str] = field(default_factory=set)
    sort_mode: SortMode = SortMode.LAST_PLAYED
    sort_ascending: bool = True
    search_query: str = ""
    filtered_instance_indices: list[int] = field(default_factory=list)
    filtered_account_indices: list[int] = field(default_factory=list)
    selected_instance_index: int = 0
    selected_group_index: int = 0
    selected_account_index: int = 0
    active_account: str | None = None
    screen: Screen = Screen.INSTANCES
    previous_screen: Screen | None = None
    input_mode: InputMode = InputMode.NORMAL
    input_buffer: str = ""
    pending_server_name: str = ""
    pending_server_address: str = ""
    editing_server_index: int | None = None
    focused_instance_id: str | None = None
    servers: list[Server] = field(default_factory=list)
    selected_server_index: int = 0
    log_source: LogSource = LogSource.INSTANCE
    log_entries: list[LogEntry] = field(default_factory=list)
    selected_log_index: int = 0
    log_content: list[str] | None = None
    log_content_name: str = ""
    log_scroll: int = 0
    log_search_query: str = ""
    log_search_matches: list[int] = field(default_factory=list)
    log_search_current: int = 0
    log_level_filter: set[LogLevel] = field(default_factory=set)
    help_scroll: int = 0
    error_message: str | None = None
    # Error cleared by the message being handled, if any.
    cleared_error: str | None = None
    running: dict[str, RunningInstance] = field(default_factory=dict)
    last_process_scan: float = 0.0
    click_regions: ClickRegistry = field(default_factory=ClickRegistry)
    double_click: DoubleClickTracker = field(default_factory=DoubleClickTracker)
    chord: ChordState = field(default_factory=ChordState)
    # Body rows between the header rule and the status rule; set by Resize.
    viewport_rows: int = 20
    should_quit: bool = False

    def instance_by_id(self, instance_id: str | None) -> Instance | None:
        if instance_id is None:
            return None
        for instance in self.instances:
            if instance.id == instance_id:
                return instance
        return None

    def storage_index_of(self, instance_id: str) -> int | None:
        for storage_index, instance in enumerate(self.instances):
            if instance.id == instance_id:
                return storage_index
        return None

    def selected_instance(self) -> Instance | None:
        """Return the instance under the instance-list cursor."""
        if not 0 <= self.selected_instance_index < len(self.filtered_instance_indices):
            return None
        return self.instances[self.filtered_instance_indices[self.selected_instance_index]]

    def focused_instance(self) -> Instance | None:
        """Instance the servers/logs/details screens operate on.

        Falls back to the list cursor when no screen has pinned one.
        """
        pinned = self.instance_by_id(self.focused_instance_id)
        return pinned if pinned is not None else self.selected_instance()

    def selected_account(self) -> Account | None:
        if not 0 <= self.selected_account_index < len(self.filtered_account_indices):
            return None
        return self.accounts[self.filtered_account_indices[self.selected_account_index]]

    def selected_server(self) -> Server | None:
        if not 0 <= self.selected_server_index < len(self.servers):
            return None
        return self.servers[self.selected_server_index]

    def selected_log_entry(self) -> LogEntry | None:
        if not 0 <= self.selected_log_index < len(self.log_entries):
            return None
        return self.log_entries[self.selected_log_index]

    def is_running(self, instance_id: str) -> bool:
        return instance_id in self.running
