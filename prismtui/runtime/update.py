"""Message-driven update engine.

``UpdateEngine.update`` is the only code path that mutates ``AppState``.
Key and pointer messages are translated into finer-grained messages and
applied recursively within the same call. Collaborator failures become a
transient ``error_message``; they never propagate out of ``update``.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence
from pathlib import Path

from ..data.types import Instance, Server
from ..errors import PrismTuiError
from ..render.help import help_line_count
from . import log_view
from . import messages as m
from .config import Preferences
from .keymap import messages_for_key
from .mouse import messages_for_pointer
from .reconcile import LAUNCH_GRACE_SECONDS, reconcile_running_instances, scan_due
from .selection import (
    apply_search,
    apply_sort,
    clamp_index,
    move_instance_selection,
    next_group,
    prev_group,
    replace_accounts,
    replace_instance,
    replace_instances,
    select_instance,
    selected_group_key,
    toggle_group_collapse,
)
from .services import Collaborators
from .state import TAB_SCREENS, AppState, InputMode, LogSource, RunningInstance, Screen, SERVER_INPUT_MODES
from .validation import validate_server_address, validate_server_name

logger = logging.getLogger(__name__)

CHROME_ROWS = 6
ACTION_ERRORS: tuple[type[BaseException], ...] = (PrismTuiError, OSError)


class UpdateEngine:
    """Apply messages to application state through injected collaborators."""

    def __init__(self, collaborators: Collaborators, monotonic: Callable[[], float] = time.monotonic) -> None:
        """Bind collaborators and build the message handler table.

        Raises ``TypeError`` when any message variant lacks a handler, so a
        new message cannot be added without deciding how it is handled.
        """
        self._services = collaborators
        self._monotonic = monotonic
        self._handlers: dict[type, Callable[[AppState, object], None]] = {
            m.Quit: self._on_quit,
            m.Back: self._on_back,
            m.Tick: self._on_tick,
            m.Resize: self._on_resize,
            m.Reload: self._on_reload,
            m.KeyPressed: self._on_key,
            m.Pointer: self._on_pointer,
            m.SwitchTab: self._on_switch_tab,
            m.DismissOverlay: self._on_dismiss_overlay,
            m.OpenHelp: self._on_open_help,
            m.OpenAccountScreen: self._on_open_accounts,
            m.OpenServerScreen: self._on_open_servers,
            m.OpenInstanceDetails: self._on_open_details,
            m.OpenInstanceLogs: self._on_open_instance_logs,
            m.OpenLauncherLogs: self._on_open_launcher_logs,
            m.SelectNext: lambda state, _msg: self._move_selection(state, 1),
            m.SelectPrevious: lambda state, _msg: self._move_selection(state, -1),
            m.SelectFirst: lambda state, _msg: self._select_absolute(state, 0),
            m.SelectLast: lambda state, _msg: self._select_absolute(state, -1),
            m.SelectIndex: self._on_select_index,
            m.NextGroup: lambda state, _msg: next_group(state),
            m.PrevGroup: lambda state, _msg: prev_group(state),
            m.ToggleGroupCollapse: self._on_toggle_group,
            m.CycleSortMode: self._on_cycle_sort,
            m.ToggleSortDirection: self._on_toggle_sort_direction,
            m.StartSearch: self._on_start_search,
            m.ClearSearch: lambda state, _msg: apply_search(state, ""),
            m.LaunchInstance: self._on_launch,
            m.KillInstance: self._on_kill,
            m.OpenFolder: self._on_open_folder,
            m.ConfirmAccountSelection: self._on_confirm_account,
            m.AddServer: self._on_add_server,
            m.EditServer: self._on_edit_server,
            m.DeleteServer: self._on_delete_server,
            m.ConfirmDelete: self._on_confirm_delete,
            m.CancelDelete: lambda state, _msg: self._leave_input(state),
            m.ToggleJoinOnLaunch: self._on_toggle_join,
            m.LaunchWithServer: self._on_launch_with_server,
            m.LoadLogContent: self._on_load_log,
            m.ScrollLog: self._on_scroll_log,
            m.StartLogSearch: self._on_start_log_search,
            m.LogSearchNext: lambda state, _msg: log_view.step_log_search(state, 1),
            m.LogSearchPrev: lambda state, _msg: log_view.step_log_search(state, -1),
            m.ToggleLogLevel: lambda state, msg: log_view.toggle_log_level(state, msg.level),
            m.ClearLogLevelFilter: lambda state, _msg: log_view.clear_log_level_filter(state),
            m.OpenLogInEditor: self._on_open_log_in_editor,
            m.ScrollHelp: self._on_scroll_help,
            m.InputChar: self._on_input_char,
            m.InputBackspace: self._on_input_backspace,
            m.InputConfirm: self._on_input_confirm,
            m.InputCancel: self._on_input_cancel,
        }
        missing = [message_type.__name__ for message_type in m.MESSAGE_TYPES if message_type not in self._handlers]
        if missing:
            raise TypeError(f"no update handler for: {', '.join(missing)}")

    def update(self, state: AppState, message: m.Message) -> AppState:
        """Apply one message and return the (same, mutated) state.

        Every message except ticks and resizes clears the visible error
        before it is handled.
        """
        state.cleared_error = None
        if not isinstance(message, m.PASSIVE_MESSAGES):
            state.cleared_error = state.error_message
            state.error_message = None
        self._apply(state, message)
        return state

    def _apply(self, state: AppState, message: object) -> None:
        handler = self._handlers.get(type(message))
        if handler is None:
            raise TypeError(f"unknown message {message!r}")
        handler(state, message)

    def _apply_all(self, state: AppState, messages: Sequence[object]) -> None:
        for message in messages:
            self._apply(state, message)

    @staticmethod
    def _fail(state: AppState, text: str) -> None:
        logger.warning("%s", text)
        state.error_message = text

    # Screens -----------------------------------------------------------

    def _set_screen(self, state: AppState, screen: Screen, *, remember: bool = True) -> None:
        if screen == state.screen:
            return
        if remember:
            state.previous_screen = state.screen
        state.screen = screen
        state.chord.reset()
        self._leave_input(state)
        if screen == Screen.INSTANCES:
            state.focused_instance_id = None

    def _target_instance(self, state: AppState) -> Instance | None:
        """Instance an action applies to; sets an error when there is none."""
        if state.screen == Screen.INSTANCES:
            instance = state.selected_instance()
        else:
            instance = state.focused_instance()
        if instance is None:
            self._fail(state, "No instance selected")
        return instance

    def _on_quit(self, state: AppState, _msg: m.Quit) -> None:
        state.should_quit = True

    def _on_back(self, state: AppState, _msg: m.Back) -> None:
        target = state.previous_screen or Screen.INSTANCES
        state.previous_screen = None
        self._set_screen(state, target, remember=False)

    def _on_switch_tab(self, state: AppState, msg: m.SwitchTab) -> None:
        if not 0 <= msg.index < len(TAB_SCREENS):
            return
        target = TAB_SCREENS[msg.index]
        if target == state.screen:
            return
        if target == Screen.INSTANCES:
            state.previous_screen = None
            self._set_screen(state, Screen.INSTANCES, remember=False)
        elif target == Screen.ACCOUNTS:
            self._on_open_accounts(state, m.OpenAccountScreen())
        elif target == Screen.SERVERS:
            self._on_open_servers(state, m.OpenServerScreen())
        else:
            self._on_open_instance_logs(state, m.OpenInstanceLogs())

    def _on_dismiss_overlay(self, state: AppState, _msg: m.DismissOverlay) -> None:
        if state.screen == Screen.HELP:
            self._on_back(state, m.Back())
        elif state.cleared_error is not None:
            return
        elif state.input_mode != InputMode.NORMAL:
            self._on_input_cancel(state, m.InputCancel())

    def _on_open_help(self, state: AppState, _msg: m.OpenHelp) -> None:
        state.help_scroll = 0
        self._set_screen(state, Screen.HELP)

    def _on_open_accounts(self, state: AppState, _msg: m.OpenAccountScreen) -> None:
        for position, storage_index in enumerate(state.filtered_account_indices):
            if state.accounts[storage_index].username == state.active_account:
                state.selected_account_index = position
                break
        else:
            state.selected_account_index = clamp_index(
                state.selected_account_index, len(state.filtered_account_indices)
            )
        self._set_screen(state, Screen.ACCOUNTS)

    def _on_open_servers(self, state: AppState, _msg: m.OpenServerScreen) -> None:
        instance = self._target_instance(state)
        if instance is None:
            return
        try:
            servers = self._services.load_servers(instance.servers_dat_path())
        except ACTION_ERRORS as exc:
            self._fail(state, f"Failed to load servers: {exc}")
            return
        state.servers = list(servers)
        state.selected_server_index = 0
        state.focused_instance_id = instance.id
        self._set_screen(state, Screen.SERVERS)

    def _on_open_details(self, state: AppState, _msg: m.OpenInstanceDetails) -> None:
        instance = self._target_instance(state)
        if instance is None:
            return
        state.focused_instance_id = instance.id
        self._set_screen(state, Screen.INSTANCE_DETAILS)

    def _open_logs(self, state: AppState, source: LogSource, directory: Path, instance_id: str | None) -> None:
        try:
            entries = self._services.load_log_entries(directory)
        except ACTION_ERRORS as exc:
            self._fail(state, f"Failed to load logs: {exc}")
            return
        log_view.reset_log_view(state)
        state.log_source = source
        state.log_entries = list(entries)
        state.selected_log_index = 0
        if instance_id is not None:
            state.focused_instance_id = instance_id
        self._set_screen(state, Screen.LOGS)

    def _on_open_instance_logs(self, state: AppState, _msg: m.OpenInstanceLogs) -> None:
        instance = self._target_instance(state)
        if instance is None:
            return
        self._open_logs(state, LogSource.INSTANCE, instance.logs_dir(), instance.id)

    def _on_open_launcher_logs(self, state: AppState, _msg: m.OpenLauncherLogs) -> None:
        self._open_logs(state, LogSource.LAUNCHER, self._services.launcher_logs_dir, None)

    # Periodic and terminal events ---------------------------------------

    def _on_tick(self, state: AppState, _msg: m.Tick) -> None:
        now = self._monotonic()
        if not scan_due(state.running, state.last_process_scan, now):
            return
        state.last_process_scan = now
        try:
            snapshot = self._services.snapshot_processes()
        except ACTION_ERRORS as exc:
            logger.warning("process scan failed: %s", exc)
            return
        result = reconcile_running_instances(state.running, state.instances, snapshot, now)
        if result.failed_to_start:
            names = ", ".join(_display_name(state, instance_id) for instance_id in result.failed_to_start)
            state.error_message = f"{names} did not start (no game process after {LAUNCH_GRACE_SECONDS:.0f}s)"

    def _on_resize(self, state: AppState, msg: m.Resize) -> None:
        state.viewport_rows = max(1, msg.height - CHROME_ROWS)

    def _on_reload(self, state: AppState, _msg: m.Reload) -> None:
        try:
            instances = self._services.load_instances()
        except ACTION_ERRORS as exc:
            self._fail(state, f"Failed to reload instances: {exc}")
            return
        replace_instances(state, instances)
        try:
            accounts = self._services.load_accounts()
        except ACTION_ERRORS as exc:
            self._fail(state, f"Failed to reload accounts: {exc}")
            return
        replace_accounts(state, accounts)

    def _on_key(self, state: AppState, msg: m.KeyPressed) -> None:
        self._apply_all(state, messages_for_key(state, msg.key))

    def _on_pointer(self, state: AppState, msg: m.Pointer) -> None:
        self._apply_all(state, messages_for_pointer(state, msg.kind, msg.col, msg.row, self._monotonic()))

    # Selection ----------------------------------------------------------

    def _list_length(self, state: AppState) -> int:
        if state.screen == Screen.INSTANCES:
            return len(state.filtered_instance_indices)
        if state.screen == Screen.ACCOUNTS:
            return len(state.filtered_account_indices)
        if state.screen == Screen.SERVERS:
            return len(state.servers)
        if state.screen == Screen.LOGS:
            return len(state.log_entries)
        return 0

    def _set_list_index(self, state: AppState, index: int) -> None:
        if state.screen == Screen.INSTANCES:
            select_instance(state, index)
        elif state.screen == Screen.ACCOUNTS:
            state.selected_account_index = index
        elif state.screen == Screen.SERVERS:
            state.selected_server_index = index
        elif state.screen == Screen.LOGS:
            state.selected_log_index = index

    def _current_list_index(self, state: AppState) -> int:
        return {
            Screen.INSTANCES: state.selected_instance_index,
            Screen.ACCOUNTS: state.selected_account_index,
            Screen.SERVERS: state.selected_server_index,
            Screen.LOGS: state.selected_log_index,
        }.get(state.screen, 0)

    def _move_selection(self, state: AppState, delta: int) -> None:
        if state.screen == Screen.HELP:
            self._on_scroll_help(state, m.ScrollHelp(delta))
            return
        if state.screen == Screen.INSTANCES:
            move_instance_selection(state, delta)
            return
        count = self._list_length(state)
        if count:
            self._set_list_index(state, clamp_index(self._current_list_index(state) + delta, count))

    def _select_absolute(self, state: AppState, index: int) -> None:
        count = self._list_length(state)
        if count:
            self._set_list_index(state, index % count)

    def _on_select_index(self, state: AppState, msg: m.SelectIndex) -> None:
        if 0 <= msg.index < self._list_length(state):
            self._set_list_index(state, msg.index)

    # Instances ----------------------------------------------------------

    def _on_toggle_group(self, state: AppState, msg: m.ToggleGroupCollapse) -> None:
        key = msg.key if msg.key is not None else selected_group_key(state)
        if key is not None:
            toggle_group_collapse(state, key)

    def _save_sort_preferences(self, state: AppState) -> None:
        self._services.save_preferences(Preferences(sort_mode=state.sort_mode, sort_ascending=state.sort_ascending))

    def _on_cycle_sort(self, state: AppState, _msg: m.CycleSortMode) -> None:
        apply_sort(state, state.sort_mode.next(), state.sort_ascending)
        self._save_sort_preferences(state)

    def _on_toggle_sort_direction(self, state: AppState, _msg: m.ToggleSortDirection) -> None:
        apply_sort(state, state.sort_mode, not state.sort_ascending)
        self._save_sort_preferences(state)

    def _on_start_search(self, state: AppState, _msg: m.StartSearch) -> None:
        if state.screen not in (Screen.INSTANCES, Screen.ACCOUNTS):
            return
        state.input_mode = InputMode.SEARCH
        state.input_buffer = state.search_query

    def _launch(self, state: AppState, instance: Instance, server: str | None) -> None:
        if state.is_running(instance.id):
            self._fail(state, "Instance is already running")
            return
        try:
            self._services.launch_instance(instance.id, state.active_account, server)
        except PrismTuiError as exc:
            self._fail(state, str(exc))
            return
        except OSError as exc:
            self._fail(state, f"Launch failed: {exc}")
            return
        state.running[instance.id] = RunningInstance(pid=None, launched_at=self._monotonic())
        logger.info("launch requested for %s", instance.id)

    def _on_launch(self, state: AppState, _msg: m.LaunchInstance) -> None:
        instance = self._target_instance(state)
        if instance is None:
            return
        join = instance.server_join
        self._launch(state, instance, join.address if join is not None and join.enabled else None)

    def _on_kill(self, state: AppState, _msg: m.KillInstance) -> None:
        instance = self._target_instance(state)
        if instance is None:
            return
        record = state.running.get(instance.id)
        if record is None:
            self._fail(state, "Instance is not running")
            return
        if record.pid is not None:
            try:
                self._services.kill_process(record.pid)
            except ACTION_ERRORS as exc:
                self._fail(state, f"Failed to kill instance: {exc}")
                return
        del state.running[instance.id]

    def _on_open_folder(self, state: AppState, _msg: m.OpenFolder) -> None:
        if state.screen == Screen.LOGS and state.log_source == LogSource.LAUNCHER:
            target = self._services.launcher_logs_dir
        else:
            instance = self._target_instance(state)
            if instance is None:
                return
            target = instance.logs_dir() if state.screen == Screen.LOGS else instance.path
        try:
            self._services.open_folder(target)
        except ACTION_ERRORS as exc:
            self._fail(state, f"Failed to open folder: {exc}")

    # Accounts -----------------------------------------------------------

    def _on_confirm_account(self, state: AppState, _msg: m.ConfirmAccountSelection) -> None:
        account = state.selected_account()
        if account is None:
            return
        state.active_account = account.username
        state.previous_screen = None
        self._set_screen(state, Screen.INSTANCES, remember=False)

    # Servers ------------------------------------------------------------

    def _on_add_server(self, state: AppState, _msg: m.AddServer) -> None:
        state.input_mode = InputMode.ADD_SERVER_NAME
        state.input_buffer = ""
        state.pending_server_name = ""
        state.pending_server_address = ""

    def _on_edit_server(self, state: AppState, _msg: m.EditServer) -> None:
        server = state.selected_server()
        if server is None:
            return
        state.editing_server_index = state.selected_server_index
        state.pending_server_name = server.name
        state.pending_server_address = server.ip
        state.input_buffer = server.name
        state.input_mode = InputMode.EDIT_SERVER_NAME

    def _on_delete_server(self, state: AppState, _msg: m.DeleteServer) -> None:
        if state.selected_server() is not None:
            state.input_mode = InputMode.CONFIRM_DELETE

    def _save_servers(self, state: AppState, servers: Sequence[Server]) -> bool:
        instance = state.focused_instance()
        if instance is None:
            self._fail(state, "No instance selected")
            return False
        try:
            self._services.save_servers(instance.servers_dat_path(), list(servers))
        except ACTION_ERRORS as exc:
            self._fail(state, f"Failed to save servers: {exc}")
            return False
        return True

    def _on_confirm_delete(self, state: AppState, _msg: m.ConfirmDelete) -> None:
        index = state.selected_server_index
        self._leave_input(state)
        if not 0 <= index < len(state.servers):
            return
        remaining = state.servers[:index] + state.servers[index + 1 :]
        if self._save_servers(state, remaining):
            state.servers = remaining
            state.selected_server_index = clamp_index(index, len(remaining))

    def _on_toggle_join(self, state: AppState, _msg: m.ToggleJoinOnLaunch) -> None:
        instance = state.focused_instance()
        server = state.selected_server()
        if instance is None or server is None:
            return
        join = instance.server_join
        currently_set = join is not None and join.enabled and join.address == server.ip
        try:
            updated = self._services.set_server_join(instance, not currently_set, server.ip)
        except ACTION_ERRORS as exc:
            self._fail(state, f"Failed to update config: {exc}")
            return
        replace_instance(state, updated)

    def _on_launch_with_server(self, state: AppState, _msg: m.LaunchWithServer) -> None:
        instance = state.focused_instance()
        server = state.selected_server()
        if instance is None or server is None:
            return
        self._launch(state, instance, server.ip)

    # Logs ---------------------------------------------------------------

    def _on_load_log(self, state: AppState, _msg: m.LoadLogContent) -> None:
        entry = state.selected_log_entry()
        if entry is None:
            return
        try:
            lines = self._services.load_log_content(entry.path)
        except ACTION_ERRORS as exc:
            self._fail(state, f"Failed to load log: {exc}")
            return
        log_view.set_log_content(state, entry.name, list(lines))

    def _on_scroll_log(self, state: AppState, msg: m.ScrollLog) -> None:
        if state.log_content is not None:
            log_view.scroll_log(state, msg.delta + msg.pages * log_view.log_page_lines(state))

    def _on_start_log_search(self, state: AppState, _msg: m.StartLogSearch) -> None:
        if state.log_content is None:
            return
        state.input_mode = InputMode.LOG_SEARCH
        state.input_buffer = state.log_search_query

    def _on_open_log_in_editor(self, state: AppState, _msg: m.OpenLogInEditor) -> None:
        entry = state.selected_log_entry()
        if entry is None:
            return
        try:
            self._services.open_in_editor(entry.path)
        except ACTION_ERRORS as exc:
            self._fail(state, f"Failed to open editor: {exc}")

    def _on_scroll_help(self, state: AppState, msg: m.ScrollHelp) -> None:
        delta = msg.delta + msg.pages * state.viewport_rows
        state.help_scroll = max(0, min(state.help_scroll + delta, help_line_count() - 1))

    # Text entry ---------------------------------------------------------

    def _leave_input(self, state: AppState) -> None:
        state.input_mode = InputMode.NORMAL
        state.input_buffer = ""
        state.editing_server_index = None

    def _sync_query(self, state: AppState) -> None:
        if state.input_mode == InputMode.SEARCH:
            apply_search(state, state.input_buffer)
        elif state.input_mode == InputMode.LOG_SEARCH:
            state.log_search_query = state.input_buffer
            log_view.refresh_log_search(state)

    def _on_input_char(self, state: AppState, msg: m.InputChar) -> None:
        if state.input_mode == InputMode.NORMAL:
            return
        state.input_buffer += msg.char
        self._sync_query(state)

    def _on_input_backspace(self, state: AppState, _msg: m.InputBackspace) -> None:
        if state.input_mode == InputMode.NORMAL:
            return
        state.input_buffer = state.input_buffer[:-1]
        self._sync_query(state)

    def _on_input_cancel(self, state: AppState, _msg: m.InputCancel) -> None:
        if state.input_mode == InputMode.SEARCH:
            apply_search(state, "")
        elif state.input_mode == InputMode.LOG_SEARCH:
            state.log_search_query = ""
            log_view.refresh_log_search(state, jump=False)
        self._leave_input(state)

    def _on_input_confirm(self, state: AppState, _msg: m.InputConfirm) -> None:
        mode = state.input_mode
        if mode in (InputMode.SEARCH, InputMode.LOG_SEARCH):
            self._leave_input(state)
            return
        if mode not in SERVER_INPUT_MODES:
            return
        value = state.input_buffer.strip()
        if mode in (InputMode.ADD_SERVER_NAME, InputMode.EDIT_SERVER_NAME):
            error = validate_server_name(value)
            if error:
                self._fail(state, error)
                return
            state.pending_server_name = value
            if mode == InputMode.ADD_SERVER_NAME:
                state.input_buffer = ""
                state.input_mode = InputMode.ADD_SERVER_ADDRESS
            else:
                state.input_buffer = state.pending_server_address
                state.input_mode = InputMode.EDIT_SERVER_ADDRESS
            return

        error = validate_server_address(value)
        if error:
            self._fail(state, error)
            return
        if mode == InputMode.ADD_SERVER_ADDRESS:
            updated = [*state.servers, Server(name=state.pending_server_name, ip=value)]
            new_index = len(updated) - 1
        else:
            index = state.editing_server_index
            if index is None or not 0 <= index < len(state.servers):
                self._leave_input(state)
                return
            original = state.servers[index]
            updated = list(state.servers)
            updated[index] = Server(name=state.pending_server_name, ip=value, extra=original.extra)
            new_index = index
        self._leave_input(state)
        if self._save_servers(state, updated):
            state.servers = updated
            state.selected_server_index = new_index


def _display_name(state: AppState, instance_id: str) -> str:
    instance = state.instance_by_id(instance_id)
    return instance.name if instance is not None else instance_id
