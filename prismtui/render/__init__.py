"""Rendering engine for the dashboard.

Composes tab bar, header, screen body, status line, footer, and modal
overlays into a cell canvas, then encodes one ANSI frame. Click regions
are registered in paint order so overlays drawn later win hit tests.
"""

from __future__ import annotations

from ..ansi import display_width
from ..runtime import click_regions as regions
from ..runtime import messages as m
from ..runtime.click_regions import Rect
from ..runtime.state import SERVER_INPUT_MODES, TAB_SCREENS, AppState, InputMode, Screen
from ..ui_theme import UITheme
from .canvas import Canvas
from .help import KEY_COLUMN_WIDTH, help_lines
from .screens import draw_accounts, draw_details, draw_instances, draw_logs, draw_servers

MIN_WIDTH = 40
MIN_HEIGHT = 10
APP_TITLE = "PrismTUI"

_TAB_LABELS: dict[Screen, str] = {
    Screen.INSTANCES: "Instances",
    Screen.ACCOUNTS: "Accounts",
    Screen.SERVERS: "Servers",
    Screen.LOGS: "Logs",
}

_FOOTER_HINTS: dict[Screen, tuple[tuple[str, str, m.Message], ...]] = {
    Screen.INSTANCES: (
        ("Enter", "Launch", m.LaunchInstance()),
        ("x", "Kill", m.KillInstance()),
        ("/", "Search", m.StartSearch()),
        ("S", "Sort", m.CycleSortMode()),
        ("s", "Servers", m.OpenServerScreen()),
        ("L", "Logs", m.OpenInstanceLogs()),
        ("i", "Details", m.OpenInstanceDetails()),
        ("a", "Accounts", m.OpenAccountScreen()),
        ("?", "Help", m.OpenHelp()),
        ("q", "Quit", m.Quit()),
    ),
    Screen.ACCOUNTS: (
        ("Enter", "Use account", m.ConfirmAccountSelection()),
        ("/", "Search", m.StartSearch()),
        ("Esc", "Back", m.Back()),
        ("?", "Help", m.OpenHelp()),
        ("q", "Quit", m.Quit()),
    ),
    Screen.SERVERS: (
        ("Enter", "Join", m.LaunchWithServer()),
        ("a", "Add", m.AddServer()),
        ("e", "Edit", m.EditServer()),
        ("d", "Delete", m.DeleteServer()),
        ("J", "Join on launch", m.ToggleJoinOnLaunch()),
        ("Esc", "Back", m.Back()),
        ("?", "Help", m.OpenHelp()),
    ),
    Screen.LOGS: (
        ("Enter", "Load", m.LoadLogContent()),
        ("/", "Search", m.StartLogSearch()),
        ("n", "Next hit", m.LogSearchNext()),
        ("0", "All levels", m.ClearLogLevelFilter()),
        ("e", "Editor", m.OpenLogInEditor()),
        ("o", "Folder", m.OpenFolder()),
        ("Esc", "Back", m.Back()),
        ("?", "Help", m.OpenHelp()),
    ),
    Screen.INSTANCE_DETAILS: (
        ("o", "Open folder", m.OpenFolder()),
        ("Esc", "Back", m.Back()),
        ("?", "Help", m.OpenHelp()),
        ("q", "Quit", m.Quit()),
    ),
    Screen.HELP: (("Esc", "Close help", m.Back()),),
}

_TEXT_ENTRY_HINTS: tuple[tuple[str, str, m.Message], ...] = (
    ("Enter", "Confirm", m.InputConfirm()),
    ("Esc", "Cancel", m.InputCancel()),
)

_DIALOG_PROMPTS: dict[InputMode, tuple[str, str]] = {
    InputMode.ADD_SERVER_NAME: ("Add server", "Name"),
    InputMode.ADD_SERVER_ADDRESS: ("Add server", "Address"),
    InputMode.EDIT_SERVER_NAME: ("Edit server", "Name"),
    InputMode.EDIT_SERVER_ADDRESS: ("Edit server", "Address"),
}


def base_screen(state: AppState) -> Screen:
    """Screen painted under the help modal."""
    if state.screen == Screen.HELP:
        return state.previous_screen or Screen.INSTANCES
    return state.screen


def _draw_tab_bar(canvas: Canvas, state: AppState, theme: UITheme, width: int) -> None:
    canvas.fill(Rect(0, 0, width, 1), theme.tab_inactive)
    x = canvas.put(1, 0, APP_TITLE, theme.title) + 2
    active = base_screen(state)
    if active == Screen.INSTANCE_DETAILS:
        active = Screen.INSTANCES
    for index, screen in enumerate(TAB_SCREENS):
        label = f" {index + 1} {_TAB_LABELS[screen]} "
        style = theme.tab_active if screen == active else theme.tab_inactive
        end = canvas.put(x, 0, label, style)
        state.click_regions.register(Rect(x, 0, end - x, 1), regions.SwitchTab(index))
        x = end + 1
    account = f"Account: {state.active_account}" if state.active_account else "No account"
    account_x = width - display_width(account) - 1
    if account_x > x:
        canvas.put(account_x, 0, account, theme.tab_inactive)


def _header_text(state: AppState, screen: Screen) -> str:
    if screen == Screen.INSTANCES:
        arrow = "↑" if state.sort_ascending else "↓"
        parts = [
            f"Instances ({len(state.filtered_instance_indices)}/{len(state.instances)})",
            f"Sort: {state.sort_mode.label} {arrow}",
        ]
        if state.running:
            parts.append(f"Running: {len(state.running)}")
        if state.search_query and state.input_mode != InputMode.SEARCH:
            parts.append(f"Filter: {state.search_query}")
        return "  ".join(parts)
    if screen == Screen.ACCOUNTS:
        text = f"Accounts ({len(state.filtered_account_indices)}/{len(state.accounts)})"
        if state.search_query and state.input_mode != InputMode.SEARCH:
            text += f"  Filter: {state.search_query}"
        return text
    if screen == Screen.SERVERS:
        return f"Servers ({len(state.servers)})"
    if screen == Screen.LOGS:
        return f"Log files ({len(state.log_entries)})"
    return "Instance details"


def _draw_footer(canvas: Canvas, state: AppState, theme: UITheme, y: int, width: int) -> None:
    if state.input_mode in (InputMode.SEARCH, InputMode.LOG_SEARCH):
        hints = _TEXT_ENTRY_HINTS
    else:
        hints = _FOOTER_HINTS[state.screen]
    x = 1
    for key, label, message in hints:
        text = f"[{key}] {label}"
        if x + display_width(text) >= width:
            break
        canvas.put(x, y, f"[{key}]", theme.key_hint)
        end = canvas.put(x + display_width(key) + 3, y, label, theme.dim)
        state.click_regions.register(Rect(x, y, end - x, 1), regions.FooterAction(message))
        x = end + 2


def _draw_status(canvas: Canvas, state: AppState, theme: UITheme, y: int, width: int) -> None:
    if state.input_mode == InputMode.SEARCH:
        end = canvas.put(1, y, "Search: ", theme.key_hint)
        end = canvas.put(end, y, state.input_buffer, theme.input_text, max_width=width - end - 2)
        canvas.put(end, y, "█", theme.input_text)
    elif state.input_mode == InputMode.LOG_SEARCH:
        end = canvas.put(1, y, "Find in log: ", theme.key_hint)
        end = canvas.put(end, y, state.input_buffer, theme.input_text, max_width=width - end - 2)
        canvas.put(end, y, "█", theme.input_text)
    elif state.chord.awaiting:
        canvas.put(1, y, f"{state.chord.pending}-", theme.key_hint)


def _modal_rect(width: int, height: int, box_width: int, box_height: int) -> Rect:
    box_width = min(box_width, width - 2)
    box_height = min(box_height, height - 2)
    return Rect((width - box_width) // 2, (height - box_height) // 2, box_width, box_height)


def _register_modal(state: AppState, width: int, height: int, box: Rect) -> None:
    state.click_regions.register(Rect(0, 0, width, height), regions.DismissOverlay())
    state.click_regions.register(box, regions.Noop())


def _draw_help(canvas: Canvas, state: AppState, theme: UITheme, width: int, height: int) -> None:
    box = _modal_rect(width, height, 72, height - 4)
    _register_modal(state, width, height, box)
    canvas.box(box, theme.border, title="Help")
    inner_height = box.height - 2
    for offset, (keys, description, is_heading) in enumerate(help_lines()[state.help_scroll :][:inner_height]):
        y = box.y + 1 + offset
        if is_heading:
            canvas.put(box.x + 2, y, keys, theme.title, max_width=box.width - 4)
            continue
        canvas.put(box.x + 2, y, keys, theme.key_hint, max_width=KEY_COLUMN_WIDTH)
        canvas.put(box.x + 3 + KEY_COLUMN_WIDTH, y, description, "", max_width=box.width - KEY_COLUMN_WIDTH - 5)


def _draw_input_dialog(canvas: Canvas, state: AppState, theme: UITheme, width: int, height: int) -> None:
    title, field_label = _DIALOG_PROMPTS[state.input_mode]
    box = _modal_rect(width, height, 56, 6)
    _register_modal(state, width, height, box)
    canvas.box(box, theme.border, title=title)
    end = canvas.put(box.x + 2, box.y + 2, f"{field_label}: ", theme.key_hint)
    end = canvas.put(end, box.y + 2, state.input_buffer, theme.input_text, max_width=box.x + box.width - end - 3)
    canvas.put(end, box.y + 2, "█", theme.input_text)
    canvas.put(box.x + 2, box.y + 4, "[Enter] Confirm  [Esc] Cancel", theme.dim, max_width=box.width - 4)


def _draw_confirm_delete(canvas: Canvas, state: AppState, theme: UITheme, width: int, height: int) -> None:
    server = state.selected_server()
    name = server.name if server is not None else "server"
    box = _modal_rect(width, height, 50, 6)
    _register_modal(state, width, height, box)
    canvas.box(box, theme.border, title="Delete server")
    canvas.put(box.x + 2, box.y + 2, f"Delete '{name}'?", "", max_width=box.width - 4)
    y = box.y + 4
    yes_end = canvas.put(box.x + 2, y, "[y] Yes", theme.key_hint)
    state.click_regions.register(Rect(box.x + 2, y, yes_end - box.x - 2, 1), regions.FooterAction(m.ConfirmDelete()))
    no_end = canvas.put(yes_end + 3, y, "[n] No", theme.key_hint)
    state.click_regions.register(Rect(yes_end + 3, y, no_end - yes_end - 3, 1), regions.FooterAction(m.CancelDelete()))


def _draw_error(canvas: Canvas, state: AppState, theme: UITheme, width: int, height: int) -> None:
    message = state.error_message or ""
    box = _modal_rect(width, height, max(30, min(display_width(message) + 6, width - 4)), 5)
    _register_modal(state, width, height, box)
    canvas.box(box, theme.error, title="Error")
    canvas.put(box.x + 2, box.y + 2, message, theme.error, max_width=box.width - 4)


def render_frame(state: AppState, width: int, height: int, theme: UITheme) -> str:
    """Paint the whole screen and return the encoded ANSI frame.

    Clears and repopulates ``state.click_regions``; nothing else in the
    state is modified.
    """
    state.click_regions.begin_frame()
    canvas = Canvas(width, height)
    if width < MIN_WIDTH or height < MIN_HEIGHT:
        canvas.put(0, 0, "Terminal too small", theme.error)
        return canvas.to_ansi(theme.reset)

    screen = base_screen(state)
    _draw_tab_bar(canvas, state, theme, width)
    canvas.put(1, 1, _header_text(state, screen), theme.title, max_width=width - 2)
    canvas.put(0, 2, "─" * width, theme.border)
    body = Rect(1, 3, width - 2, height - 6)
    if screen == Screen.INSTANCES:
        draw_instances(canvas, state, theme, body)
    elif screen == Screen.ACCOUNTS:
        draw_accounts(canvas, state, theme, body)
    elif screen == Screen.SERVERS:
        draw_servers(canvas, state, theme, body)
    elif screen == Screen.LOGS:
        draw_logs(canvas, state, theme, body)
    else:
        draw_details(canvas, state, theme, body)
    canvas.put(0, height - 3, "─" * width, theme.border)
    _draw_status(canvas, state, theme, height - 2, width)
    _draw_footer(canvas, state, theme, height - 1, width)

    if state.screen == Screen.HELP:
        _draw_help(canvas, state, theme, width, height)
    if state.input_mode in SERVER_INPUT_MODES:
        _draw_input_dialog(canvas, state, theme, width, height)
    elif state.input_mode == InputMode.CONFIRM_DELETE:
        _draw_confirm_delete(canvas, state, theme, width, height)
    if state.error_message:
        _draw_error(canvas, state, theme, width, height)
    return canvas.to_ansi(theme.reset)


__all__ = ["Canvas", "base_screen", "render_frame"]
