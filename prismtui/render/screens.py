"""Body renderers for each dashboard screen.

Each ``draw_*`` function paints one screen into the body rectangle and
registers the click regions for what it drew. State is read, never
written; scroll windows are derived from the current selection.
"""

from __future__ import annotations

from ..ansi import display_width, strip_ansi, truncate_with_ellipsis
from ..data.types import Instance
from ..instance_model import GroupHeaderRow, row_position_for_visual
from ..runtime import click_regions as regions
from ..runtime.click_regions import Rect
from ..runtime.log_view import detect_log_level, visible_log_lines
from ..runtime.selection import current_rows
from ..runtime.state import AppState, LogLevel, LogSource
from ..ui_theme import UITheme
from .canvas import Canvas

LOG_LIST_WIDTH = 34
RUNNING_MARK = "●"

# Optional trailing columns of an instance row, dropped right to left
# when the terminal is too narrow.
_INSTANCE_COLUMNS: tuple[tuple[str, int], ...] = (
    ("version", 12),
    ("loader", 10),
    ("playtime", 12),
    ("last", 17),
)
_MIN_NAME_WIDTH = 16


def fit(text: str, width: int) -> str:
    """Truncate or right-pad ``text`` to exactly ``width`` columns."""
    clipped = truncate_with_ellipsis(text, width)
    return clipped + " " * max(0, width - display_width(clipped))


def window_start(position: int, total: int, height: int) -> int:
    """First row of a ``height``-row window that keeps ``position`` visible."""
    if height <= 0 or total <= height:
        return 0
    start = max(0, position - height + 1)
    return min(start, total - height)


def _empty_message(canvas: Canvas, body: Rect, text: str, theme: UITheme) -> None:
    canvas.put(body.x + 2, body.y + 1, text, theme.dim, max_width=body.width - 4)


def _instance_cells(instance: Instance, width: int) -> list[str]:
    values = {
        "version": instance.minecraft_version,
        "loader": instance.mod_loader or "Vanilla",
        "playtime": instance.formatted_playtime(),
        "last": instance.formatted_last_launch(),
    }
    columns = list(_INSTANCE_COLUMNS)
    while columns and width - sum(w for _, w in columns) < _MIN_NAME_WIDTH:
        columns.pop()
    name_width = width - sum(w for _, w in columns)
    return [fit(instance.name, name_width)] + [fit(values[key], w) for key, w in columns]


def draw_instances(canvas: Canvas, state: AppState, theme: UITheme, body: Rect) -> None:
    rows = current_rows(state)
    if not rows:
        if state.search_query:
            _empty_message(canvas, body, f"No instances match '{state.search_query}'", theme)
        else:
            _empty_message(canvas, body, "No instances found", theme)
        return

    position = row_position_for_visual(rows, state.selected_instance_index) or 0
    start = window_start(position, len(rows), body.height)
    registry = state.click_regions
    for offset, row in enumerate(rows[start : start + body.height]):
        y = body.y + offset
        line_rect = Rect(body.x, y, body.width, 1)
        if isinstance(row, GroupHeaderRow):
            marker = "▸" if row.collapsed else "▾"
            canvas.put(body.x + 1, y, f"{marker} {row.key} ({row.count})", theme.group_header, max_width=body.width - 1)
            registry.register(line_rect, regions.GroupHeader(row.key))
            continue

        instance = state.instances[row.storage_index]
        selected = row.visual_index == state.selected_instance_index
        style = theme.selected if selected else ""
        if selected:
            canvas.fill(line_rect, style)
        canvas.put(body.x, y, ">" if selected else " ", style)
        if state.is_running(instance.id):
            canvas.put(body.x + 2, y, RUNNING_MARK, theme.running if not selected else style)
        canvas.put(body.x + 4, y, " ".join(_instance_cells(instance, body.width - 4 - 3)), style)
        registry.register(line_rect, regions.SelectItem(row.visual_index))


def draw_accounts(canvas: Canvas, state: AppState, theme: UITheme, body: Rect) -> None:
    indices = state.filtered_account_indices
    if not indices:
        text = f"No accounts match '{state.search_query}'" if state.search_query else "No accounts found"
        _empty_message(canvas, body, text, theme)
        return
    start = window_start(state.selected_account_index, len(indices), body.height)
    for offset, storage_index in enumerate(indices[start : start + body.height]):
        position = start + offset
        account = state.accounts[storage_index]
        y = body.y + offset
        line_rect = Rect(body.x, y, body.width, 1)
        selected = position == state.selected_account_index
        style = theme.selected if selected else ""
        if selected:
            canvas.fill(line_rect, style)
        canvas.put(body.x, y, ">" if selected else " ", style)
        end = canvas.put(body.x + 2, y, account.username, style, max_width=body.width - 14)
        if account.username == state.active_account:
            canvas.put(end + 2, y, "(active)", theme.running if not selected else style)
        state.click_regions.register(line_rect, regions.SelectItem(position))


def draw_servers(canvas: Canvas, state: AppState, theme: UITheme, body: Rect) -> None:
    instance = state.focused_instance()
    registry = state.click_regions
    name = instance.name if instance is not None else "no instance"
    canvas.put(body.x + 1, body.y, f"Servers for {name}", theme.title, max_width=body.width - 14)
    back_label = "[Esc] Back"
    back_x = body.x + body.width - display_width(back_label) - 1
    canvas.put(back_x, body.y, back_label, theme.key_hint)
    registry.register(Rect(back_x, body.y, display_width(back_label), 1), regions.GoBack())

    join = instance.server_join if instance is not None else None
    joined = join is not None and join.enabled
    checkbox = "[x]" if joined else "[ ]"
    target = join.address if joined and join is not None else "off"
    join_y = body.y + 1
    canvas.put(body.x + 1, join_y, f"{checkbox} Join on launch: {target}", theme.dim, max_width=body.width - 2)
    registry.register(Rect(body.x, join_y, body.width, 1), regions.JoinCheckbox())

    list_top = body.y + 3
    list_height = body.height - 3
    if not state.servers:
        canvas.put(body.x + 2, list_top, "No servers. Press 'a' to add one.", theme.dim, max_width=body.width - 4)
        return
    start = window_start(state.selected_server_index, len(state.servers), list_height)
    name_width = max(10, (body.width - 6) // 2)
    for offset, server in enumerate(state.servers[start : start + list_height]):
        position = start + offset
        y = list_top + offset
        line_rect = Rect(body.x, y, body.width, 1)
        selected = position == state.selected_server_index
        style = theme.selected if selected else ""
        if selected:
            canvas.fill(line_rect, style)
        canvas.put(body.x, y, ">" if selected else " ", style)
        canvas.put(body.x + 2, y, fit(server.name, name_width), style)
        end = canvas.put(body.x + 3 + name_width, y, server.ip, style, max_width=body.width - name_width - 6)
        if joined and join is not None and join.address == server.ip:
            canvas.put(end + 1, y, "*", theme.running if not selected else style)
        registry.register(line_rect, regions.SelectItem(position))


def _level_style(theme: UITheme, level: LogLevel | None) -> str:
    if level == LogLevel.ERROR:
        return theme.log_error
    if level == LogLevel.WARN:
        return theme.log_warn
    if level == LogLevel.INFO:
        return theme.log_info
    if level == LogLevel.DEBUG:
        return theme.log_debug
    return ""


def _level_badges(state: AppState) -> str:
    if not state.log_level_filter:
        return "levels: all"
    shown = [level.value for level in LogLevel if level in state.log_level_filter]
    return "levels: " + " ".join(shown)


def draw_logs(canvas: Canvas, state: AppState, theme: UITheme, body: Rect) -> None:
    registry = state.click_regions
    list_width = min(LOG_LIST_WIDTH, max(12, body.width // 3))
    list_rect = Rect(body.x, body.y, list_width, body.height)
    preview_rect = Rect(body.x + list_width + 1, body.y, body.width - list_width - 1, body.height)

    if state.log_source == LogSource.LAUNCHER:
        source = "Launcher logs"
    else:
        instance = state.focused_instance()
        source = f"Logs: {instance.name}" if instance is not None else "Logs"
    canvas.put(list_rect.x + 1, list_rect.y, source, theme.title, max_width=list_width - 1)
    for y in range(body.y, body.y + body.height):
        canvas.put(list_rect.x + list_width, y, "│", theme.border)

    list_top = list_rect.y + 1
    list_height = list_rect.height - 1
    if not state.log_entries:
        canvas.put(list_rect.x + 1, list_top, "No log files", theme.dim, max_width=list_width - 1)
    start = window_start(state.selected_log_index, len(state.log_entries), list_height)
    for offset, entry in enumerate(state.log_entries[start : start + list_height]):
        position = start + offset
        y = list_top + offset
        line_rect = Rect(list_rect.x, y, list_width, 1)
        selected = position == state.selected_log_index
        style = theme.selected if selected else ""
        if selected:
            canvas.fill(line_rect, style)
        size = entry.formatted_size()
        canvas.put(list_rect.x + 1, y, fit(entry.name, list_width - len(size) - 3), style)
        canvas.put(list_rect.x + list_width - len(size) - 1, y, size, style if selected else theme.dim)
        registry.register(line_rect, regions.SelectLogFile(position))

    registry.register(preview_rect, regions.ScrollLogPreview())
    _draw_log_preview(canvas, state, theme, preview_rect)


def _draw_log_preview(canvas: Canvas, state: AppState, theme: UITheme, pane: Rect) -> None:
    if state.log_content is None:
        canvas.put(pane.x + 1, pane.y + 1, "Press Enter to load the selected log", theme.dim, max_width=pane.width - 2)
        return

    title = state.log_content_name
    if state.log_search_query:
        total = len(state.log_search_matches)
        current = state.log_search_current + 1 if total else 0
        title += f"  /{state.log_search_query} ({current}/{total})"
    canvas.put(pane.x + 1, pane.y, title, theme.title, max_width=pane.width - 2)
    badges = _level_badges(state)
    canvas.put(pane.x + pane.width - len(badges) - 1, pane.y, badges, theme.dim)

    lines = visible_log_lines(state)
    text_top = pane.y + 1
    text_height = pane.height - 1
    if not lines:
        canvas.put(pane.x + 1, text_top, "(empty)", theme.dim)
        return
    hits = set(state.log_search_matches)
    current_hit = state.log_search_matches[state.log_search_current] if state.log_search_matches else None
    for offset, (_, raw) in enumerate(lines[state.log_scroll : state.log_scroll + text_height]):
        position = state.log_scroll + offset
        y = text_top + offset
        text = strip_ansi(raw)
        if position == current_hit:
            style = theme.search_hit
        elif position in hits:
            style = theme.reverse
        else:
            style = _level_style(theme, detect_log_level(text))
        canvas.put(pane.x + 1, y, text, style, max_width=pane.width - 1)


def draw_details(canvas: Canvas, state: AppState, theme: UITheme, body: Rect) -> None:
    instance = state.focused_instance()
    back_label = "[Esc] Back"
    back_x = body.x + body.width - display_width(back_label) - 1
    canvas.put(back_x, body.y, back_label, theme.key_hint)
    state.click_regions.register(Rect(back_x, body.y, display_width(back_label), 1), regions.GoBack())
    if instance is None:
        _empty_message(canvas, body, "No instance selected", theme)
        return

    running = state.running.get(instance.id)
    if running is None:
        status = "Not running"
    elif running.pid is None:
        status = "Starting..."
    else:
        status = f"Running (pid {running.pid})"
    join = instance.server_join
    fields = (
        ("Name", instance.name),
        ("ID", instance.id),
        ("Group", instance.group or "Ungrouped"),
        ("Minecraft", instance.minecraft_version),
        ("Mod loader", instance.mod_loader or "Vanilla"),
        ("Playtime", instance.formatted_playtime_full()),
        ("Last played", instance.formatted_last_launch()),
        ("Mods", str(instance.mods_count())),
        ("Worlds", str(instance.saves_count())),
        ("Resource packs", str(instance.resource_packs_count())),
        ("Join on launch", join.address if join is not None and join.enabled else "off"),
        ("Status", status),
        ("Path", str(instance.path)),
    )
    canvas.put(body.x + 1, body.y, instance.name, theme.title, max_width=body.width - 14)
    for offset, (label, value) in enumerate(fields[: max(0, body.height - 2)]):
        y = body.y + 2 + offset
        canvas.put(body.x + 2, y, fit(label, 16), theme.key_hint)
        canvas.put(body.x + 19, y, value, "", max_width=body.width - 20)
