"""Log pane view state: level filter, search hits, and scrolling.

Search hits and the scroll offset are positions in the level-filtered
line list, so they stay valid for what the pane actually shows.
"""

from __future__ import annotations

from .state import AppState, LogLevel


def detect_log_level(line: str) -> LogLevel | None:
    for level in LogLevel:
        if level.value in line:
            return level
    return None


def visible_log_lines(state: AppState) -> list[tuple[int, str]]:
    """Return ``(source_line_number, text)`` pairs passing the level filter.

    Lines with no detectable level are always shown.
    """
    content = state.log_content or []
    if not state.log_level_filter:
        return list(enumerate(content))
    shown: list[tuple[int, str]] = []
    for number, line in enumerate(content):
        level = detect_log_level(line)
        if level is None or level in state.log_level_filter:
            shown.append((number, line))
    return shown


def _max_scroll(state: AppState) -> int:
    return max(0, len(visible_log_lines(state)) - 1)


def log_page_lines(state: AppState) -> int:
    """Log lines shown in the preview pane below its title row."""
    return max(1, state.viewport_rows - 1)


def scroll_log(state: AppState, delta: int) -> None:
    state.log_scroll = max(0, min(state.log_scroll + delta, _max_scroll(state)))


def refresh_log_search(state: AppState, *, jump: bool = True) -> None:
    """Recompute search hits; optionally scroll to the first one."""
    state.log_search_matches = []
    state.log_search_current = 0
    query = state.log_search_query.lower()
    if query:
        state.log_search_matches = [
            position
            for position, (_, line) in enumerate(visible_log_lines(state))
            if query in line.lower()
        ]
    if jump and state.log_search_matches:
        state.log_scroll = state.log_search_matches[0]
    state.log_scroll = min(state.log_scroll, _max_scroll(state))


def step_log_search(state: AppState, delta: int) -> None:
    """Move to the next/previous hit, wrapping at both ends."""
    matches = state.log_search_matches
    if not matches:
        return
    state.log_search_current = (state.log_search_current + delta) % len(matches)
    state.log_scroll = matches[state.log_search_current]


def toggle_log_level(state: AppState, level: LogLevel) -> None:
    if level in state.log_level_filter:
        state.log_level_filter.discard(level)
    else:
        state.log_level_filter.add(level)
    refresh_log_search(state, jump=False)


def clear_log_level_filter(state: AppState) -> None:
    state.log_level_filter.clear()
    refresh_log_search(state, jump=False)


def reset_log_view(state: AppState) -> None:
    state.log_content = None
    state.log_content_name = ""
    state.log_scroll = 0
    state.log_search_query = ""
    state.log_search_matches = []
    state.log_search_current = 0
    state.log_level_filter.clear()


def set_log_content(state: AppState, name: str, lines: list[str]) -> None:
    state.log_content = lines
    state.log_content_name = name
    state.log_scroll = 0
    refresh_log_search(state)
