"""UI theme definitions and selection helpers.

Themes are ANSI palettes for the dashboard chrome: tabs, lists, dialogs,
and log level colors.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UITheme:
    """Semantic ANSI palette used by renderers."""

    name: str
    reset: str
    reverse: str
    border: str
    title: str
    tab_active: str
    tab_inactive: str
    selected: str
    group_header: str
    dim: str
    running: str
    key_hint: str
    input_text: str
    error: str
    log_error: str
    log_warn: str
    log_info: str
    log_debug: str
    search_hit: str


DEFAULT_THEME = UITheme(
    name="default",
    reset="\033[0m",
    reverse="\033[7m",
    border="\033[38;5;45m",
    title="\033[1;38;5;81m",
    tab_active="\033[1;7;38;5;81m",
    tab_inactive="\033[38;5;250m",
    selected="\033[1;48;5;238m",
    group_header="\033[1;38;5;229m",
    dim="\033[2;38;5;250m",
    running="\033[1;38;5;42m",
    key_hint="\033[38;5;229m",
    input_text="\033[1;38;5;255m",
    error="\033[1;38;5;203m",
    log_error="\033[38;5;203m",
    log_warn="\033[38;5;214m",
    log_info="\033[38;5;252m",
    log_debug="\033[2;38;5;110m",
    search_hit="\033[1;30;48;5;229m",
)

OCEAN_THEME = UITheme(
    name="ocean",
    reset="\033[0m",
    reverse="\033[7m",
    border="\033[38;5;39m",
    title="\033[1;38;5;45m",
    tab_active="\033[1;7;38;5;45m",
    tab_inactive="\033[38;5;110m",
    selected="\033[1;48;5;24m",
    group_header="\033[1;38;5;153m",
    dim="\033[2;38;5;110m",
    running="\033[1;38;5;84m",
    key_hint="\033[38;5;153m",
    input_text="\033[1;38;5;255m",
    error="\033[1;38;5;209m",
    log_error="\033[38;5;209m",
    log_warn="\033[38;5;215m",
    log_info="\033[38;5;252m",
    log_debug="\033[2;38;5;73m",
    search_hit="\033[1;30;48;5;117m",
)

PLAIN_THEME = UITheme(
    name="plain",
    reset="",
    reverse="",
    border="",
    title="",
    tab_active="",
    tab_inactive="",
    selected="",
    group_header="",
    dim="",
    running="",
    key_hint="",
    input_text="",
    error="",
    log_error="",
    log_warn="",
    log_info="",
    log_debug="",
    search_hit="",
)

_THEMES: dict[str, UITheme] = {
    DEFAULT_THEME.name: DEFAULT_THEME,
    OCEAN_THEME.name: OCEAN_THEME,
}


def available_theme_names() -> tuple[str, ...]:
    """Return selectable non-plain theme names."""
    return tuple(sorted(_THEMES.keys()))


def normalize_theme_name(name: str | None) -> str:
    """Return a valid theme name, falling back to default."""
    if not name:
        return DEFAULT_THEME.name
    candidate = str(name).strip().lower()
    if candidate in _THEMES:
        return candidate
    return DEFAULT_THEME.name


def resolve_theme(name: str | None, *, no_color: bool = False) -> UITheme:
    """Return concrete theme for requested name and color mode."""
    if no_color:
        return PLAIN_THEME
    return _THEMES[normalize_theme_name(name)]


__all__ = [
    "UITheme",
    "DEFAULT_THEME",
    "OCEAN_THEME",
    "PLAIN_THEME",
    "available_theme_names",
    "normalize_theme_name",
    "resolve_theme",
]
