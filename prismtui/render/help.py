"""Help modal content.

Key descriptions are grouped by screen. Rendering helpers here are
presentation-only and side-effect free.
"""

from __future__ import annotations

HELP_SECTIONS: tuple[tuple[str, tuple[tuple[str, str], ...]], ...] = (
    (
        "INSTANCES",
        (
            ("j/k, Up/Down", "move selection"),
            ("Home, gg / G, End", "first / last instance"),
            ("Ctrl+j/k, Ctrl+Down/Up", "next / previous group"),
            ("Tab", "collapse or expand group"),
            ("l, Enter, Right", "launch instance"),
            ("x", "kill running instance"),
            ("/", "search, Esc clears"),
            ("S / R", "cycle sort mode / reverse order"),
            ("i", "instance details"),
            ("s", "servers"),
            ("a", "accounts"),
            ("L / gl", "instance logs / launcher logs"),
            ("o", "open instance folder"),
            ("r", "reload instances and accounts"),
        ),
    ),
    (
        "ACCOUNTS",
        (
            ("j/k", "move selection"),
            ("l, Enter", "make account active"),
            ("/", "search accounts"),
            ("h, Esc", "back"),
        ),
    ),
    (
        "SERVERS",
        (
            ("j/k", "move selection"),
            ("l, Enter", "launch and join server"),
            ("a / e / d", "add / edit / delete server"),
            ("J", "toggle join on launch"),
            ("h, Esc", "back"),
        ),
    ),
    (
        "LOGS",
        (
            ("j/k", "select log file"),
            ("l, Enter", "load log"),
            ("J/K, PgDn/PgUp", "scroll log"),
            ("/ then n/N", "search, next / previous hit"),
            ("1 2 3 4", "toggle ERROR WARN INFO DEBUG"),
            ("0", "show all levels"),
            ("e / o", "open in editor / open folder"),
            ("h, Esc", "back"),
        ),
    ),
    (
        "GENERAL",
        (
            ("?", "toggle this help"),
            ("mouse", "click to select, double-click to activate"),
            ("q, Ctrl+C", "quit"),
        ),
    ),
)

KEY_COLUMN_WIDTH = 24


def help_lines() -> list[tuple[str, str, bool]]:
    """Return ``(keys, description, is_heading)`` rows in display order."""
    rows: list[tuple[str, str, bool]] = []
    for index, (title, entries) in enumerate(HELP_SECTIONS):
        if index:
            rows.append(("", "", False))
        rows.append((title, "", True))
        rows.extend((keys, description, False) for keys, description in entries)
    return rows


def help_line_count() -> int:
    return len(help_lines())
