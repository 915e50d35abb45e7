"""Display-width helpers for terminal cell layout.

Used by the canvas to place text without overrunning cell boundaries when
wide or combining characters are present.
"""

from __future__ import annotations

import re
import unicodedata

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")


def char_display_width(ch: str) -> int:
    """Return terminal column width for one character.

    Combining marks consume no columns, East Asian wide/fullwidth characters
    consume two, and control characters are treated as one blank cell.
    """
    if unicodedata.combining(ch):
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def strip_ansi(text: str) -> str:
    return ANSI_ESCAPE_RE.sub("", text)


def display_width(text: str) -> int:
    """Return display columns used by ``text`` ignoring escape sequences."""
    return sum(char_display_width(ch) for ch in strip_ansi(text))


def clip_text(text: str, max_cols: int) -> str:
    """Trim plain text to at most ``max_cols`` display columns.

    Tabs become single spaces and other control characters are dropped so
    log lines cannot move the terminal cursor.
    """
    if max_cols <= 0 or not text:
        return ""
    out: list[str] = []
    col = 0
    for ch in text:
        if ch == "\t":
            ch = " "
        elif ch < " " or ch == "\x7f":
            continue
        width = char_display_width(ch)
        if col + width > max_cols:
            break
        out.append(ch)
        col += width
    return "".join(out)


def truncate_with_ellipsis(text: str, max_cols: int) -> str:
    """Clip ``text`` and mark the cut with ``…`` when it does not fit."""
    if display_width(text) <= max_cols:
        return clip_text(text, max_cols)
    if max_cols <= 1:
        return clip_text(text, max_cols)
    return clip_text(text, max_cols - 1) + "…"
