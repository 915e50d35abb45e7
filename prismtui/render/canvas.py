"""Cell canvas composed into one ANSI frame per render."""

from __future__ import annotations

from ..ansi import char_display_width, clip_text
from ..runtime.click_regions import Rect

# Placeholder for the right half of a double-width character.
WIDE_TAIL = ""


class Canvas:
    """Fixed-size grid of ``(char, style)`` cells."""

    def __init__(self, width: int, height: int) -> None:
        self.width = max(0, width)
        self.height = max(0, height)
        self._cells: list[list[tuple[str, str]]] = [[(" ", "")] * self.width for _ in range(self.height)]

    def put(self, x: int, y: int, text: str, style: str = "", max_width: int | None = None) -> int:
        """Write ``text`` at ``(x, y)``, clipped to the canvas and ``max_width``.

        Returns the column after the last written cell.
        """
        if not 0 <= y < self.height or x >= self.width:
            return x
        limit = self.width - x if max_width is None else min(max_width, self.width - x)
        col = x
        for ch in clip_text(text, limit):
            width = char_display_width(ch)
            if width == 0:
                continue
            if col >= 0:
                self._cells[y][col] = (ch, style)
                if width == 2 and col + 1 < self.width:
                    self._cells[y][col + 1] = (WIDE_TAIL, style)
            col += width
        return col

    def fill(self, rect: Rect, style: str = "", char: str = " ") -> None:
        for y in range(max(0, rect.y), min(self.height, rect.y + rect.height)):
            for x in range(max(0, rect.x), min(self.width, rect.x + rect.width)):
                self._cells[y][x] = (char, style)

    def restyle_row(self, y: int, x: int, width: int, style: str) -> None:
        """Apply ``style`` to existing cells without changing their text."""
        if not 0 <= y < self.height:
            return
        for col in range(max(0, x), min(self.width, x + width)):
            ch, _ = self._cells[y][col]
            self._cells[y][col] = (ch, style)

    def box(self, rect: Rect, style: str = "", title: str = "") -> None:
        """Draw a single-line border around ``rect`` and blank its interior."""
        if rect.width < 2 or rect.height < 2:
            return
        self.fill(rect)
        right = rect.x + rect.width - 1
        bottom = rect.y + rect.height - 1
        self.put(rect.x, rect.y, "┌" + "─" * (rect.width - 2) + "┐", style)
        self.put(rect.x, bottom, "└" + "─" * (rect.width - 2) + "┘", style)
        for y in range(rect.y + 1, bottom):
            self.put(rect.x, y, "│", style)
            self.put(right, y, "│", style)
        if title:
            self.put(rect.x + 2, rect.y, f" {title} ", style, max_width=rect.width - 4)

    def cell(self, x: int, y: int) -> tuple[str, str]:
        return self._cells[y][x]

    def row_text(self, y: int) -> str:
        return "".join(ch for ch, _ in self._cells[y])

    def to_ansi(self, reset: str) -> str:
        """Compose the frame, emitting style changes only between runs."""
        out: list[str] = []
        for y, row in enumerate(self._cells):
            out.append(f"\x1b[{y + 1};1H")
            current = ""
            for ch, style in row:
                if style != current:
                    if current and reset:
                        out.append(reset)
                    if style:
                        out.append(style)
                    current = style
                out.append(ch)
            if current and reset:
                out.append(reset)
        return "".join(out)
