"""Low-level terminal input decoding.

Reads raw bytes from stdin and translates them into normalized key tokens.
Handles ESC-sequence timing, modifier combos, and SGR mouse events.
"""

from __future__ import annotations

import os
import select

ESC_SEQUENCE_TIMEOUT_MS = 25
MAX_MOUSE_PAYLOAD = 64

_CONTROL_KEYS: dict[bytes, str] = {
    b"\x03": "CTRL_C",
    b"\x0b": "CTRL_K",
    b"\t": "TAB",
    b"\x08": "BACKSPACE",
    b"\x7f": "BACKSPACE",
    b"\r": "ENTER_CR",
    b"\n": "ENTER_LF",
}

_CSI_FINAL_KEYS: dict[bytes, str] = {
    b"A": "UP",
    b"B": "DOWN",
    b"C": "RIGHT",
    b"D": "LEFT",
    b"H": "HOME",
    b"F": "END",
    b"Z": "SHIFT_TAB",
}

# ESC [ <n> ~ sequences.
_CSI_TILDE_KEYS: dict[str, str] = {
    "1": "HOME",
    "7": "HOME",
    "4": "END",
    "8": "END",
    "3": "DELETE",
    "5": "PAGE_UP",
    "6": "PAGE_DOWN",
}

# ESC [ 1 ; <modifier> <final> sequences.
_MODIFIED_ARROWS: dict[tuple[str, bytes], str] = {
    ("5", b"A"): "CTRL_UP",
    ("5", b"B"): "CTRL_DOWN",
    ("2", b"C"): "SHIFT_RIGHT",
    ("2", b"D"): "SHIFT_LEFT",
    ("3", b"C"): "ALT_RIGHT",
    ("3", b"D"): "ALT_LEFT",
}


class KeyReader:
    """Stateful decoder over one input file descriptor.

    Bytes read ahead while disambiguating a lone ESC are kept for the next
    call instead of being dropped.
    """

    def __init__(self, fd: int) -> None:
        self.fd = fd
        self._pending: list[bytes] = []

    def _read_ready_byte(self, timeout_ms: int) -> bytes | None:
        if self._pending:
            return self._pending.pop(0)
        ready, _, _ = select.select([self.fd], [], [], max(0.0, timeout_ms / 1000.0))
        if not ready:
            return None
        ch = os.read(self.fd, 1)
        if not ch:
            return None
        return ch

    def _read_utf8_tail(self, lead: bytes) -> str:
        first = lead[0]
        if first >= 0xF0:
            extra = 3
        elif first >= 0xE0:
            extra = 2
        elif first >= 0xC0:
            extra = 1
        else:
            extra = 0
        data = lead
        for _ in range(extra):
            nxt = self._read_ready_byte(ESC_SEQUENCE_TIMEOUT_MS)
            if nxt is None:
                break
            data += nxt
        return data.decode("utf-8", errors="replace")

    def read_key(self, timeout_ms: int | None = None) -> str:
        """Return the next key token, or ``""`` when nothing arrived in time."""
        if self._pending:
            ch = self._pending.pop(0)
        else:
            if timeout_ms is not None:
                ready, _, _ = select.select([self.fd], [], [], max(0.0, timeout_ms / 1000.0))
                if not ready:
                    return ""
            ch = os.read(self.fd, 1)
            if not ch:
                return ""

        control = _CONTROL_KEYS.get(ch)
        if control is not None:
            return control
        if ch != b"\x1b":
            if ch[0] < 0x20:
                return f"CTRL_{chr(ch[0] + 0x40)}"
            return self._read_utf8_tail(ch)
        return self._read_escape()

    def _read_escape(self) -> str:
        seq = self._read_ready_byte(ESC_SEQUENCE_TIMEOUT_MS)
        if seq is None:
            return "ESC"
        if seq == b"O":
            final = self._read_ready_byte(ESC_SEQUENCE_TIMEOUT_MS)
            if final is None:
                return "ESC"
            return _CSI_FINAL_KEYS.get(final, "ESC")
        if seq != b"[":
            self._pending.append(seq)
            return "ESC"
        seq = self._read_ready_byte(ESC_SEQUENCE_TIMEOUT_MS)
        if seq is None:
            return "ESC"
        if seq in _CSI_FINAL_KEYS:
            return _CSI_FINAL_KEYS[seq]
        if seq == b"<":
            return self._read_sgr_mouse()
        if seq.isdigit():
            return self._read_numeric_csi(seq)
        return "ESC"

    def _read_numeric_csi(self, first: bytes) -> str:
        params = first
        while True:
            part = self._read_ready_byte(ESC_SEQUENCE_TIMEOUT_MS)
            if part is None:
                return "ESC"
            if part == b"~":
                return _CSI_TILDE_KEYS.get(params.decode("ascii").split(";")[0], "ESC")
            if part.isdigit() or part == b";":
                params += part
                if len(params) > 16:
                    return "ESC"
                continue
            pieces = params.decode("ascii").split(";")
            if len(pieces) == 2:
                return _MODIFIED_ARROWS.get((pieces[1], part), "ESC")
            return "ESC"

    def _read_sgr_mouse(self) -> str:
        # SGR mouse: ESC [ < btn ; col ; row (M/m)
        payload = []
        while True:
            part = self._read_ready_byte(ESC_SEQUENCE_TIMEOUT_MS)
            if part is None:
                return "ESC"
            if part in {b"M", b"m"}:
                break
            payload.append(part)
            if len(payload) > MAX_MOUSE_PAYLOAD:
                return "ESC"
        try:
            btn_s, col_s, row_s = b"".join(payload).decode("ascii").split(";")
            btn = int(btn_s)
            col = int(col_s)
            row = int(row_s)
        except ValueError:
            return "ESC"
        button = btn & 0b11
        if btn & 0b0100_0000:
            if button == 0:
                return f"MOUSE_WHEEL_UP:{col}:{row}"
            if button == 1:
                return f"MOUSE_WHEEL_DOWN:{col}:{row}"
            return "MOUSE"
        if btn & 0b0010_0000:
            # Motion while a button is held.
            return "MOUSE"
        if button == 0:
            suffix = "DOWN" if part == b"M" else "UP"
            return f"MOUSE_LEFT_{suffix}:{col}:{row}"
        return "MOUSE"


def parse_mouse_token(key: str) -> tuple[str, int, int] | None:
    """Split ``MOUSE_<KIND>:col:row`` into ``(kind, col, row)`` with 1-based cells."""
    if not key.startswith("MOUSE_"):
        return None
    parts = key.split(":")
    if len(parts) != 3:
        return None
    try:
        return parts[0], int(parts[1]), int(parts[2])
    except ValueError:
        return None
