"""Input event source feeding the main loop.

One daemon thread multiplexes decoded keys, pointer events, a periodic
tick, and terminal resizes into a single queue. It never touches
application state; the loop turns each event into one message.
"""

from __future__ import annotations

import contextlib
import threading
import time
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from queue import Empty, Queue

from ..input import parse_mouse_token
from . import messages as m

TICK_SECONDS = 0.25
POLL_MS = 50

_POINTER_KINDS: dict[str, str] = {
    "MOUSE_LEFT_DOWN": "left_down",
    "MOUSE_WHEEL_UP": "wheel_up",
    "MOUSE_WHEEL_DOWN": "wheel_down",
}


@dataclass(frozen=True)
class KeyEvent:
    key: str


@dataclass(frozen=True)
class PointerEvent:
    """Pointer event with 0-based cell coordinates."""

    kind: str
    col: int
    row: int


@dataclass(frozen=True)
class TickEvent:
    pass


@dataclass(frozen=True)
class ResizeEvent:
    width: int
    height: int


Event = KeyEvent | PointerEvent | TickEvent | ResizeEvent


def translate_token(token: str, skip_next_lf: bool) -> tuple[Event | None, bool]:
    """Map a decoder token to an event.

    Returns ``(event, skip_next_lf)``. A CR is Enter; an LF directly after a
    CR belongs to the same keypress and is dropped, while a lone LF is
    Ctrl+J.
    """
    if token == "ENTER_CR":
        return KeyEvent("ENTER"), True
    if token == "ENTER_LF":
        if skip_next_lf:
            return None, False
        return KeyEvent("CTRL_J"), False
    if token.startswith("MOUSE"):
        parsed = parse_mouse_token(token)
        if parsed is None:
            return None, False
        name, col, row = parsed
        kind = _POINTER_KINDS.get(name)
        if kind is None:
            return None, False
        return PointerEvent(kind, max(0, col - 1), max(0, row - 1)), False
    if not token:
        return None, skip_next_lf
    return KeyEvent(token), False


def message_for_event(event: Event) -> m.Message:
    if isinstance(event, KeyEvent):
        return m.KeyPressed(event.key)
    if isinstance(event, PointerEvent):
        return m.Pointer(event.kind, event.col, event.row)
    if isinstance(event, ResizeEvent):
        return m.Resize(event.width, event.height)
    return m.Tick()


class EventSource:
    """Background reader producing ``Event`` values on a queue."""

    def __init__(
        self,
        read_key: Callable[[int], str],
        terminal_size: Callable[[], tuple[int, int]],
        *,
        tick_seconds: float = TICK_SECONDS,
        poll_ms: int = POLL_MS,
        monotonic: Callable[[], float] = time.monotonic,
    ) -> None:
        self._read_key = read_key
        self._terminal_size = terminal_size
        self._tick_seconds = tick_seconds
        self._poll_ms = poll_ms
        self._monotonic = monotonic
        self._events: Queue[Event] = Queue()
        self._stop = threading.Event()
        self._active = threading.Event()
        self._active.set()
        self._read_lock = threading.Lock()
        self._thread: threading.Thread | None = None

    def start(self) -> None:
        if self._thread is not None:
            return
        self._thread = threading.Thread(target=self._run, name="prismtui-events", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        self._stop.set()
        self._active.set()
        if self._thread is not None:
            self._thread.join(timeout=1.0)
            self._thread = None

    @contextlib.contextmanager
    def suspended(self) -> Iterator[None]:
        """Stop reading stdin while another program owns the terminal."""
        self._active.clear()
        # Wait out any read already in progress.
        with self._read_lock:
            pass
        try:
            yield
        finally:
            self._active.set()

    def next_event(self, timeout: float | None = None) -> Event | None:
        try:
            return self._events.get(timeout=timeout)
        except Empty:
            return None

    def _run(self) -> None:
        skip_next_lf = False
        last_tick = self._monotonic()
        last_size = self._terminal_size()
        while not self._stop.is_set():
            if not self._active.is_set():
                self._active.wait(self._poll_ms / 1000.0)
                continue
            token = ""
            with self._read_lock:
                if self._active.is_set():
                    token = self._read_key(self._poll_ms)
            event, skip_next_lf = translate_token(token, skip_next_lf)
            if event is not None:
                self._events.put(event)

            now = self._monotonic()
            if now - last_tick >= self._tick_seconds:
                last_tick = now
                self._events.put(TickEvent())
            size = self._terminal_size()
            if size != last_size:
                last_size = size
                self._events.put(ResizeEvent(*size))
