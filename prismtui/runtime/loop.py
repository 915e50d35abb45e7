"""Main interactive event loop for the terminal UI.

Renders, waits for one event, and hands it to the update engine.
This loop is intentionally wiring-heavy; feature logic lives in the engine.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from .events import message_for_event
from .state import AppState


@dataclass(frozen=True)
class RuntimeLoopTiming:
    """Timing constants controlling interactive loop behavior."""

    event_wait_seconds: float = 0.1


@dataclass(frozen=True)
class RuntimeLoopCallbacks:
    """Injected operations used by ``run_main_loop``.

    Keeping the loop callback-driven lets tests drive it with scripted
    events and an in-memory screen.
    """

    render: Callable[[AppState, int, int], str]
    write: Callable[[str], None]
    terminal_size: Callable[[], tuple[int, int]]
    next_event: Callable[[float], object | None]
    update: Callable[[AppState, object], AppState]


def run_main_loop(state: AppState, timing: RuntimeLoopTiming, callbacks: RuntimeLoopCallbacks) -> None:
    """Run until a message sets ``state.should_quit``.

    A frame is written only when its content differs from the last one.
    Rendering also refreshes the click registry, so pointer events always
    resolve against what is on screen.
    """
    ops = callbacks
    last_frame: str | None = None
    while not state.should_quit:
        width, height = ops.terminal_size()
        frame = ops.render(state, width, height)
        if frame != last_frame:
            ops.write(frame)
            last_frame = frame

        event = ops.next_event(timing.event_wait_seconds)
        if event is None:
            continue
        state = ops.update(state, message_for_event(event))
