from __future__ import annotations

import unittest
from pathlib import Path

from prismtui.runtime import RuntimeLoopCallbacks, RuntimeLoopTiming, run_main_loop
from prismtui.runtime import messages as m
from prismtui.runtime.events import KeyEvent, TickEvent
from prismtui.runtime.state import AppState


class _ScriptedEvents:
    def __init__(self, events: list[object | None]) -> None:
        self._events = list(events)
        self.timeouts: list[float] = []

    def __call__(self, timeout: float) -> object | None:
        self.timeouts.append(timeout)
        if not self._events:
            return KeyEvent("q")
        return self._events.pop(0)


class RuntimeLoopTests(unittest.TestCase):
    def _run(self, events: list[object | None]) -> tuple[list[str], list[object], _ScriptedEvents]:
        state = AppState(data_dir=Path("/data"))
        written: list[str] = []
        applied: list[object] = []
        script = _ScriptedEvents(events)

        def render(current: AppState, width: int, height: int) -> str:
            return f"{width}x{height} chars={len(applied)}"

        def update(current: AppState, message: object) -> AppState:
            applied.append(message)
            if message == m.KeyPressed("q"):
                current.should_quit = True
            return current

        callbacks = RuntimeLoopCallbacks(
            render=render,
            write=written.append,
            terminal_size=lambda: (80, 24),
            next_event=script,
            update=update,
        )
        run_main_loop(state, RuntimeLoopTiming(event_wait_seconds=0.25), callbacks)
        return written, applied, script

    def test_events_become_messages_until_quit(self) -> None:
        _written, applied, script = self._run([KeyEvent("j"), TickEvent()])
        self.assertEqual(applied, [m.KeyPressed("j"), m.Tick(), m.KeyPressed("q")])
        self.assertEqual(script.timeouts, [0.25, 0.25, 0.25])

    def test_unchanged_frames_are_not_rewritten(self) -> None:
        written, applied, _script = self._run([None, None, KeyEvent("j")])
        self.assertEqual(applied, [m.KeyPressed("j"), m.KeyPressed("q")])
        self.assertEqual(written, ["80x24 chars=0", "80x24 chars=1"])

    def test_quit_state_skips_loop(self) -> None:
        state = AppState(data_dir=Path("/data"), should_quit=True)
        written: list[str] = []
        callbacks = RuntimeLoopCallbacks(
            render=lambda *_args: "frame",
            write=written.append,
            terminal_size=lambda: (80, 24),
            next_event=lambda _timeout: None,
            update=lambda current, _message: current,
        )
        run_main_loop(state, RuntimeLoopTiming(), callbacks)
        self.assertEqual(written, [])


if __name__ == "__main__":
    unittest.main()
