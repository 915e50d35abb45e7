"""Tests for decoder-token translation and the background event source."""

from __future__ import annotations

import unittest

from prismtui.runtime import messages as m
from prismtui.runtime.events import (
    EventSource,
    KeyEvent,
    PointerEvent,
    ResizeEvent,
    TickEvent,
    message_for_event,
    translate_token,
)


class TranslateTokenTests(unittest.TestCase):
    def test_cr_is_enter_and_swallows_following_lf(self) -> None:
        event, skip = translate_token("ENTER_CR", False)
        self.assertEqual(event, KeyEvent("ENTER"))
        self.assertTrue(skip)

        event, skip = translate_token("ENTER_LF", skip)
        self.assertIsNone(event)
        self.assertFalse(skip)

    def test_lone_lf_is_ctrl_j(self) -> None:
        event, skip = translate_token("ENTER_LF", False)
        self.assertEqual(event, KeyEvent("CTRL_J"))
        self.assertFalse(skip)

    def test_empty_token_keeps_pending_lf_skip(self) -> None:
        self.assertEqual(translate_token("", True), (None, True))

    def test_mouse_tokens_become_zero_based_pointer_events(self) -> None:
        event, _ = translate_token("MOUSE_LEFT_DOWN:5:3", False)
        self.assertEqual(event, PointerEvent("left_down", 4, 2))
        event, _ = translate_token("MOUSE_WHEEL_DOWN:1:1", False)
        self.assertEqual(event, PointerEvent("wheel_down", 0, 0))

    def test_ignored_mouse_tokens(self) -> None:
        for token in ("MOUSE", "MOUSE_LEFT_UP:3:3", "MOUSE_LEFT_DOWN:x:1"):
            self.assertEqual(translate_token(token, False), (None, False), token)

    def test_plain_keys_pass_through(self) -> None:
        self.assertEqual(translate_token("j", True), (KeyEvent("j"), False))


class MessageForEventTests(unittest.TestCase):
    def test_each_event_kind_maps_to_one_message(self) -> None:
        self.assertEqual(message_for_event(KeyEvent("q")), m.KeyPressed("q"))
        self.assertEqual(message_for_event(PointerEvent("wheel_up", 1, 2)), m.Pointer("wheel_up", 1, 2))
        self.assertEqual(message_for_event(ResizeEvent(80, 24)), m.Resize(80, 24))
        self.assertEqual(message_for_event(TickEvent()), m.Tick())


class EventSourceTests(unittest.TestCase):
    def test_thread_delivers_keys_ticks_and_resizes(self) -> None:
        keys = iter(["ENTER_CR", "ENTER_LF", "a"])
        sizes = iter([(80, 24), (80, 24), (100, 30)])

        def read_key(_timeout_ms: int) -> str:
            return next(keys, "")

        def terminal_size() -> tuple[int, int]:
            return next(sizes, (100, 30))

        source = EventSource(read_key, terminal_size, tick_seconds=0.0, poll_ms=1)
        source.start()
        try:
            seen: list[object] = []
            for _ in range(20):
                event = source.next_event(timeout=1.0)
                if event is None:
                    break
                seen.append(event)
                if KeyEvent("a") in seen and ResizeEvent(100, 30) in seen:
                    break
        finally:
            source.stop()

        keys_seen = [event for event in seen if isinstance(event, KeyEvent)]
        self.assertEqual(keys_seen, [KeyEvent("ENTER"), KeyEvent("a")])
        self.assertIn(ResizeEvent(100, 30), seen)
        self.assertIn(TickEvent(), seen)

    def test_next_event_times_out_with_none(self) -> None:
        source = EventSource(lambda _ms: "", lambda: (80, 24))
        self.assertIsNone(source.next_event(timeout=0.01))

    def test_suspended_pauses_reads(self) -> None:
        calls: list[int] = []

        def read_key(timeout_ms: int) -> str:
            calls.append(timeout_ms)
            return ""

        source = EventSource(read_key, lambda: (80, 24), tick_seconds=3600, poll_ms=1)
        with source.suspended():
            source.start()
            try:
                source.next_event(timeout=0.05)
                self.assertEqual(calls, [])
            finally:
                source.stop()


if __name__ == "__main__":
    unittest.main()
