from __future__ import annotations

import os
import unittest
from unittest import mock

from prismtui.runtime import terminal
from prismtui.runtime.terminal import ENTER_TUI, LEAVE_TUI, TerminalController


class TerminalControllerTests(unittest.TestCase):
    def _controller(self) -> TerminalController:
        with mock.patch("prismtui.runtime.terminal.termios.tcgetattr", return_value=["saved"]):
            return TerminalController(stdin_fd=0, stdout_fd=1)

    def test_raw_mode_brackets_body_and_restores_on_error(self) -> None:
        controller = self._controller()
        with (
            mock.patch("prismtui.runtime.terminal.tty.setraw") as setraw,
            mock.patch("prismtui.runtime.terminal.termios.tcsetattr") as tcsetattr,
            mock.patch("prismtui.runtime.terminal.os.write", side_effect=lambda _fd, data: len(data)) as write,
        ):
            with self.assertRaises(RuntimeError):
                with controller.raw_mode():
                    raise RuntimeError("boom")

        setraw.assert_called_once()
        self.assertEqual([c.args[1] for c in write.call_args_list], [ENTER_TUI, LEAVE_TUI])
        self.assertEqual(tcsetattr.call_args.args[2], ["saved"])

    def test_suspended_leaves_and_reenters_only_when_active(self) -> None:
        controller = self._controller()
        with (
            mock.patch("prismtui.runtime.terminal.tty.setraw"),
            mock.patch("prismtui.runtime.terminal.termios.tcsetattr"),
            mock.patch("prismtui.runtime.terminal.os.write", side_effect=lambda _fd, data: len(data)) as write,
        ):
            with controller.suspended():
                pass
            self.assertEqual(write.call_count, 0)

            with controller.raw_mode():
                with controller.suspended():
                    pass

        self.assertEqual(
            [c.args[1] for c in write.call_args_list],
            [ENTER_TUI, LEAVE_TUI, ENTER_TUI, LEAVE_TUI],
        )

    def test_write_handles_partial_writes(self) -> None:
        controller = self._controller()
        chunks: list[bytes] = []

        def partial_write(_fd: int, data: bytes) -> int:
            chunks.append(bytes(data[:2]))
            return min(2, len(data))

        with mock.patch("prismtui.runtime.terminal.os.write", side_effect=partial_write):
            controller.write("héllo")

        self.assertEqual(b"".join(chunks), "héllo".encode("utf-8"))

    def test_terminal_size_reads_columns_and_lines(self) -> None:
        with mock.patch(
            "prismtui.runtime.terminal.shutil.get_terminal_size",
            return_value=os.terminal_size((120, 40)),
        ):
            self.assertEqual(terminal.terminal_size(), (120, 40))


if __name__ == "__main__":
    unittest.main()
