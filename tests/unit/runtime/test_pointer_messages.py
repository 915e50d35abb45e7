"""Pointer event to message translation."""

from __future__ import annotations

import unittest
from pathlib import Path

from prismtui.runtime import click_regions as regions
from prismtui.runtime import messages as m
from prismtui.runtime.click_regions import Rect
from prismtui.runtime.mouse import messages_for_pointer
from prismtui.runtime.state import AppState, Screen


def _state(screen: Screen = Screen.INSTANCES) -> AppState:
    return AppState(data_dir=Path("/data"), screen=screen)


class PointerClickTests(unittest.TestCase):
    def test_single_and_double_click_on_instance_row(self) -> None:
        state = _state()
        state.click_regions.register(Rect(0, 5, 80, 1), regions.SelectItem(2))

        self.assertEqual(messages_for_pointer(state, "left_down", 10, 5, 1.0), [m.SelectIndex(2)])
        self.assertEqual(
            messages_for_pointer(state, "left_down", 10, 5, 1.1),
            [m.SelectIndex(2), m.LaunchInstance()],
        )

    def test_slow_second_click_only_selects(self) -> None:
        state = _state(Screen.ACCOUNTS)
        state.click_regions.register(Rect(0, 5, 80, 1), regions.SelectItem(0))
        messages_for_pointer(state, "left_down", 10, 5, 1.0)
        self.assertEqual(messages_for_pointer(state, "left_down", 10, 5, 1.6), [m.SelectIndex(0)])

    def test_double_click_activation_depends_on_screen(self) -> None:
        for screen, activate in (
            (Screen.ACCOUNTS, m.ConfirmAccountSelection()),
            (Screen.SERVERS, m.LaunchWithServer()),
        ):
            state = _state(screen)
            state.click_regions.register(Rect(0, 3, 80, 1), regions.SelectItem(1))
            messages_for_pointer(state, "left_down", 4, 3, 0.0)
            self.assertEqual(messages_for_pointer(state, "left_down", 4, 3, 0.2), [m.SelectIndex(1), activate])

    def test_double_click_log_file_loads_it(self) -> None:
        state = _state(Screen.LOGS)
        state.click_regions.register(Rect(0, 4, 30, 1), regions.SelectLogFile(0))
        messages_for_pointer(state, "left_down", 3, 4, 0.0)
        self.assertEqual(messages_for_pointer(state, "left_down", 3, 4, 0.1), [m.SelectIndex(0), m.LoadLogContent()])

    def test_region_actions_map_to_messages(self) -> None:
        state = _state(Screen.SERVERS)
        state.click_regions.register(Rect(0, 0, 10, 1), regions.SwitchTab(3))
        state.click_regions.register(Rect(0, 1, 10, 1), regions.JoinCheckbox())
        state.click_regions.register(Rect(0, 2, 10, 1), regions.GoBack())
        state.click_regions.register(Rect(0, 3, 10, 1), regions.FooterAction(m.AddServer()))
        state.click_regions.register(Rect(0, 4, 10, 1), regions.GroupHeader("Modded"))

        self.assertEqual(messages_for_pointer(state, "left_down", 1, 0, 0.0), [m.SwitchTab(3)])
        self.assertEqual(messages_for_pointer(state, "left_down", 1, 1, 5.0), [m.ToggleJoinOnLaunch()])
        self.assertEqual(messages_for_pointer(state, "left_down", 1, 2, 10.0), [m.Back()])
        self.assertEqual(messages_for_pointer(state, "left_down", 1, 3, 15.0), [m.AddServer()])
        self.assertEqual(messages_for_pointer(state, "left_down", 1, 4, 20.0), [m.ToggleGroupCollapse("Modded")])
        self.assertEqual(messages_for_pointer(state, "left_down", 50, 20, 25.0), [])

    def test_overlay_panel_swallows_clicks(self) -> None:
        state = _state()
        state.click_regions.register(Rect(0, 5, 80, 1), regions.SelectItem(0))
        state.click_regions.register(Rect(0, 0, 80, 24), regions.DismissOverlay())
        state.click_regions.register(Rect(20, 3, 40, 6), regions.Noop())

        self.assertEqual(messages_for_pointer(state, "left_down", 30, 5, 0.0), [])
        self.assertEqual(messages_for_pointer(state, "left_down", 2, 5, 5.0), [m.DismissOverlay()])


class PointerWheelTests(unittest.TestCase):
    def test_wheel_moves_list_selection(self) -> None:
        state = _state()
        self.assertEqual(messages_for_pointer(state, "wheel_down", 0, 0, 0.0), [m.SelectNext()])
        self.assertEqual(messages_for_pointer(state, "wheel_up", 0, 0, 0.0), [m.SelectPrevious()])

    def test_wheel_scrolls_help(self) -> None:
        state = _state(Screen.HELP)
        self.assertEqual(messages_for_pointer(state, "wheel_down", 0, 0, 0.0), [m.ScrollHelp(3)])

    def test_wheel_on_logs_depends_on_pane(self) -> None:
        state = _state(Screen.LOGS)
        state.click_regions.register(Rect(0, 3, 30, 10), regions.SelectLogFile(0))
        state.click_regions.register(Rect(31, 3, 40, 10), regions.ScrollLogPreview())

        self.assertEqual(messages_for_pointer(state, "wheel_down", 40, 5, 0.0), [m.ScrollLog(3)])
        self.assertEqual(messages_for_pointer(state, "wheel_down", 5, 5, 0.0), [m.SelectNext()])
        self.assertEqual(messages_for_pointer(state, "wheel_up", 75, 20, 0.0), [m.SelectPrevious()])
        state.log_content = ["line"]
        self.assertEqual(messages_for_pointer(state, "wheel_up", 75, 20, 0.0), [m.ScrollLog(-3)])

    def test_wheel_on_details_does_nothing(self) -> None:
        self.assertEqual(messages_for_pointer(_state(Screen.INSTANCE_DETAILS), "wheel_down", 0, 0, 0.0), [])


if __name__ == "__main__":
    unittest.main()
