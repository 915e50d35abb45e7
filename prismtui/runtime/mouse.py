"""Pointer event to message translation.

Left presses resolve against the current frame's click registry and the
persistent double-click tracker; a double click layers the screen's
activate message on top of the single-click selection.
"""

from __future__ import annotations

from . import click_regions as regions
from . import messages as m
from .state import AppState, Screen

WHEEL_SCROLL_LINES = 3

# Screen-specific activation for a double click on a list row.
_ACTIVATE_ON_DOUBLE: dict[Screen, m.Message] = {
    Screen.INSTANCES: m.LaunchInstance(),
    Screen.ACCOUNTS: m.ConfirmAccountSelection(),
    Screen.SERVERS: m.LaunchWithServer(),
}


def _click_messages(state: AppState, action: regions.ClickAction, is_double: bool) -> list[m.Message]:
    if isinstance(action, regions.SwitchTab):
        return [m.SwitchTab(action.index)]
    if isinstance(action, regions.SelectItem):
        out: list[m.Message] = [m.SelectIndex(action.index)]
        activate = _ACTIVATE_ON_DOUBLE.get(state.screen)
        if is_double and activate is not None:
            out.append(activate)
        return out
    if isinstance(action, regions.GroupHeader):
        return [m.ToggleGroupCollapse(action.key)]
    if isinstance(action, regions.FooterAction):
        return [action.message]
    if isinstance(action, regions.JoinCheckbox):
        return [m.ToggleJoinOnLaunch()]
    if isinstance(action, regions.GoBack):
        return [m.Back()]
    if isinstance(action, regions.DismissOverlay):
        return [m.DismissOverlay()]
    if isinstance(action, regions.SelectLogFile):
        out = [m.SelectIndex(action.index)]
        if is_double:
            out.append(m.LoadLogContent())
        return out
    return []


def _wheel_messages(state: AppState, direction: int, col: int, row: int) -> list[m.Message]:
    if state.screen == Screen.HELP:
        return [m.ScrollHelp(direction * WHEEL_SCROLL_LINES)]
    step: m.Message = m.SelectNext() if direction > 0 else m.SelectPrevious()
    if state.screen == Screen.LOGS:
        action = state.click_regions.hit_test(col, row)
        if isinstance(action, regions.ScrollLogPreview):
            return [m.ScrollLog(direction * WHEEL_SCROLL_LINES)]
        if isinstance(action, regions.SelectLogFile):
            return [step]
        if state.log_content is not None:
            return [m.ScrollLog(direction * WHEEL_SCROLL_LINES)]
        return [step]
    if state.screen == Screen.INSTANCE_DETAILS:
        return []
    return [step]


def messages_for_pointer(state: AppState, kind: str, col: int, row: int, now: float) -> list[m.Message]:
    """Translate one pointer event; only the double-click tracker is updated."""
    if kind == "left_down":
        is_double = state.double_click.press(col, row, now)
        return _click_messages(state, state.click_regions.hit_test(col, row), is_double)
    if kind == "wheel_up":
        return _wheel_messages(state, -1, col, row)
    if kind == "wheel_down":
        return _wheel_messages(state, 1, col, row)
    return []
