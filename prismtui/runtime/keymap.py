"""Key token to message translation.

Keys go to a text-entry table whenever an input dialog is open; screen
tables apply only in normal mode. The instances screen also recognizes
the ``g`` ``l`` chord through ``AppState.chord``.
"""

from __future__ import annotations

from dataclasses import dataclass

from . import messages as m
from .state import AppState, InputMode, LogLevel, Screen

CHORD_LEADER = "g"
LAUNCHER_LOGS_CHORD_KEY = "l"


@dataclass(frozen=True)
class KeyComboBinding:
    """Mapping from one or more key tokens to a single message."""

    combos: tuple[str, ...]
    message: m.Message


class KeyComboRegistry:
    """Small key-to-message table; later bindings overwrite earlier ones."""

    def __init__(self, *bindings: KeyComboBinding) -> None:
        self._messages: dict[str, m.Message] = {}
        for binding in bindings:
            for combo in binding.combos:
                self._messages[combo] = binding.message

    def lookup(self, key: str) -> m.Message | None:
        return self._messages.get(key)

    def keys(self) -> tuple[str, ...]:
        return tuple(self._messages)


INSTANCES_KEYS = KeyComboRegistry(
    KeyComboBinding(("CTRL_J", "CTRL_DOWN"), m.NextGroup()),
    KeyComboBinding(("CTRL_K", "CTRL_UP"), m.PrevGroup()),
    KeyComboBinding(("j", "DOWN"), m.SelectNext()),
    KeyComboBinding(("k", "UP"), m.SelectPrevious()),
    KeyComboBinding(("G", "END"), m.SelectLast()),
    KeyComboBinding(("HOME",), m.SelectFirst()),
    KeyComboBinding(("l", "ENTER", "RIGHT"), m.LaunchInstance()),
    KeyComboBinding(("x",), m.KillInstance()),
    KeyComboBinding(("L",), m.OpenInstanceLogs()),
    KeyComboBinding(("s",), m.OpenServerScreen()),
    KeyComboBinding(("S",), m.CycleSortMode()),
    KeyComboBinding(("R",), m.ToggleSortDirection()),
    KeyComboBinding(("r",), m.Reload()),
    KeyComboBinding(("a",), m.OpenAccountScreen()),
    KeyComboBinding(("i",), m.OpenInstanceDetails()),
    KeyComboBinding(("o",), m.OpenFolder()),
    KeyComboBinding(("TAB",), m.ToggleGroupCollapse()),
    KeyComboBinding(("/",), m.StartSearch()),
    KeyComboBinding(("?",), m.OpenHelp()),
    KeyComboBinding(("q",), m.Quit()),
)

ACCOUNTS_KEYS = KeyComboRegistry(
    KeyComboBinding(("j", "DOWN"), m.SelectNext()),
    KeyComboBinding(("k", "UP"), m.SelectPrevious()),
    KeyComboBinding(("l", "ENTER", "RIGHT"), m.ConfirmAccountSelection()),
    KeyComboBinding(("h", "ESC", "LEFT"), m.Back()),
    KeyComboBinding(("/",), m.StartSearch()),
    KeyComboBinding(("?",), m.OpenHelp()),
    KeyComboBinding(("q",), m.Quit()),
)

SERVERS_KEYS = KeyComboRegistry(
    KeyComboBinding(("j", "DOWN"), m.SelectNext()),
    KeyComboBinding(("k", "UP"), m.SelectPrevious()),
    KeyComboBinding(("l", "ENTER", "RIGHT"), m.LaunchWithServer()),
    KeyComboBinding(("a",), m.AddServer()),
    KeyComboBinding(("e",), m.EditServer()),
    KeyComboBinding(("d",), m.DeleteServer()),
    KeyComboBinding(("J",), m.ToggleJoinOnLaunch()),
    KeyComboBinding(("h", "ESC", "LEFT"), m.Back()),
    KeyComboBinding(("?",), m.OpenHelp()),
    KeyComboBinding(("q",), m.Quit()),
)

LOGS_KEYS = KeyComboRegistry(
    KeyComboBinding(("j", "DOWN"), m.SelectNext()),
    KeyComboBinding(("k", "UP"), m.SelectPrevious()),
    KeyComboBinding(("l", "ENTER", "RIGHT"), m.LoadLogContent()),
    KeyComboBinding(("J", "PAGE_DOWN"), m.ScrollLog(pages=1)),
    KeyComboBinding(("K", "PAGE_UP"), m.ScrollLog(pages=-1)),
    KeyComboBinding(("/",), m.StartLogSearch()),
    KeyComboBinding(("n",), m.LogSearchNext()),
    KeyComboBinding(("N",), m.LogSearchPrev()),
    KeyComboBinding(("1",), m.ToggleLogLevel(LogLevel.ERROR)),
    KeyComboBinding(("2",), m.ToggleLogLevel(LogLevel.WARN)),
    KeyComboBinding(("3",), m.ToggleLogLevel(LogLevel.INFO)),
    KeyComboBinding(("4",), m.ToggleLogLevel(LogLevel.DEBUG)),
    KeyComboBinding(("0",), m.ClearLogLevelFilter()),
    KeyComboBinding(("e",), m.OpenLogInEditor()),
    KeyComboBinding(("o",), m.OpenFolder()),
    KeyComboBinding(("h", "ESC", "LEFT"), m.Back()),
    KeyComboBinding(("?",), m.OpenHelp()),
    KeyComboBinding(("q",), m.Quit()),
)

DETAILS_KEYS = KeyComboRegistry(
    KeyComboBinding(("h", "ESC", "LEFT"), m.Back()),
    KeyComboBinding(("o",), m.OpenFolder()),
    KeyComboBinding(("?",), m.OpenHelp()),
    KeyComboBinding(("q",), m.Quit()),
)

HELP_KEYS = KeyComboRegistry(
    KeyComboBinding(("ESC", "q", "?", "h", "LEFT"), m.Back()),
    KeyComboBinding(("j", "DOWN"), m.ScrollHelp(1)),
    KeyComboBinding(("k", "UP"), m.ScrollHelp(-1)),
    KeyComboBinding(("PAGE_DOWN",), m.ScrollHelp(pages=1)),
    KeyComboBinding(("PAGE_UP",), m.ScrollHelp(pages=-1)),
)

SCREEN_KEYS: dict[Screen, KeyComboRegistry] = {
    Screen.INSTANCES: INSTANCES_KEYS,
    Screen.ACCOUNTS: ACCOUNTS_KEYS,
    Screen.SERVERS: SERVERS_KEYS,
    Screen.LOGS: LOGS_KEYS,
    Screen.INSTANCE_DETAILS: DETAILS_KEYS,
    Screen.HELP: HELP_KEYS,
}

TEXT_ENTRY_KEYS = KeyComboRegistry(
    KeyComboBinding(("ENTER",), m.InputConfirm()),
    KeyComboBinding(("ESC",), m.InputCancel()),
    KeyComboBinding(("BACKSPACE",), m.InputBackspace()),
)

# Instance search also lets the cursor move while typing.
SEARCH_EXTRA_KEYS = KeyComboRegistry(
    KeyComboBinding(("DOWN",), m.SelectNext()),
    KeyComboBinding(("UP",), m.SelectPrevious()),
)

CONFIRM_DELETE_KEYS = KeyComboRegistry(
    KeyComboBinding(("y", "Y"), m.ConfirmDelete()),
    KeyComboBinding(("n", "N", "ESC"), m.CancelDelete()),
)


def is_text_key(key: str) -> bool:
    """Return whether ``key`` is one printable character."""
    return len(key) == 1 and key.isprintable()


def _text_entry_messages(state: AppState, key: str) -> list[m.Message]:
    if state.input_mode == InputMode.CONFIRM_DELETE:
        message = CONFIRM_DELETE_KEYS.lookup(key)
        return [message] if message is not None else []
    message = TEXT_ENTRY_KEYS.lookup(key)
    if message is None and state.input_mode == InputMode.SEARCH:
        message = SEARCH_EXTRA_KEYS.lookup(key)
    if message is not None:
        return [message]
    if is_text_key(key):
        return [m.InputChar(key)]
    return []


def _instances_messages(state: AppState, key: str) -> list[m.Message]:
    if state.chord.awaiting:
        state.chord.reset()
        if key == LAUNCHER_LOGS_CHORD_KEY:
            return [m.OpenLauncherLogs()]
        if key == CHORD_LEADER:
            return [m.SelectFirst()]
        # Chord not completed: the leader's own action, then this key as usual.
        return [m.SelectFirst(), *_instances_messages(state, key)]
    if key == CHORD_LEADER:
        state.chord.begin(key)
        return []
    if key == "ESC":
        return [m.ClearSearch()] if state.search_query else []
    message = INSTANCES_KEYS.lookup(key)
    return [message] if message is not None else []


def messages_for_key(state: AppState, key: str) -> list[m.Message]:
    """Translate one key token into zero or more messages.

    Only the chord state is touched here; everything else is left to the
    update engine, which applies the returned messages in order.
    """
    if key == "CTRL_C":
        return [m.Quit()]
    if state.input_mode != InputMode.NORMAL:
        return _text_entry_messages(state, key)
    if state.screen == Screen.INSTANCES:
        return _instances_messages(state, key)
    message = SCREEN_KEYS[state.screen].lookup(key)
    return [message] if message is not None else []
