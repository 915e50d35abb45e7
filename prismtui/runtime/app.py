"""Runtime composition layer for prismtui.

Builds initial state from the launcher data directory, wires collaborators
to the terminal, and starts the loop.
"""

from __future__ import annotations

import contextlib
import logging
import sys
from collections.abc import Iterator
from pathlib import Path

from ..actions.launch import DEFAULT_LAUNCHER_COMMAND
from ..data import LauncherPaths, active_account_name
from ..errors import DataLoadError
from ..input import KeyReader
from ..instance_model import storage_to_visual
from ..render import render_frame
from ..ui_theme import resolve_theme
from . import messages as m
from .config import load_preferences
from .events import EventSource
from .loop import RuntimeLoopCallbacks, RuntimeLoopTiming, run_main_loop
from .selection import current_rows, initialize_lists, select_instance
from .services import Collaborators, default_collaborators
from .state import AppState
from .terminal import TerminalController, terminal_size
from .update import UpdateEngine

logger = logging.getLogger(__name__)


def build_initial_state(paths: LauncherPaths, collaborators: Collaborators) -> AppState:
    """Load instances, accounts, and saved preferences into a fresh state.

    A load failure leaves the corresponding list empty; the dashboard still
    starts so the user can see what is wrong and reload. The cursor starts
    on the launcher's own selected instance when it is visible.
    """
    preferences = load_preferences()
    state = AppState(
        data_dir=paths.data_dir,
        sort_mode=preferences.sort_mode,
        sort_ascending=preferences.sort_ascending,
    )
    try:
        state.instances = list(collaborators.load_instances())
    except DataLoadError as exc:
        logger.error("failed to load instances: %s", exc)
        state.error_message = f"Failed to load instances: {exc}"
    try:
        state.accounts = list(collaborators.load_accounts())
    except DataLoadError as exc:
        logger.error("failed to load accounts: %s", exc)
        state.error_message = f"Failed to load accounts: {exc}"
    state.active_account = active_account_name(state.accounts)
    initialize_lists(state)
    storage_index = state.storage_index_of(paths.selected_instance) if paths.selected_instance else None
    if storage_index is not None:
        visual_index = storage_to_visual(current_rows(state), storage_index)
        if visual_index is not None:
            select_instance(state, visual_index)
    return state


def run_app(
    data_dir: Path,
    *,
    launcher_command: str = DEFAULT_LAUNCHER_COMMAND,
    theme_name: str | None = None,
    no_color: bool = False,
) -> int:
    """Run the interactive dashboard until the user quits."""
    paths = LauncherPaths.from_data_dir(data_dir)
    stdin_fd = sys.stdin.fileno()
    stdout_fd = sys.stdout.fileno()
    terminal = TerminalController(stdin_fd, stdout_fd)
    reader = KeyReader(stdin_fd)
    events = EventSource(reader.read_key, terminal_size)

    @contextlib.contextmanager
    def suspend_tui() -> Iterator[None]:
        with events.suspended(), terminal.suspended():
            yield

    collaborators = default_collaborators(paths, launcher_command=launcher_command, suspend_tui=suspend_tui)
    state = build_initial_state(paths, collaborators)
    theme = resolve_theme(theme_name or load_preferences().theme, no_color=no_color)
    engine = UpdateEngine(collaborators)
    width, height = terminal_size()
    engine.update(state, m.Resize(width, height))

    callbacks = RuntimeLoopCallbacks(
        render=lambda current, w, h: render_frame(current, w, h, theme),
        write=terminal.write,
        terminal_size=terminal_size,
        next_event=events.next_event,
        update=engine.update,
    )
    logger.info("starting dashboard for %s", paths.data_dir)
    with terminal.raw_mode():
        events.start()
        try:
            run_main_loop(state, RuntimeLoopTiming(), callbacks)
        finally:
            events.stop()
    return 0
