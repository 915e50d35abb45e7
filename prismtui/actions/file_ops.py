"""Open folders and files with desktop or terminal tools.

Folder opening is fire-and-forget. Editor runs happen in the foreground
while the TUI is suspended, mirroring how a pager hands off the terminal.
"""

from __future__ import annotations

import contextlib
import os
import shlex
import subprocess
import sys
from collections.abc import Callable
from pathlib import Path
from typing import ContextManager

from ..errors import ActionError


def platform_opener() -> str:
    if sys.platform == "darwin":
        return "open"
    if sys.platform.startswith("win"):
        return "explorer"
    return "xdg-open"


def _spawn_detached(cmd: list[str]) -> None:
    subprocess.Popen(
        cmd,
        stdin=subprocess.DEVNULL,
        stdout=subprocess.DEVNULL,
        stderr=subprocess.DEVNULL,
        start_new_session=True,
    )


def open_folder(path: Path) -> None:
    """Reveal ``path`` in the desktop file manager."""
    try:
        _spawn_detached([platform_opener(), str(path)])
    except OSError as exc:
        raise ActionError(str(exc)) from exc


def open_in_editor(
    path: Path,
    suspend_tui: Callable[[], ContextManager[None]] | None = None,
) -> None:
    """Open ``path`` in ``$EDITOR``, or the platform opener when unset.

    ``suspend_tui`` returns a context manager that hands the terminal back
    to the editor for the duration of the run.
    """
    editor_env = os.environ.get("EDITOR", "").strip()
    cmd = shlex.split(editor_env) if editor_env else []
    if not cmd:
        try:
            _spawn_detached([platform_opener(), str(path)])
        except OSError as exc:
            raise ActionError(str(exc)) from exc
        return

    suspended = suspend_tui() if suspend_tui is not None else contextlib.nullcontext()
    with suspended:
        try:
            subprocess.run([*cmd, str(path)], check=False)
        except OSError as exc:
            raise ActionError(f"{cmd[0]}: {exc}") from exc
