"""Launcher process spawning and termination."""

from __future__ import annotations

import logging
import subprocess

import psutil

from ..errors import ActionError, LaunchError

logger = logging.getLogger(__name__)

DEFAULT_LAUNCHER_COMMAND = "prismlauncher"
KILL_GRACE_SECONDS = 3.0


def build_launch_command(
    instance_id: str,
    account: str | None = None,
    server: str | None = None,
    launcher_command: str = DEFAULT_LAUNCHER_COMMAND,
) -> list[str]:
    cmd = [launcher_command, "--launch", instance_id]
    if account:
        cmd.extend(["--profile", account])
    if server:
        cmd.extend(["--server", server])
    return cmd


def launch_instance(
    instance_id: str,
    account: str | None = None,
    server: str | None = None,
    launcher_command: str = DEFAULT_LAUNCHER_COMMAND,
) -> None:
    """Start the launcher detached from the TUI's terminal.

    Raises ``LaunchError`` when the launcher binary cannot be started.
    """
    cmd = build_launch_command(instance_id, account, server, launcher_command)
    logger.info("launching %s", cmd)
    try:
        subprocess.Popen(
            cmd,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=True,
        )
    except FileNotFoundError as exc:
        raise LaunchError(f"{launcher_command} not found in PATH") from exc
    except OSError as exc:
        raise LaunchError(f"Launch failed: {exc}") from exc


def kill_process(pid: int) -> None:
    """Terminate ``pid``, escalating to kill when it ignores the request.

    A process that is already gone counts as success.
    """
    try:
        process = psutil.Process(pid)
        process.terminate()
        try:
            process.wait(timeout=KILL_GRACE_SECONDS)
        except psutil.TimeoutExpired:
            logger.info("pid %s ignored terminate, killing", pid)
            process.kill()
    except psutil.NoSuchProcess:
        return
    except psutil.Error as exc:
        raise ActionError(f"pid {pid}: {exc}") from exc
