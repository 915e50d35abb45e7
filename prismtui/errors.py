"""Exception hierarchy shared by loaders, actions, and the update engine.

Collaborators raise these; the update engine converts them into transient
status text. Only ``DataDirNotFoundError`` is fatal, and only at startup.
"""

from __future__ import annotations


class PrismTuiError(Exception):
    """Base class for every error the dashboard knows how to present."""


class DataLoadError(PrismTuiError):
    """A launcher file exists but could not be parsed."""


class LaunchError(PrismTuiError):
    """Starting the launcher process failed."""


class ActionError(PrismTuiError):
    """A fire-and-forget action (kill, open folder, editor, save) failed."""


class DataDirNotFoundError(PrismTuiError):
    """No launcher data directory could be located."""

    def __init__(self, message: str = "PrismLauncher data directory not found") -> None:
        super().__init__(message)


__all__ = [
    "PrismTuiError",
    "DataLoadError",
    "LaunchError",
    "ActionError",
    "DataDirNotFoundError",
]
