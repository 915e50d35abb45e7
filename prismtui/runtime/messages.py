"""Closed set of messages accepted by the update engine.

Raw input is translated into these values; ``MESSAGE_TYPES`` lists every
variant so the engine can verify its handler table covers all of them.
"""

from __future__ import annotations

from dataclasses import dataclass

from .state import LogLevel


# Lifecycle and navigation.
@dataclass(frozen=True)
class Quit:
    pass


@dataclass(frozen=True)
class Back:
    pass


@dataclass(frozen=True)
class Tick:
    pass


@dataclass(frozen=True)
class Resize:
    width: int
    height: int


@dataclass(frozen=True)
class Reload:
    pass


@dataclass(frozen=True)
class KeyPressed:
    key: str


@dataclass(frozen=True)
class Pointer:
    """Pointer event in 0-based cells; ``kind`` is ``left_down``/``wheel_up``/``wheel_down``."""

    kind: str
    col: int
    row: int


@dataclass(frozen=True)
class SwitchTab:
    index: int


@dataclass(frozen=True)
class DismissOverlay:
    pass


@dataclass(frozen=True)
class OpenHelp:
    pass


@dataclass(frozen=True)
class OpenAccountScreen:
    pass


@dataclass(frozen=True)
class OpenServerScreen:
    pass


@dataclass(frozen=True)
class OpenInstanceDetails:
    pass


@dataclass(frozen=True)
class OpenInstanceLogs:
    pass


@dataclass(frozen=True)
class OpenLauncherLogs:
    pass


# List movement; the active screen decides which list moves.
@dataclass(frozen=True)
class SelectNext:
    pass


@dataclass(frozen=True)
class SelectPrevious:
    pass


@dataclass(frozen=True)
class SelectFirst:
    pass


@dataclass(frozen=True)
class SelectLast:
    pass


@dataclass(frozen=True)
class SelectIndex:
    index: int


# Instances.
@dataclass(frozen=True)
class NextGroup:
    pass


@dataclass(frozen=True)
class PrevGroup:
    pass


@dataclass(frozen=True)
class ToggleGroupCollapse:
    """Collapse/expand ``key``, or the selected group when ``key`` is ``None``."""

    key: str | None = None


@dataclass(frozen=True)
class CycleSortMode:
    pass


@dataclass(frozen=True)
class ToggleSortDirection:
    pass


@dataclass(frozen=True)
class StartSearch:
    pass


@dataclass(frozen=True)
class ClearSearch:
    pass


@dataclass(frozen=True)
class LaunchInstance:
    pass


@dataclass(frozen=True)
class KillInstance:
    pass


@dataclass(frozen=True)
class OpenFolder:
    pass


# Accounts.
@dataclass(frozen=True)
class ConfirmAccountSelection:
    pass


# Servers.
@dataclass(frozen=True)
class AddServer:
    pass


@dataclass(frozen=True)
class EditServer:
    pass


@dataclass(frozen=True)
class DeleteServer:
    pass


@dataclass(frozen=True)
class ConfirmDelete:
    pass


@dataclass(frozen=True)
class CancelDelete:
    pass


@dataclass(frozen=True)
class ToggleJoinOnLaunch:
    pass


@dataclass(frozen=True)
class LaunchWithServer:
    pass


# Logs.
@dataclass(frozen=True)
class LoadLogContent:
    pass


@dataclass(frozen=True)
class ScrollLog:
    delta: int = 0
    pages: int = 0


@dataclass(frozen=True)
class StartLogSearch:
    pass


@dataclass(frozen=True)
class LogSearchNext:
    pass


@dataclass(frozen=True)
class LogSearchPrev:
    pass


@dataclass(frozen=True)
class ToggleLogLevel:
    level: LogLevel


@dataclass(frozen=True)
class ClearLogLevelFilter:
    pass


@dataclass(frozen=True)
class OpenLogInEditor:
    pass


# Help.
@dataclass(frozen=True)
class ScrollHelp:
    delta: int = 0
    pages: int = 0


# Text entry.
@dataclass(frozen=True)
class InputChar:
    char: str


@dataclass(frozen=True)
class InputBackspace:
    pass


@dataclass(frozen=True)
class InputConfirm:
    pass


@dataclass(frozen=True)
class InputCancel:
    pass


MESSAGE_TYPES: tuple[type, ...] = (
    Quit,
    Back,
    Tick,
    Resize,
    Reload,
    KeyPressed,
    Pointer,
    SwitchTab,
    DismissOverlay,
    OpenHelp,
    OpenAccountScreen,
    OpenServerScreen,
    OpenInstanceDetails,
    OpenInstanceLogs,
    OpenLauncherLogs,
    SelectNext,
    SelectPrevious,
    SelectFirst,
    SelectLast,
    SelectIndex,
    NextGroup,
    PrevGroup,
    ToggleGroupCollapse,
    CycleSortMode,
    ToggleSortDirection,
    StartSearch,
    ClearSearch,
    LaunchInstance,
    KillInstance,
    OpenFolder,
    ConfirmAccountSelection,
    AddServer,
    EditServer,
    DeleteServer,
    ConfirmDelete,
    CancelDelete,
    ToggleJoinOnLaunch,
    LaunchWithServer,
    LoadLogContent,
    ScrollLog,
    StartLogSearch,
    LogSearchNext,
    LogSearchPrev,
    ToggleLogLevel,
    ClearLogLevelFilter,
    OpenLogInEditor,
    ScrollHelp,
    InputChar,
    InputBackspace,
    InputConfirm,
    InputCancel,
)

Message = (
    Quit | Back | Tick | Resize | Reload | KeyPressed | Pointer | SwitchTab | DismissOverlay
    | OpenHelp | OpenAccountScreen | OpenServerScreen | OpenInstanceDetails | OpenInstanceLogs
    | OpenLauncherLogs | SelectNext | SelectPrevious | SelectFirst | SelectLast | SelectIndex
    | NextGroup | PrevGroup | ToggleGroupCollapse | CycleSortMode | ToggleSortDirection
    | StartSearch | ClearSearch | LaunchInstance | KillInstance | OpenFolder
    | ConfirmAccountSelection | AddServer | EditServer | DeleteServer | ConfirmDelete
    | CancelDelete | ToggleJoinOnLaunch | LaunchWithServer | LoadLogContent | ScrollLog
    | StartLogSearch | LogSearchNext | LogSearchPrev | ToggleLogLevel | ClearLogLevelFilter
    | OpenLogInEditor | ScrollHelp | InputChar | InputBackspace | InputConfirm | InputCancel
)

# Messages that leave a visible error in place.
PASSIVE_MESSAGES: tuple[type, ...] = (Tick, Resize)
