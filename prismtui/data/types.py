"""Record types describing launcher data on disk.

All records are frozen; edits produce replacements via
``dataclasses.replace`` so a frame never observes a half-updated value.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

MINECRAFT_FOLDERS: tuple[str, ...] = (".minecraft", "minecraft")


@dataclass(frozen=True)
class ServerJoin:
    """Join-server-on-launch setting stored in ``instance.cfg``."""

    enabled: bool
    address: str


@dataclass(frozen=True)
class Instance:
    """One launcher instance directory."""

    id: str
    name: str
    path: Path
    group: str | None = None
    minecraft_version: str = "Unknown"
    mod_loader: str | None = None
    total_time_played: int = 0
    last_launch: int | None = None
    server_join: ServerJoin | None = None

    def minecraft_dir(self) -> Path | None:
        """Return the game folder inside the instance, if one exists."""
        for folder in MINECRAFT_FOLDERS:
            candidate = self.path / folder
            if candidate.is_dir():
                return candidate
        return None

    def _game_dir(self) -> Path:
        found = self.minecraft_dir()
        return found if found is not None else self.path / MINECRAFT_FOLDERS[0]

    def servers_dat_path(self) -> Path:
        return self._game_dir() / "servers.dat"

    def logs_dir(self) -> Path:
        return self._game_dir() / "logs"

    def formatted_playtime(self) -> str:
        hours = self.total_time_played // 3600
        if hours > 0:
            return f"{hours}h played"
        return f"{self.total_time_played // 60}m played"

    def formatted_playtime_full(self) -> str:
        hours = self.total_time_played // 3600
        minutes = (self.total_time_played % 3600) // 60
        if hours > 0:
            return f"{hours}h {minutes}m"
        return f"{minutes}m"

    def formatted_last_launch(self) -> str:
        """Render ``last_launch`` (epoch milliseconds) in local time."""
        if self.last_launch is None or self.last_launch <= 0:
            return "Never"
        try:
            stamp = datetime.fromtimestamp(self.last_launch / 1000)
        except (OverflowError, OSError, ValueError):
            return "Unknown"
        return stamp.strftime("%Y-%m-%d %H:%M")

    def _count_entries(self, folder: str, *, suffixes: tuple[str, ...] = (), dirs_only: bool = False) -> int:
        game_dir = self.minecraft_dir()
        if game_dir is None:
            return 0
        target = game_dir / folder
        try:
            children = list(target.iterdir())
        except OSError:
            return 0
        count = 0
        for child in children:
            if dirs_only and not child.is_dir():
                continue
            if suffixes and child.suffix.lower() not in suffixes:
                continue
            count += 1
        return count

    def mods_count(self) -> int:
        return self._count_entries("mods", suffixes=(".jar", ".zip"))

    def saves_count(self) -> int:
        return self._count_entries("saves", dirs_only=True)

    def resource_packs_count(self) -> int:
        return self._count_entries("resourcepacks")


@dataclass(frozen=True)
class Account:
    profile_id: str
    username: str
    is_active: bool = False


@dataclass(frozen=True)
class Server:
    """One entry of an instance's ``servers.dat`` list.

    ``extra`` carries the remaining NBT fields (icon, resource-pack policy)
    so a save does not drop data the game wrote.
    """

    name: str
    ip: str
    extra: dict = field(default_factory=dict, compare=False, hash=False)


@dataclass(frozen=True)
class LogEntry:
    name: str
    path: Path
    modified: float | None
    size: int

    def formatted_size(self) -> str:
        if self.size < 1024:
            return f"{self.size} B"
        if self.size < 1024 * 1024:
            return f"{self.size / 1024:.1f} KB"
        return f"{self.size / (1024 * 1024):.1f} MB"

    def formatted_modified(self) -> str:
        if self.modified is None:
            return ""
        return datetime.fromtimestamp(self.modified).strftime("%Y-%m-%d %H:%M")


__all__ = [
    "Account",
    "Instance",
    "LogEntry",
    "MINECRAFT_FOLDERS",
    "Server",
    "ServerJoin",
]
