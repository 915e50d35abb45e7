"""Locate the launcher data directory and the files inside it."""

from __future__ import annotations

import configparser
import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_data_dir

from ..errors import DataDirNotFoundError

logger = logging.getLogger(__name__)

DATA_DIR_ENV = "PRISMLAUNCHER_DATA"
LAUNCHER_APP_NAME = "PrismLauncher"
FLATPAK_RELATIVE = Path(".var/app/org.prismlauncher.PrismLauncher/data/PrismLauncher")
LAUNCHER_CONFIG_NAME = "prismlauncher.cfg"


def candidate_data_dirs() -> list[Path]:
    """Return data-dir candidates in lookup order."""
    candidates: list[Path] = []
    env_value = os.environ.get(DATA_DIR_ENV, "").strip()
    if env_value:
        candidates.append(Path(env_value).expanduser())
    candidates.append(Path(user_data_dir(LAUNCHER_APP_NAME, appauthor=False)))
    if sys.platform.startswith("linux"):
        candidates.append(Path.home() / FLATPAK_RELATIVE)
    return candidates


def find_data_dir() -> Path:
    """Return the first existing data directory.

    Raises ``DataDirNotFoundError`` when no candidate exists.
    """
    for candidate in candidate_data_dirs():
        if candidate.is_dir():
            logger.debug("using launcher data dir %s", candidate)
            return candidate
    raise DataDirNotFoundError()


def read_ini(path: Path) -> configparser.ConfigParser:
    """Parse a launcher INI file, tolerating a missing ``[General]`` header.

    Keys keep their case and values are read raw (no ``%`` interpolation).
    """
    parser = configparser.ConfigParser(interpolation=None, strict=False)
    parser.optionxform = str
    text = path.read_text(encoding="utf-8", errors="replace")
    try:
        parser.read_string(text, source=str(path))
    except configparser.MissingSectionHeaderError:
        parser.read_string("[General]\n" + text, source=str(path))
    return parser


@dataclass(frozen=True)
class LauncherPaths:
    """Resolved file locations inside one launcher data directory."""

    data_dir: Path
    instances_dir: Path
    selected_instance: str | None = None

    @property
    def accounts_path(self) -> Path:
        return self.data_dir / "accounts.json"

    @property
    def logs_dir(self) -> Path:
        return self.data_dir / "logs"

    @property
    def groups_path(self) -> Path:
        return self.instances_dir / "instgroups.json"

    @classmethod
    def from_data_dir(cls, data_dir: Path) -> "LauncherPaths":
        """Build paths, honoring ``InstanceDir`` from ``prismlauncher.cfg``.

        An unreadable launcher config is logged and the defaults are used.
        """
        instances_dir = data_dir / "instances"
        selected: str | None = None
        config_path = data_dir / LAUNCHER_CONFIG_NAME
        if config_path.is_file():
            try:
                parser = read_ini(config_path)
            except (OSError, configparser.Error) as exc:
                logger.warning("ignoring unreadable %s: %s", config_path, exc)
            else:
                general = parser["General"] if parser.has_section("General") else {}
                override = str(general.get("InstanceDir", "")).strip()
                if override:
                    override_path = Path(override).expanduser()
                    instances_dir = override_path if override_path.is_absolute() else data_dir / override_path
                selected = str(general.get("SelectedInstance", "")).strip() or None
        return cls(data_dir=data_dir, instances_dir=instances_dir, selected_instance=selected)
