"""Instance discovery and ``instance.cfg`` editing.

Each instance is a directory holding ``instance.cfg`` (INI) and, usually,
``mmc-pack.json`` listing the installed components.
"""

from __future__ import annotations

import configparser
import json
import logging
from dataclasses import replace
from pathlib import Path

from ..errors import ActionError, DataLoadError
from .launcher_config import read_ini
from .types import Instance, ServerJoin

logger = logging.getLogger(__name__)

INSTANCE_CONFIG_NAME = "instance.cfg"
PACK_FILE_NAME = "mmc-pack.json"
SKIPPED_DIR_NAMES = frozenset({"_MMC_TEMP"})
GAME_COMPONENT_UID = "net.minecraft"
LOADER_COMPONENTS: dict[str, str] = {
    "net.minecraftforge": "Forge",
    "net.fabricmc.fabric-loader": "Fabric",
    "org.quiltmc.quilt-loader": "Quilt",
    "net.neoforged": "NeoForge",
}


def _parse_int(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        return int(value.strip())
    except ValueError:
        return None


def read_pack_components(instance_path: Path) -> tuple[str, str | None]:
    """Return ``(minecraft_version, mod_loader)`` from ``mmc-pack.json``."""
    pack_path = instance_path / PACK_FILE_NAME
    if not pack_path.exists():
        return "Unknown", None
    try:
        pack = json.loads(pack_path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise DataLoadError(f"Failed to read {pack_path}: {exc}") from exc

    version = "Unknown"
    loader: str | None = None
    components = pack.get("components") if isinstance(pack, dict) else None
    for component in components if isinstance(components, list) else []:
        if not isinstance(component, dict):
            continue
        uid = component.get("uid")
        if uid == GAME_COMPONENT_UID:
            found = component.get("version") or component.get("cachedVersion")
            if isinstance(found, str) and found:
                version = found
        elif uid in LOADER_COMPONENTS:
            loader = LOADER_COMPONENTS[uid]
    return version, loader


def load_instance(path: Path, groups: dict[str, str]) -> Instance:
    """Load one instance directory; raises ``DataLoadError`` if unreadable."""
    instance_id = path.name
    config_path = path / INSTANCE_CONFIG_NAME
    name = instance_id
    total_time_played = 0
    last_launch: int | None = None
    server_join: ServerJoin | None = None

    if config_path.exists():
        try:
            parser = read_ini(config_path)
        except (OSError, configparser.Error) as exc:
            raise DataLoadError(f"Failed to read {config_path}: {exc}") from exc
        general = parser["General"] if parser.has_section("General") else {}
        name = general.get("name") or instance_id
        total_time_played = max(0, _parse_int(general.get("totalTimePlayed")) or 0)
        last_launch = _parse_int(general.get("lastLaunchTime"))
        join_address = general.get("JoinServerOnLaunchAddress")
        if join_address is not None:
            server_join = ServerJoin(
                enabled=general.get("JoinServerOnLaunch", "").strip().lower() == "true",
                address=join_address,
            )

    version, loader = read_pack_components(path)
    return Instance(
        id=instance_id,
        name=name,
        path=path,
        group=groups.get(instance_id),
        minecraft_version=version,
        mod_loader=loader,
        total_time_played=total_time_played,
        last_launch=last_launch,
        server_join=server_join,
    )


def _is_instance_dir(path: Path) -> bool:
    if not path.is_dir():
        return False
    if path.name.startswith(".") or path.name in SKIPPED_DIR_NAMES:
        return False
    return (path / INSTANCE_CONFIG_NAME).exists()


def load_instances(instances_dir: Path, groups: dict[str, str]) -> list[Instance]:
    """Load every instance under ``instances_dir``.

    A missing directory yields an empty list. Individual broken instances
    are logged and skipped so one bad folder cannot hide the rest.
    """
    if not instances_dir.is_dir():
        return []
    try:
        children = sorted(instances_dir.iterdir())
    except OSError as exc:
        raise DataLoadError(f"Failed to list {instances_dir}: {exc}") from exc

    instances: list[Instance] = []
    for child in children:
        if not _is_instance_dir(child):
            continue
        try:
            instances.append(load_instance(child, groups))
        except DataLoadError as exc:
            logger.warning("skipping instance %s: %s", child.name, exc)
    return instances


def set_server_join(instance: Instance, enabled: bool, address: str | None) -> Instance:
    """Persist the join-on-launch setting and return the updated instance.

    ``address=None`` leaves any stored address untouched in the file; the
    returned instance then carries no join setting, matching what a reload
    of a file without an address would produce.
    """
    config_path = instance.path / INSTANCE_CONFIG_NAME
    try:
        if config_path.exists():
            parser = read_ini(config_path)
        else:
            parser = configparser.ConfigParser(interpolation=None)
            parser.optionxform = str
        if not parser.has_section("General"):
            parser.add_section("General")
        parser.set("General", "JoinServerOnLaunch", "true" if enabled else "false")
        if address is not None:
            parser.set("General", "JoinServerOnLaunchAddress", address)
        with config_path.open("w", encoding="utf-8") as handle:
            parser.write(handle, space_around_delimiters=False)
    except (OSError, configparser.Error) as exc:
        raise ActionError(f"{config_path}: {exc}") from exc

    join = ServerJoin(enabled=enabled, address=address) if address is not None else None
    return replace(instance, server_join=join)
