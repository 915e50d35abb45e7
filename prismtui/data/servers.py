"""Server list persistence for an instance's ``servers.dat``."""

from __future__ import annotations

from pathlib import Path

from ..errors import ActionError, DataLoadError
from . import nbt
from .types import Server


def load_servers(servers_dat_path: Path) -> list[Server]:
    """Read the server list; a missing file is an empty list.

    Entries without an ``ip`` string are skipped and a missing ``name``
    becomes ``"Unknown"``.
    """
    if not servers_dat_path.exists():
        return []
    try:
        _, root = nbt.decode(servers_dat_path.read_bytes())
    except (OSError, nbt.NbtError) as exc:
        raise DataLoadError(f"Failed to read {servers_dat_path.name}: {exc}") from exc

    servers_tag = root.get("servers")
    if servers_tag is None or servers_tag.kind != nbt.TAG_LIST:
        return []
    listing = servers_tag.value
    if listing.element_kind != nbt.TAG_COMPOUND:
        return []

    servers: list[Server] = []
    for entry in listing.items:
        ip_tag = entry.get("ip")
        if ip_tag is None or ip_tag.kind != nbt.TAG_STRING:
            continue
        name_tag = entry.get("name")
        name = name_tag.value if name_tag is not None and name_tag.kind == nbt.TAG_STRING else "Unknown"
        extra = {key: tag for key, tag in entry.items() if key not in ("name", "ip")}
        servers.append(Server(name=name, ip=ip_tag.value, extra=extra))
    return servers


def save_servers(servers_dat_path: Path, servers: list[Server]) -> None:
    """Write the server list, creating the game folder when needed."""
    items = []
    for server in servers:
        entry: dict[str, nbt.Tag] = {
            "name": nbt.string_tag(server.name),
            "ip": nbt.string_tag(server.ip),
        }
        entry.update(server.extra)
        items.append(entry)
    payload = nbt.encode({"servers": nbt.Tag(nbt.TAG_LIST, nbt.TagList(nbt.TAG_COMPOUND, items))})
    try:
        servers_dat_path.parent.mkdir(parents=True, exist_ok=True)
        servers_dat_path.write_bytes(payload)
    except OSError as exc:
        raise ActionError(f"{servers_dat_path}: {exc}") from exc
