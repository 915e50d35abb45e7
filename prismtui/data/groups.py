"""Instance group membership from ``instgroups.json``."""

from __future__ import annotations

import json
from pathlib import Path

from ..errors import DataLoadError


def load_groups(groups_path: Path) -> dict[str, str]:
    """Return ``{instance_id: group_name}`` for every visible group.

    A missing file yields an empty mapping. Hidden groups are skipped, so
    their members land in the ungrouped bucket.
    """
    if not groups_path.exists():
        return {}
    try:
        data = json.loads(groups_path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise DataLoadError(f"Failed to read {groups_path.name}: {exc}") from exc

    groups = data.get("groups") if isinstance(data, dict) else None
    if not isinstance(groups, dict):
        raise DataLoadError(f"{groups_path.name} has no 'groups' object")

    membership: dict[str, str] = {}
    for group_name, entry in groups.items():
        if not isinstance(entry, dict) or entry.get("hidden") is True:
            continue
        members = entry.get("instances")
        if not isinstance(members, list):
            continue
        for instance_id in members:
            if isinstance(instance_id, str):
                membership[instance_id] = str(group_name)
    return membership
