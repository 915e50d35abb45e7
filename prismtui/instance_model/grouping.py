"""Sorting and grouping of the canonical instance list."""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence

from ..data.types import Instance
from .types import UNGROUPED_KEY, GroupedInstances, SortMode

_VERSION_PART_RE = re.compile(r"(\d+)")


def version_sort_key(version: str) -> tuple:
    """Natural ordering key so ``1.9`` sorts before ``1.20``."""
    parts = []
    for piece in _VERSION_PART_RE.split(version.casefold()):
        if not piece:
            continue
        if piece.isdigit():
            parts.append((0, int(piece), ""))
        else:
            parts.append((1, 0, piece))
    return tuple(parts)


def _last_played_key(instance: Instance) -> tuple:
    # Most recent first; never-launched instances last.
    if instance.last_launch is None:
        return (1, 0)
    return (0, -instance.last_launch)


_SORT_KEYS: dict[SortMode, Callable[[Instance], object]] = {
    SortMode.LAST_PLAYED: _last_played_key,
    SortMode.NAME: lambda instance: instance.name.casefold(),
    SortMode.PLAYTIME: lambda instance: -instance.total_time_played,
    SortMode.VERSION: lambda instance: version_sort_key(instance.minecraft_version),
    SortMode.MOD_LOADER: lambda instance: (instance.mod_loader or "").casefold(),
}


def sort_instances(instances: Sequence[Instance], mode: SortMode, ascending: bool = True) -> list[Instance]:
    """Return a stably sorted copy.

    ``ascending`` keeps each mode's natural order; ``False`` reverses it.
    Equal keys keep their input order in both directions.
    """
    return sorted(instances, key=_SORT_KEYS[mode], reverse=not ascending)


def group_key_for(instance: Instance) -> str:
    return instance.group if instance.group else UNGROUPED_KEY


def group_instances(instances: Sequence[Instance]) -> list[GroupedInstances]:
    """Bucket instances by group label.

    Labelled groups come first in alphabetical order, then one ungrouped
    bucket if any instance lacks a label. A group literally named
    ``Ungrouped`` shares the synthetic bucket's key and is merged into it.
    """
    labelled: dict[str, list[int]] = {}
    ungrouped: list[int] = []
    for storage_index, instance in enumerate(instances):
        if instance.group and instance.group != UNGROUPED_KEY:
            labelled.setdefault(instance.group, []).append(storage_index)
        else:
            ungrouped.append(storage_index)

    groups = [
        GroupedInstances(key=label, label=label, members=tuple(labelled[label]))
        for label in sorted(labelled)
    ]
    if ungrouped:
        groups.append(GroupedInstances(key=UNGROUPED_KEY, label=None, members=tuple(ungrouped)))
    return groups
