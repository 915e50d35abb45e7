"""Visual row projection for the grouped instance list.

Everything on screen and every index conversion is derived from the row
sequence returned by ``visible_rows``. Lookups are single linear passes;
nothing is cached between calls, so a stale index table cannot exist.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from .types import GroupedInstances, GroupHeaderRow, InstanceRow, VisualRow


def visible_rows(
    groups: Sequence[GroupedInstances],
    collapsed: set[str] | frozenset[str],
    filtered_storage_indices: Iterable[int],
) -> list[VisualRow]:
    """Interleave group headers with surviving instance rows.

    A collapsed group always shows its header (so it can be expanded) and
    no members. An expanded group shows a header only when at least one
    member survives the filter.
    """
    survivors = set(filtered_storage_indices)
    rows: list[VisualRow] = []
    visual_index = 0
    for group in groups:
        is_collapsed = group.key in collapsed
        shown = [] if is_collapsed else [idx for idx in group.members if idx in survivors]
        if is_collapsed or shown:
            rows.append(GroupHeaderRow(key=group.key, collapsed=is_collapsed, count=len(group.members)))
        for storage_index in shown:
            rows.append(InstanceRow(visual_index=visual_index, storage_index=storage_index))
            visual_index += 1
    return rows


def instance_row_count(rows: Sequence[VisualRow]) -> int:
    return sum(1 for row in rows if isinstance(row, InstanceRow))


def visual_to_storage(rows: Sequence[VisualRow], visual_index: int) -> int | None:
    for row in rows:
        if isinstance(row, InstanceRow) and row.visual_index == visual_index:
            return row.storage_index
    return None


def storage_to_visual(rows: Sequence[VisualRow], storage_index: int) -> int | None:
    for row in rows:
        if isinstance(row, InstanceRow) and row.storage_index == storage_index:
            return row.visual_index
    return None


def row_position_for_visual(rows: Sequence[VisualRow], visual_index: int) -> int | None:
    """Return the position in ``rows`` of the instance row ``visual_index``."""
    for position, row in enumerate(rows):
        if isinstance(row, InstanceRow) and row.visual_index == visual_index:
            return position
    return None


def group_key_for_visual(rows: Sequence[VisualRow], visual_index: int) -> str | None:
    """Return the key of the header preceding instance row ``visual_index``."""
    current: str | None = None
    for row in rows:
        if isinstance(row, GroupHeaderRow):
            current = row.key
        elif row.visual_index == visual_index:
            return current
    return None


def first_visual_in_group(rows: Sequence[VisualRow], key: str) -> int | None:
    """Return the first visible instance of group ``key``, if it has one."""
    inside = False
    for row in rows:
        if isinstance(row, GroupHeaderRow):
            if inside:
                return None
            inside = row.key == key
        elif inside:
            return row.visual_index
    return None
