"""Instance list model: sorting, grouping, filtering, and visual rows.

Pure functions over immutable instance records; ``runtime.selection``
applies them to application state.
"""

from __future__ import annotations

from .filtering import account_matches, instance_matches
from .grouping import group_instances, group_key_for, sort_instances, version_sort_key
from .rows import (
    first_visual_in_group,
    group_key_for_visual,
    instance_row_count,
    row_position_for_visual,
    storage_to_visual,
    visible_rows,
    visual_to_storage,
)
from .types import UNGROUPED_KEY, GroupedInstances, GroupHeaderRow, InstanceRow, SortMode, VisualRow

__all__ = [
    "UNGROUPED_KEY",
    "GroupedInstances",
    "GroupHeaderRow",
    "InstanceRow",
    "SortMode",
    "VisualRow",
    "account_matches",
    "first_visual_in_group",
    "group_instances",
    "group_key_for",
    "group_key_for_visual",
    "instance_matches",
    "instance_row_count",
    "row_position_for_visual",
    "sort_instances",
    "storage_to_visual",
    "version_sort_key",
    "visible_rows",
    "visual_to_storage",
]
