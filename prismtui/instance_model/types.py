"""Grouping and row datatypes for the instance list."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

UNGROUPED_KEY = "Ungrouped"


class SortMode(Enum):
    """Instance ordering; member order is the cycle order."""

    LAST_PLAYED = "Last Played"
    NAME = "Name"
    PLAYTIME = "Playtime"
    VERSION = "Version"
    MOD_LOADER = "Mod Loader"

    @property
    def label(self) -> str:
        return self.value

    def next(self) -> "SortMode":
        members = list(SortMode)
        return members[(members.index(self) + 1) % len(members)]

    @classmethod
    def from_label(cls, label: object) -> "SortMode":
        """Parse a persisted label, defaulting to ``LAST_PLAYED``."""
        for mode in cls:
            if mode.value == label:
                return mode
        return cls.LAST_PLAYED


@dataclass(frozen=True)
class GroupedInstances:
    """One group of the canonical list.

    ``members`` are storage indices in sort order; ``label`` is ``None`` for
    the ungrouped bucket.
    """

    key: str
    label: str | None
    members: tuple[int, ...]


@dataclass(frozen=True)
class GroupHeaderRow:
    key: str
    collapsed: bool
    count: int


@dataclass(frozen=True)
class InstanceRow:
    visual_index: int
    storage_index: int


VisualRow = GroupHeaderRow | InstanceRow
