"""Sorting, grouping, filtering, and visual-row projection tests."""

from __future__ import annotations

import itertools
import unittest
from pathlib import Path

from prismtui.data.types import Instance
from prismtui.instance_model import (
    UNGROUPED_KEY,
    GroupHeaderRow,
    InstanceRow,
    SortMode,
    first_visual_in_group,
    group_instances,
    group_key_for_visual,
    instance_matches,
    instance_row_count,
    row_position_for_visual,
    sort_instances,
    storage_to_visual,
    version_sort_key,
    visible_rows,
    visual_to_storage,
)


def _instance(instance_id: str, **kwargs) -> Instance:
    kwargs.setdefault("name", instance_id)
    return Instance(id=instance_id, path=Path("/instances") / instance_id, **kwargs)


class SortModeTests(unittest.TestCase):
    def test_cycle_visits_every_mode_and_returns_after_five_steps(self) -> None:
        mode = SortMode.LAST_PLAYED
        seen = [mode]
        for _ in range(4):
            mode = mode.next()
            seen.append(mode)
        self.assertEqual(
            [m.label for m in seen],
            ["Last Played", "Name", "Playtime", "Version", "Mod Loader"],
        )
        self.assertEqual(mode.next(), SortMode.LAST_PLAYED)

    def test_from_label_falls_back_to_last_played(self) -> None:
        self.assertEqual(SortMode.from_label("Playtime"), SortMode.PLAYTIME)
        self.assertEqual(SortMode.from_label("bogus"), SortMode.LAST_PLAYED)
        self.assertEqual(SortMode.from_label(None), SortMode.LAST_PLAYED)


class SortInstancesTests(unittest.TestCase):
    def test_last_played_puts_recent_first_and_never_launched_last(self) -> None:
        instances = [
            _instance("never"),
            _instance("old", last_launch=100),
            _instance("new", last_launch=900),
        ]
        ordered = sort_instances(instances, SortMode.LAST_PLAYED)
        self.assertEqual([i.id for i in ordered], ["new", "old", "never"])

    def test_descending_reverses_natural_order(self) -> None:
        instances = [_instance("b", name="beta"), _instance("a", name="Alpha"), _instance("c", name="gamma")]
        self.assertEqual([i.id for i in sort_instances(instances, SortMode.NAME)], ["a", "b", "c"])
        self.assertEqual([i.id for i in sort_instances(instances, SortMode.NAME, ascending=False)], ["c", "b", "a"])

    def test_playtime_sorts_most_played_first(self) -> None:
        instances = [_instance("a", total_time_played=10), _instance("b", total_time_played=500)]
        self.assertEqual([i.id for i in sort_instances(instances, SortMode.PLAYTIME)], ["b", "a"])

    def test_version_sort_is_natural(self) -> None:
        instances = [
            _instance("a", minecraft_version="1.20.1"),
            _instance("b", minecraft_version="1.9"),
            _instance("c", minecraft_version="1.20"),
        ]
        self.assertEqual([i.id for i in sort_instances(instances, SortMode.VERSION)], ["b", "c", "a"])
        self.assertLess(version_sort_key("1.9"), version_sort_key("1.10"))

    def test_equal_keys_keep_input_order(self) -> None:
        instances = [_instance("x", mod_loader="Fabric"), _instance("y", mod_loader="Fabric"), _instance("z")]
        self.assertEqual([i.id for i in sort_instances(instances, SortMode.MOD_LOADER)], ["z", "x", "y"])


class GroupingTests(unittest.TestCase):
    def test_labelled_groups_alphabetical_then_ungrouped(self) -> None:
        instances = [
            _instance("a", group="Zeta"),
            _instance("b"),
            _instance("c", group="Alpha"),
            _instance("d", group="Zeta"),
        ]
        groups = group_instances(instances)
        self.assertEqual([g.key for g in groups], ["Alpha", "Zeta", UNGROUPED_KEY])
        self.assertEqual(groups[1].members, (0, 3))
        self.assertIsNone(groups[2].label)

    def test_group_named_ungrouped_merges_into_bucket(self) -> None:
        groups = group_instances([_instance("a", group=UNGROUPED_KEY), _instance("b")])
        self.assertEqual([(g.key, g.members) for g in groups], [(UNGROUPED_KEY, (0, 1))])


class VisibleRowsTests(unittest.TestCase):
    def setUp(self) -> None:
        self.instances = [
            _instance("a", group="Alpha"),
            _instance("b", group="Alpha"),
            _instance("c", group="Beta"),
            _instance("d"),
        ]
        self.groups = group_instances(self.instances)

    def test_rows_interleave_headers_and_count_instances(self) -> None:
        rows = visible_rows(self.groups, set(), [0, 1, 2, 3])
        self.assertEqual(
            rows,
            [
                GroupHeaderRow("Alpha", False, 2),
                InstanceRow(0, 0),
                InstanceRow(1, 1),
                GroupHeaderRow("Beta", False, 1),
                InstanceRow(2, 2),
                GroupHeaderRow(UNGROUPED_KEY, False, 1),
                InstanceRow(3, 3),
            ],
        )
        self.assertEqual(instance_row_count(rows), 4)

    def test_collapsed_group_keeps_header_even_when_filter_empties_it(self) -> None:
        rows = visible_rows(self.groups, {"Alpha"}, [2])
        self.assertEqual(rows, [GroupHeaderRow("Alpha", True, 2), GroupHeaderRow("Beta", False, 1), InstanceRow(0, 2)])

    def test_expanded_group_without_survivors_is_hidden(self) -> None:
        rows = visible_rows(self.groups, set(), [3])
        self.assertEqual(rows, [GroupHeaderRow(UNGROUPED_KEY, False, 1), InstanceRow(0, 3)])

    def test_instance_rows_match_predicate_for_every_collapse_set(self) -> None:
        instances = [
            _instance("a1", group="Alpha", minecraft_version="1.20.1", mod_loader="Fabric"),
            _instance("a2", group="Alpha", minecraft_version="1.19.2"),
            _instance("b1", group="Beta", minecraft_version="1.20.4", mod_loader="Forge"),
            _instance("c1", minecraft_version="1.8.9"),
            _instance("c2", minecraft_version="1.20.1", mod_loader="Quilt"),
        ]
        groups = group_instances(instances)
        keys = [group.key for group in groups]
        subsets = [set(combo) for size in range(len(keys) + 1) for combo in itertools.combinations(keys, size)]
        for collapsed in subsets:
            for query in ("", "a", "1.20", "forge", "beta", "zzz"):
                with self.subTest(collapsed=sorted(collapsed), query=query):
                    filtered = [i for i, inst in enumerate(instances) if instance_matches(inst, query)]
                    rows = visible_rows(groups, collapsed, filtered)
                    expected = sum(
                        1
                        for group in groups
                        if group.key not in collapsed
                        for i in group.members
                        if instance_matches(instances[i], query)
                    )
                    self.assertEqual(instance_row_count(rows), expected)
                    self.assertEqual(
                        [row.visual_index for row in rows if isinstance(row, InstanceRow)], list(range(expected))
                    )

    def test_index_conversions(self) -> None:
        rows = visible_rows(self.groups, set(), [0, 1, 2, 3])
        self.assertEqual(visual_to_storage(rows, 2), 2)
        self.assertEqual(storage_to_visual(rows, 3), 3)
        self.assertIsNone(visual_to_storage(rows, 9))
        self.assertEqual(row_position_for_visual(rows, 2), 4)
        self.assertEqual(group_key_for_visual(rows, 1), "Alpha")
        self.assertEqual(first_visual_in_group(rows, "Beta"), 2)
        collapsed_rows = visible_rows(self.groups, {"Beta"}, [0, 1, 3])
        self.assertIsNone(first_visual_in_group(collapsed_rows, "Beta"))


class FilteringTests(unittest.TestCase):
    def test_query_matches_name_version_loader_and_group(self) -> None:
        instance = _instance("a", name="Create Above", minecraft_version="1.20.1", mod_loader="Forge", group="Tech")
        for query in ("create", "1.20", "forge", "tech", ""):
            self.assertTrue(instance_matches(instance, query), query)
        self.assertFalse(instance_matches(instance, "fabric"))


if __name__ == "__main__":
    unittest.main()
