"""Selection bookkeeping across search, sort, collapse, and reload."""

from __future__ import annotations

import unittest
from pathlib import Path

from prismtui.data.types import Account, Instance
from prismtui.instance_model import UNGROUPED_KEY, InstanceRow, SortMode
from prismtui.runtime import selection
from prismtui.runtime.state import AppState


def _instance(instance_id: str, **kwargs) -> Instance:
    kwargs.setdefault("name", instance_id)
    return Instance(id=instance_id, path=Path("/instances") / instance_id, **kwargs)


def _state(instances: list[Instance], accounts: list[Account] | None = None) -> AppState:
    state = AppState(data_dir=Path("/data"), instances=instances, accounts=accounts or [], sort_mode=SortMode.NAME)
    selection.initialize_lists(state)
    return state


def _selected_id(state: AppState) -> str | None:
    instance = state.selected_instance()
    return instance.id if instance is not None else None


class SearchTests(unittest.TestCase):
    def test_search_filters_and_resets_cursors(self) -> None:
        state = _state(
            [_instance("alpha"), _instance("beta"), _instance("gamma")],
            [Account("1", "Steve"), Account("2", "Alex")],
        )
        state.selected_instance_index = 2
        state.selected_account_index = 1

        selection.apply_search(state, "A")

        self.assertEqual(state.search_query, "a")
        self.assertEqual([state.instances[i].id for i in state.filtered_instance_indices], ["alpha", "beta", "gamma"])
        self.assertEqual([state.accounts[i].username for i in state.filtered_account_indices], ["Alex"])
        self.assertEqual(state.selected_instance_index, 0)
        self.assertEqual(state.selected_account_index, 0)

        selection.apply_search(state, "gam")
        self.assertEqual(_selected_id(state), "gamma")

    def test_empty_query_restores_everything(self) -> None:
        state = _state([_instance("alpha"), _instance("beta")], [Account("1", "Steve")])
        selection.apply_search(state, "zzz")
        self.assertIsNone(state.selected_instance())

        selection.apply_search(state, "")

        self.assertEqual(len(state.filtered_instance_indices), 2)
        self.assertEqual(len(state.filtered_account_indices), 1)

    def test_empty_query_equals_visible_rows_with_collapsed_group(self) -> None:
        state = _state(
            [
                _instance("delta", group="Modded"),
                _instance("alpha", group="Modded"),
                _instance("gamma", group="Vanilla"),
                _instance("beta"),
            ]
        )
        selection.toggle_group_collapse(state, "Vanilla")
        selection.apply_search(state, "zzz")

        selection.apply_search(state, "")

        rows = selection.current_rows(state)
        expected = [row.storage_index for row in rows if isinstance(row, InstanceRow)]
        self.assertEqual(state.filtered_instance_indices, expected)
        self.assertEqual([state.instances[i].id for i in expected], ["alpha", "delta", "beta"])


class SortSelectionTests(unittest.TestCase):
    def test_sort_keeps_selected_instance(self) -> None:
        state = _state(
            [
                _instance("a", total_time_played=5),
                _instance("b", total_time_played=50),
                _instance("c", total_time_played=500),
            ]
        )
        selection.select_instance(state, 0)
        self.assertEqual(_selected_id(state), "a")

        selection.apply_sort(state, SortMode.PLAYTIME, True)

        self.assertEqual(_selected_id(state), "a")
        self.assertEqual(state.selected_instance_index, 2)

    def test_sort_resets_to_top_when_selection_hidden(self) -> None:
        state = _state([_instance("a"), _instance("b")])
        selection.apply_search(state, "zzz")
        selection.apply_sort(state, SortMode.NAME, False)
        self.assertEqual(state.selected_instance_index, 0)


class CollapseTests(unittest.TestCase):
    def setUp(self) -> None:
        self.state = _state(
            [
                _instance("a", group="Alpha"),
                _instance("b", group="Alpha"),
                _instance("c", group="Beta"),
                _instance("d"),
            ]
        )

    def test_double_toggle_restores_rows(self) -> None:
        before = selection.current_rows(self.state)
        selection.toggle_group_collapse(self.state, "Alpha")
        self.assertNotEqual(selection.current_rows(self.state), before)
        selection.toggle_group_collapse(self.state, "Alpha")
        self.assertEqual(selection.current_rows(self.state), before)

    def test_collapse_clamps_cursor(self) -> None:
        selection.select_instance(self.state, 3)
        selection.toggle_group_collapse(self.state, "Alpha")
        selection.toggle_group_collapse(self.state, UNGROUPED_KEY)
        self.assertEqual(len(self.state.filtered_instance_indices), 1)
        self.assertEqual(self.state.selected_instance_index, 0)
        self.assertEqual(selection.selected_group_key(self.state), UNGROUPED_KEY)

    def test_collapse_keeps_search_applied(self) -> None:
        selection.apply_search(self.state, "c")
        selection.toggle_group_collapse(self.state, "Alpha")
        self.assertEqual([self.state.instances[i].id for i in self.state.filtered_instance_indices], ["c"])

    def test_group_jumps_wrap_and_skip_hidden_groups(self) -> None:
        selection.select_instance(self.state, 0)
        selection.next_group(self.state)
        self.assertEqual(_selected_id(self.state), "c")
        selection.next_group(self.state)
        self.assertEqual(_selected_id(self.state), "d")
        selection.next_group(self.state)
        self.assertEqual(_selected_id(self.state), "a")
        selection.prev_group(self.state)
        self.assertEqual(_selected_id(self.state), "d")

        selection.apply_search(self.state, "d")
        selection.next_group(self.state)
        self.assertEqual(selection.selected_group_key(self.state), UNGROUPED_KEY)
        self.assertEqual(_selected_id(self.state), "d")


class ReloadTests(unittest.TestCase):
    def test_reload_keeps_selection_by_id(self) -> None:
        state = _state([_instance("a"), _instance("b"), _instance("c")])
        selection.select_instance(state, 1)
        selection.replace_instances(state, [_instance("0"), _instance("a"), _instance("b"), _instance("c")])
        self.assertEqual(_selected_id(state), "b")

    def test_reload_that_removes_last_selected_clamps(self) -> None:
        state = _state([_instance(name) for name in "abcde"])
        selection.select_instance(state, 4)
        selection.replace_instances(state, [_instance(name) for name in "abcd"])
        self.assertEqual(state.selected_instance_index, 3)
        self.assertEqual(_selected_id(state), "d")

    def test_replace_accounts_drops_vanished_active_account(self) -> None:
        state = _state([], [Account("1", "Steve", is_active=True)])
        self.assertEqual(state.active_account, "Steve")
        selection.replace_accounts(state, [Account("2", "Alex", is_active=True)])
        self.assertEqual(state.active_account, "Alex")


if __name__ == "__main__":
    unittest.main()
