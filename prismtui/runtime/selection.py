"""Selection, search, sort, and collapse operations on ``AppState``.

Every function that can shrink a visible list re-validates the matching
selection index before returning, so callers never observe an index past
the end of what is on screen.
"""

from __future__ import annotations

from collections.abc import Sequence

from ..data.types import Account, Instance
from ..instance_model import (
    GroupHeaderRow,
    SortMode,
    VisualRow,
    account_matches,
    first_visual_in_group,
    group_instances,
    group_key_for_visual,
    instance_matches,
    sort_instances,
    visible_rows,
)
from .state import AppState


def clamp_index(index: int, count: int) -> int:
    """Clamp ``index`` into ``[0, count)``; empty lists clamp to ``0``."""
    if count <= 0:
        return 0
    return max(0, min(index, count - 1))


def current_rows(state: AppState) -> list[VisualRow]:
    return visible_rows(state.groups, state.collapsed_groups, state.filtered_instance_indices)


def matching_instance_indices(state: AppState) -> list[int]:
    """Storage indices of expanded-group members passing the query, in visible order."""
    matches: list[int] = []
    for group in state.groups:
        if group.key in state.collapsed_groups:
            continue
        for storage_index in group.members:
            if instance_matches(state.instances[storage_index], state.search_query):
                matches.append(storage_index)
    return matches


def _refilter(state: AppState) -> None:
    state.filtered_instance_indices = matching_instance_indices(state)
    state.filtered_account_indices = [
        idx for idx, account in enumerate(state.accounts) if account_matches(account, state.search_query)
    ]


def _group_position(state: AppState, key: str | None) -> int | None:
    if key is None:
        return None
    for position, group in enumerate(state.groups):
        if group.key == key:
            return position
    return None


def _sync_group_index(state: AppState) -> None:
    """Point ``selected_group_index`` at the group holding the cursor."""
    key = group_key_for_visual(current_rows(state), state.selected_instance_index)
    position = _group_position(state, key)
    if position is not None:
        state.selected_group_index = position
    else:
        state.selected_group_index = clamp_index(state.selected_group_index, len(state.groups))


def selected_group_key(state: AppState) -> str | None:
    if not 0 <= state.selected_group_index < len(state.groups):
        return None
    return state.groups[state.selected_group_index].key


def apply_search(state: AppState, query: str) -> None:
    """Filter instances and accounts by ``query`` and reset both cursors."""
    state.search_query = query.lower()
    _refilter(state)
    state.selected_instance_index = 0
    state.selected_account_index = 0
    _sync_group_index(state)


def _rebuild(state: AppState, keep_id: str | None, fallback_index: int) -> None:
    state.groups = group_instances(state.instances)
    _refilter(state)
    new_index: int | None = None
    if keep_id is not None:
        storage_index = state.storage_index_of(keep_id)
        if storage_index is not None and storage_index in state.filtered_instance_indices:
            new_index = state.filtered_instance_indices.index(storage_index)
    if new_index is None:
        new_index = clamp_index(fallback_index, len(state.filtered_instance_indices))
    state.selected_instance_index = new_index
    state.selected_account_index = clamp_index(state.selected_account_index, len(state.filtered_account_indices))
    _sync_group_index(state)


def apply_sort(state: AppState, mode: SortMode, ascending: bool) -> None:
    """Re-sort and regroup, keeping the selected instance under the cursor.

    When the selected instance is no longer visible the cursor returns to
    the top of the list.
    """
    selected = state.selected_instance()
    state.sort_mode = mode
    state.sort_ascending = ascending
    state.instances = sort_instances(state.instances, mode, ascending)
    _rebuild(state, selected.id if selected is not None else None, 0)


def replace_instances(state: AppState, instances: Sequence[Instance]) -> None:
    """Swap in a freshly loaded instance list (reload path)."""
    selected = state.selected_instance()
    previous_index = state.selected_instance_index
    state.instances = sort_instances(instances, state.sort_mode, state.sort_ascending)
    _rebuild(state, selected.id if selected is not None else None, previous_index)


def replace_accounts(state: AppState, accounts: Sequence[Account]) -> None:
    state.accounts = list(accounts)
    _refilter(state)
    state.selected_account_index = clamp_index(state.selected_account_index, len(state.filtered_account_indices))
    usernames = {account.username for account in state.accounts}
    if state.active_account not in usernames:
        state.active_account = next((a.username for a in state.accounts if a.is_active), None)


def replace_instance(state: AppState, updated: Instance) -> None:
    """Replace one instance record in place, by id."""
    storage_index = state.storage_index_of(updated.id)
    if storage_index is not None:
        state.instances[storage_index] = updated


def toggle_group_collapse(state: AppState, key: str) -> None:
    """Flip ``key`` in the collapsed set, keeping the current query applied.

    The selected group does not follow the cursor here, so toggling the
    same group twice restores the original rows.
    """
    if key in state.collapsed_groups:
        state.collapsed_groups.discard(key)
    else:
        state.collapsed_groups.add(key)
    _refilter(state)
    state.selected_instance_index = clamp_index(state.selected_instance_index, len(state.filtered_instance_indices))
    position = _group_position(state, key)
    if position is not None:
        state.selected_group_index = position


def select_instance(state: AppState, visual_index: int) -> bool:
    if not 0 <= visual_index < len(state.filtered_instance_indices):
        return False
    state.selected_instance_index = visual_index
    _sync_group_index(state)
    return True


def move_instance_selection(state: AppState, delta: int) -> None:
    target = clamp_index(state.selected_instance_index + delta, len(state.filtered_instance_indices))
    select_instance(state, target)


def _step_group(state: AppState, direction: int) -> None:
    total = len(state.groups)
    if total == 0:
        return
    rows = current_rows(state)
    shown_keys = {row.key for row in rows if isinstance(row, GroupHeaderRow)}
    for step in range(1, total + 1):
        position = (state.selected_group_index + direction * step) % total
        key = state.groups[position].key
        if key not in shown_keys:
            continue
        state.selected_group_index = position
        first = first_visual_in_group(rows, key)
        if first is not None:
            state.selected_instance_index = first
        return


def next_group(state: AppState) -> None:
    """Jump to the next group with a visible header, wrapping around."""
    _step_group(state, 1)


def prev_group(state: AppState) -> None:
    _step_group(state, -1)


def initialize_lists(state: AppState) -> None:
    """Sort, group, and filter freshly constructed state."""
    state.instances = sort_instances(state.instances, state.sort_mode, state.sort_ascending)
    state.groups = group_instances(state.instances)
    _refilter(state)
    state.selected_instance_index = 0
    state.selected_account_index = 0
    if state.active_account is None:
        state.active_account = next((a.username for a in state.accounts if a.is_active), None)
    _sync_group_index(state)
