"""
Row selection.

:class:`SelectionState` wraps a ``frozenset`` of row ids, so every
operation returns a new state and never touches the old set. Row ids come
from the caller's row-key function; this module never makes one up.

"Select all" and "deselect all" are page-scoped: they act on the ids of
the rows currently displayed, not on every row matching the filters.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from enum import Enum

RowId = str | int


class SelectionMode(str, Enum):
    SINGLE = "single"
    MULTI = "multi"


@dataclass(frozen=True)
class SelectionState:
    selected_row_ids: frozenset[RowId] = field(default_factory=frozenset)

    def __contains__(self, row_id: object) -> bool:
        return row_id in self.selected_row_ids

    def __len__(self) -> int:
        return len(self.selected_row_ids)


def create_initial_selection_state(row_ids: Iterable[RowId] | None = None) -> SelectionState:
    return SelectionState(frozenset(row_ids or ()))


def select_row(
    state: SelectionState,
    row_id: RowId,
    mode: SelectionMode | str = SelectionMode.MULTI,
) -> SelectionState:
    """Select a row. In single mode every other row is deselected first."""
    if SelectionMode(mode) == SelectionMode.SINGLE:
        return SelectionState(frozenset((row_id,)))
    return SelectionState(state.selected_row_ids | {row_id})


def deselect_row(state: SelectionState, row_id: RowId) -> SelectionState:
    return SelectionState(state.selected_row_ids - {row_id})


def toggle_row(
    state: SelectionState,
    row_id: RowId,
    mode: SelectionMode | str = SelectionMode.MULTI,
) -> SelectionState:
    if row_id in state.selected_row_ids:
        if SelectionMode(mode) == SelectionMode.SINGLE:
            return SelectionState()
        return deselect_row(state, row_id)
    return select_row(state, row_id, mode)


def select_rows(
    state: SelectionState,
    row_ids: Iterable[RowId],
    mode: SelectionMode | str = SelectionMode.MULTI,
) -> SelectionState:
    """Select several rows. Ignored in single mode."""
    if SelectionMode(mode) == SelectionMode.SINGLE:
        return state
    return SelectionState(state.selected_row_ids | frozenset(row_ids))


def deselect_rows(state: SelectionState, row_ids: Iterable[RowId]) -> SelectionState:
    return SelectionState(state.selected_row_ids - frozenset(row_ids))


def clear_selection() -> SelectionState:
    return SelectionState()


def is_row_selected(state: SelectionState, row_id: RowId) -> bool:
    return row_id in state.selected_row_ids


def get_selected_row_count(state: SelectionState) -> int:
    return len(state.selected_row_ids)


def select_all(
    state: SelectionState,
    page_row_ids: Sequence[RowId],
    mode: SelectionMode | str = SelectionMode.MULTI,
) -> SelectionState:
    """Select every row on the current page (multi mode only)."""
    return select_rows(state, page_row_ids, mode)


def deselect_all(state: SelectionState, page_row_ids: Sequence[RowId]) -> SelectionState:
    """Deselect every row on the current page; other pages are untouched."""
    return deselect_rows(state, page_row_ids)


def is_all_selected(state: SelectionState, page_row_ids: Sequence[RowId]) -> bool:
    return bool(page_row_ids) and all(i in state.selected_row_ids for i in page_row_ids)


def is_indeterminate(state: SelectionState, page_row_ids: Sequence[RowId]) -> bool:
    selected = sum(1 for i in page_row_ids if i in state.selected_row_ids)
    return 0 < selected < len(page_row_ids)


__all__ = [
    "RowId",
    "SelectionMode",
    "SelectionState",
    "create_initial_selection_state",
    "select_row",
    "deselect_row",
    "toggle_row",
    "select_rows",
    "deselect_rows",
    "clear_selection",
    "is_row_selected",
    "get_selected_row_count",
    "select_all",
    "deselect_all",
    "is_all_selected",
    "is_indeterminate",
]
