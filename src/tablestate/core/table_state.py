"""
The aggregate table state.

:class:`TableState` bundles the five user-facing slices (sorting,
pagination, filtering, column visibility, column order) with the row
selection and the server-mode flags. It is frozen: every ``update_*``
helper returns a new snapshot that shares the slices it did not change.

Architecture:
    ::

        ┌──────────────────────────────────────────────────────────┐
        │                       TableState                          │
        ├──────────────────────────────────────────────────────────┤
        │  sorting            SortState(column_id, direction)       │
        │  pagination         PaginationState(index, size, ...)     │
        │  filtering          FilterState(global, per-column)       │
        │  column_visibility  {column_id: bool}                     │
        │  column_order       (column_id, ...)                      │
        │  selection          SelectionState(frozenset)             │
        │  server_mode        ServerMode(pagination, sorting, ...)  │
        └──────────────────────────────────────────────────────────┘

Examples:
    >>> state = create_initial_table_state(["name", "age"])
    >>> state.pagination.page_size
    10
    >>> update_column_visibility(state, "age", False).column_visibility["age"]
    False
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field, replace
from typing import Any, Literal

from tablestate.core.filtering import FilterState
from tablestate.core.pagination import DEFAULT_PAGE_SIZE, PaginationState
from tablestate.core.selection import RowId, SelectionState, create_initial_selection_state
from tablestate.core.sorting import SortState

StateField = Literal[
    "sorting",
    "pagination",
    "filtering",
    "column_visibility",
    "column_order",
    "selection",
]

# Slices that can be individually controlled by an external owner
CONTROLLABLE_FIELDS: tuple[StateField, ...] = (
    "pagination",
    "sorting",
    "filtering",
    "column_visibility",
    "column_order",
)

STATE_FIELDS: tuple[StateField, ...] = CONTROLLABLE_FIELDS + ("selection",)

PipelineStage = Literal["pagination", "sorting", "filtering"]


@dataclass(frozen=True)
class ServerMode:
    """Pipeline stages already performed by a server."""

    pagination: bool = False
    sorting: bool = False
    filtering: bool = False

    def is_enabled(self, stage: PipelineStage) -> bool:
        return getattr(self, stage) is True

    @classmethod
    def coerce(cls, value: ServerMode | Mapping[str, Any] | None) -> ServerMode:
        if value is None:
            return cls()
        if isinstance(value, ServerMode):
            return value
        return cls(
            pagination=bool(value.get("pagination", False)),
            sorting=bool(value.get("sorting", False)),
            filtering=bool(value.get("filtering", False)),
        )


@dataclass(frozen=True)
class TableState:
    sorting: SortState = field(default_factory=SortState)
    pagination: PaginationState = field(default_factory=PaginationState)
    filtering: FilterState = field(default_factory=FilterState)
    column_visibility: Mapping[str, bool] = field(default_factory=dict)
    column_order: tuple[str, ...] = ()
    selection: SelectionState = field(default_factory=SelectionState)
    server_mode: ServerMode = field(default_factory=ServerMode)


def is_server_mode(server_mode: ServerMode | None, stage: PipelineStage) -> bool:
    return server_mode is not None and server_mode.is_enabled(stage)


def create_initial_table_state(
    column_ids: Sequence[str],
    server_mode: ServerMode | Mapping[str, Any] | None = None,
    initial_selected_row_ids: Iterable[RowId] | None = None,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> TableState:
    """Build the starting snapshot for a set of columns."""
    return TableState(
        sorting=SortState(),
        pagination=PaginationState(page_index=0, page_size=page_size),
        filtering=FilterState(),
        column_visibility={column_id: True for column_id in column_ids},
        column_order=tuple(column_ids),
        selection=create_initial_selection_state(initial_selected_row_ids),
        server_mode=ServerMode.coerce(server_mode),
    )


def update_table_state(state: TableState, **changes: Any) -> TableState:
    """Replace several slices at once; unchanged slices are shared."""
    return replace(state, **changes)


def update_sorting(state: TableState, sorting: SortState) -> TableState:
    return replace(state, sorting=sorting)


def update_pagination(state: TableState, **changes: Any) -> TableState:
    """Merge pagination fields, e.g. ``update_pagination(state, page_index=2)``."""
    return replace(state, pagination=replace(state.pagination, **changes))


def update_filtering(state: TableState, filtering: FilterState) -> TableState:
    return replace(state, filtering=filtering)


def update_column_visibility(state: TableState, column_id: str, visible: bool) -> TableState:
    return replace(
        state,
        column_visibility={**state.column_visibility, column_id: visible},
    )


def update_column_order(state: TableState, column_order: Sequence[str]) -> TableState:
    return replace(state, column_order=tuple(column_order))


def update_selection(state: TableState, selection: SelectionState) -> TableState:
    return replace(state, selection=selection)


def update_field(state: TableState, field_name: StateField, value: Any) -> TableState:
    """Replace one slice by name."""
    if field_name == "column_order":
        value = tuple(value)
    return update_table_state(state, **{field_name: value})


__all__ = [
    "StateField",
    "PipelineStage",
    "CONTROLLABLE_FIELDS",
    "STATE_FIELDS",
    "ServerMode",
    "TableState",
    "is_server_mode",
    "create_initial_table_state",
    "update_table_state",
    "update_sorting",
    "update_pagination",
    "update_filtering",
    "update_column_visibility",
    "update_column_order",
    "update_selection",
    "update_field",
]
