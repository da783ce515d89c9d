"""
tablestate.core - pure table primitives.

Everything in this package is a side-effect-free function over frozen
state values:

- columns:      ColumnDef, Column, col(), col_with_accessor(), validate_columns()
- filtering:    FilterState, apply_filters(), default_match()
- sorting:      SortState, toggle_sort(), apply_sort(), default_compare()
- pagination:   PaginationState, get_page_count(), clamp_page_index()
- selection:    SelectionState, select_row(), select_all(), is_indeterminate()
- table_state:  TableState, ServerMode, create_initial_table_state()

Ambient modules: errors, logging (structlog), settings (pydantic-settings).
"""

from tablestate.core.columns import (
    AccessorFn,
    Align,
    Column,
    ColumnAccessor,
    ColumnDef,
    ColumnValidation,
    FilterType,
    col,
    col_with_accessor,
    create_column,
    create_columns,
    define_columns,
    get_column_by_id,
    get_column_ids,
    get_ordered_columns,
    get_visible_columns,
    normalize_accessor,
    validate_columns,
)
from tablestate.core.errors import (
    ConfigError,
    ErrorCategory,
    ErrorContext,
    StateError,
    TableStateError,
    UrlSyncError,
)
from tablestate.core.filtering import (
    FilterState,
    MatchFn,
    apply_filters,
    clear_all_filters,
    clear_column_filter,
    create_initial_filter_state,
    default_match,
    get_active_filter_count,
    is_filter_active,
    set_column_filter,
    set_global_filter,
)
from tablestate.core.pagination import (
    DEFAULT_PAGE_SIZE,
    PaginationState,
    clamp_page_index,
    create_initial_pagination_state,
    get_page_count,
    get_page_end_index,
    get_page_start_index,
    get_paginated_data,
    go_to_next_page,
    go_to_page,
    go_to_previous_page,
    has_next_page,
    has_previous_page,
    is_valid_page_index,
    set_page_size,
)
from tablestate.core.selection import (
    RowId,
    SelectionMode,
    SelectionState,
    clear_selection,
    create_initial_selection_state,
    deselect_all,
    deselect_row,
    deselect_rows,
    get_selected_row_count,
    is_all_selected,
    is_indeterminate,
    is_row_selected,
    select_all,
    select_row,
    select_rows,
    toggle_row,
)
from tablestate.core.sorting import (
    CompareFn,
    SortDirection,
    SortState,
    apply_sort,
    clear_sort,
    create_comparator,
    create_initial_sort_state,
    default_compare,
    is_sort_active,
    set_sort,
    toggle_sort,
)
from tablestate.core.table_state import (
    CONTROLLABLE_FIELDS,
    STATE_FIELDS,
    ServerMode,
    StateField,
    TableState,
    create_initial_table_state,
    is_server_mode,
    update_column_order,
    update_column_visibility,
    update_field,
    update_filtering,
    update_pagination,
    update_selection,
    update_sorting,
    update_table_state,
)

__all__ = [
    # columns
    "AccessorFn",
    "Align",
    "Column",
    "ColumnAccessor",
    "ColumnDef",
    "ColumnValidation",
    "FilterType",
    "col",
    "col_with_accessor",
    "create_column",
    "create_columns",
    "define_columns",
    "get_column_by_id",
    "get_column_ids",
    "get_ordered_columns",
    "get_visible_columns",
    "normalize_accessor",
    "validate_columns",
    # errors
    "ConfigError",
    "ErrorCategory",
    "ErrorContext",
    "StateError",
    "TableStateError",
    "UrlSyncError",
    # filtering
    "FilterState",
    "MatchFn",
    "apply_filters",
    "clear_all_filters",
    "clear_column_filter",
    "create_initial_filter_state",
    "default_match",
    "get_active_filter_count",
    "is_filter_active",
    "set_column_filter",
    "set_global_filter",
    # pagination
    "DEFAULT_PAGE_SIZE",
    "PaginationState",
    "clamp_page_index",
    "create_initial_pagination_state",
    "get_page_count",
    "get_page_end_index",
    "get_page_start_index",
    "get_paginated_data",
    "go_to_next_page",
    "go_to_page",
    "go_to_previous_page",
    "has_next_page",
    "has_previous_page",
    "is_valid_page_index",
    "set_page_size",
    # selection
    "RowId",
    "SelectionMode",
    "SelectionState",
    "clear_selection",
    "create_initial_selection_state",
    "deselect_all",
    "deselect_row",
    "deselect_rows",
    "get_selected_row_count",
    "is_all_selected",
    "is_indeterminate",
    "is_row_selected",
    "select_all",
    "select_row",
    "select_rows",
    "toggle_row",
    # sorting
    "CompareFn",
    "SortDirection",
    "SortState",
    "apply_sort",
    "clear_sort",
    "create_comparator",
    "create_initial_sort_state",
    "default_compare",
    "is_sort_active",
    "set_sort",
    "toggle_sort",
    # table state
    "CONTROLLABLE_FIELDS",
    "STATE_FIELDS",
    "ServerMode",
    "StateField",
    "TableState",
    "create_initial_table_state",
    "is_server_mode",
    "update_column_order",
    "update_column_visibility",
    "update_field",
    "update_filtering",
    "update_pagination",
    "update_selection",
    "update_sorting",
    "update_table_state",
]
