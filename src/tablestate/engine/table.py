"""
DataTable - the state coordinator.

A ``DataTable`` takes records, column definitions and options, resolves who
owns each slice of state, runs the filter → sort → paginate pipeline and
exposes grouped mutators. When URL sync is on it seeds itself from the
query string and keeps the query string in step with a debounced write.

Manifesto:
    - **Framework-agnostic:** no rendering, no event loop, no globals
    - **One owner per slice:** ownership is fixed at construction
    - **Derived views are pure:** the pipeline never mutates the input
    - **URL sync is best-effort:** adapter failures are logged, not raised

Architecture:
    ::

        DataTable(data, columns, state=..., url_sync=...)
             │
             ├── OwnershipStrategy ── read(field) / write(field, value)
             │
             ├── Pipeline ── filter → sort → paginate  (per-stage server skip)
             │
             ├── grouped mutators
             │     sorting · pagination · filtering · column_management · selection
             │
             └── URL sync
                   construction: parse_state_from_url(adapter.get_search_params())
                   every write:  Debouncer → serialize_state_to_url → adapter (replace)

Examples:
    >>> table = DataTable(users, [col("name", sortable=True), col("role")], page_size=5)
    >>> table.filtering.set_column_filter("role", "admin")
    >>> table.sorting.toggle("name")
    >>> [u["name"] for u in table.paginated_data]
    ['Alice', 'Dora', ...]

Guardrails:
    ❌ DON'T: Mutate ``table.state`` slices in place
    ✅ DO: Go through the grouped mutators, which produce new snapshots

    ❌ DON'T: Forget to ``close()`` a URL-synced table you discard
    ✅ DO: Use ``with DataTable(...) as table:`` so the pending write is cancelled

Tags:
    coordinator, table, pipeline, url-sync, tablestate
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import replace
from typing import Any, Generic, TypeVar

from pydantic import ValidationError

from tablestate.core.columns import (
    Column,
    ColumnDef,
    create_columns,
    get_column_ids,
    get_ordered_columns,
    get_visible_columns,
    validate_columns,
)
from tablestate.core.errors import ConfigError, UrlSyncError
from tablestate.core.filtering import (
    FilterState,
    MatchFn,
    clear_all_filters,
    clear_column_filter,
    set_column_filter,
    set_global_filter,
)
from tablestate.core.logging import get_logger
from tablestate.core.pagination import (
    PaginationState,
    go_to_next_page,
    go_to_page,
    go_to_previous_page,
    has_next_page,
    has_previous_page,
    set_page_size,
)
from tablestate.core.selection import (
    RowId,
    SelectionMode,
    SelectionState,
    clear_selection,
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
from tablestate.core.settings import get_settings
from tablestate.core.sorting import (
    CompareFn,
    SortDirection,
    SortState,
    clear_sort,
    set_sort,
    toggle_sort,
)
from tablestate.core.table_state import (
    ServerMode,
    StateField,
    TableState,
    create_initial_table_state,
)
from tablestate.engine.options import (
    InitialState,
    SelectionConfig,
    StateConfig,
    UncontrolledState,
    coerce_initial_state,
    coerce_state_config,
)
from tablestate.engine.ownership import OwnershipStrategy, build_ownership
from tablestate.engine.pipeline import Pipeline, PipelineResult
from tablestate.urlsync.adapters import MemoryRouterAdapter, RouterAdapter
from tablestate.urlsync.codec import (
    UrlState,
    UrlSyncConfig,
    parse_state_from_url,
    serialize_state_to_url,
)
from tablestate.urlsync.debounce import Debouncer, TimerFactory

logger = get_logger(__name__)

T = TypeVar("T")

RowKeyFn = Callable[[Any, int], RowId]


def _first(*values: Any) -> Any:
    for value in values:
        if value is not None:
            return value
    return None


# =============================================================================
# GROUPED MUTATORS
# =============================================================================


class SortingControls:
    """``table.sorting``"""

    def __init__(self, table: DataTable) -> None:
        self._table = table

    @property
    def state(self) -> SortState:
        return self._table._read("sorting")

    def toggle(self, column_id: str) -> None:
        """Cycle ``column_id`` through asc → desc → unsorted."""
        self._table._write("sorting", toggle_sort(self.state, column_id))

    def set(self, column_id: str | None, direction: SortDirection | str | None) -> None:
        self._table._write("sorting", set_sort(column_id, direction))

    def clear(self) -> None:
        self._table._write("sorting", clear_sort())


class PaginationControls:
    """``table.pagination``"""

    def __init__(self, table: DataTable) -> None:
        self._table = table

    @property
    def state(self) -> PaginationState:
        return self._table._read("pagination")

    def next_page(self) -> None:
        self._table._write("pagination", go_to_next_page(self.state, self._table.page_count))

    def previous_page(self) -> None:
        self._table._write("pagination", go_to_previous_page(self.state, self._table.page_count))

    def go_to_page(self, page_index: int) -> None:
        """Jump to ``page_index``, clamped to the available pages."""
        self._table._write("pagination", go_to_page(self.state, page_index, self._table.page_count))

    def set_page_size(self, page_size: int) -> None:
        if page_size <= 0:
            raise ConfigError(f"page_size must be positive, got {page_size}").with_context(
                operation="set_page_size"
            )
        new_state = set_page_size(self.state, page_size, self._table.filtered_row_count)
        self._table._write("pagination", new_state)


class FilteringControls:
    """``table.filtering``"""

    def __init__(self, table: DataTable) -> None:
        self._table = table

    @property
    def state(self) -> FilterState:
        return self._table._read("filtering")

    def set_global_filter(self, text: str) -> None:
        """Search every field. Clears the column filters."""
        self._table._write("filtering", set_global_filter(text))

    def set_column_filter(self, column_id: str, text: str) -> None:
        self._table._write("filtering", set_column_filter(self.state, column_id, text))

    def clear_column_filter(self, column_id: str) -> None:
        self._table._write("filtering", clear_column_filter(self.state, column_id))

    def clear_all_filters(self) -> None:
        self._table._write("filtering", clear_all_filters())


class ColumnManagement:
    """``table.column_management``: visibility and order."""

    def __init__(self, table: DataTable) -> None:
        self._table = table

    def toggle_visibility(self, column_id: str) -> None:
        visibility = self._table._read("column_visibility")
        visible = visibility.get(column_id) is not False
        self.set_visibility(column_id, not visible)

    def set_visibility(self, column_id: str, visible: bool) -> None:
        visibility = self._table._read("column_visibility")
        self._table._write("column_visibility", {**visibility, column_id: visible})

    def reorder(self, column_ids: Sequence[str]) -> None:
        self._table._write("column_order", tuple(column_ids))


class SelectionControls:
    """
    ``table.selection``

    Every mutator is a no-op while selection is disabled. ``select_all``,
    ``deselect_all`` and the aggregate checks work on the current page.
    """

    def __init__(self, table: DataTable, config: SelectionConfig) -> None:
        self._table = table
        self._config = config

    @property
    def state(self) -> SelectionState:
        return self._table._read("selection")

    @property
    def enabled(self) -> bool:
        return self._config.enabled

    @property
    def mode(self) -> SelectionMode:
        return self._config.mode

    @property
    def selected_row_ids(self) -> frozenset[RowId]:
        return self.state.selected_row_ids

    @property
    def selected_count(self) -> int:
        return get_selected_row_count(self.state)

    def is_selected(self, row_id: RowId) -> bool:
        return is_row_selected(self.state, row_id)

    def _apply(self, new_state: SelectionState) -> None:
        if not self.enabled:
            return
        self._table._write("selection", new_state)

    def select(self, row_id: RowId) -> None:
        self._apply(select_row(self.state, row_id, self.mode))

    def deselect(self, row_id: RowId) -> None:
        self._apply(deselect_row(self.state, row_id))

    def toggle(self, row_id: RowId) -> None:
        self._apply(toggle_row(self.state, row_id, self.mode))

    def select_multiple(self, row_ids: Iterable[RowId]) -> None:
        self._apply(select_rows(self.state, row_ids, self.mode))

    def deselect_multiple(self, row_ids: Iterable[RowId]) -> None:
        self._apply(deselect_rows(self.state, row_ids))

    def select_all(self) -> None:
        self._apply(select_all(self.state, self._table.page_row_ids, self.mode))

    def deselect_all(self) -> None:
        self._apply(deselect_all(self.state, self._table.page_row_ids))

    def clear(self) -> None:
        self._apply(clear_selection())

    def is_all_selected(self) -> bool:
        if not self.enabled:
            return False
        return is_all_selected(self.state, self._table.page_row_ids)

    def is_indeterminate(self) -> bool:
        if not self.enabled:
            return False
        return is_indeterminate(self.state, self._table.page_row_ids)


# =============================================================================
# COORDINATOR
# =============================================================================


class DataTable(Generic[T]):
    """
    Tabular state coordinator.

    Args:
        data: Records (mappings, dataclasses, models or plain objects)
        columns: Column definitions
        page_size: Starting page size, defaults to ``TABLESTATE_DEFAULT_PAGE_SIZE``
        state: ``ControlledState``, ``UncontrolledState``, ``PerFieldControl``
            or an equivalent mapping; ``None`` is uncontrolled
        server_mode: Stages already done by a server (``ServerMode`` or mapping)
        selection: ``SelectionConfig`` or mapping
        get_row_key: ``(record, absolute_index) -> row id`` for selection
        url_sync: ``UrlSyncConfig`` or mapping
        compare_fn: Value comparator for sorting. Missing values always sort
            last and are never passed to it
        match_fn: Value matcher for filtering
        timer_factory: Timer constructor for the debounced URL write
    """

    def __init__(
        self,
        data: Sequence[T],
        columns: Sequence[ColumnDef],
        *,
        page_size: int | None = None,
        state: StateConfig = None,
        server_mode: ServerMode | Mapping[str, Any] | None = None,
        selection: SelectionConfig | Mapping[str, Any] | None = None,
        get_row_key: RowKeyFn | None = None,
        url_sync: UrlSyncConfig | Mapping[str, Any] | None = None,
        compare_fn: CompareFn | None = None,
        match_fn: MatchFn | None = None,
        timer_factory: TimerFactory | None = None,
    ) -> None:
        settings = get_settings()
        if page_size is None:
            page_size = settings.default_page_size
        if page_size <= 0:
            raise ConfigError(f"page_size must be positive, got {page_size}").with_context(
                operation="create_table"
            )

        self._data: Sequence[T] = data
        self._definitions: tuple[ColumnDef, ...] = tuple(columns)

        validation = validate_columns(self._definitions)
        self.column_errors: tuple[str, ...] = validation.errors
        for error in validation.errors:
            logger.warning("invalid_column_definition", error=error)

        self._columns: list[Column] = create_columns(self._definitions)
        self._server_mode = ServerMode.coerce(server_mode)
        self._selection_config = self._coerce_selection(selection)
        self._url_config = self._coerce_url_sync(url_sync, settings.url_debounce_ms)
        self._router: RouterAdapter = self._url_config.router_adapter or MemoryRouterAdapter()
        if not isinstance(self._router, RouterAdapter):
            raise ConfigError(
                f"router_adapter does not implement RouterAdapter: {type(self._router).__name__}"
            ).with_context(operation="create_table")
        self._url_active = self._url_config.enabled and self._router.is_client()
        self._get_row_key = get_row_key
        self._pipeline: Pipeline[T] = Pipeline(
            self._columns, compare_fn=compare_fn, match_fn=match_fn
        )
        self._closed = False

        url_state = self._read_url_state() if self._url_active else None

        config = coerce_state_config(state)
        initial = InitialState()
        on_state_change = None
        if isinstance(config, UncontrolledState):
            initial = coerce_initial_state(config.initial_state)
            on_state_change = config.on_state_change

        seed = self._build_seed(page_size, url_state, initial)
        self._ownership: OwnershipStrategy = build_ownership(
            config, seed, self._server_mode, on_state_change
        )

        self.sorting = SortingControls(self)
        self.pagination = PaginationControls(self)
        self.filtering = FilteringControls(self)
        self.column_management = ColumnManagement(self)
        self.selection = SelectionControls(self, self._selection_config)

        self._url_writer: Debouncer | None = None
        if self._url_active:
            self._url_writer = Debouncer(
                self._write_url,
                self._url_config.debounce_ms,
                timer_factory=timer_factory,
            )
            self._url_writer()

        logger.debug(
            "table_created",
            mode=self._ownership.mode,
            columns=len(self._columns),
            rows=len(data),
            url_sync=self._url_active,
        )

    # -------------------------------------------------------------------------
    # Construction helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _coerce_selection(value: SelectionConfig | Mapping[str, Any] | None) -> SelectionConfig:
        if value is None:
            return SelectionConfig()
        if isinstance(value, SelectionConfig):
            return value
        try:
            return SelectionConfig.model_validate(dict(value))
        except ValidationError as exc:
            raise ConfigError("Invalid selection options", cause=exc).with_context(
                operation="create_table", option="selection"
            ) from exc

    @staticmethod
    def _coerce_url_sync(
        value: UrlSyncConfig | Mapping[str, Any] | None, debounce_ms: int
    ) -> UrlSyncConfig:
        if value is None:
            return UrlSyncConfig(debounce_ms=debounce_ms)
        if isinstance(value, UrlSyncConfig):
            return value
        try:
            return UrlSyncConfig.model_validate({"debounce_ms": debounce_ms, **value})
        except ValidationError as exc:
            raise ConfigError("Invalid url_sync options", cause=exc).with_context(
                operation="create_table", option="url_sync"
            ) from exc

    def _read_url_state(self) -> UrlState | None:
        try:
            return parse_state_from_url(self._router.get_search_params(), self._url_config)
        except Exception as exc:
            error = UrlSyncError("Failed to read table state from URL", cause=exc).with_context(
                operation="read_url"
            )
            logger.warning("url_read_failed", **error.to_dict())
            return None

    def _build_seed(
        self,
        page_size: int,
        url_state: UrlState | None,
        initial: InitialState,
    ) -> TableState:
        base = create_initial_table_state(
            get_column_ids(self._definitions),
            self._server_mode,
            self._selection_config.initial_selected_row_ids,
            page_size,
        )
        url_state = url_state or UrlState()

        pagination = base.pagination
        if url_state.page_index is not None:
            pagination = replace(pagination, page_index=url_state.page_index)
        if url_state.page_size is not None:
            pagination = replace(pagination, page_size=url_state.page_size)
        if isinstance(initial.pagination, PaginationState):
            pagination = initial.pagination
        elif initial.pagination is not None:
            try:
                pagination = replace(pagination, **dict(initial.pagination))
            except TypeError as exc:
                raise ConfigError("Invalid initial pagination", cause=exc).with_context(
                    operation="create_table", option="pagination"
                ) from exc

        visibility = {d.id: d.visible for d in self._definitions}

        return replace(
            base,
            pagination=pagination,
            sorting=_first(initial.sorting, url_state.sorting, base.sorting),
            filtering=_first(initial.filtering, url_state.filtering, base.filtering),
            column_visibility=dict(_first(initial.column_visibility, visibility)),
            column_order=tuple(_first(initial.column_order, base.column_order)),
            selection=_first(initial.selection, base.selection),
        )

    # -------------------------------------------------------------------------
    # State access
    # -------------------------------------------------------------------------

    def _read(self, field_name: StateField) -> Any:
        return self._ownership.read(field_name)

    def _write(self, field_name: StateField, value: Any) -> None:
        self._ownership.write(field_name, value)
        logger.debug("table_state_written", field=field_name, mode=self._ownership.mode)
        self._schedule_url_write()

    @property
    def state(self) -> TableState:
        """The current snapshot, assembled from whoever owns each slice."""
        return self._ownership.snapshot()

    @property
    def ownership_mode(self) -> str:
        return self._ownership.mode

    def update_control(self, **values: Any) -> None:
        """
        Hand the table new caller-owned values.

        Controlled tables take ``state=<TableState>``; per-field tables take
        any slice they were given at construction (``sorting=...``).
        """
        self._ownership.update(**values)
        self._schedule_url_write()

    # -------------------------------------------------------------------------
    # Data and derived views
    # -------------------------------------------------------------------------

    @property
    def data(self) -> Sequence[T]:
        return self._data

    def set_data(self, data: Sequence[T]) -> None:
        """Replace the input records. State is kept as is."""
        self._data = data
        self._pipeline.invalidate()

    def _run(self) -> PipelineResult[T]:
        return self._pipeline.run(self._data, self.state)

    @property
    def columns(self) -> list[Column]:
        return list(self._columns)

    @property
    def visible_columns(self) -> list[Column]:
        """Visible columns in display order."""
        state = self.state
        visible = get_visible_columns(self._columns, state.column_visibility)
        return get_ordered_columns(visible, state.column_order)

    @property
    def filtered_data(self) -> list[T]:
        return list(self._run().filtered)

    @property
    def sorted_data(self) -> list[T]:
        return list(self._run().sorted)

    @property
    def paginated_data(self) -> list[T]:
        return list(self._run().paginated)

    @property
    def filtered_row_count(self) -> int:
        return self._run().filtered_row_count

    @property
    def page_count(self) -> int:
        return self._run().page_count

    @property
    def page_index(self) -> int:
        return self._read("pagination").page_index

    @property
    def page_size(self) -> int:
        return self._read("pagination").page_size

    @property
    def has_next_page(self) -> bool:
        return has_next_page(self.page_index, self.page_count)

    @property
    def has_previous_page(self) -> bool:
        return has_previous_page(self.page_index)

    @property
    def page_row_ids(self) -> list[RowId]:
        """Row ids of the current page; empty without ``get_row_key``."""
        if self._get_row_key is None:
            return []
        pagination = self._read("pagination")
        offset = pagination.page_index * pagination.page_size
        return [self._get_row_key(row, offset + i) for i, row in enumerate(self.paginated_data)]

    def get_value(self, record: T, column_id: str) -> Any:
        return self._pipeline.get_value(record, column_id)

    # -------------------------------------------------------------------------
    # URL sync
    # -------------------------------------------------------------------------

    @property
    def router_adapter(self) -> RouterAdapter:
        return self._router

    @property
    def url_sync(self) -> UrlSyncConfig:
        return self._url_config

    def _schedule_url_write(self) -> None:
        if self._url_writer is not None and not self._closed:
            self._url_writer()

    def _write_url(self) -> None:
        if self._closed:
            return
        try:
            current = self._router.get_search_params()
            params = serialize_state_to_url(self.state, current, self._url_config)
            # key order may differ after a rewrite; only content matters
            if sorted(params.multi_items()) == sorted(current.multi_items()):
                return
            self._router.set_search_params(params, replace=True)
            logger.debug("url_written", query=str(params))
        except Exception as exc:
            error = UrlSyncError("Failed to write table state to URL", cause=exc).with_context(
                operation="write_url"
            )
            logger.warning("url_write_failed", **error.to_dict())

    def flush_url(self) -> bool:
        """Run the pending URL write now. Returns False if none was pending."""
        if self._url_writer is None or self._closed:
            return False
        return self._url_writer.flush()

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def close(self) -> None:
        """Cancel any pending URL write. The table stays readable."""
        if self._closed:
            return
        self._closed = True
        if self._url_writer is not None:
            self._url_writer.cancel()
        logger.debug("table_closed")

    def __enter__(self) -> DataTable[T]:
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        return (
            f"DataTable(rows={len(self._data)}, columns={len(self._columns)}, "
            f"mode={self._ownership.mode!r})"
        )


__all__ = [
    "DataTable",
    "RowKeyFn",
    "SortingControls",
    "PaginationControls",
    "FilteringControls",
    "ColumnManagement",
    "SelectionControls",
]
