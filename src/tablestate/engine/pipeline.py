"""
The derivation pipeline: filter, then sort, then paginate.

Each stage is skipped (passed through) when the server already performed
it. Stage results are cached on their inputs so that reading the same
state twice does no work and returns the same list objects.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from tablestate.core.columns import Column
from tablestate.core.filtering import FilterState, MatchFn, apply_filters
from tablestate.core.pagination import PaginationState, get_page_count, get_paginated_data
from tablestate.core.sorting import CompareFn, SortState, apply_sort
from tablestate.core.table_state import TableState

T = TypeVar("T")


@dataclass(frozen=True)
class PipelineResult(Generic[T]):
    """Every intermediate view of one pipeline run."""

    filtered: list[T]
    sorted: list[T]
    paginated: list[T]
    filtered_row_count: int
    page_count: int


def compute_page_count(pagination: PaginationState, filtered_row_count: int) -> int:
    """
    Pages available: server ``page_count``, else pages of the server
    ``total_count``, else pages of the filtered rows.
    """
    if pagination.page_count is not None:
        return pagination.page_count
    if pagination.total_count is not None:
        return get_page_count(pagination.total_count, pagination.page_size)
    return get_page_count(filtered_row_count, pagination.page_size)


class _StageCache:
    __slots__ = ("_source", "_key", "_result")

    def __init__(self) -> None:
        self._source: Any = None
        self._key: Any = None
        self._result: Any = None

    def get(self, source: Any, key: Any) -> Any:
        if self._result is not None and source is self._source and key == self._key:
            return self._result
        return None

    def put(self, source: Any, key: Any, result: Any) -> Any:
        self._source, self._key, self._result = source, key, result
        return result


class Pipeline(Generic[T]):
    """Filter → sort → paginate over a record collection."""

    def __init__(
        self,
        columns: Sequence[Column],
        *,
        compare_fn: CompareFn | None = None,
        match_fn: MatchFn | None = None,
    ) -> None:
        self._columns: dict[str, Column] = {}
        for column in columns:
            self._columns.setdefault(column.id, column)
        self._compare_fn = compare_fn
        self._match_fn = match_fn
        self._filter_cache = _StageCache()
        self._sort_cache = _StageCache()
        self._page_cache = _StageCache()

    def get_value(self, record: Any, column_id: str) -> Any:
        """Cell value for ``column_id``; ``None`` for unknown columns."""
        column = self._columns.get(column_id)
        if column is None:
            return None
        return column.get_value(record)

    def invalidate(self) -> None:
        """Forget cached stage results (records mutated in place)."""
        self._filter_cache = _StageCache()
        self._sort_cache = _StageCache()
        self._page_cache = _StageCache()

    def filter(self, records: Sequence[T], filtering: FilterState, server: bool) -> list[T]:
        key = (filtering, server)
        cached = self._filter_cache.get(records, key)
        if cached is not None:
            return cached
        result = apply_filters(records, filtering, self.get_value, self._match_fn, server)
        return self._filter_cache.put(records, key, result)

    def sort(self, records: list[T], sorting: SortState, server: bool) -> list[T]:
        key = (sorting, server)
        cached = self._sort_cache.get(records, key)
        if cached is not None:
            return cached
        result = apply_sort(records, sorting, self.get_value, self._compare_fn, server)
        return self._sort_cache.put(records, key, result)

    def paginate(self, records: list[T], pagination: PaginationState, server: bool) -> list[T]:
        key = (pagination.page_index, pagination.page_size, server)
        cached = self._page_cache.get(records, key)
        if cached is not None:
            return cached
        result = get_paginated_data(records, pagination, server)
        return self._page_cache.put(records, key, result)

    def run(self, records: Sequence[T], state: TableState) -> PipelineResult[T]:
        server_mode = state.server_mode
        filtered = self.filter(records, state.filtering, server_mode.filtering)
        sorted_rows = self.sort(filtered, state.sorting, server_mode.sorting)
        paginated = self.paginate(sorted_rows, state.pagination, server_mode.pagination)
        return PipelineResult(
            filtered=filtered,
            sorted=sorted_rows,
            paginated=paginated,
            filtered_row_count=len(filtered),
            page_count=compute_page_count(state.pagination, len(filtered)),
        )


__all__ = ["Pipeline", "PipelineResult", "compute_page_count"]
