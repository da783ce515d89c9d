"""
Query-string codec for table state.

Only the navigation-relevant slices travel through the URL: pagination,
sorting and filtering. Parsing is forgiving (malformed values are dropped,
never raised) and serialisation is minimal (defaults are omitted) so that a
table in its initial state leaves the query string untouched.

Default parameter names::

    page=2              0-based page index, omitted at 0
    pageSize=25         omitted at 10
    sort=age            sorted column
    sortDir=desc        asc | desc
    q=ali               global filter
    filter_role=admin   one key per column filter

Examples:
    >>> config = UrlSyncConfig(enabled=True)
    >>> parsed = parse_state_from_url("page=2&sort=age&sortDir=DESC", config)
    >>> parsed.page_index, parsed.sorting.direction.value
    (2, 'desc')

Tags:
    url-sync, query-string, codec, tablestate
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from starlette.datastructures import MultiDict, QueryParams

from tablestate.core.filtering import FilterState
from tablestate.core.pagination import DEFAULT_PAGE_SIZE
from tablestate.core.sorting import SortDirection, SortState
from tablestate.core.table_state import TableState

QueryInput = QueryParams | Mapping[str, Any] | str | list[tuple[str, str]] | None


class UrlParamNames(BaseModel):
    """Query-string key used for each synchronised field."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    page: str = "page"
    page_size: str = "pageSize"
    sort_column: str = "sort"
    sort_dir: str = "sortDir"
    global_filter: str = "q"
    column_filter_prefix: str = Field(default="filter_", min_length=1)


class UrlFeatures(BaseModel):
    """Which slices are synchronised."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    pagination: bool = True
    sorting: bool = True
    filtering: bool = True


class UrlSyncConfig(BaseModel):
    """
    URL synchronisation options.

    Attributes:
        enabled: Turn URL sync on (off by default)
        param_names: Query-string keys
        debounce_ms: Quiet interval before a write fires
        features: Per-slice enable flags
        router_adapter: Where the query string is read from and written to
    """

    model_config = ConfigDict(frozen=True, extra="forbid", arbitrary_types_allowed=True)

    enabled: bool = False
    param_names: UrlParamNames = Field(default_factory=UrlParamNames)
    debounce_ms: int = Field(default=300, ge=0)
    features: UrlFeatures = Field(default_factory=UrlFeatures)
    router_adapter: Any = Field(default=None, exclude=True)


@dataclass(frozen=True)
class UrlState:
    """Partial table state recovered from a query string."""

    page_index: int | None = None
    page_size: int | None = None
    sorting: SortState | None = None
    filtering: FilterState | None = None

    @property
    def is_empty(self) -> bool:
        return (
            self.page_index is None
            and self.page_size is None
            and self.sorting is None
            and self.filtering is None
        )

    def apply_to(self, state: TableState) -> TableState:
        """Overlay the recovered fields on a snapshot."""
        pagination = state.pagination
        if self.page_index is not None:
            pagination = replace(pagination, page_index=self.page_index)
        if self.page_size is not None:
            pagination = replace(pagination, page_size=self.page_size)
        return replace(
            state,
            pagination=pagination,
            sorting=self.sorting if self.sorting is not None else state.sorting,
            filtering=self.filtering if self.filtering is not None else state.filtering,
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        if self.page_index is not None or self.page_size is not None:
            result["pagination"] = {
                k: v
                for k, v in (("page_index", self.page_index), ("page_size", self.page_size))
                if v is not None
            }
        if self.sorting is not None:
            result["sorting"] = {
                "column_id": self.sorting.column_id,
                "direction": self.sorting.direction.value if self.sorting.direction else None,
            }
        if self.filtering is not None:
            result["filtering"] = {
                "global_filter": self.filtering.global_filter,
                "column_filters": dict(self.filtering.column_filters),
            }
        return result


def to_query_params(value: QueryInput) -> QueryParams:
    """Coerce a query string, mapping or pair list to ``QueryParams``."""
    if value is None:
        return QueryParams()
    if isinstance(value, QueryParams):
        return value
    if isinstance(value, str):
        return QueryParams(value.lstrip("?"))
    return QueryParams(value)


def _parse_int(raw: str | None, minimum: int) -> int | None:
    if not raw:
        return None
    try:
        number = int(raw.strip())
    except ValueError:
        return None
    return number if number >= minimum else None


def _parse_sorting(params: QueryParams, names: UrlParamNames) -> SortState | None:
    column_id = params.get(names.sort_column)
    if not column_id:
        return None
    direction = (params.get(names.sort_dir) or "").lower()
    if direction not in (SortDirection.ASC.value, SortDirection.DESC.value):
        return None
    return SortState(column_id, SortDirection(direction))


def _parse_filtering(params: QueryParams, names: UrlParamNames) -> FilterState | None:
    global_filter = params.get(names.global_filter) or ""
    prefix = names.column_filter_prefix
    column_filters: dict[str, str] = {}
    for key, value in params.multi_items():
        if key.startswith(prefix):
            column_id = key[len(prefix):]
            if column_id and value:
                column_filters[column_id] = value

    if not global_filter and not column_filters:
        return None
    return FilterState(global_filter=global_filter, column_filters=column_filters)


def parse_state_from_url(params: QueryInput, config: UrlSyncConfig) -> UrlState:
    """
    Read table state from a query string.

    Malformed numbers, negative page indices and non-positive page sizes are
    dropped. A sort direction other than asc/desc (case-insensitive) drops
    the sort entirely.
    """
    query = to_query_params(params)
    names = config.param_names
    features = config.features

    page_index = page_size = None
    sorting = filtering = None

    if features.pagination:
        page_index = _parse_int(query.get(names.page), minimum=0)
        page_size = _parse_int(query.get(names.page_size), minimum=1)
    if features.sorting:
        sorting = _parse_sorting(query, names)
    if features.filtering:
        filtering = _parse_filtering(query, names)

    return UrlState(
        page_index=page_index,
        page_size=page_size,
        sorting=sorting,
        filtering=filtering,
    )


def _serialize_pagination(state: TableState, params: MultiDict, names: UrlParamNames) -> None:
    pagination = state.pagination
    if pagination.page_index > 0:
        params[names.page] = str(pagination.page_index)
    else:
        params.pop(names.page, None)

    if pagination.page_size != DEFAULT_PAGE_SIZE:
        params[names.page_size] = str(pagination.page_size)
    else:
        params.pop(names.page_size, None)


def _serialize_sorting(state: TableState, params: MultiDict, names: UrlParamNames) -> None:
    sorting = state.sorting
    if sorting.column_id and sorting.direction:
        params[names.sort_column] = sorting.column_id
        params[names.sort_dir] = SortDirection(sorting.direction).value
    else:
        params.pop(names.sort_column, None)
        params.pop(names.sort_dir, None)


def _serialize_filtering(state: TableState, params: MultiDict, names: UrlParamNames) -> None:
    filtering = state.filtering
    if filtering.global_filter:
        params[names.global_filter] = filtering.global_filter
    else:
        params.pop(names.global_filter, None)

    prefix = names.column_filter_prefix
    for key in [k for k in params.keys() if k.startswith(prefix)]:
        params.pop(key, None)

    for column_id, value in filtering.column_filters.items():
        if value:
            params[f"{prefix}{column_id}"] = value


def serialize_state_to_url(
    state: TableState,
    current_params: QueryInput,
    config: UrlSyncConfig,
) -> QueryParams:
    """
    Write table state into a copy of ``current_params``.

    Only non-default values are written. Column-filter keys are removed and
    rewritten on every call; unrelated keys are kept.
    """
    params = MultiDict(to_query_params(current_params).multi_items())
    names = config.param_names
    features = config.features

    if features.pagination:
        _serialize_pagination(state, params, names)
    if features.sorting:
        _serialize_sorting(state, params, names)
    if features.filtering:
        _serialize_filtering(state, params, names)

    return QueryParams(params.multi_items())


__all__ = [
    "QueryInput",
    "UrlParamNames",
    "UrlFeatures",
    "UrlSyncConfig",
    "UrlState",
    "to_query_params",
    "parse_state_from_url",
    "serialize_state_to_url",
]
