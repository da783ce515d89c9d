"""
Text filtering.

A :class:`FilterState` carries one global filter and one filter per column.
Blank strings are inactive. Matching is a case-insensitive substring test,
replaceable through ``match_fn``.

When at least one column filter key is present, the global filter is not
applied. Existing consumers rely on that behaviour, so it is kept as is.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field, fields, is_dataclass
from typing import Any, TypeVar

T = TypeVar("T")

MatchFn = Callable[[Any, str], bool]
ValueGetter = Callable[[Any, str], Any]


@dataclass(frozen=True)
class FilterState:
    """Global and per-column text filters."""

    global_filter: str = ""
    column_filters: Mapping[str, str] = field(default_factory=dict)


def create_initial_filter_state() -> FilterState:
    return FilterState()


def set_global_filter(text: str) -> FilterState:
    """Set the global filter. Column filters are cleared."""
    return FilterState(global_filter=text, column_filters={})


def set_column_filter(state: FilterState, column_id: str, text: str) -> FilterState:
    return FilterState(
        global_filter=state.global_filter,
        column_filters={**state.column_filters, column_id: text},
    )


def clear_column_filter(state: FilterState, column_id: str) -> FilterState:
    remaining = {k: v for k, v in state.column_filters.items() if k != column_id}
    return FilterState(global_filter=state.global_filter, column_filters=remaining)


def clear_all_filters() -> FilterState:
    return create_initial_filter_state()


def is_filter_active(state: FilterState) -> bool:
    """True if the global filter or any column filter is non-blank."""
    return bool(state.global_filter.strip()) or any(
        value.strip() for value in state.column_filters.values()
    )


def get_active_filter_count(state: FilterState) -> int:
    count = 1 if state.global_filter.strip() else 0
    return count + sum(1 for value in state.column_filters.values() if value.strip())


def default_match(value: Any, filter: str) -> bool:
    """Case-insensitive substring match. A blank filter matches everything."""
    if not filter.strip():
        return True
    needle = filter.strip().lower()
    haystack = "" if value is None else str(value).lower()
    return needle in haystack


def record_values(record: Any) -> list[Any]:
    """Every field value of a record (mapping, dataclass or plain object)."""
    if isinstance(record, Mapping):
        return list(record.values())
    if is_dataclass(record) and not isinstance(record, type):
        return [getattr(record, f.name) for f in fields(record)]
    if hasattr(record, "model_dump"):
        return list(record.model_dump().values())
    if hasattr(record, "__dict__"):
        return list(vars(record).values())
    return [record]


def apply_filters(
    records: Sequence[T],
    filter_state: FilterState,
    get_value: ValueGetter,
    match_fn: MatchFn | None = None,
    server_mode: bool = False,
) -> list[T]:
    """
    Filter records by the global and column filters.

    Args:
        records: Input records
        filter_state: Current filter state
        get_value: ``(record, column_id) -> value``
        match_fn: Matcher, defaults to :func:`default_match`
        server_mode: If True the input is returned unchanged (as a new list)

    Returns:
        A new list; input order is preserved.
    """
    if server_mode is True or not is_filter_active(filter_state):
        return list(records)

    match = match_fn or default_match
    global_filter = filter_state.global_filter
    column_filters = [(k, v) for k, v in filter_state.column_filters.items() if v.strip()]
    use_global = bool(global_filter.strip()) and not filter_state.column_filters

    def _keep(record: T) -> bool:
        if use_global and not any(match(v, global_filter) for v in record_values(record)):
            return False
        for column_id, text in column_filters:
            if not match(get_value(record, column_id), text):
                return False
        return True

    return [record for record in records if _keep(record)]


__all__ = [
    "FilterState",
    "MatchFn",
    "ValueGetter",
    "create_initial_filter_state",
    "set_global_filter",
    "set_column_filter",
    "clear_column_filter",
    "clear_all_filters",
    "is_filter_active",
    "get_active_filter_count",
    "default_match",
    "record_values",
    "apply_filters",
]
