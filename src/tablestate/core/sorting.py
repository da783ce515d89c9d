"""
Single-column sorting.

:class:`SortState` names one column and one direction. Both are ``None``
when the table is unsorted; the mutators in this module never produce a
state with only one of them set.

Sorting is stable: rows with equal keys keep their input order. Missing
values (``None``) always sort after present values, in both directions.
"""

from __future__ import annotations

import locale
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from functools import cmp_to_key
from numbers import Real
from typing import Any, TypeVar

from tablestate.core.filtering import ValueGetter

T = TypeVar("T")

CompareFn = Callable[[Any, Any], int]


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class SortState:
    """Sorted column and direction. ``(None, None)`` means unsorted."""

    column_id: str | None = None
    direction: SortDirection | None = None


def create_initial_sort_state() -> SortState:
    return SortState()


def toggle_sort(state: SortState, column_id: str) -> SortState:
    """
    Cycle the sort for a column: none -> asc -> desc -> none.

    Toggling a different column than the current one starts at asc.
    """
    if state.column_id == column_id:
        if state.direction == SortDirection.ASC:
            return SortState(column_id, SortDirection.DESC)
        if state.direction == SortDirection.DESC:
            return SortState()
    return SortState(column_id, SortDirection.ASC)


def set_sort(column_id: str | None, direction: SortDirection | str | None) -> SortState:
    """Set the sort explicitly. If either part is None the sort is cleared."""
    if column_id is None or direction is None:
        return SortState()
    return SortState(column_id, SortDirection(direction))


def clear_sort() -> SortState:
    return create_initial_sort_state()


def is_sort_active(state: SortState) -> bool:
    return state.column_id is not None and state.direction is not None


def _sign(value: Any) -> int:
    return (value > 0) - (value < 0)


def _is_number(value: Any) -> bool:
    return isinstance(value, (Real, Decimal)) and not isinstance(value, bool)


def _compare_text(a: str, b: str) -> int:
    folded = locale.strcoll(a.casefold(), b.casefold())
    if folded:
        return _sign(folded)
    return _sign(locale.strcoll(a, b))


def default_compare(a: Any, b: Any) -> int:
    """
    Compare two cell values.

    ``None`` is greater than any value (two ``None`` compare equal); numbers
    compare numerically, strings by locale collation, dates and datetimes
    chronologically. Anything else falls back to comparing ``str()`` forms.
    """
    if a is None and b is None:
        return 0
    if a is None:
        return 1
    if b is None:
        return -1
    if a == b and type(a) is type(b):
        return 0

    if _is_number(a) and _is_number(b):
        return (a > b) - (a < b)

    if isinstance(a, str) and isinstance(b, str):
        return _compare_text(a, b)

    if isinstance(a, datetime) and isinstance(b, datetime):
        try:
            return (a > b) - (a < b)
        except TypeError:
            return _sign(a.timestamp() - b.timestamp())

    if isinstance(a, date) and isinstance(b, date) and not (
        isinstance(a, datetime) or isinstance(b, datetime)
    ):
        return (a > b) - (a < b)

    return _compare_text(str(a), str(b))


def create_comparator(
    direction: SortDirection | str,
    compare_fn: CompareFn | None = None,
) -> CompareFn:
    """
    Build a directional comparator.

    Descending negates ``compare_fn``; missing values stay last either way.
    ``compare_fn`` only ever sees two present values, so a custom comparator
    cannot reorder ``None``.
    """
    compare = compare_fn or default_compare
    descending = SortDirection(direction) == SortDirection.DESC

    def _compare(a: Any, b: Any) -> int:
        if a is None or b is None:
            if a is None and b is None:
                return 0
            return 1 if a is None else -1
        result = compare(a, b)
        return -result if descending else result

    return _compare


def apply_sort(
    records: Sequence[T],
    sort_state: SortState,
    get_value: ValueGetter,
    compare_fn: CompareFn | None = None,
    server_mode: bool = False,
) -> list[T]:
    """
    Sort records by the active column.

    Args:
        records: Input records
        sort_state: Current sort state
        get_value: ``(record, column_id) -> value``
        compare_fn: Value comparator, defaults to :func:`default_compare`
        server_mode: If True the input is returned unchanged (as a new list)

    Returns:
        A new, stably sorted list.
    """
    if server_mode is True or not is_sort_active(sort_state):
        return list(records)

    column_id = sort_state.column_id
    comparator = create_comparator(sort_state.direction, compare_fn)  # type: ignore[arg-type]
    keyed = [(get_value(record, column_id), record) for record in records]
    keyed.sort(key=cmp_to_key(lambda x, y: comparator(x[0], y[0])))
    return [record for _, record in keyed]


__all__ = [
    "CompareFn",
    "SortDirection",
    "SortState",
    "create_initial_sort_state",
    "toggle_sort",
    "set_sort",
    "clear_sort",
    "is_sort_active",
    "default_compare",
    "create_comparator",
    "apply_sort",
]
