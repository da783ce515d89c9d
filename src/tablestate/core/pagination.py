"""
Client-side pagination with optional server-supplied counts.

``PaginationState.total_count`` and ``page_count`` are only set when a
server paginates the data; they take precedence over counting the local
records. Every navigation helper clamps the target page, so an out-of-range
index is never stored.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass, replace
from typing import TypeVar

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 10


@dataclass(frozen=True)
class PaginationState:
    """
    Attributes:
        page_index: Current page (0-based)
        page_size: Rows per page
        total_count: Total row count reported by a server
        page_count: Page count reported by a server
    """

    page_index: int = 0
    page_size: int = DEFAULT_PAGE_SIZE
    total_count: int | None = None
    page_count: int | None = None


def create_initial_pagination_state(page_size: int = DEFAULT_PAGE_SIZE) -> PaginationState:
    return PaginationState(page_index=0, page_size=page_size)


def get_page_count(
    total_items: int,
    page_size: int,
    server_page_count: int | None = None,
) -> int:
    """Number of pages; a server-supplied count wins. 0 if page_size <= 0."""
    if server_page_count is not None:
        return server_page_count
    if page_size <= 0:
        return 0
    return math.ceil(total_items / page_size)


def get_page_start_index(page_index: int, page_size: int) -> int:
    return page_index * page_size


def get_page_end_index(page_index: int, page_size: int, total_items: int) -> int:
    """Exclusive end index of a page."""
    return min(get_page_start_index(page_index, page_size) + page_size, total_items)


def is_valid_page_index(page_index: int, total_pages: int) -> bool:
    return 0 <= page_index < total_pages


def clamp_page_index(page_index: int, total_pages: int) -> int:
    """Clamp to ``[0, total_pages - 1]``, or 0 when there are no pages."""
    if total_pages <= 0:
        return 0
    return max(0, min(page_index, total_pages - 1))


def go_to_next_page(state: PaginationState, total_pages: int) -> PaginationState:
    return replace(state, page_index=clamp_page_index(state.page_index + 1, total_pages))


def go_to_previous_page(state: PaginationState, total_pages: int) -> PaginationState:
    return replace(state, page_index=clamp_page_index(state.page_index - 1, total_pages))


def go_to_page(state: PaginationState, page_index: int, total_pages: int) -> PaginationState:
    return replace(state, page_index=clamp_page_index(page_index, total_pages))


def set_page_size(
    state: PaginationState,
    page_size: int,
    total_items: int | None = None,
) -> PaginationState:
    """
    Change the page size and reclamp the page index.

    The page count is taken from ``state.page_count``, else computed from
    ``state.total_count``, else from ``total_items``.
    """
    if state.page_count is not None:
        total_pages = state.page_count
    elif state.total_count is not None:
        total_pages = get_page_count(state.total_count, page_size)
    else:
        total_pages = get_page_count(total_items or 0, page_size)

    return replace(
        state,
        page_size=page_size,
        page_index=clamp_page_index(state.page_index, total_pages),
    )


def get_paginated_data(
    records: Sequence[T],
    pagination: PaginationState,
    server_mode: bool = False,
) -> list[T]:
    """Slice out the current page. In server mode the input is already a page."""
    if server_mode is True:
        return list(records)
    start = get_page_start_index(pagination.page_index, pagination.page_size)
    end = get_page_end_index(pagination.page_index, pagination.page_size, len(records))
    return list(records[start:end])


def has_next_page(page_index: int, total_pages: int) -> bool:
    return page_index < total_pages - 1


def has_previous_page(page_index: int) -> bool:
    return page_index > 0


__all__ = [
    "DEFAULT_PAGE_SIZE",
    "PaginationState",
    "create_initial_pagination_state",
    "get_page_count",
    "get_page_start_index",
    "get_page_end_index",
    "is_valid_page_index",
    "clamp_page_index",
    "go_to_next_page",
    "go_to_previous_page",
    "go_to_page",
    "set_page_size",
    "get_paginated_data",
    "has_next_page",
    "has_previous_page",
]
