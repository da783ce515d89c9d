"""Tests for tablestate.core.pagination module."""

import pytest

from tablestate.core.pagination import (
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


class TestPageMath:
    """Test page count and index helpers."""

    @pytest.mark.parametrize(
        ("total", "size", "expected"),
        [(12, 5, 3), (12, 2, 6), (10, 10, 1), (0, 10, 0), (12, 0, 0)],
    )
    def test_page_count(self, total, size, expected):
        assert get_page_count(total, size) == expected

    def test_server_page_count_wins(self):
        assert get_page_count(12, 5, server_page_count=9) == 9

    def test_start_and_end_index(self):
        assert get_page_start_index(2, 5) == 10
        assert get_page_end_index(2, 5, 12) == 12
        assert get_page_end_index(0, 5, 12) == 5

    @pytest.mark.parametrize("index", [-5, -1, 0, 1, 2, 3, 100])
    def test_clamp_stays_in_range(self, index):
        assert 0 <= clamp_page_index(index, 3) <= 2

    def test_clamp_with_no_pages(self):
        assert clamp_page_index(7, 0) == 0

    def test_is_valid_page_index(self):
        assert is_valid_page_index(0, 3) is True
        assert is_valid_page_index(3, 3) is False
        assert is_valid_page_index(0, 0) is False

    def test_has_next_and_previous(self):
        assert has_next_page(0, 3) is True
        assert has_next_page(2, 3) is False
        assert has_previous_page(0) is False
        assert has_previous_page(1) is True


class TestNavigation:
    """Navigation always clamps."""

    def test_initial_state(self):
        state = create_initial_pagination_state(25)
        assert state == PaginationState(page_index=0, page_size=25)

    def test_next_page_clamps_at_end(self):
        state = PaginationState(page_index=2, page_size=5)
        assert go_to_next_page(state, 3).page_index == 2

    def test_previous_page_clamps_at_start(self):
        assert go_to_previous_page(PaginationState(), 3).page_index == 0

    def test_go_to_page_clamps(self):
        state = PaginationState(page_size=5)
        assert go_to_page(state, 5, 3).page_index == 2
        assert go_to_page(state, -1, 3).page_index == 0

    def test_navigation_keeps_page_size(self):
        state = PaginationState(page_index=0, page_size=5)
        assert go_to_next_page(state, 3).page_size == 5


class TestSetPageSize:
    def test_reclamps_against_local_rows(self):
        state = PaginationState(page_index=5, page_size=2)
        new_state = set_page_size(state, 5, total_items=12)
        assert new_state.page_size == 5
        assert new_state.page_index == 2

    def test_uses_server_total_count(self):
        state = PaginationState(page_index=9, page_size=10, total_count=100)
        new_state = set_page_size(state, 50, total_items=10)
        assert new_state.page_index == 1
        assert new_state.total_count == 100

    def test_uses_server_page_count(self):
        state = PaginationState(page_index=3, page_size=10, page_count=4)
        assert set_page_size(state, 20).page_index == 3

    def test_no_rows(self):
        assert set_page_size(PaginationState(page_index=3), 5).page_index == 0


class TestGetPaginatedData:
    def test_slices_current_page(self, users):
        page = get_paginated_data(users, PaginationState(page_index=2, page_size=5))
        assert [u["id"] for u in page] == [11, 12]

    def test_server_mode_returns_everything(self, users):
        page = get_paginated_data(users, PaginationState(page_index=2, page_size=5), server_mode=True)
        assert page == users
        assert page is not users

    def test_out_of_range_page_is_empty(self, users):
        assert get_paginated_data(users, PaginationState(page_index=9, page_size=5)) == []
