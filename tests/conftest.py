"""
Shared pytest fixtures and configuration for tablestate tests.

This module provides:
- A 12-user dataset (4 Admins, 3 Managers, 5 Users) used across
  the filter, sort, pagination and coordinator tests
- Column definitions for that dataset
- A fake timer factory so debounced URL writes fire only when a test says so
- structlog/settings reset fixtures for test isolation

Usage:
    def test_something(users, user_columns, fake_timers):
        table = DataTable(users, user_columns, timer_factory=fake_timers)
        ...
        fake_timers.fire_all()
"""

import os
import sys
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import pytest
import structlog

# Ensure tablestate package is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from tablestate.core.columns import ColumnDef, FilterType, col
from tablestate.core.settings import reset_settings


# =============================================================================
# Isolation Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_logging() -> Generator[None, None, None]:
    """
    Restore structlog's defaults after each test.

    The CLI configures structlog to write to the (swapped) stderr of the
    invocation; later tests must not log into that closed stream.
    """
    yield
    structlog.contextvars.clear_contextvars()
    structlog.reset_defaults()


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Drop cached settings and any TABLESTATE_* variables from the environment."""
    for key in [k for k in os.environ if k.startswith("TABLESTATE_")]:
        monkeypatch.delenv(key, raising=False)
    reset_settings()
    yield
    reset_settings()


# =============================================================================
# Dataset Fixtures
# =============================================================================


USERS: list[dict[str, Any]] = [
    {"id": 1, "name": "Alice", "email": "alice@example.com", "role": "Admin", "age": 34},
    {"id": 2, "name": "Bob", "email": "bob@example.com", "role": "User", "age": 27},
    {"id": 3, "name": "Carol", "email": "carol@example.com", "role": "Manager", "age": 41},
    {"id": 4, "name": "Dave", "email": "dave@example.com", "role": "Admin", "age": 45},
    {"id": 5, "name": "Eve", "email": "eve@example.com", "role": "User", "age": 22},
    {"id": 6, "name": "Frank", "email": "frank@example.com", "role": "Admin", "age": 29},
    {"id": 7, "name": "Grace", "email": "grace@example.com", "role": "Manager", "age": 38},
    {"id": 8, "name": "Heidi", "email": "heidi@example.com", "role": "User", "age": 31},
    {"id": 9, "name": "Ivan", "email": "ivan@example.com", "role": "Admin", "age": 52},
    {"id": 10, "name": "Judy", "email": "judy@example.com", "role": "User", "age": 26},
    {"id": 11, "name": "Mallory", "email": "mallory@example.com", "role": "Manager", "age": 47},
    {"id": 12, "name": "Niaj", "email": "niaj@example.com", "role": "User", "age": 35},
]


@pytest.fixture
def users() -> list[dict[str, Any]]:
    """
    Twelve users: 4 Admins (Alice, Dave, Frank, Ivan), 3 Managers, 5 Users.

    Ages are distinct so sort order is fully determined.
    """
    return [dict(u) for u in USERS]


@pytest.fixture
def user_columns() -> list[ColumnDef]:
    return [
        col("name", header="Name", sortable=True, filter=FilterType.TEXT),
        col("email", header="Email", filter=FilterType.TEXT),
        col("role", header="Role", sortable=True, filter=FilterType.TEXT),
        col("age", header="Age", sortable=True, align="right"),
    ]


@pytest.fixture
def row_key() -> Callable[[dict[str, Any], int], int]:
    """Row key by the record's ``id`` field."""
    return lambda row, index: row["id"]


# =============================================================================
# Timer Fixtures
# =============================================================================


class FakeTimer:
    """Stand-in for ``threading.Timer`` that only fires when told to."""

    def __init__(self, interval: float, function: Callable[[], None]) -> None:
        self.interval = interval
        self.function = function
        self.started = False
        self.cancelled = False
        self.fired = False

    def start(self) -> None:
        self.started = True

    def cancel(self) -> None:
        self.cancelled = True

    def fire(self) -> None:
        self.fired = True
        self.function()


class FakeTimerFactory:
    """Records every timer a ``Debouncer`` creates."""

    def __init__(self) -> None:
        self.timers: list[FakeTimer] = []

    def __call__(self, interval: float, function: Callable[[], None]) -> FakeTimer:
        timer = FakeTimer(interval, function)
        self.timers.append(timer)
        return timer

    @property
    def pending(self) -> list[FakeTimer]:
        return [t for t in self.timers if t.started and not t.cancelled and not t.fired]

    def fire_all(self) -> int:
        """Fire every pending timer; returns how many fired."""
        pending = self.pending
        for timer in pending:
            timer.fire()
        return len(pending)


@pytest.fixture
def fake_timers() -> FakeTimerFactory:
    return FakeTimerFactory()
