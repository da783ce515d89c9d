"""
Cancellable debounced calls.

A :class:`Debouncer` owns at most one pending timer. Calling it again
before the delay elapses cancels the pending timer and starts a new one,
so a burst of calls results in a single execution after the quiet
interval. The wrapped function takes no arguments: it reads whatever is
current when it fires.

Examples:
    >>> writes = []
    >>> debounced = Debouncer(lambda: writes.append("x"), delay_ms=300)
    >>> debounced(); debounced(); debounced()
    >>> debounced.flush()
    True
    >>> writes
    ['x']
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Any, Protocol

from tablestate.core.logging import get_logger

logger = get_logger(__name__)


class TimerHandle(Protocol):
    def start(self) -> None: ...

    def cancel(self) -> None: ...


TimerFactory = Callable[[float, Callable[[], None]], TimerHandle]


def _thread_timer(interval: float, function: Callable[[], None]) -> TimerHandle:
    timer = threading.Timer(interval, function)
    timer.daemon = True
    timer.name = "tablestate-debounce"
    return timer


class Debouncer:
    """Coalesce bursts of calls into one deferred call of ``fn``."""

    def __init__(
        self,
        fn: Callable[[], Any],
        delay_ms: int,
        *,
        timer_factory: TimerFactory | None = None,
    ) -> None:
        self._fn = fn
        self._delay_seconds = max(delay_ms, 0) / 1000.0
        self._timer_factory = timer_factory or _thread_timer
        self._lock = threading.Lock()
        self._timer: TimerHandle | None = None
        self._generation = 0

    def __call__(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._generation += 1
            generation = self._generation
            self._timer = self._timer_factory(self._delay_seconds, lambda: self._fire(generation))
            self._timer.start()

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._timer is not None

    def cancel(self) -> None:
        """Drop the pending call, if any."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = None
            self._generation += 1

    def flush(self) -> bool:
        """Run the pending call now. Returns False if nothing was pending."""
        with self._lock:
            if self._timer is None:
                return False
            self._timer.cancel()
            self._timer = None
            self._generation += 1
        self._run()
        return True

    def _fire(self, generation: int) -> None:
        with self._lock:
            # superseded or cancelled after the timer thread woke up
            if generation != self._generation:
                return
            self._timer = None
        self._run()

    def _run(self) -> None:
        try:
            self._fn()
        except Exception:
            logger.exception("debounced_call_failed")


__all__ = ["Debouncer", "TimerFactory", "TimerHandle"]
