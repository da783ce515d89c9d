"""
Ownership strategies: who holds each slice of table state.

A strategy is chosen once when a table is built and never changes. The
coordinator only ever calls ``read(field)`` and ``write(field, value)``;
where the value lives and who is told about a change is the strategy's
business.

Manifesto:
    A table either owns its state, borrows all of it, or borrows some of it.
    Mixing those at runtime makes every mutation ambiguous, so the choice is
    fixed at construction and encoded in a single object.

Architecture:
    ::

        DataTable ── read(field) ──►  OwnershipStrategy
                  ── write(field, value) ──►
                                          │
               ┌──────────────────────────┼──────────────────────────┐
               ▼                          ▼                          ▼
        ControlledOwnership      UncontrolledOwnership       PerFieldOwnership
        snapshot from caller     internal slices             caller slices +
        set_state(new snapshot)  on_state_change(snapshot)   internal slices

Guardrails:
    ❌ DON'T: Store a caller-owned slice internally after a write
    ✅ DO: Hand the new value to the caller and read it back from them

Tags:
    state, ownership, controlled, uncontrolled, tablestate
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any, ClassVar

from tablestate.core.errors import StateError
from tablestate.core.table_state import (
    CONTROLLABLE_FIELDS,
    STATE_FIELDS,
    ServerMode,
    StateField,
    TableState,
    update_field,
)
from tablestate.engine.options import (
    ControlledState,
    OwnershipMode,
    PerFieldControl,
    StateListener,
)


def _normalize(field_name: StateField, value: Any) -> Any:
    if field_name == "column_order":
        return tuple(value)
    if field_name == "column_visibility":
        return dict(value)
    return value


class OwnershipStrategy(ABC):
    """Read and write access to the state slices of one table."""

    mode: ClassVar[OwnershipMode]

    def __init__(self, server_mode: ServerMode) -> None:
        self.server_mode = server_mode

    @abstractmethod
    def read(self, field_name: StateField) -> Any:
        """Current value of one slice."""

    @abstractmethod
    def write(self, field_name: StateField, value: Any) -> None:
        """Apply a new value for one slice."""

    def snapshot(self) -> TableState:
        return TableState(
            **{name: self.read(name) for name in STATE_FIELDS},
            server_mode=self.server_mode,
        )

    def update(self, **values: Any) -> None:
        """Accept new caller-owned values. Only meaningful for borrowed state."""
        raise StateError(
            "Table state is owned by the table; nothing to update"
        ).with_context(operation="update_control", mode=self.mode)


class ControlledOwnership(OwnershipStrategy):
    """The caller owns the entire snapshot."""

    mode = "controlled"

    def __init__(self, config: ControlledState, server_mode: ServerMode) -> None:
        super().__init__(server_mode)
        self._config = config

    def read(self, field_name: StateField) -> Any:
        return getattr(self._config.current(), field_name)

    def write(self, field_name: StateField, value: Any) -> None:
        self._config.set_state(update_field(self._config.current(), field_name, value))

    def update(self, **values: Any) -> None:
        if set(values) != {"state"}:
            raise StateError(
                "Controlled tables accept only a new 'state'"
            ).with_context(operation="update_control", keys=sorted(values))
        self._config.state = values["state"]


class UncontrolledOwnership(OwnershipStrategy):
    """The table owns every slice, seeded from ``initial``."""

    mode = "uncontrolled"

    def __init__(
        self,
        initial: TableState,
        server_mode: ServerMode,
        on_state_change: StateListener | None = None,
    ) -> None:
        super().__init__(server_mode)
        self._slices: dict[str, Any] = {name: getattr(initial, name) for name in STATE_FIELDS}
        self._on_state_change = on_state_change

    def read(self, field_name: StateField) -> Any:
        return self._slices[field_name]

    def write(self, field_name: StateField, value: Any) -> None:
        self._slices[field_name] = _normalize(field_name, value)
        if self._on_state_change is not None:
            self._on_state_change(self.snapshot())


class PerFieldOwnership(OwnershipStrategy):
    """
    Caller-supplied slices are borrowed; all others are table-owned.

    Which slices are borrowed is fixed by what was supplied at construction.
    Selection is always table-owned.
    """

    mode = "per_field"

    def __init__(
        self,
        config: PerFieldControl,
        internal: TableState,
        server_mode: ServerMode,
    ) -> None:
        super().__init__(server_mode)
        self._config = config
        self._external: dict[str, Any] = {
            name: _normalize(name, value) for name, value in config.supplied_fields().items()
        }
        self._internal: dict[str, Any] = {
            name: getattr(internal, name) for name in STATE_FIELDS if name not in self._external
        }

    @property
    def borrowed_fields(self) -> frozenset[str]:
        return frozenset(self._external)

    def read(self, field_name: StateField) -> Any:
        if field_name in self._external:
            return self._external[field_name]
        return self._internal[field_name]

    def write(self, field_name: StateField, value: Any) -> None:
        value = _normalize(field_name, value)
        if field_name not in self._external:
            self._internal[field_name] = value
        self._notify(field_name, value)

    def _notify(self, field_name: StateField, value: Any) -> None:
        listener: Callable[[Any], None] | None = None
        if field_name in CONTROLLABLE_FIELDS:
            listener = self._config.field_listener(field_name)
        if listener is not None:
            listener(value)
        if self._config.on_state_change is not None:
            self._config.on_state_change({field_name: value})

    def update(self, **values: Any) -> None:
        unknown = set(values) - set(self._external)
        if unknown:
            raise StateError(
                f"Slices not supplied by the caller: {sorted(unknown)}"
            ).with_context(operation="update_control", borrowed=sorted(self._external))
        for name, value in values.items():
            self._external[name] = _normalize(name, value)


def build_ownership(
    config: ControlledState | Any,
    seed: TableState,
    server_mode: ServerMode,
    on_state_change: StateListener | None = None,
) -> OwnershipStrategy:
    """Pick the strategy for an already-classified config."""
    if isinstance(config, ControlledState):
        return ControlledOwnership(config, server_mode)
    if isinstance(config, PerFieldControl) and not config.is_empty():
        return PerFieldOwnership(config, seed, server_mode)
    return UncontrolledOwnership(seed, server_mode, on_state_change)


__all__ = [
    "OwnershipStrategy",
    "ControlledOwnership",
    "UncontrolledOwnership",
    "PerFieldOwnership",
    "build_ownership",
]

