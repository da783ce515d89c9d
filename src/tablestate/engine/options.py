"""
Configuration shapes accepted by :class:`~tablestate.engine.table.DataTable`.

State ownership is declared with one of three shapes:

- :class:`ControlledState`    the caller owns the whole snapshot
- :class:`UncontrolledState`  the table owns everything, optionally seeded
  and observed
- :class:`PerFieldControl`    the caller owns some slices, the table the rest

Plain mappings with the same keys are accepted and classified by shape,
see :func:`coerce_state_config`.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, fields
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from tablestate.core.errors import ConfigError
from tablestate.core.filtering import FilterState
from tablestate.core.pagination import PaginationState
from tablestate.core.selection import RowId, SelectionMode, SelectionState
from tablestate.core.sorting import SortState
from tablestate.core.table_state import CONTROLLABLE_FIELDS, StateField, TableState

OwnershipMode = Literal["controlled", "uncontrolled", "per_field"]

StateListener = Callable[[TableState], None]
PartialListener = Callable[[dict[str, Any]], None]


@dataclass
class ControlledState:
    """
    The caller owns the entire state.

    ``state`` is a snapshot or a zero-argument callable returning the current
    snapshot (e.g. a store's getter). ``set_state`` receives every new
    snapshot the table derives.
    """

    state: TableState | Callable[[], TableState]
    set_state: Callable[[TableState], None]

    def current(self) -> TableState:
        if callable(self.state):
            return self.state()
        return self.state


@dataclass
class InitialState:
    """Overrides for the table-owned starting state. Every slice is optional."""

    sorting: SortState | None = None
    pagination: PaginationState | Mapping[str, Any] | None = None
    filtering: FilterState | None = None
    column_visibility: Mapping[str, bool] | None = None
    column_order: Sequence[str] | None = None
    selection: SelectionState | None = None


@dataclass
class UncontrolledState:
    """The table owns the state; ``on_state_change`` sees every new snapshot."""

    initial_state: InitialState | Mapping[str, Any] | None = None
    on_state_change: StateListener | None = None


@dataclass
class PerFieldControl:
    """
    Slices supplied here are owned by the caller; omitted ones by the table.

    Writes to a caller-owned slice go only through ``on_<slice>_change`` and
    ``on_state_change({slice: value})``.
    """

    pagination: PaginationState | None = None
    sorting: SortState | None = None
    filtering: FilterState | None = None
    column_visibility: Mapping[str, bool] | None = None
    column_order: Sequence[str] | None = None

    on_state_change: PartialListener | None = None
    on_pagination_change: Callable[[PaginationState], None] | None = None
    on_sorting_change: Callable[[SortState], None] | None = None
    on_filtering_change: Callable[[FilterState], None] | None = None
    on_column_visibility_change: Callable[[Mapping[str, bool]], None] | None = None
    on_column_order_change: Callable[[tuple[str, ...]], None] | None = None

    def supplied_fields(self) -> dict[StateField, Any]:
        return {name: getattr(self, name) for name in CONTROLLABLE_FIELDS if getattr(self, name) is not None}

    def field_listener(self, name: StateField) -> Callable[[Any], None] | None:
        return getattr(self, f"on_{name}_change", None)

    def is_empty(self) -> bool:
        return all(getattr(self, f.name) is None for f in fields(self))


StateConfig = ControlledState | UncontrolledState | PerFieldControl | Mapping[str, Any] | None

_PER_FIELD_KEYS = frozenset(f.name for f in fields(PerFieldControl))


def coerce_state_config(config: StateConfig) -> ControlledState | UncontrolledState | PerFieldControl:
    """
    Turn any accepted state config into one of the three typed shapes.

    Mappings are classified by their keys: ``state`` + ``set_state`` is
    controlled; per-field keys without ``state``/``initial_state`` are
    per-field; anything else is uncontrolled.
    """
    if config is None:
        return UncontrolledState()
    if isinstance(config, (ControlledState, UncontrolledState, PerFieldControl)):
        return config
    if not isinstance(config, Mapping):
        raise ConfigError(
            f"Unsupported state config type: {type(config).__name__}"
        ).with_context(operation="classify_state_config")

    keys = set(config)
    if "state" in keys and "set_state" in keys:
        return ControlledState(state=config["state"], set_state=config["set_state"])
    if "state" not in keys and "initial_state" not in keys and keys & _PER_FIELD_KEYS:
        unknown = keys - _PER_FIELD_KEYS
        if unknown:
            raise ConfigError(
                f"Unknown per-field state keys: {sorted(unknown)}"
            ).with_context(operation="classify_state_config")
        return PerFieldControl(**config)
    return UncontrolledState(
        initial_state=config.get("initial_state"),
        on_state_change=config.get("on_state_change"),
    )


def classify_state_config(config: StateConfig) -> OwnershipMode:
    """Decide which ownership model a state config describes."""
    shaped = coerce_state_config(config)
    if isinstance(shaped, ControlledState):
        return "controlled"
    if isinstance(shaped, PerFieldControl) and not shaped.is_empty():
        return "per_field"
    return "uncontrolled"


def coerce_initial_state(value: InitialState | Mapping[str, Any] | None) -> InitialState:
    if value is None:
        return InitialState()
    if isinstance(value, InitialState):
        return value
    if isinstance(value, TableState):
        return InitialState(**{f.name: getattr(value, f.name) for f in fields(InitialState)})
    try:
        return InitialState(**value)
    except TypeError as exc:
        raise ConfigError("Invalid initial_state", cause=exc).with_context(
            operation="coerce_initial_state"
        ) from exc


class SelectionConfig(BaseModel):
    """Row selection options."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    enabled: bool = False
    mode: SelectionMode = SelectionMode.MULTI
    initial_selected_row_ids: tuple[RowId, ...] = Field(default_factory=tuple)


__all__ = [
    "OwnershipMode",
    "StateListener",
    "PartialListener",
    "ControlledState",
    "InitialState",
    "UncontrolledState",
    "PerFieldControl",
    "StateConfig",
    "SelectionConfig",
    "coerce_state_config",
    "classify_state_config",
    "coerce_initial_state",
]
