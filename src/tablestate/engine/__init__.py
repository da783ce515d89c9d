"""
tablestate.engine - the state coordinator.

- options:    state ownership configs, SelectionConfig
- ownership:  controlled / uncontrolled / per-field strategies
- pipeline:   filter → sort → paginate with per-stage server skip
- table:      DataTable and its grouped mutators
"""

from tablestate.engine.options import (
    ControlledState,
    InitialState,
    PerFieldControl,
    SelectionConfig,
    UncontrolledState,
    classify_state_config,
    coerce_state_config,
)
from tablestate.engine.ownership import (
    ControlledOwnership,
    OwnershipStrategy,
    PerFieldOwnership,
    UncontrolledOwnership,
    build_ownership,
)
from tablestate.engine.pipeline import Pipeline, PipelineResult, compute_page_count
from tablestate.engine.table import DataTable

__all__ = [
    "ControlledState",
    "InitialState",
    "PerFieldControl",
    "SelectionConfig",
    "UncontrolledState",
    "classify_state_config",
    "coerce_state_config",
    "ControlledOwnership",
    "OwnershipStrategy",
    "PerFieldOwnership",
    "UncontrolledOwnership",
    "build_ownership",
    "Pipeline",
    "PipelineResult",
    "compute_page_count",
    "DataTable",
]
