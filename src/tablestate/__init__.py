"""
tablestate - framework-agnostic tabular data transformation and state.

- tablestate.core:     column model, filter/sort/pagination/selection engines
- tablestate.engine:   DataTable coordinator and ownership strategies
- tablestate.urlsync:  query-string codec, router adapters, debounced writes
- tablestate.cli:      ``tablestate view`` / ``tablestate url``
"""

__version__ = "0.1.0"

from tablestate.core import *  # noqa: E402,F401,F403
from tablestate.engine import (  # noqa: E402
    ControlledState,
    DataTable,
    InitialState,
    PerFieldControl,
    SelectionConfig,
    UncontrolledState,
    classify_state_config,
)
from tablestate.urlsync import (  # noqa: E402
    MemoryRouterAdapter,
    NullRouterAdapter,
    RequestRouterAdapter,
    RouterAdapter,
    UrlParamNames,
    UrlSyncConfig,
    parse_state_from_url,
    serialize_state_to_url,
)
