"""
tablestate.urlsync - two-way sync between table state and a query string.

- codec:     parse_state_from_url(), serialize_state_to_url(), UrlSyncConfig
- adapters:  RouterAdapter protocol and the memory/null/request adapters
- debounce:  Debouncer, the cancellable deferred writer
"""

from tablestate.urlsync.adapters import (
    MemoryRouterAdapter,
    NullRouterAdapter,
    RequestRouterAdapter,
    RouterAdapter,
)
from tablestate.urlsync.codec import (
    UrlFeatures,
    UrlParamNames,
    UrlState,
    UrlSyncConfig,
    parse_state_from_url,
    serialize_state_to_url,
    to_query_params,
)
from tablestate.urlsync.debounce import Debouncer

__all__ = [
    "MemoryRouterAdapter",
    "NullRouterAdapter",
    "RequestRouterAdapter",
    "RouterAdapter",
    "UrlFeatures",
    "UrlParamNames",
    "UrlState",
    "UrlSyncConfig",
    "parse_state_from_url",
    "serialize_state_to_url",
    "to_query_params",
    "Debouncer",
]
