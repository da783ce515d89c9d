"""Router adapters: where a table's query string lives.

The codec never touches the environment. Reading and writing the query
string goes through a :class:`RouterAdapter`:

- :class:`MemoryRouterAdapter`  in-process navigation history (tests, CLIs,
  embedding in a non-web UI)
- :class:`NullRouterAdapter`    non-interactive rendering; URL sync is off
- :class:`RequestRouterAdapter` a Starlette/FastAPI request; writes become a
  location the handler can redirect to
"""

from __future__ import annotations

import threading
from typing import Protocol, runtime_checkable

from starlette.datastructures import URL, QueryParams
from starlette.requests import Request

from tablestate.urlsync.codec import QueryInput, to_query_params


@runtime_checkable
class RouterAdapter(Protocol):
    """Read/write access to the ambient query string."""

    def is_client(self) -> bool:
        """True when there is an interactive location to sync with."""
        ...

    def get_search_params(self) -> QueryParams:
        ...

    def set_search_params(self, params: QueryParams, *, replace: bool = False) -> None:
        ...


class MemoryRouterAdapter:
    """
    In-memory location with a navigation history.

    ``replace=True`` overwrites the current history entry, otherwise a new
    entry is pushed. Writes may come from the debounce timer thread.
    """

    def __init__(self, initial: QueryInput = None, *, path: str = "/") -> None:
        self.path = path
        self._lock = threading.Lock()
        self._history: list[QueryParams] = [to_query_params(initial)]

    def is_client(self) -> bool:
        return True

    def get_search_params(self) -> QueryParams:
        with self._lock:
            return self._history[-1]

    def set_search_params(self, params: QueryParams, *, replace: bool = False) -> None:
        with self._lock:
            if replace:
                self._history[-1] = params
            else:
                self._history.append(params)

    @property
    def history(self) -> list[QueryParams]:
        with self._lock:
            return list(self._history)

    @property
    def location(self) -> str:
        search = str(self.get_search_params())
        return f"{self.path}?{search}" if search else self.path


class NullRouterAdapter:
    """Adapter for contexts with no location (background jobs, static renders)."""

    def is_client(self) -> bool:
        return False

    def get_search_params(self) -> QueryParams:
        return QueryParams()

    def set_search_params(self, params: QueryParams, *, replace: bool = False) -> None:
        return None


class RequestRouterAdapter:
    """
    Adapter over an incoming Starlette/FastAPI request.

    Reads come from the request's query string until the table writes;
    after that they reflect the written params. ``location`` holds the URL
    to redirect to, or ``None`` if nothing was written.
    """

    def __init__(self, request: Request) -> None:
        self._url: URL = request.url
        self._params = QueryParams(request.query_params.multi_items())
        self._lock = threading.Lock()
        self.location: str | None = None
        self.replace: bool = False

    def is_client(self) -> bool:
        return True

    def get_search_params(self) -> QueryParams:
        with self._lock:
            return self._params

    def set_search_params(self, params: QueryParams, *, replace: bool = False) -> None:
        with self._lock:
            self._params = params
            self.location = str(self._url.replace(query=str(params)))
            self.replace = replace


__all__ = [
    "RouterAdapter",
    "MemoryRouterAdapter",
    "NullRouterAdapter",
    "RequestRouterAdapter",
]
