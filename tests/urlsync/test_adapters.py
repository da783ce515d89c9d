"""Tests for tablestate.urlsync.adapters module."""

from starlette.applications import Starlette
from starlette.datastructures import QueryParams
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route
from starlette.testclient import TestClient

from tablestate.core.columns import col
from tablestate.engine.table import DataTable
from tablestate.urlsync.adapters import (
    MemoryRouterAdapter,
    NullRouterAdapter,
    RequestRouterAdapter,
    RouterAdapter,
)


def _request(path: str = "/users", query: bytes = b"") -> Request:
    scope = {
        "type": "http",
        "method": "GET",
        "scheme": "http",
        "server": ("testserver", 80),
        "root_path": "",
        "path": path,
        "query_string": query,
        "headers": [],
    }
    return Request(scope)


class TestProtocol:
    def test_adapters_satisfy_protocol(self):
        assert isinstance(MemoryRouterAdapter(), RouterAdapter)
        assert isinstance(NullRouterAdapter(), RouterAdapter)
        assert isinstance(RequestRouterAdapter(_request()), RouterAdapter)
        assert not isinstance(object(), RouterAdapter)


class TestMemoryRouterAdapter:
    def test_initial_query(self):
        adapter = MemoryRouterAdapter("?page=2&tab=x")
        assert adapter.is_client() is True
        assert adapter.get_search_params()["page"] == "2"

    def test_push_and_replace(self):
        adapter = MemoryRouterAdapter()
        adapter.set_search_params(QueryParams("page=1"))
        adapter.set_search_params(QueryParams("page=2"), replace=True)
        adapter.set_search_params(QueryParams("page=3"))

        assert [str(p) for p in adapter.history] == ["", "page=2", "page=3"]

    def test_location(self):
        adapter = MemoryRouterAdapter(path="/users")
        assert adapter.location == "/users"
        adapter.set_search_params(QueryParams("sort=name&sortDir=asc"), replace=True)
        assert adapter.location == "/users?sort=name&sortDir=asc"


class TestNullRouterAdapter:
    def test_no_location(self):
        adapter = NullRouterAdapter()
        assert adapter.is_client() is False
        adapter.set_search_params(QueryParams("page=1"))
        assert str(adapter.get_search_params()) == ""


class TestRequestRouterAdapter:
    def test_reads_request_query(self):
        adapter = RequestRouterAdapter(_request(query=b"page=1&tab=x"))
        assert adapter.get_search_params()["tab"] == "x"
        assert adapter.location is None

    def test_write_sets_location(self):
        adapter = RequestRouterAdapter(_request(query=b"tab=x"))
        adapter.set_search_params(QueryParams("tab=x&page=2"), replace=True)

        assert adapter.get_search_params()["page"] == "2"
        assert adapter.location == "http://testserver/users?tab=x&page=2"
        assert adapter.replace is True

    def test_table_in_a_request_handler(self, users, fake_timers):
        async def list_users(request: Request) -> JSONResponse:
            adapter = RequestRouterAdapter(request)
            with DataTable(
                users,
                [col("name", sortable=True), col("role")],
                page_size=5,
                url_sync={"enabled": True, "router_adapter": adapter},
                timer_factory=fake_timers,
            ) as table:
                table.sorting.toggle("name")
                table.flush_url()
                return JSONResponse(
                    {
                        "names": [u["name"] for u in table.paginated_data],
                        "location": adapter.location,
                    }
                )

        app = Starlette(routes=[Route("/users", list_users)])
        client = TestClient(app)

        body = client.get("/users", params={"filter_role": "manager", "tab": "people"}).json()

        assert body["names"] == ["Carol", "Grace", "Mallory"]
        assert body["location"].startswith("http://testserver/users?")
        location_params = QueryParams(body["location"].split("?", 1)[1])
        assert location_params["tab"] == "people"
        assert location_params["filter_role"] == "manager"
        assert location_params["sort"] == "name"
