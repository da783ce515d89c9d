"""Tests for tablestate.engine.options and tablestate.engine.ownership."""

import pytest

from tablestate.core.errors import ConfigError, StateError
from tablestate.core.pagination import PaginationState
from tablestate.core.sorting import SortDirection, SortState
from tablestate.core.table_state import ServerMode, TableState, create_initial_table_state
from tablestate.engine.options import (
    ControlledState,
    InitialState,
    PerFieldControl,
    UncontrolledState,
    classify_state_config,
    coerce_initial_state,
    coerce_state_config,
)
from tablestate.engine.ownership import (
    ControlledOwnership,
    PerFieldOwnership,
    UncontrolledOwnership,
    build_ownership,
)

ASC_AGE = SortState("age", SortDirection.ASC)


@pytest.fixture
def seed():
    return create_initial_table_state(["name", "age"])


class TestClassifyStateConfig:
    """Ownership classification."""

    def test_none_is_uncontrolled(self):
        assert classify_state_config(None) == "uncontrolled"

    def test_typed_configs(self, seed):
        assert classify_state_config(ControlledState(seed, lambda s: None)) == "controlled"
        assert classify_state_config(UncontrolledState()) == "uncontrolled"
        assert classify_state_config(PerFieldControl(sorting=ASC_AGE)) == "per_field"

    def test_per_field_callback_alone_is_per_field(self):
        assert classify_state_config(PerFieldControl(on_sorting_change=print)) == "per_field"

    def test_empty_per_field_is_uncontrolled(self):
        assert classify_state_config(PerFieldControl()) == "uncontrolled"

    def test_mappings(self, seed):
        assert classify_state_config({"state": seed, "set_state": print}) == "controlled"
        assert classify_state_config({"sorting": ASC_AGE}) == "per_field"
        assert classify_state_config({"on_state_change": print}) == "per_field"
        assert classify_state_config({"initial_state": {"sorting": ASC_AGE}}) == "uncontrolled"

    def test_initial_state_with_per_field_keys_is_uncontrolled(self):
        config = {"initial_state": {}, "sorting": ASC_AGE}
        assert classify_state_config(config) == "uncontrolled"

    def test_unknown_per_field_key(self):
        with pytest.raises(ConfigError):
            coerce_state_config({"sorting": ASC_AGE, "colour": "blue"})

    def test_unsupported_type(self):
        with pytest.raises(ConfigError):
            coerce_state_config(42)  # type: ignore[arg-type]

    def test_coerce_initial_state(self):
        assert coerce_initial_state(None) == InitialState()
        assert coerce_initial_state({"sorting": ASC_AGE}).sorting == ASC_AGE
        with pytest.raises(ConfigError):
            coerce_initial_state({"nonsense": 1})


class TestControlledOwnership:
    def test_reads_caller_snapshot(self, seed):
        ownership = ControlledOwnership(ControlledState(seed, lambda s: None), ServerMode())
        assert ownership.read("sorting") is seed.sorting

    def test_write_calls_set_state_without_storing(self, seed):
        received = []
        ownership = ControlledOwnership(ControlledState(seed, received.append), ServerMode())

        ownership.write("sorting", ASC_AGE)

        assert received[0].sorting == ASC_AGE
        assert received[0].pagination is seed.pagination
        # nothing changes until the caller hands the state back
        assert ownership.read("sorting") == SortState()

    def test_callable_state(self, seed):
        store = {"state": seed}
        ownership = ControlledOwnership(
            ControlledState(lambda: store["state"], lambda s: store.update(state=s)),
            ServerMode(),
        )
        ownership.write("sorting", ASC_AGE)
        assert ownership.read("sorting") == ASC_AGE

    def test_update(self, seed):
        ownership = ControlledOwnership(ControlledState(seed, lambda s: None), ServerMode())
        ownership.update(state=TableState(sorting=ASC_AGE))
        assert ownership.read("sorting") == ASC_AGE
        with pytest.raises(StateError):
            ownership.update(sorting=ASC_AGE)


class TestUncontrolledOwnership:
    def test_write_stores_and_notifies_full_snapshot(self, seed):
        snapshots = []
        ownership = UncontrolledOwnership(seed, ServerMode(sorting=True), snapshots.append)

        ownership.write("column_order", ["age", "name"])

        assert ownership.read("column_order") == ("age", "name")
        assert snapshots[0].column_order == ("age", "name")
        assert snapshots[0].server_mode == ServerMode(sorting=True)

    def test_update_not_allowed(self, seed):
        with pytest.raises(StateError):
            UncontrolledOwnership(seed, ServerMode()).update(sorting=ASC_AGE)


class TestPerFieldOwnership:
    def test_supplied_slice_is_borrowed(self, seed):
        calls = []
        config = PerFieldControl(
            sorting=SortState(),
            on_sorting_change=lambda v: calls.append(("sorting", v)),
            on_state_change=lambda partial: calls.append(("state", partial)),
        )
        ownership = PerFieldOwnership(config, seed, ServerMode())

        ownership.write("sorting", ASC_AGE)

        assert calls == [("sorting", ASC_AGE), ("state", {"sorting": ASC_AGE})]
        assert ownership.read("sorting") == SortState()
        assert ownership.borrowed_fields == {"sorting"}

    def test_omitted_slice_is_internal_and_still_notified(self, seed):
        calls = []
        config = PerFieldControl(sorting=SortState(), on_pagination_change=calls.append)
        ownership = PerFieldOwnership(config, seed, ServerMode())

        ownership.write("pagination", PaginationState(page_index=1))

        assert ownership.read("pagination").page_index == 1
        assert calls == [PaginationState(page_index=1)]

    def test_selection_is_always_internal(self, seed):
        ownership = PerFieldOwnership(PerFieldControl(sorting=SortState()), seed, ServerMode())
        assert ownership.read("selection") is seed.selection

    def test_update_borrowed_slice(self, seed):
        ownership = PerFieldOwnership(PerFieldControl(sorting=SortState()), seed, ServerMode())
        ownership.update(sorting=ASC_AGE)
        assert ownership.read("sorting") == ASC_AGE
        with pytest.raises(StateError):
            ownership.update(pagination=PaginationState())


class TestBuildOwnership:
    def test_picks_strategy(self, seed):
        assert build_ownership(ControlledState(seed, print), seed, ServerMode()).mode == "controlled"
        assert build_ownership(PerFieldControl(sorting=ASC_AGE), seed, ServerMode()).mode == "per_field"
        assert build_ownership(UncontrolledState(), seed, ServerMode()).mode == "uncontrolled"
        assert build_ownership(PerFieldControl(), seed, ServerMode()).mode == "uncontrolled"
