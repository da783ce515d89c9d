"""Tests for tablestate.core.columns module."""

from dataclasses import FrozenInstanceError, dataclass

import pytest

from tablestate.core.columns import (
    Align,
    ColumnDef,
    FilterType,
    col,
    col_with_accessor,
    create_column,
    create_columns,
    define_columns,
    get_column_by_id,
    get_column_ids,
    get_ordered_columns,
    get_visible_columns,
    normalize_accessor,
    validate_columns,
)


@dataclass
class Address:
    city: str


@dataclass
class Person:
    name: str
    address: Address | None = None


class TestColumnHelpers:
    """Test col() and col_with_accessor()."""

    def test_col_uses_key_as_id_header_and_accessor(self):
        definition = col("name")
        assert definition.id == "name"
        assert definition.header == "name"
        assert definition.accessor == "name"

    def test_col_options(self):
        definition = col("age", header="Age", sortable=True, filter="text", align="right", width=80)
        assert definition.header == "Age"
        assert definition.sortable is True
        assert definition.filter is FilterType.TEXT
        assert definition.align is Align.RIGHT
        assert definition.width == 80

    def test_col_with_accessor(self):
        definition = col_with_accessor("full", accessor=lambda r: f"{r['first']} {r['last']}")
        column = create_column(definition)
        assert column.get_value({"first": "Ada", "last": "Lovelace"}) == "Ada Lovelace"

    def test_definitions_are_frozen(self):
        definition = col("name")
        with pytest.raises(FrozenInstanceError):
            definition.id = "other"  # type: ignore[misc]

    def test_invalid_align_rejected(self):
        with pytest.raises(ValueError):
            col("name", align="middle")

    def test_define_columns_returns_tuple(self):
        columns = define_columns([col("a"), col("b")])
        assert isinstance(columns, tuple)
        assert get_column_ids(columns) == ["a", "b"]


class TestNormalizeAccessor:
    """Test accessor normalisation."""

    def test_callable_is_used_as_is(self):
        fn = lambda r: 42  # noqa: E731
        assert normalize_accessor(fn) is fn

    def test_mapping_key(self):
        assert normalize_accessor("name")({"name": "Ada"}) == "Ada"

    def test_object_attribute(self):
        assert normalize_accessor("name")(Person("Ada")) == "Ada"

    def test_missing_key_is_none(self):
        assert normalize_accessor("missing")({"name": "Ada"}) is None
        assert normalize_accessor("missing")(Person("Ada")) is None

    def test_dotted_path_walks_nested_records(self):
        get_city = normalize_accessor("address.city")
        assert get_city({"address": {"city": "Oslo"}}) == "Oslo"
        assert get_city(Person("Ada", Address("London"))) == "London"

    def test_dotted_path_through_missing_parent(self):
        assert normalize_accessor("address.city")(Person("Ada")) is None

    def test_literal_dotted_key_wins(self):
        record = {"address.city": "Literal", "address": {"city": "Nested"}}
        assert normalize_accessor("address.city")(record) == "Literal"


class TestRuntimeColumns:
    """Test create_columns() and column lookup helpers."""

    def test_header_defaults_to_id(self):
        column = create_column(ColumnDef(id="age"))
        assert column.header == "age"

    def test_definition_without_accessor_reads_none(self):
        column = create_column(ColumnDef(id="age"))
        assert column.get_value({"age": 3}) is None

    def test_get_column_by_id(self):
        columns = create_columns([col("a"), col("b")])
        assert get_column_by_id(columns, "b").id == "b"
        assert get_column_by_id(columns, "zzz") is None

    def test_visible_columns_absent_means_visible(self):
        columns = create_columns([col("a"), col("b"), col("c")])
        visible = get_visible_columns(columns, {"b": False})
        assert [c.id for c in visible] == ["a", "c"]

    def test_ordered_columns(self):
        columns = create_columns([col("a"), col("b"), col("c"), col("d")])
        ordered = get_ordered_columns(columns, ["c", "unknown", "a"])
        assert [c.id for c in ordered] == ["c", "a", "b", "d"]


class TestValidateColumns:
    """validate_columns() reports, never raises."""

    def test_valid(self):
        result = validate_columns([col("a"), col("b")])
        assert result.valid is True
        assert result.errors == ()

    def test_duplicate_ids(self):
        result = validate_columns([col("a"), col("b"), col("a")])
        assert result.valid is False
        assert result.errors == ("Duplicate column ID: a",)

    def test_missing_id(self):
        result = validate_columns([{"header": "No id"}, ColumnDef(id="")])
        assert result.valid is False
        assert result.errors == (
            "Column definition missing required 'id' field",
            "Column definition missing required 'id' field",
        )

    def test_accepts_mappings(self):
        assert validate_columns([{"id": "a"}, {"id": "b"}]).valid is True
