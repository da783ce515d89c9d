"""
Column definitions and runtime columns.

A table is described once by a sequence of :class:`ColumnDef` values. At
runtime each definition is turned into a :class:`Column` whose ``accessor``
is a uniform ``record -> value`` function, whatever the definition declared
(a key path or a callable).

Manifesto:
    - **Declarative:** definitions are plain frozen data, built with
      :func:`col` or :func:`col_with_accessor`
    - **Uniform access:** the pipeline never cares how a value is extracted
    - **Diagnostics, not exceptions:** :func:`validate_columns` reports
      problems and lets the caller decide

Architecture:
    ::

        col("name")  col_with_accessor("full", accessor=fn)
              │                  │
              ▼                  ▼
        ┌──────────────────────────────────┐
        │ ColumnDef (frozen)                │
        │  id, header, sortable, filter,    │
        │  width/min/max, visible, align,   │
        │  accessor (str | callable), meta  │
        └──────────────┬───────────────────┘
                       │ create_columns()
                       ▼
        ┌──────────────────────────────────┐
        │ Column (frozen)                   │
        │  definition + accessor(record)    │
        └──────────────────────────────────┘

Examples:
    >>> columns = create_columns([
    ...     col("name", header="Name", sortable=True),
    ...     col_with_accessor("city", accessor="address.city"),
    ... ])
    >>> columns[1].accessor({"address": {"city": "Oslo"}})
    'Oslo'

Tags:
    columns, accessor, column-model, tablestate
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field, is_dataclass
from enum import Enum
from typing import Any

AccessorFn = Callable[[Any], Any]
ColumnAccessor = str | AccessorFn


class FilterType(str, Enum):
    """Filter kind declared on a column."""

    TEXT = "text"
    NONE = "none"


class Align(str, Enum):
    """Horizontal alignment hint for the view layer."""

    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


@dataclass(frozen=True)
class ColumnDef:
    """
    Declarative column definition.

    Attributes:
        id: Unique, stable column identifier
        header: Header label (defaults to the id)
        sortable: Whether the column can be sorted
        filter: Filter kind for this column
        width: Column width in pixels
        min_width: Minimum column width
        max_width: Maximum column width
        visible: Whether the column is visible by default
        align: Column alignment
        accessor: Key path or callable extracting the value from a record
        meta: Free-form metadata for the view layer
    """

    id: str
    header: str | None = None
    sortable: bool = False
    filter: FilterType = FilterType.NONE
    width: int | None = None
    min_width: int | None = None
    max_width: int | None = None
    visible: bool = True
    align: Align = Align.LEFT
    accessor: ColumnAccessor | None = None
    meta: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Column:
    """Runtime column: the definition plus a normalised value accessor."""

    definition: ColumnDef
    id: str
    header: str
    sortable: bool
    filter: FilterType
    width: int | None
    align: Align
    accessor: AccessorFn

    def get_value(self, record: Any) -> Any:
        return self.accessor(record)


@dataclass(frozen=True)
class ColumnValidation:
    """Result of :func:`validate_columns`."""

    valid: bool
    errors: tuple[str, ...] = ()


def _build_definition(
    column_id: str,
    accessor: ColumnAccessor | None,
    *,
    header: str | None,
    sortable: bool,
    filter: FilterType | str,
    width: int | None,
    min_width: int | None,
    max_width: int | None,
    visible: bool,
    align: Align | str,
    meta: Mapping[str, Any] | None,
) -> ColumnDef:
    return ColumnDef(
        id=column_id,
        header=header if header is not None else column_id,
        sortable=sortable,
        filter=FilterType(filter),
        width=width,
        min_width=min_width,
        max_width=max_width,
        visible=visible,
        align=Align(align),
        accessor=accessor,
        meta=dict(meta or {}),
    )


def col(
    key: str,
    *,
    header: str | None = None,
    sortable: bool = False,
    filter: FilterType | str = FilterType.NONE,
    width: int | None = None,
    min_width: int | None = None,
    max_width: int | None = None,
    visible: bool = True,
    align: Align | str = Align.LEFT,
    accessor: ColumnAccessor | None = None,
    meta: Mapping[str, Any] | None = None,
) -> ColumnDef:
    """
    Create a column definition from a record key.

    The key is the column id, the default header and (unless ``accessor`` is
    given) the key path used to read the value.
    """
    return _build_definition(
        str(key),
        accessor if accessor is not None else str(key),
        header=header,
        sortable=sortable,
        filter=filter,
        width=width,
        min_width=min_width,
        max_width=max_width,
        visible=visible,
        align=align,
        meta=meta,
    )


def col_with_accessor(
    id: str,
    *,
    accessor: ColumnAccessor,
    header: str | None = None,
    sortable: bool = False,
    filter: FilterType | str = FilterType.NONE,
    width: int | None = None,
    min_width: int | None = None,
    max_width: int | None = None,
    visible: bool = True,
    align: Align | str = Align.LEFT,
    meta: Mapping[str, Any] | None = None,
) -> ColumnDef:
    """Create a column definition with an explicit id and accessor."""
    return _build_definition(
        id,
        accessor,
        header=header,
        sortable=sortable,
        filter=filter,
        width=width,
        min_width=min_width,
        max_width=max_width,
        visible=visible,
        align=align,
        meta=meta,
    )


def define_columns(columns: Sequence[ColumnDef]) -> tuple[ColumnDef, ...]:
    """Freeze a sequence of column definitions."""
    return tuple(columns)


def _lookup(record: Any, key: str) -> Any:
    if isinstance(record, Mapping):
        return record.get(key)
    return getattr(record, key, None)


def _has_key(record: Any, key: str) -> bool:
    if isinstance(record, Mapping):
        return key in record
    return hasattr(record, key)


def normalize_accessor(accessor: ColumnAccessor) -> AccessorFn:
    """
    Normalise a column accessor to a ``record -> value`` function.

    A callable is returned unchanged. A key path reads a mapping key or an
    attribute. A dotted path walks nested records unless the record has a
    key with the literal dotted name. Missing values resolve to ``None``.
    """
    if callable(accessor):
        return accessor

    key = str(accessor)
    parts = key.split(".")

    def _get(record: Any) -> Any:
        if len(parts) == 1 or _has_key(record, key):
            return _lookup(record, key)
        value = record
        for part in parts:
            if value is None:
                return None
            value = _lookup(value, part)
        return value

    return _get


def _missing(record: Any) -> Any:
    return None


def create_column(definition: ColumnDef) -> Column:
    """Convert a column definition to a runtime column."""
    accessor = normalize_accessor(definition.accessor) if definition.accessor is not None else _missing
    return Column(
        definition=definition,
        id=definition.id,
        header=definition.header if definition.header is not None else definition.id,
        sortable=definition.sortable,
        filter=definition.filter,
        width=definition.width,
        align=definition.align,
        accessor=accessor,
    )


def create_columns(definitions: Sequence[ColumnDef]) -> list[Column]:
    """Convert column definitions to runtime columns."""
    return [create_column(d) for d in definitions]


def get_column_by_id(columns: Sequence[Column], column_id: str) -> Column | None:
    for column in columns:
        if column.id == column_id:
            return column
    return None


def get_column_ids(definitions: Sequence[ColumnDef]) -> list[str]:
    return [d.id for d in definitions]


def get_visible_columns(
    columns: Sequence[Column], visibility: Mapping[str, bool]
) -> list[Column]:
    """Columns not explicitly hidden. Absent entries count as visible."""
    return [c for c in columns if visibility.get(c.id) is not False]


def get_ordered_columns(columns: Sequence[Column], order: Sequence[str]) -> list[Column]:
    """
    Place the columns named in ``order`` first, then the rest.

    Unknown ids in ``order`` are skipped; columns not named keep their
    original relative order.
    """
    remaining = {c.id: c for c in columns}
    ordered: list[Column] = []
    for column_id in order:
        column = remaining.pop(column_id, None)
        if column is not None:
            ordered.append(column)
    ordered.extend(remaining.values())
    return ordered


def validate_columns(definitions: Sequence[Any]) -> ColumnValidation:
    """
    Check column definitions for blank and duplicate ids.

    Never raises. Accepts :class:`ColumnDef` values or anything with an
    ``id`` attribute or key.
    """
    errors: list[str] = []
    seen: set[str] = set()

    for definition in definitions:
        if isinstance(definition, Mapping):
            column_id = definition.get("id")
        elif is_dataclass(definition) or hasattr(definition, "id"):
            column_id = getattr(definition, "id", None)
        else:
            column_id = None

        if not isinstance(column_id, str) or not column_id.strip():
            errors.append("Column definition missing required 'id' field")
            continue

        if column_id in seen:
            errors.append(f"Duplicate column ID: {column_id}")
        seen.add(column_id)

    return ColumnValidation(valid=not errors, errors=tuple(errors))


__all__ = [
    "AccessorFn",
    "ColumnAccessor",
    "FilterType",
    "Align",
    "ColumnDef",
    "Column",
    "ColumnValidation",
    "col",
    "col_with_accessor",
    "define_columns",
    "normalize_accessor",
    "create_column",
    "create_columns",
    "get_column_by_id",
    "get_column_ids",
    "get_visible_columns",
    "get_ordered_columns",
    "validate_columns",
]
