"""
Root Typer application for the tablestate CLI.

``tablestate view`` runs the filter → sort → paginate pipeline over a JSON
or CSV file; ``tablestate url`` decodes a table query string.
"""

from __future__ import annotations

import sys
from pathlib import Path

import typer
from typer import Typer

from tablestate.cli.utils import fail, load_records, print_json, print_page, record_keys
from tablestate.core.columns import FilterType, col
from tablestate.core.errors import TableStateError
from tablestate.core.logging import bind_context, configure_logging
from tablestate.core.settings import get_settings
from tablestate.core.sorting import SortDirection
from tablestate.engine.table import DataTable
from tablestate.urlsync.codec import UrlSyncConfig, parse_state_from_url

app = Typer(
    name="tablestate",
    help="tablestate: filter, sort and page tabular data from the terminal.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# ── Version callback ─────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        from importlib.metadata import PackageNotFoundError
        from importlib.metadata import version as pkg_version

        try:
            v = pkg_version("tablestate")
        except PackageNotFoundError:
            from tablestate import __version__ as v
        typer.echo(f"tablestate {v}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
    log_level: str | None = typer.Option(None, "--log-level", help="DEBUG, INFO, WARNING, ERROR."),
) -> None:
    """tablestate CLI: inspect tables and table URLs."""
    settings = get_settings()
    configure_logging(
        level=log_level or settings.log_level,
        json_format=settings.log_format == "json",
        stream=sys.stderr,
        cache_loggers=False,
    )


# ── Option parsing ───────────────────────────────────────────────────────


def _parse_sort(value: str) -> tuple[str, SortDirection]:
    column_id, _, direction = value.partition(":")
    if not column_id:
        raise typer.BadParameter("expected COL or COL:asc|desc", param_hint="--sort")
    try:
        return column_id, SortDirection((direction or "asc").lower())
    except ValueError as exc:
        raise typer.BadParameter(
            f"unknown direction {direction!r}, use asc or desc", param_hint="--sort"
        ) from exc


def _parse_filter(value: str) -> tuple[str, str]:
    column_id, sep, text = value.partition("=")
    if not sep or not column_id:
        raise typer.BadParameter(f"expected COL=TEXT, got {value!r}", param_hint="--filter")
    return column_id, text


# ── Commands ─────────────────────────────────────────────────────────────


@app.command("view")
def view(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="JSON array or CSV file."),
    sort: str | None = typer.Option(None, "--sort", "-s", help="COL or COL:asc|desc."),
    filters: list[str] | None = typer.Option(None, "--filter", "-f", help="COL=TEXT, repeatable."),
    query: str | None = typer.Option(None, "--q", "-q", help="Search every field (ignored with --filter)."),
    page: int = typer.Option(1, "--page", "-p", min=1, help="1-based page number."),
    page_size: int | None = typer.Option(None, "--page-size", "-n", min=1),
    columns: str | None = typer.Option(None, "--columns", "-c", help="Comma-separated column ids."),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Filter, sort and page a data file."""
    bind_context(source=file.name)
    records = load_records(file)
    column_ids = [c.strip() for c in columns.split(",") if c.strip()] if columns else record_keys(records)
    if not column_ids:
        fail(f"{file} has no columns")

    sort_spec = _parse_sort(sort) if sort else None
    filter_specs = [_parse_filter(f) for f in filters or []]

    try:
        table = DataTable(
            records,
            [col(c, sortable=True, filter=FilterType.TEXT) for c in column_ids],
            page_size=page_size,
        )
        with table:
            if query:
                table.filtering.set_global_filter(query)
            for column_id, text in filter_specs:
                table.filtering.set_column_filter(column_id, text)
            if sort_spec is not None:
                table.sorting.set(*sort_spec)
            table.pagination.go_to_page(page - 1)
    except TableStateError as exc:
        fail(exc.message)

    visible = table.visible_columns
    rows = table.paginated_data

    if json_out:
        print_json(
            {
                "rows": [{c.id: c.get_value(r) for c in visible} for r in rows],
                "page_index": table.page_index,
                "page_size": table.page_size,
                "page_count": table.page_count,
                "filtered_row_count": table.filtered_row_count,
                "total_row_count": len(records),
            }
        )
        return

    caption = (
        f"Page {table.page_index + 1} of {max(table.page_count, 1)}"
        f" · {table.filtered_row_count} of {len(records)} rows"
    )
    print_page(rows, visible, title=file.name, caption=caption)


@app.command("url")
def url(
    query: str = typer.Argument(..., help="Query string, with or without the leading '?'."),
) -> None:
    """Decode a table query string into state (JSON)."""
    state = parse_state_from_url(query, UrlSyncConfig(enabled=True))
    print_json(state.to_dict())


if __name__ == "__main__":
    app()
