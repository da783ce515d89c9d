"""
CLI utility helpers: record loading and output formatting.
"""

from __future__ import annotations

import csv
import json
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.table import Table

from tablestate.core.columns import Align, Column

console = Console()
err_console = Console(stderr=True)


# ── Loading ──────────────────────────────────────────────────────────────


def _coerce_cell(value: str) -> Any:
    """CSV cells are text; give numbers back their type so they sort numerically."""
    text = value.strip()
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return float(text)
    except ValueError:
        return value


def load_records(path: Path) -> list[dict[str, Any]]:
    """Load a JSON array of objects or a CSV file with a header row."""
    if path.suffix.lower() == ".csv":
        with path.open(newline="", encoding="utf-8") as fh:
            return [{k: _coerce_cell(v or "") for k, v in row.items()} for row in csv.DictReader(fh)]

    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise typer.BadParameter(f"{path} is not valid JSON: {exc}") from exc

    if not isinstance(payload, list) or not all(isinstance(r, dict) for r in payload):
        raise typer.BadParameter(f"{path} must contain a JSON array of objects")
    return payload


def record_keys(records: Sequence[dict[str, Any]]) -> list[str]:
    """Every key across the records, in first-seen order."""
    keys: dict[str, None] = {}
    for record in records:
        for key in record:
            keys.setdefault(key, None)
    return list(keys)


# ── Output helpers ───────────────────────────────────────────────────────


_JUSTIFY = {Align.LEFT: "left", Align.CENTER: "center", Align.RIGHT: "right"}


def _cell(value: Any) -> str:
    return "" if value is None else str(value)


def print_page(
    rows: Sequence[Any],
    columns: Sequence[Column],
    *,
    title: str = "",
    caption: str = "",
) -> None:
    """Render one page of records as a Rich table."""
    if not rows:
        console.print("[dim]No rows.[/dim]")
        return

    table = Table(title=title or None, caption=caption or None, show_lines=False, pad_edge=False)
    for column in columns:
        table.add_column(column.header, justify=_JUSTIFY[column.align], overflow="fold")
    for row in rows:
        table.add_row(*(_cell(column.get_value(row)) for column in columns))
    console.print(table)


def print_json(payload: Any) -> None:
    """Plain JSON on stdout, safe to pipe."""
    typer.echo(json.dumps(payload, indent=2, default=str))


def fail(message: str) -> None:
    err_console.print(f"[bold red]Error[/bold red]: {message}")
    raise typer.Exit(code=1)
