"""Rendering of tweets, tracks and users for the terminal.

Tables are decoration and go to stderr; JSON is the machine-readable
result and is the only thing written to stdout.
"""

from __future__ import annotations

import json
import sys
from enum import Enum
from typing import Any

from pydantic import BaseModel
from rich.console import Console
from rich.table import Table

console = Console(stderr=True)

Row = dict[str, Any]


class OutputFormat(str, Enum):
    TABLE = "table"
    JSON = "json"


def to_rows(items: list[BaseModel] | BaseModel) -> list[Row]:
    """Dump models to plain dicts keyed by their wire names (``prettyName``, ``publishedAt``)."""
    if isinstance(items, BaseModel):
        items = [items]
    return [item.model_dump(mode="json", by_alias=True) for item in items]


def print_output(
    rows: list[Row] | Row,
    fmt: OutputFormat = OutputFormat.TABLE,
    columns: list[str] | None = None,
    title: str | None = None,
) -> None:
    """Show rows from ``to_rows`` as a table, or as JSON with ``--output json``."""
    if fmt == OutputFormat.JSON:
        print_json(rows)
        return
    print_table(rows, columns, title)


def print_json(data: Any) -> None:
    json.dump(data, sys.stdout, indent=2, default=str)
    sys.stdout.write("\n")


def print_table(rows: list[Row] | Row, columns: list[str] | None = None, title: str | None = None) -> None:
    """Render rows as a rich table on stderr.

    ``columns`` picks and orders the wire fields to show, e.g.
    ``["prettyName", "hashtag", "id"]`` for tracks; by default every
    field of the first row is shown. Long tweet text folds within its
    cell.
    """
    if isinstance(rows, dict):
        rows = [rows]
    if not rows:
        console.print("[dim]No results.[/dim]")
        return

    fields = columns or list(rows[0])
    table = Table(title=title)
    for name in fields:
        table.add_column(name, overflow="fold")
    for row in rows:
        table.add_row(*(str(row.get(name, "")) for name in fields))
    console.print(table)
