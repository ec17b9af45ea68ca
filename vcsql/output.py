"""Rendering of query results as table, JSON, JSON lines or CSV."""

from __future__ import annotations

import csv
import json
import sys
from enum import Enum

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from vcsql.core.models import QueryResult, Value

_MAX_CELL_WIDTH = 80


class OutputFormat(str, Enum):
    """Supported output formats."""

    TABLE = "table"
    JSON = "json"
    JSONL = "jsonl"
    CSV = "csv"


def value_to_string(value: Value) -> str:
    """Cell text; NULL renders as the empty string."""
    if value is None:
        return ""
    return str(value)


def _truncate(text: str) -> str:
    if len(text) <= _MAX_CELL_WIDTH:
        return text
    return text[: _MAX_CELL_WIDTH - 3] + "..."


def render_table(result: QueryResult, console: Console, no_header: bool = False) -> None:
    if result.is_empty:
        return

    table = Table(box=box.ROUNDED, show_header=not no_header)
    for column in result.columns:
        table.add_column(column, overflow="fold")
    for row in result.rows:
        table.add_row(*(Text(_truncate(value_to_string(v))) for v in row))
    console.print(table)


def render_json(result: QueryResult) -> None:
    print(json.dumps(result.to_dicts(), indent=2, ensure_ascii=False))


def render_jsonl(result: QueryResult) -> None:
    for row in result.to_dicts():
        print(json.dumps(row, ensure_ascii=False))


def render_csv(result: QueryResult, no_header: bool = False) -> None:
    writer = csv.writer(sys.stdout, lineterminator="\n")
    if not no_header:
        writer.writerow(result.columns)
    for row in result.rows:
        writer.writerow([value_to_string(v) for v in row])


def render(
    result: QueryResult,
    output_format: OutputFormat,
    console: Console,
    no_header: bool = False,
) -> None:
    """Write ``result`` to stdout in ``output_format``."""
    if output_format is OutputFormat.JSON:
        render_json(result)
    elif output_format is OutputFormat.JSONL:
        render_jsonl(result)
    elif output_format is OutputFormat.CSV:
        render_csv(result, no_header)
    else:
        render_table(result, console, no_header)
