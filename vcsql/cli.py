"""CLI entry point for vcsql."""

import logging
import time
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from vcsql.core.catalog import TABLES, get_table_info, tables_by_category
from vcsql.core.engine import ProjectionEngine
from vcsql.core.exceptions import InvalidQueryError, VcsqlError
from vcsql.core.models import TableDescriptor
from vcsql.git import GitRepo
from vcsql.output import OutputFormat, render

app = typer.Typer(
    name="vcsql",
    help="Query git repositories with SQL.",
    no_args_is_help=True,
)
console = Console()
err_console = Console(stderr=True)

EXAMPLES = """\
BASIC QUERIES

  # Recent commits
  vcsql query "SELECT short_id, summary, authored_at
               FROM commits
               ORDER BY committed_at DESC
               LIMIT 10"

  # Current branch
  vcsql query "SELECT name FROM branches WHERE is_head = 1"

  # All branches with their targets
  vcsql query "SELECT name, target_id, is_remote FROM branches"

ANALYTICS

  # Commits by author
  vcsql query "SELECT author_name, COUNT(*) AS commits
               FROM commits
               GROUP BY author_name
               ORDER BY commits DESC"

  # Commits by day of week
  vcsql query "SELECT
                 CASE CAST(strftime('%w', substr(authored_at, 1, 19)) AS INTEGER)
                   WHEN 0 THEN 'Sun' WHEN 1 THEN 'Mon'
                   WHEN 2 THEN 'Tue' WHEN 3 THEN 'Wed'
                   WHEN 4 THEN 'Thu' WHEN 5 THEN 'Fri' WHEN 6 THEN 'Sat'
                 END AS day,
                 COUNT(*) AS commits
               FROM commits
               GROUP BY day"

  # Files that change most often
  vcsql query "SELECT new_path, COUNT(*) AS changes
               FROM diff_files
               GROUP BY new_path
               ORDER BY changes DESC
               LIMIT 10"

  # Merge commits
  vcsql query "SELECT short_id, summary FROM commits WHERE is_merge = 1"

JOINS

  # Commits with branch info
  vcsql query "SELECT c.short_id, c.summary, b.name AS branch
               FROM commits c
               JOIN branches b ON b.target_id = c.id"

  # Merge commits with their parents
  vcsql query "SELECT c.summary, p.parent_id, p.parent_index
               FROM commits c
               JOIN commit_parents p ON p.commit_id = c.id
               WHERE c.is_merge = 1
               LIMIT 10"

OUTPUT FORMATS

  # JSON output
  vcsql query -f json "SELECT short_id, summary FROM commits LIMIT 3"

  # CSV output
  vcsql query -f csv "SELECT * FROM branches" > branches.csv

  # JSON lines for streaming
  vcsql query -f jsonl "SELECT * FROM commits"

MULTIPLE REPOSITORIES

  vcsql query -r ../api -r ../web "SELECT repo, COUNT(*) FROM commits GROUP BY repo"
"""


def configure_logging(verbose: bool) -> None:
    """Send log records to stderr through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def fail(message: str) -> typer.Exit:
    """Print an error to stderr and build the exit to raise."""
    err_console.print(f"[red]Error:[/red] {escape(message)}")
    return typer.Exit(code=1)


@app.command()
def query(
    sql: Annotated[str, typer.Argument(help="SQL query to execute")],
    repo: Annotated[
        list[Path] | None,
        typer.Option(
            "--repo", "-r", help="Repository path (repeatable)", envvar="VCSQL_REPO"
        ),
    ] = None,
    output_format: Annotated[
        OutputFormat,
        typer.Option("--format", "-f", help="Output format", envvar="VCSQL_FORMAT"),
    ] = OutputFormat.TABLE,
    no_header: Annotated[
        bool, typer.Option("--no-header", "-H", help="Omit header row (table/csv)")
    ] = False,
    quiet: Annotated[
        bool, typer.Option("--quiet", "-q", help="Suppress non-essential output")
    ] = False,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Show timing, row counts and debug logs")
    ] = False,
    blame_path: Annotated[
        str | None, typer.Option("--blame-path", help="Only blame this file (path in HEAD)")
    ] = None,
) -> None:
    """Run a SQL query against one or more repositories."""
    configure_logging(verbose)
    start = time.perf_counter()

    repos: list[GitRepo] = []
    try:
        if not sql.strip():
            raise InvalidQueryError("Query is empty")
        for path in repo or [Path(".")]:
            repos.append(GitRepo.open(path))
        with ProjectionEngine(blame_path=blame_path) as engine:
            result = engine.run_query(sql, repos)
    except VcsqlError as e:
        raise fail(str(e)) from e
    finally:
        for handle in repos:
            handle.close()

    render(result, output_format, console, no_header)

    if result.is_empty and output_format is OutputFormat.TABLE and not quiet:
        err_console.print("[dim]No rows[/]")
    if verbose:
        elapsed = time.perf_counter() - start
        err_console.print(f"\n{result.row_count} row(s) in {elapsed:.3f}s")


@app.command()
def tables() -> None:
    """List all available tables."""
    console.print("\nAvailable tables:\n")
    for category, descriptors in tables_by_category().items():
        if not descriptors:
            continue
        console.print(f"  [bold]{category}[/]")
        for table in descriptors:
            console.print(f"    [cyan]{table.name:<20}[/] {table.description}")
        console.print()
    console.print("Use 'vcsql schema <table>' for column details.")


def print_schema(table: TableDescriptor) -> None:
    """Print the columns of one table."""
    console.print(f"\n[bold]TABLE: {table.name}[/]")
    console.print(table.description)
    console.print("\nCOLUMNS:")
    for column in table.columns:
        nullable = " [dim](nullable)[/]" if column.nullable else ""
        console.print(
            f"  [cyan]{column.name:<20}[/] {column.type.value:<10} {column.description}{nullable}"
        )


@app.command()
def schema(
    table: Annotated[str | None, typer.Argument(help="Table name (all tables if omitted)")] = None,
) -> None:
    """Show table schemas."""
    if table is None:
        for descriptor in TABLES:
            print_schema(descriptor)
        return

    descriptor = get_table_info(table)
    if descriptor is None:
        err_console.print(f"Table '{escape(table)}' not found.\n\nAvailable tables:")
        for known in TABLES:
            err_console.print(f"  {known.name}")
        raise typer.Exit(code=1)
    print_schema(descriptor)


@app.command()
def examples() -> None:
    """Show example queries."""
    console.print(EXAMPLES, markup=False, highlight=False)


if __name__ == "__main__":
    app()
