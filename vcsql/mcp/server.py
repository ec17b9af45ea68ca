"""MCP server implementation for vcsql."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from vcsql.core.catalog import get_table_info, tables_by_category
from vcsql.core.engine import ProjectionEngine
from vcsql.core.exceptions import InvalidQueryError, TableNotFoundError, VcsqlError
from vcsql.core.models import TableDescriptor
from vcsql.git import GitRepo

logger = logging.getLogger(__name__)

server = Server("vcsql")


def _table_to_dict(table: TableDescriptor) -> dict[str, Any]:
    """Convert a TableDescriptor to a JSON-serializable dict."""
    return {
        "name": table.name,
        "category": table.category,
        "description": table.description,
        "columns": [
            {
                "name": c.name,
                "type": c.type.value,
                "nullable": c.nullable,
                "description": c.description,
            }
            for c in table.columns
        ],
    }


@server.list_tools()  # type: ignore[no-untyped-call, untyped-decorator]
async def list_tools() -> list[Tool]:
    """List available tools."""
    return [
        Tool(
            name="vcsql_query",
            description=(
                "Run a SQLite query against git repository data. Tables: commits, "
                "commit_parents, branches, tags, refs, stashes, reflog, diffs, diff_files, "
                "blame, config, remotes, submodules, status, worktrees, hooks, notes. "
                "Every table has a 'repo' column naming the repository a row came from."
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "sql": {
                        "type": "string",
                        "description": "SQL query to execute",
                    },
                    "repos": {
                        "type": "array",
                        "items": {"type": "string"},
                        "description": "Repository paths (default: current directory)",
                    },
                    "blame_path": {
                        "type": "string",
                        "description": "Only blame this file when the query uses the blame table",
                    },
                },
                "required": ["sql"],
            },
        ),
        Tool(
            name="vcsql_tables",
            description="List the queryable tables grouped by category.",
            inputSchema={
                "type": "object",
                "properties": {},
            },
        ),
        Tool(
            name="vcsql_schema",
            description="Show the columns of one table, or of every table.",
            inputSchema={
                "type": "object",
                "properties": {
                    "table": {
                        "type": "string",
                        "description": "Table name (optional)",
                    },
                },
            },
        ),
    ]


@server.call_tool()  # type: ignore[untyped-decorator]
async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
    """Handle tool calls."""
    try:
        if name == "vcsql_query":
            result = _handle_query(
                arguments["sql"],
                arguments.get("repos") or [],
                arguments.get("blame_path"),
            )
        elif name == "vcsql_tables":
            result = _handle_tables()
        elif name == "vcsql_schema":
            result = _handle_schema(arguments.get("table"))
        else:
            result = {"error": f"Unknown tool: {name}"}

        return [TextContent(type="text", text=json.dumps(result, indent=2))]

    except VcsqlError as e:
        return [TextContent(type="text", text=json.dumps({"error": str(e)}))]
    except Exception as e:
        logger.exception("Tool %s failed", name)
        return [TextContent(type="text", text=json.dumps({"error": str(e)}))]


def _handle_query(sql: str, repos: list[str], blame_path: str | None) -> dict[str, Any]:
    """Handle vcsql_query tool."""
    if not sql.strip():
        raise InvalidQueryError("Query is empty")
    handles = []
    try:
        for path in repos or [str(Path.cwd())]:
            handles.append(GitRepo.open(path))
        with ProjectionEngine(blame_path=blame_path) as engine:
            result = engine.run_query(sql, handles)
    finally:
        for handle in handles:
            handle.close()

    return {
        "columns": result.columns,
        "rows": result.to_dicts(),
        "row_count": result.row_count,
    }


def _handle_tables() -> dict[str, Any]:
    """Handle vcsql_tables tool."""
    return {
        category: [{"name": t.name, "description": t.description} for t in tables]
        for category, tables in tables_by_category().items()
        if tables
    }


def _handle_schema(table: str | None) -> dict[str, Any]:
    """Handle vcsql_schema tool."""
    if table is None:
        return {
            "tables": [
                _table_to_dict(t) for tables in tables_by_category().values() for t in tables
            ]
        }
    descriptor = get_table_info(table)
    if descriptor is None:
        raise TableNotFoundError(table)
    return _table_to_dict(descriptor)


async def serve() -> None:
    """Run the MCP server."""
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())
