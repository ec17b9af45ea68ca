"""
MCP server for vcsql.

Exposes SQL queries over git repository data to LLMs via the Model Context
Protocol.

Tools:
    - vcsql_query: Run a SQL query against one or more repositories
    - vcsql_tables: List tables by category
    - vcsql_schema: Describe table columns

Usage:
    Install: pip install mcp-server-vcsql
    Run: mcp-server-vcsql
"""

import asyncio

from vcsql.mcp.server import serve as _serve


def serve() -> None:
    """Entry point for the MCP server."""
    asyncio.run(_serve())


__all__ = ["serve"]
