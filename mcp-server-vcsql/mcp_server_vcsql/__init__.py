"""MCP server for vcsql - SQL queries over git repositories."""

from vcsql.mcp import serve


def main() -> None:
    """Entry point for mcp-server-vcsql."""
    serve()


__all__ = ["main", "serve"]
