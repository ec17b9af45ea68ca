"""Tests for the MCP tool handlers."""

import asyncio
import json
from pathlib import Path

from vcsql.mcp.server import call_tool, list_tools


def call(name: str, arguments: dict) -> dict:
    """Invoke a tool and decode its JSON payload."""
    (content,) = asyncio.run(call_tool(name, arguments))
    return json.loads(content.text)


class TestTools:
    """Tests for tool listing and dispatch."""

    def test_list_tools(self) -> None:
        """Test that the three tools are advertised."""
        tools = asyncio.run(list_tools())
        assert [tool.name for tool in tools] == ["vcsql_query", "vcsql_tables", "vcsql_schema"]

    def test_tables(self) -> None:
        """Test that tables are grouped by category."""
        payload = call("vcsql_tables", {})
        assert [t["name"] for t in payload["CORE"]] == ["commits", "commit_parents"]
        assert "OPERATIONAL" in payload

    def test_schema_one_table(self) -> None:
        """Test the schema of a single table."""
        payload = call("vcsql_schema", {"table": "notes"})
        assert payload["name"] == "notes"
        assert [c["name"] for c in payload["columns"]][-1] == "repo"

    def test_schema_unknown_table(self) -> None:
        """Test that an unknown table is reported as an error."""
        assert call("vcsql_schema", {"table": "nope"}) == {"error": "Table not found: nope"}

    def test_unknown_tool(self) -> None:
        """Test dispatch of an unknown tool name."""
        assert call("vcsql_nope", {}) == {"error": "Unknown tool: vcsql_nope"}

    def test_query_blank(self) -> None:
        """Test that a blank query is rejected."""
        assert call("vcsql_query", {"sql": ""}) == {"error": "Query is empty"}

    def test_query_not_a_repository(self, temp_dir: Path) -> None:
        """Test querying a path outside any repository."""
        payload = call("vcsql_query", {"sql": "SELECT 1", "repos": [str(temp_dir)]})
        assert payload == {"error": f"Repository not found: {temp_dir}"}

    def test_query(self, builder) -> None:
        """Test a query against a real repository."""
        builder.commit("first")
        payload = call(
            "vcsql_query", {"sql": "SELECT summary FROM commits", "repos": [str(builder.path)]}
        )
        assert payload == {
            "columns": ["summary"],
            "rows": [{"summary": "first"}],
            "row_count": 1,
        }
