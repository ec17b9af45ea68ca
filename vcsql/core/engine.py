"""Projection engine: loads the tables a query needs, then runs the query."""

from __future__ import annotations

import logging
import math
import re
import sqlite3
from collections.abc import Iterable, Mapping
from types import MappingProxyType

from vcsql.core.catalog import TABLES, get_table_info
from vcsql.core.exceptions import ExtractionError, RelationalError, TableNotFoundError
from vcsql.core.models import QueryResult, Value
from vcsql.extractors import get_extractor, populate
from vcsql.git import GIT_ERRORS, GitRepo

logger = logging.getLogger(__name__)

_TABLE_AFTER_KEYWORD = re.compile(r"\b(?:FROM|JOIN|INTO|UPDATE)\s+(\w+)", re.IGNORECASE)

_TABLE_WORDS = {
    table.name: re.compile(rf"\b{re.escape(table.name)}\b", re.IGNORECASE) for table in TABLES
}

_SQLITE_ERRORS = (sqlite3.Error, sqlite3.Warning)


def to_value(value: object) -> Value:
    """Map a SQLite cell onto null, integer, float or text."""
    if value is None or isinstance(value, (int, str)):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else str(value)
    # BLOB
    return None


class ProjectionEngine:
    """In-memory SQLite store populated lazily from git repositories.

    A table is loaded at most once per repository for the lifetime of the
    engine. Rows of several repositories share a table and are told apart by
    their ``repo`` column.
    """

    def __init__(self, blame_path: str | None = None) -> None:
        self._blame_path = blame_path
        self._conn: sqlite3.Connection | None = None
        self._loaded: dict[tuple[str, str], int] = {}

    def _get_connection(self) -> sqlite3.Connection:
        """Get or create the database connection."""
        if self._conn is None:
            self._conn = sqlite3.connect(":memory:")
        return self._conn

    def close(self) -> None:
        """Close the database connection."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None
        self._loaded.clear()

    def __enter__(self) -> ProjectionEngine:
        return self

    def __exit__(self, exc_type: type | None, exc_val: Exception | None, exc_tb: object) -> None:
        self.close()

    @property
    def loaded_tables(self) -> Mapping[tuple[str, str], int]:
        """Row counts keyed by (repository path, table name)."""
        return MappingProxyType(self._loaded)

    @staticmethod
    def extract_table_names(query: str) -> set[str]:
        """Catalog tables a query refers to.

        Names following FROM/JOIN/INTO/UPDATE are matched, as is any catalog
        name appearing as a whole word (aliases, subqueries). This is a
        heuristic: names inside string literals or comments match too.
        """
        found = set()
        for match in _TABLE_AFTER_KEYWORD.finditer(query):
            name = match.group(1).lower()
            if name in _TABLE_WORDS:
                found.add(name)
        for name, pattern in _TABLE_WORDS.items():
            if pattern.search(query):
                found.add(name)
        return found

    def ensure_loaded(self, table: str, repo: GitRepo) -> None:
        """Create and populate ``table`` for ``repo`` unless already loaded."""
        key = (repo.path, table)
        if key in self._loaded:
            return

        descriptor = get_table_info(table)
        extractor = get_extractor(table, self._blame_path)
        if descriptor is None or extractor is None:
            raise TableNotFoundError(table)

        conn = self._get_connection()
        try:
            with conn:
                conn.execute(descriptor.create_sql)
                count = populate(conn, extractor, repo)
        except _SQLITE_ERRORS as e:
            raise RelationalError(f"Failed to load table '{table}': {e}") from e
        except GIT_ERRORS as e:
            raise ExtractionError(table, e) from e

        self._loaded[key] = count
        logger.debug("Loaded %s for %s (%d rows)", table, repo.path, count)

    def load_for_query(self, query: str, repo: GitRepo) -> None:
        """Load every catalog table ``query`` refers to."""
        for table in sorted(self.extract_table_names(query)):
            self.ensure_loaded(table, repo)

    def execute(self, query: str) -> QueryResult:
        """Run ``query`` against the loaded tables."""
        conn = self._get_connection()
        try:
            cursor = conn.execute(query)
            rows = cursor.fetchall()
        except _SQLITE_ERRORS as e:
            raise RelationalError(str(e)) from e

        columns = [d[0] for d in cursor.description] if cursor.description else []
        return QueryResult(columns=columns, rows=[[to_value(v) for v in row] for row in rows])

    def run_query(self, query: str, repos: Iterable[GitRepo]) -> QueryResult:
        """Load ``query``'s tables from each repository in turn, then execute it."""
        for repo in repos:
            self.load_for_query(query, repo)
        return self.execute(query)
