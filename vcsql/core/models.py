"""Data models for vcsql."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ColumnType(Enum):
    """Declared column types of the projected schema."""

    TEXT = "TEXT"
    INTEGER = "INTEGER"
    BOOLEAN = "BOOLEAN"
    DATETIME = "DATETIME"

    @property
    def storage_type(self) -> str:
        """SQLite storage class used in CREATE TABLE statements."""
        if self is ColumnType.BOOLEAN:
            return "INTEGER"
        if self is ColumnType.DATETIME:
            return "TEXT"
        return self.value


@dataclass(frozen=True)
class ColumnDescriptor:
    """A column of a projected table."""

    name: str
    type: ColumnType
    nullable: bool
    description: str


@dataclass(frozen=True)
class TableDescriptor:
    """Schema of one projected table.

    Column order is the order extractors emit values and the order of the
    CREATE TABLE statement.
    """

    name: str
    category: str
    description: str
    columns: tuple[ColumnDescriptor, ...]
    primary_key: tuple[str, ...] = ()

    @property
    def column_names(self) -> list[str]:
        return [c.name for c in self.columns]

    @property
    def create_sql(self) -> str:
        """CREATE TABLE IF NOT EXISTS statement for this table."""
        lines = []
        for column in self.columns:
            line = f"    {column.name} {column.type.storage_type}"
            if not column.nullable:
                line += " NOT NULL"
            lines.append(line)
        if self.primary_key:
            lines.append(f"    PRIMARY KEY ({', '.join(self.primary_key)})")
        body = ",\n".join(lines)
        return f"CREATE TABLE IF NOT EXISTS {self.name} (\n{body}\n)"

    @property
    def insert_sql(self) -> str:
        """Parameterized INSERT statement binding every column in order."""
        placeholders = ", ".join("?" for _ in self.columns)
        return f"INSERT INTO {self.name} ({', '.join(self.column_names)}) VALUES ({placeholders})"


Value = int | float | str | None


@dataclass
class QueryResult:
    """Column names and rows produced by a query."""

    columns: list[str]
    rows: list[list[Value]] = field(default_factory=list)

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def is_empty(self) -> bool:
        return not self.rows

    def to_dicts(self) -> list[dict[str, Any]]:
        """Rows as dicts keyed by column name."""
        return [dict(zip(self.columns, row)) for row in self.rows]
