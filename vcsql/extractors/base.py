"""Extractor protocol and the row-shaping helpers shared by every table."""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Iterable, Sequence
from datetime import datetime, timezone
from typing import Protocol

from vcsql.core.catalog import get_table_info
from vcsql.core.exceptions import TableNotFoundError
from vcsql.git import GitRepo

logger = logging.getLogger(__name__)

Row = Sequence[object]

_BINARY_SNIFF_BYTES = 8000


class Extractor(Protocol):
    """Produces the rows of one catalog table.

    Rows hold every column except the trailing ``repo`` column, which
    populate() appends.
    """

    table: str

    def rows(self, repo: GitRepo) -> Iterable[Row]:
        """Yield rows in catalog column order."""
        ...


def populate(conn: sqlite3.Connection, extractor: Extractor, repo: GitRepo) -> int:
    """Insert every row ``extractor`` yields for ``repo``; return the row count."""
    descriptor = get_table_info(extractor.table)
    if descriptor is None:
        raise TableNotFoundError(extractor.table)

    repo_path = repo.path
    cursor = conn.executemany(
        descriptor.insert_sql,
        ((*row, repo_path) for row in extractor.rows(repo)),
    )
    count = max(cursor.rowcount, 0)
    logger.debug("Inserted %d rows into %s for %s", count, extractor.table, repo_path)
    return count


def flag(value: bool) -> int:
    """Booleans are stored as 0/1."""
    return 1 if value else 0


def format_time(epoch: int) -> str:
    """UTC ``YYYY-MM-DD HH:MM:SS``."""
    return datetime.fromtimestamp(epoch, tz=timezone.utc).strftime("%Y-%m-%d %H:%M:%S")


def format_time_with_offset(epoch: int, offset_minutes: int) -> str:
    """UTC time followed by the original ``+HHMM`` offset."""
    sign = "+" if offset_minutes >= 0 else "-"
    hours, minutes = divmod(abs(offset_minutes), 60)
    return f"{format_time(epoch)} {sign}{hours:02d}{minutes:02d}"


def offset_minutes(tz_offset: int) -> int:
    """GitPython stores offsets in seconds west of UTC."""
    return -tz_offset // 60


def split_message(message: str) -> tuple[str, str | None]:
    """Split a commit message into its summary line and body."""
    lines = message.strip().split("\n")
    summary = lines[0].strip()
    body = "\n".join(lines[1:]).strip()
    return summary, body or None


def is_binary(data: bytes) -> bool:
    return b"\0" in data[:_BINARY_SNIFF_BYTES]


def decode_text(data: bytes) -> str:
    """Blob content as text; binary content becomes the empty string."""
    if is_binary(data):
        return ""
    return data.decode("utf-8", errors="replace")


def split_lines(text: str) -> list[str]:
    """Split on newlines the way git numbers lines."""
    if not text:
        return []
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]
