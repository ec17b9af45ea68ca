"""Value types returned by the repository handle."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Flag, auto


@dataclass(frozen=True)
class Reference:
    """A reference under refs/, resolved to an object id."""

    name: str
    full_name: str
    target_id: str
    symbolic_target: str | None = None

    @property
    def is_symbolic(self) -> bool:
        return self.symbolic_target is not None


@dataclass(frozen=True)
class FileDiff:
    """One file entry of a tree-to-tree diff."""

    old_path: str | None
    new_path: str | None
    status: str
    insertions: int = 0
    deletions: int = 0
    is_binary: bool = False
    similarity: int | None = None


@dataclass(frozen=True)
class ConfigEntry:
    """A configuration variable with the scope it was read from."""

    scope: str
    name: str
    value: str | None


class StatusFlag(Flag):
    """Per-path working tree status bits."""

    CURRENT = 0
    INDEX_NEW = auto()
    INDEX_MODIFIED = auto()
    INDEX_DELETED = auto()
    INDEX_RENAMED = auto()
    INDEX_TYPECHANGE = auto()
    WT_NEW = auto()
    WT_MODIFIED = auto()
    WT_DELETED = auto()
    WT_TYPECHANGE = auto()
    WT_RENAMED = auto()
    IGNORED = auto()
    CONFLICTED = auto()

    INDEX_ANY = INDEX_NEW | INDEX_MODIFIED | INDEX_DELETED | INDEX_RENAMED | INDEX_TYPECHANGE


@dataclass(frozen=True)
class StatusEntry:
    """Status of a single path."""

    path: str
    flags: StatusFlag


@dataclass(frozen=True)
class BlameLine:
    """Attribution of one line of a file at HEAD."""

    line_number: int
    commit_id: str
    original_line: int
    original_path: str
    author_name: str
    author_email: str
    authored_date: int


@dataclass(frozen=True)
class ReflogEntry:
    """One change recorded in a reference's log."""

    old_id: str
    new_id: str
    committer_name: str
    committer_email: str
    time: int
    message: str
