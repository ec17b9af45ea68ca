"""
Git access layer.

GitRepo (repository.py) opens a repository and exposes history, references,
diffs, blame, configuration and working tree state. Plain value types for
those results live in models.py.
"""

from vcsql.git.models import (
    BlameLine,
    ConfigEntry,
    FileDiff,
    ReflogEntry,
    Reference,
    StatusEntry,
    StatusFlag,
)
from vcsql.git.repository import GIT_ERRORS, GitRepo, shorthand

__all__ = [
    "GitRepo",
    "GIT_ERRORS",
    "shorthand",
    "BlameLine",
    "ConfigEntry",
    "FileDiff",
    "ReflogEntry",
    "Reference",
    "StatusEntry",
    "StatusFlag",
]
