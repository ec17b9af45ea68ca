"""
Extractors: one per catalog table.

Each extractor reads repository state through GitRepo and yields the rows of
its table. EXTRACTORS maps every catalog table name to a factory; the blame
factory takes the optional path filter, the rest ignore it.
"""

from __future__ import annotations

from collections.abc import Callable

from vcsql.extractors.base import Extractor, populate
from vcsql.extractors.changes import BlameExtractor, DiffFilesExtractor, DiffsExtractor
from vcsql.extractors.config import ConfigExtractor, RemotesExtractor, SubmodulesExtractor
from vcsql.extractors.history import CommitParentsExtractor, CommitsExtractor
from vcsql.extractors.operational import HooksExtractor, NotesExtractor
from vcsql.extractors.refs import (
    BranchesExtractor,
    RefsExtractor,
    ReflogExtractor,
    StashesExtractor,
    TagsExtractor,
)
from vcsql.extractors.workdir import StatusExtractor, WorktreesExtractor

ExtractorFactory = Callable[[str | None], Extractor]

EXTRACTORS: dict[str, ExtractorFactory] = {
    "commits": lambda _: CommitsExtractor(),
    "commit_parents": lambda _: CommitParentsExtractor(),
    "branches": lambda _: BranchesExtractor(),
    "tags": lambda _: TagsExtractor(),
    "refs": lambda _: RefsExtractor(),
    "stashes": lambda _: StashesExtractor(),
    "reflog": lambda _: ReflogExtractor(),
    "diffs": lambda _: DiffsExtractor(),
    "diff_files": lambda _: DiffFilesExtractor(),
    "blame": BlameExtractor,
    "config": lambda _: ConfigExtractor(),
    "remotes": lambda _: RemotesExtractor(),
    "submodules": lambda _: SubmodulesExtractor(),
    "status": lambda _: StatusExtractor(),
    "worktrees": lambda _: WorktreesExtractor(),
    "hooks": lambda _: HooksExtractor(),
    "notes": lambda _: NotesExtractor(),
}


def get_extractor(table: str, blame_path: str | None = None) -> Extractor | None:
    """Extractor for ``table``, None for names outside the catalog."""
    factory = EXTRACTORS.get(table)
    return factory(blame_path) if factory is not None else None


__all__ = [
    "EXTRACTORS",
    "Extractor",
    "get_extractor",
    "populate",
]
