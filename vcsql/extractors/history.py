"""Commit history tables: commits and commit_parents."""

from __future__ import annotations

from collections.abc import Iterator

from vcsql.extractors.base import (
    Row,
    flag,
    format_time_with_offset,
    offset_minutes,
    split_message,
)
from vcsql.git import GitRepo


class CommitsExtractor:
    """One row per commit reachable from HEAD."""

    table = "commits"

    def rows(self, repo: GitRepo) -> Iterator[Row]:
        for commit in repo.walk_commits():
            summary, body = split_message(commit.message)
            parent_count = len(commit.parents)
            yield (
                commit.hexsha,
                commit.hexsha[:7],
                commit.tree.hexsha,
                commit.author.name or "",
                commit.author.email or "",
                format_time_with_offset(
                    commit.authored_date, offset_minutes(commit.author_tz_offset)
                ),
                commit.committer.name or "",
                commit.committer.email or "",
                format_time_with_offset(
                    commit.committed_date, offset_minutes(commit.committer_tz_offset)
                ),
                commit.message,
                summary,
                body,
                parent_count,
                flag(parent_count > 1),
            )


class CommitParentsExtractor:
    """One row per parent edge, in recorded parent order."""

    table = "commit_parents"

    def rows(self, repo: GitRepo) -> Iterator[Row]:
        for commit in repo.walk_commits():
            for index, parent in enumerate(commit.parents):
                yield (commit.hexsha, parent.hexsha, index)
