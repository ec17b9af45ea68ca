"""Change tables: diffs, diff_files and blame."""

from __future__ import annotations

import logging
from collections.abc import Iterator

from git.objects import Commit

from vcsql.extractors.base import Row, decode_text, flag, format_time, split_lines
from vcsql.git import GIT_ERRORS, FileDiff, GitRepo

logger = logging.getLogger(__name__)


def commit_diffs(repo: GitRepo) -> Iterator[tuple[Commit, str | None, list[FileDiff]]]:
    """Diff every commit against each of its parents.

    Root commits are diffed against the empty tree and reported with a
    parent id of None. A merge with N parents produces N diffs.
    """
    for commit in repo.walk_commits():
        parent_ids: list[str | None] = [parent.hexsha for parent in commit.parents] or [None]
        for parent_id in parent_ids:
            try:
                files = repo.diff_tree(parent_id, commit.hexsha)
            except GIT_ERRORS as e:
                logger.debug("Cannot diff %s against %s: %s", commit.hexsha, parent_id, e)
                continue
            yield commit, parent_id, files


class DiffsExtractor:
    """Per-parent diff totals of every commit."""

    table = "diffs"

    def rows(self, repo: GitRepo) -> Iterator[Row]:
        for commit, parent_id, files in commit_diffs(repo):
            yield (
                commit.hexsha,
                parent_id,
                len(files),
                sum(f.insertions for f in files),
                sum(f.deletions for f in files),
            )


class DiffFilesExtractor:
    """Per-file entries of every per-parent diff."""

    table = "diff_files"

    def rows(self, repo: GitRepo) -> Iterator[Row]:
        for commit, parent_id, files in commit_diffs(repo):
            for f in files:
                yield (
                    commit.hexsha,
                    parent_id,
                    f.old_path,
                    f.new_path,
                    f.status,
                    f.insertions,
                    f.deletions,
                    flag(f.is_binary),
                    f.similarity,
                )


class BlameExtractor:
    """Line attribution of every file at HEAD, or of a single path."""

    table = "blame"

    def __init__(self, path: str | None = None) -> None:
        self.path = path

    def _files(self, repo: GitRepo) -> Iterator[tuple[str, bytes]]:
        if self.path is not None:
            data = repo.read_blob(self.path)
            if data is None:
                logger.debug("Blame path %s is not in HEAD", self.path)
            else:
                yield self.path, data
            return

        for path, blob in repo.iter_blobs():
            try:
                data = blob.data_stream.read()
            except GIT_ERRORS as e:
                logger.debug("Skipping unreadable blob %s: %s", path, e)
                continue
            yield path, data

    def rows(self, repo: GitRepo) -> Iterator[Row]:
        if repo.head_commit() is None:
            return

        for path, data in self._files(repo):
            try:
                attributions = repo.blame_file(path)
            except GIT_ERRORS as e:
                logger.debug("Cannot blame %s: %s", path, e)
                continue

            lines = split_lines(decode_text(data))
            for line in attributions:
                index = line.line_number - 1
                content = lines[index] if 0 <= index < len(lines) else ""
                yield (
                    path,
                    line.line_number,
                    line.commit_id,
                    line.original_line,
                    line.original_path,
                    line.author_name,
                    line.author_email,
                    format_time(line.authored_date),
                    content,
                )
