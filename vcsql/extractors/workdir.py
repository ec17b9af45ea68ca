"""Working directory tables: status and worktrees."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

from vcsql.extractors.base import Row, flag
from vcsql.git import GitRepo, StatusFlag, shorthand

logger = logging.getLogger(__name__)

_MAIN_WORKTREE = "main"

_INDEX_CHARS = (
    (StatusFlag.INDEX_NEW, "A"),
    (StatusFlag.INDEX_MODIFIED, "M"),
    (StatusFlag.INDEX_DELETED, "D"),
    (StatusFlag.INDEX_RENAMED, "R"),
    (StatusFlag.INDEX_TYPECHANGE, "T"),
)

_WORKTREE_CHARS = (
    (StatusFlag.WT_NEW, "?"),
    (StatusFlag.WT_MODIFIED, "M"),
    (StatusFlag.WT_DELETED, "D"),
    (StatusFlag.WT_RENAMED, "R"),
    (StatusFlag.WT_TYPECHANGE, "T"),
    (StatusFlag.IGNORED, "!"),
    (StatusFlag.CONFLICTED, "U"),
)


def _status_char(flags: StatusFlag, table: tuple[tuple[StatusFlag, str], ...]) -> str:
    for bit, char in table:
        if bit in flags:
            return char
    return " "


def status_chars(flags: StatusFlag) -> tuple[str, str]:
    """(index vs HEAD, worktree vs index) characters for a set of flags."""
    return _status_char(flags, _INDEX_CHARS), _status_char(flags, _WORKTREE_CHARS)


def _any(flags: StatusFlag, bits: StatusFlag) -> int:
    return flag(bool(flags & bits))


class StatusExtractor:
    """Changed and untracked paths of the working tree."""

    table = "status"

    def rows(self, repo: GitRepo) -> Iterator[Row]:
        for entry in repo.working_tree_status():
            flags = entry.flags
            head_status, index_status = status_chars(flags)
            yield (
                entry.path,
                head_status + index_status,
                head_status,
                index_status,
                _any(flags, StatusFlag.INDEX_ANY),
                _any(flags, StatusFlag.WT_MODIFIED | StatusFlag.INDEX_MODIFIED),
                _any(flags, StatusFlag.WT_NEW | StatusFlag.INDEX_NEW),
                _any(flags, StatusFlag.WT_DELETED | StatusFlag.INDEX_DELETED),
                _any(flags, StatusFlag.WT_RENAMED | StatusFlag.INDEX_RENAMED),
                # typechange stands in for copies, matching the established schema
                _any(flags, StatusFlag.INDEX_TYPECHANGE | StatusFlag.WT_TYPECHANGE),
                _any(flags, StatusFlag.IGNORED),
                _any(flags, StatusFlag.CONFLICTED),
            )


def _read_text(path: Path) -> str | None:
    try:
        return path.read_text(encoding="utf-8", errors="replace")
    except OSError:
        return None


class WorktreesExtractor:
    """The main worktree plus every linked worktree."""

    table = "worktrees"

    def rows(self, repo: GitRepo) -> Iterator[Row]:
        linked = self._linked_rows(repo)
        linked_names = {row[0] for row in linked}

        # a linked worktree may itself be named "main"
        name = _MAIN_WORKTREE
        while name in linked_names:
            name += "~"

        head = repo.head_commit()
        detached = repo.is_head_detached()
        branch = None if detached else repo.head_branch()
        yield (
            name,
            repo.path,
            head.hexsha if head is not None else None,
            shorthand(branch) if branch else None,
            flag(repo.is_bare),
            flag(detached),
            0,
            None,
            0,
        )
        yield from linked

    def _linked_rows(self, repo: GitRepo) -> list[Row]:
        admin_root = repo.common_dir / "worktrees"
        if not admin_root.is_dir():
            return []

        branch_targets = {ref.full_name: ref.target_id for ref in repo.list_references("refs/heads/")}
        return [
            self._linked_row(admin_dir, branch_targets)
            for admin_dir in sorted(admin_root.iterdir())
            if admin_dir.is_dir()
        ]

    @staticmethod
    def _linked_row(admin_dir: Path, branch_targets: dict[str, str]) -> Row:
        gitdir = _read_text(admin_dir / "gitdir")
        gitdir_path = Path(gitdir.strip()) if gitdir and gitdir.strip() else None
        # gitdir names the worktree's .git file
        path = str(gitdir_path.parent) if gitdir_path is not None else None

        head_id = None
        branch = None
        detached = False
        head = (_read_text(admin_dir / "HEAD") or "").strip()
        if head.startswith("ref: "):
            ref_name = head[len("ref: ") :]
            branch = ref_name.removeprefix("refs/heads/")
            head_id = branch_targets.get(ref_name)
        elif head:
            head_id = head
            detached = True

        locked_file = admin_dir / "locked"
        is_locked = locked_file.exists()
        lock_reason = None
        if is_locked:
            lock_reason = (_read_text(locked_file) or "").strip() or None
        is_prunable = not is_locked and (gitdir_path is None or not gitdir_path.exists())

        logger.debug("Linked worktree %s at %s", admin_dir.name, path)
        return (
            admin_dir.name,
            path,
            head_id,
            branch,
            0,
            flag(detached),
            flag(is_locked),
            lock_reason,
            flag(is_prunable),
        )
