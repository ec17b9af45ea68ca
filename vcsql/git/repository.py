"""Repository handle over GitPython.

GitRepo is the only place vcsql talks to git. High level objects (commits,
tags, submodules) come from GitPython; plumbing output (for-each-ref,
diff-tree, config, status, rev-list) is parsed here so extractors only see
plain values.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

import git
import git.exc
from git.objects import Blob, Commit, Object, Submodule
from git.refs.log import RefLog

from vcsql.core.exceptions import RepoNotFoundError
from vcsql.git.models import (
    BlameLine,
    ConfigEntry,
    FileDiff,
    ReflogEntry,
    Reference,
    StatusEntry,
    StatusFlag,
)

logger = logging.getLogger(__name__)

EMPTY_TREE_SHA = "4b825dc642cb6eb9a060e54bf8d69288fbee4904"

# Errors GitPython raises for unreadable objects, refs and failed commands.
GIT_ERRORS = (git.exc.GitError, git.exc.ODBError, ValueError, OSError)

_SHORTHAND_PREFIXES = ("refs/heads/", "refs/tags/", "refs/remotes/", "refs/")

# diff-tree raw status letters that differ from the projected vocabulary
_RAW_STATUS = {"U": "X", "X": "!"}

_INDEX_CODES = {
    "A": StatusFlag.INDEX_NEW,
    "C": StatusFlag.INDEX_NEW,
    "M": StatusFlag.INDEX_MODIFIED,
    "D": StatusFlag.INDEX_DELETED,
    "R": StatusFlag.INDEX_RENAMED,
    "T": StatusFlag.INDEX_TYPECHANGE,
}

_WORKTREE_CODES = {
    "A": StatusFlag.WT_NEW,
    "M": StatusFlag.WT_MODIFIED,
    "D": StatusFlag.WT_DELETED,
    "R": StatusFlag.WT_RENAMED,
    "T": StatusFlag.WT_TYPECHANGE,
}

_UNMERGED_CODES = frozenset({"DD", "AU", "UD", "UA", "DU", "AA", "UU"})


def shorthand(full_name: str) -> str:
    """Short form of a reference name (refs/heads/main -> main)."""
    for prefix in _SHORTHAND_PREFIXES:
        if full_name.startswith(prefix):
            return full_name[len(prefix) :]
    return full_name


def parse_status_code(code: str) -> StatusFlag:
    """Translate a porcelain v1 XY code into status flags."""
    if code == "??":
        return StatusFlag.WT_NEW
    if code == "!!":
        return StatusFlag.IGNORED
    if code in _UNMERGED_CODES:
        return StatusFlag.CONFLICTED

    flags = StatusFlag.CURRENT
    flags |= _INDEX_CODES.get(code[0], StatusFlag.CURRENT)
    flags |= _WORKTREE_CODES.get(code[1], StatusFlag.CURRENT)
    return flags


def parse_config_list(output: str) -> list[ConfigEntry]:
    """Parse ``git config --list --show-scope -z`` output.

    Each entry is ``scope<TERM>name\\nvalue\\0`` where TERM is NUL on current
    git releases and a tab on older ones. A name without a newline has no
    value (``[core] bare`` style booleans).
    """
    entries: list[ConfigEntry] = []
    scope: str | None = None
    for token in output.split("\0"):
        if not token:
            continue
        if scope is None:
            head, sep, rest = token.partition("\t")
            if sep and "\n" not in head:
                scope, token = head, rest
            else:
                scope = token
                continue
        name, sep, value = token.partition("\n")
        entries.append(ConfigEntry(scope=scope, name=name, value=value if sep else None))
        scope = None
    return entries


def parse_diff_tree(output: str) -> list[FileDiff]:
    """Parse ``git diff-tree -z --raw --numstat`` output.

    The raw block lists every file first, then the numstat block repeats the
    files in the same order with line counts.
    """
    tokens = output.split("\0")
    pos = 0
    raw: list[tuple[str, int | None, str | None, str | None]] = []
    while pos < len(tokens) and tokens[pos].startswith(":"):
        fields = tokens[pos].split()
        letter, score = fields[-1][0], fields[-1][1:]
        similarity = int(score) if score else None
        if letter in ("R", "C"):
            old_path, new_path = tokens[pos + 1], tokens[pos + 2]
            pos += 3
        else:
            path = tokens[pos + 1]
            old_path = None if letter == "A" else path
            new_path = None if letter == "D" else path
            pos += 2
        raw.append((_RAW_STATUS.get(letter, letter), similarity, old_path, new_path))

    stats: list[tuple[int, int, bool]] = []
    while pos < len(tokens) and tokens[pos]:
        added, deleted, path = tokens[pos].split("\t", 2)
        # renames and copies carry their two paths in the following tokens
        pos += 1 if path else 3
        if added == "-":
            stats.append((0, 0, True))
        else:
            stats.append((int(added), int(deleted), False))

    diffs = []
    for index, (status, similarity, old_path, new_path) in enumerate(raw):
        insertions, deletions, is_binary = stats[index] if index < len(stats) else (0, 0, False)
        diffs.append(
            FileDiff(
                old_path=old_path,
                new_path=new_path,
                status=status,
                insertions=insertions,
                deletions=deletions,
                is_binary=is_binary,
                similarity=similarity if status in ("R", "C") else None,
            )
        )
    return diffs


class GitRepo:
    """Read-only handle on one git repository."""

    def __init__(self, repo: git.Repo) -> None:
        self._repo = repo

    @classmethod
    def open(cls, path: Path | str) -> GitRepo:
        """Open the repository containing ``path``."""
        try:
            repo = git.Repo(path, search_parent_directories=True)
        except (git.exc.InvalidGitRepositoryError, git.exc.NoSuchPathError) as exc:
            raise RepoNotFoundError(str(path)) from exc
        logger.debug("Opened repository %s (git dir %s)", path, repo.git_dir)
        return cls(repo)

    @property
    def path(self) -> str:
        """Working directory, or the git directory of a bare repository."""
        workdir = self._repo.working_tree_dir
        return str(workdir) if workdir is not None else str(Path(self._repo.git_dir))

    @property
    def git_dir(self) -> Path:
        return Path(self._repo.git_dir)

    @property
    def common_dir(self) -> Path:
        return Path(self._repo.common_dir)

    @property
    def is_bare(self) -> bool:
        return self._repo.bare

    def close(self) -> None:
        """Stop the git processes GitPython keeps alive."""
        self._repo.close()

    # HEAD

    def head_commit(self) -> Commit | None:
        """Commit at HEAD, None for an unborn branch."""
        head = self._repo.head
        if not head.is_valid():
            return None
        return head.commit

    def is_head_detached(self) -> bool:
        return self._repo.head.is_detached

    def head_branch(self) -> str | None:
        """Full name of the branch HEAD points to, None when detached."""
        head = self._repo.head
        if head.is_detached:
            return None
        return head.reference.path

    # History

    def walk_commits(self) -> Iterator[Commit]:
        """Commits reachable from HEAD, newest first, parents after children."""
        if self.head_commit() is None:
            return iter(())
        return self._repo.iter_commits("HEAD", date_order=True)

    def commit(self, rev: str) -> Commit:
        return self._repo.commit(rev)

    def resolve(self, object_id: str) -> Object:
        """Look up any object (commit, tree, blob, tag) by full id."""
        return self._repo.rev_parse(object_id)

    # References

    def list_references(self, prefix: str | None = None) -> list[Reference]:
        """References under ``prefix`` (default: everything under refs/)."""
        args = ["--format=%(refname)%00%(objectname)%00%(symref)"]
        if prefix:
            args.append(prefix)
        output = self._repo.git.for_each_ref(*args)

        references = []
        for line in output.splitlines():
            if not line:
                continue
            full_name, target_id, symref = line.split("\0")
            references.append(
                Reference(
                    name=shorthand(full_name),
                    full_name=full_name,
                    target_id=target_id,
                    symbolic_target=symref or None,
                )
            )
        return references

    def upstream(self, branch_full_name: str) -> Reference | None:
        """Branch configured as upstream of a local branch.

        git resolves the upstream through branch.<name>.remote/merge and the
        remote's fetch refspec, so local upstreams (remote ``.``) and custom
        refspecs work. None when unset or when the upstream ref is gone.
        """
        upstream_name = self._repo.git.for_each_ref("--format=%(upstream)", branch_full_name)
        upstream_name = upstream_name.strip()
        if not upstream_name:
            return None
        for ref in self.list_references(upstream_name):
            if ref.full_name == upstream_name:
                return ref
        return None

    def ahead_behind(self, local_id: str, upstream_id: str) -> tuple[int, int]:
        """Commits only on ``local_id`` and only on ``upstream_id``."""
        output = self._repo.git.rev_list("--left-right", "--count", f"{local_id}...{upstream_id}")
        ahead, behind = output.split()
        return int(ahead), int(behind)

    def reflog(self, ref_name: str) -> list[ReflogEntry]:
        """Log of ``ref_name`` (HEAD or a full ref name), newest first."""
        base = self.git_dir if ref_name == "HEAD" else self.common_dir
        log = RefLog.from_file(base / "logs" / ref_name)
        return [
            ReflogEntry(
                old_id=entry.oldhexsha,
                new_id=entry.newhexsha,
                committer_name=entry.actor.name or "",
                committer_email=entry.actor.email or "",
                time=entry.time[0],
                message=entry.message or "",
            )
            for entry in reversed(log)
        ]

    # Trees and diffs

    def diff_tree(self, old: str | None, new: str) -> list[FileDiff]:
        """Files changed between two tree-ish ids; ``old=None`` is the empty tree."""
        output = self._repo.git.diff_tree(
            "-r", "-z", "--raw", "--numstat", "--no-renames", old or EMPTY_TREE_SHA, new
        )
        return parse_diff_tree(output)

    def iter_blobs(self, rev: str = "HEAD") -> Iterator[tuple[str, Blob]]:
        """Every blob in the tree of ``rev`` with its path."""
        tree = self._repo.commit(rev).tree
        for item in tree.traverse():
            if isinstance(item, Blob):
                yield item.path, item

    def read_blob(self, path: str, rev: str = "HEAD") -> bytes | None:
        """Content of ``path`` at ``rev``, None when the path is absent."""
        try:
            blob = self._repo.commit(rev).tree / path
        except KeyError:
            return None
        if not isinstance(blob, Blob):
            return None
        return blob.data_stream.read()

    def blame_file(self, path: str) -> list[BlameLine]:
        """Per-line attribution of ``path`` at HEAD, ordered by line."""
        lines = []
        for entry in self._repo.blame_incremental("HEAD", path):
            commit = entry.commit
            original_path = entry.orig_path or path
            for final_line, original_line in zip(entry.linenos, entry.orig_linenos):
                lines.append(
                    BlameLine(
                        line_number=final_line,
                        commit_id=commit.hexsha,
                        original_line=original_line,
                        original_path=original_path,
                        author_name=commit.author.name or "",
                        author_email=commit.author.email or "",
                        authored_date=commit.authored_date,
                    )
                )
        lines.sort(key=lambda line: line.line_number)
        return lines

    # Configuration

    def config_entries(self) -> list[ConfigEntry]:
        """Merged configuration of every scope."""
        output = self._repo.git.config("--list", "--show-scope", "-z")
        return parse_config_list(output)

    def submodules(self) -> list[Submodule]:
        """Submodules recorded in .gitmodules at HEAD."""
        if self.head_commit() is None:
            return []
        return list(self._repo.submodules)

    # Working tree

    def working_tree_status(self) -> list[StatusEntry]:
        """Status of changed and untracked paths, ignored files excluded."""
        if self.is_bare:
            return []
        output = self._repo.git.status(
            "--porcelain=v1", "-z", "--untracked-files=all", "--ignored=no", "--no-renames"
        )
        entries = []
        for record in output.split("\0"):
            if len(record) < 4:
                continue
            code, path = record[:2], record[3:]
            entries.append(StatusEntry(path=path, flags=parse_status_code(code)))
        return entries
