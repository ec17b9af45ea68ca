"""Reference tables: branches, tags, refs, stashes and reflog."""

from __future__ import annotations

import logging
from collections.abc import Iterator

from git.objects import TagObject

from vcsql.extractors.base import Row, flag, format_time
from vcsql.git import GIT_ERRORS, GitRepo, Reference

logger = logging.getLogger(__name__)

_REF_KINDS = (
    ("refs/heads/", "branch"),
    ("refs/remotes/", "remote"),
    ("refs/tags/", "tag"),
    ("refs/notes/", "note"),
    ("refs/stash", "stash"),
)

# Checked in order against the lowercased reflog message.
_REFLOG_ACTIONS = (
    (("commit:", "commit (initial):", "commit (amend):"), "commit"),
    (("checkout:",), "checkout"),
    (("merge",), "merge"),
    (("rebase",), "rebase"),
    (("reset:",), "reset"),
    (("pull:",), "pull"),
    (("push",), "push"),
    (("branch:",), "branch"),
    (("clone:",), "clone"),
    (("cherry-pick:",), "cherry-pick"),
    (("revert:",), "revert"),
)

_STASH_PREFIXES = ("WIP on ", "On ")


def ref_kind(full_name: str) -> str:
    """Classify a reference by its namespace."""
    for prefix, kind in _REF_KINDS:
        if full_name.startswith(prefix):
            return kind
    return "other"


def reflog_action(message: str) -> str:
    """Classify a reflog message into an action name."""
    lowered = message.lower()
    for prefixes, action in _REFLOG_ACTIONS:
        if lowered.startswith(prefixes):
            return action
    return "other"


def stash_branch(message: str) -> str:
    """Branch a stash was created on, parsed from its message.

    >>> stash_branch("WIP on feature-x: 1234abc fix bug")
    'feature-x'
    """
    for prefix in _STASH_PREFIXES:
        if message.startswith(prefix):
            rest = message[len(prefix) :]
            if ":" in rest:
                return rest[: rest.index(":")]
            break
    return "unknown"


class BranchesExtractor:
    """Local branches followed by remote-tracking branches."""

    table = "branches"

    def rows(self, repo: GitRepo) -> Iterator[Row]:
        head = repo.head_commit()
        head_target = head.hexsha if head is not None else None
        head_branch = None if repo.is_head_detached() else repo.head_branch()

        for ref in repo.list_references("refs/heads/"):
            is_head = head_branch == ref.full_name and head_target == ref.target_id
            upstream, ahead, behind = self._tracking(repo, ref)
            yield (
                ref.name,
                ref.full_name,
                ref.target_id,
                0,
                flag(is_head),
                None,
                upstream,
                ahead,
                behind,
            )

        for ref in repo.list_references("refs/remotes/"):
            yield (
                ref.name,
                ref.full_name,
                ref.target_id,
                1,
                0,
                ref.name.split("/")[0],
                None,
                None,
                None,
            )

    @staticmethod
    def _tracking(repo: GitRepo, ref: Reference) -> tuple[str | None, int | None, int | None]:
        try:
            upstream = repo.upstream(ref.full_name)
        except GIT_ERRORS as e:
            logger.debug("Cannot resolve upstream of %s: %s", ref.full_name, e)
            return None, None, None
        if upstream is None:
            return None, None, None

        try:
            ahead, behind = repo.ahead_behind(ref.target_id, upstream.target_id)
        except GIT_ERRORS as e:
            logger.debug("Cannot count %s against %s: %s", ref.full_name, upstream.name, e)
            ahead, behind = 0, 0
        return upstream.name, ahead, behind


class TagsExtractor:
    """Annotated and lightweight tags."""

    table = "tags"

    def rows(self, repo: GitRepo) -> Iterator[Row]:
        for ref in repo.list_references("refs/tags/"):
            try:
                obj = repo.resolve(ref.target_id)
            except GIT_ERRORS as e:
                logger.debug("Skipping tag %s: %s", ref.full_name, e)
                continue

            if not isinstance(obj, TagObject):
                yield (ref.name, ref.full_name, obj.hexsha, obj.type, 0, None, None, None, None)
                continue

            target = obj.object
            tagger = getattr(obj, "tagger", None)
            yield (
                ref.name,
                ref.full_name,
                target.hexsha,
                target.type,
                1,
                tagger.name if tagger is not None else None,
                tagger.email if tagger is not None else None,
                format_time(obj.tagged_date) if tagger is not None else None,
                obj.message,
            )


class RefsExtractor:
    """Every reference, classified by namespace."""

    table = "refs"

    def rows(self, repo: GitRepo) -> Iterator[Row]:
        for ref in repo.list_references():
            yield (
                ref.name,
                ref.full_name,
                ref.target_id,
                ref_kind(ref.full_name),
                flag(ref.is_symbolic),
                ref.symbolic_target,
            )


class StashesExtractor:
    """Stash entries, 0 being the most recent."""

    table = "stashes"

    def rows(self, repo: GitRepo) -> Iterator[Row]:
        for index, entry in enumerate(repo.reflog("refs/stash")):
            try:
                commit = repo.commit(entry.new_id)
                author = commit.author
            except GIT_ERRORS as e:
                logger.debug("Skipping stash@{%d}: %s", index, e)
                continue
            yield (
                index,
                entry.new_id,
                entry.message,
                author.name or "",
                author.email or "",
                format_time(commit.authored_date),
                stash_branch(entry.message),
            )


class ReflogExtractor:
    """Reflog of HEAD and of every local branch."""

    table = "reflog"

    def rows(self, repo: GitRepo) -> Iterator[Row]:
        ref_names = ["HEAD"] + [ref.full_name for ref in repo.list_references("refs/heads/")]
        for ref_name in ref_names:
            try:
                entries = repo.reflog(ref_name)
            except GIT_ERRORS as e:
                logger.debug("Cannot read reflog of %s: %s", ref_name, e)
                continue
            for index, entry in enumerate(entries):
                yield (
                    ref_name,
                    index,
                    entry.old_id,
                    entry.new_id,
                    entry.committer_name,
                    entry.committer_email,
                    format_time(entry.time),
                    entry.message,
                    reflog_action(entry.message),
                )
