"""Operational tables: hooks and notes."""

from __future__ import annotations

import logging
from collections.abc import Iterator

from vcsql.extractors.base import Row, decode_text, flag
from vcsql.git import GIT_ERRORS, GitRepo

logger = logging.getLogger(__name__)

HOOK_NAMES = frozenset(
    {
        "applypatch-msg",
        "pre-applypatch",
        "post-applypatch",
        "pre-commit",
        "pre-merge-commit",
        "prepare-commit-msg",
        "commit-msg",
        "post-commit",
        "pre-rebase",
        "post-checkout",
        "post-merge",
        "pre-push",
        "pre-receive",
        "update",
        "proc-receive",
        "post-receive",
        "post-update",
        "reference-transaction",
        "push-to-checkout",
        "pre-auto-gc",
        "post-rewrite",
        "sendemail-validate",
        "fsmonitor-watchman",
        "p4-changelist",
        "p4-prepare-changelist",
        "p4-post-changelist",
        "p4-pre-submit",
        "post-index-change",
    }
)

_SAMPLE_SUFFIX = ".sample"


class HooksExtractor:
    """Recognized hooks and sample hooks in the hooks directory."""

    table = "hooks"

    def rows(self, repo: GitRepo) -> Iterator[Row]:
        hooks_dir = repo.common_dir / "hooks"
        if not hooks_dir.is_dir():
            return

        for path in sorted(hooks_dir.iterdir()):
            if not path.is_file():
                continue
            is_sample = path.name.endswith(_SAMPLE_SUFFIX)
            name = path.name[: -len(_SAMPLE_SUFFIX)] if is_sample else path.name
            if not is_sample and name not in HOOK_NAMES:
                continue

            stat = path.stat()
            yield (
                name,
                str(path),
                flag(bool(stat.st_mode & 0o111)),
                flag(is_sample),
                stat.st_size,
            )


class NotesExtractor:
    """Notes attached to objects, from every refs/notes/* reference."""

    table = "notes"

    def rows(self, repo: GitRepo) -> Iterator[Row]:
        for ref in repo.list_references("refs/notes/"):
            try:
                blobs = list(repo.iter_blobs(ref.full_name))
            except GIT_ERRORS as e:
                logger.debug("Skipping notes ref %s: %s", ref.full_name, e)
                continue

            for path, blob in blobs:
                try:
                    content = decode_text(blob.data_stream.read())
                except GIT_ERRORS as e:
                    logger.debug("Cannot read note %s: %s", blob.hexsha, e)
                    content = ""
                # fan-out directories split the annotated object id
                yield (ref.full_name, path.replace("/", ""), blob.hexsha, content)
