"""Configuration tables: config, remotes and submodules."""

from __future__ import annotations

import logging
from collections.abc import Iterator

from git.objects import Submodule

from vcsql.extractors.base import Row
from vcsql.git import GIT_ERRORS, GitRepo

logger = logging.getLogger(__name__)


def split_config_key(name: str) -> tuple[str, str | None, str]:
    """Split a dotted config name into section, subsection and key.

    Everything between the first and the last segment is the subsection:

    >>> split_config_key("remote.origin.url")
    ('remote', 'origin', 'url')
    >>> split_config_key("a.b.c.d")
    ('a', 'b.c', 'd')
    """
    parts = name.split(".")
    if len(parts) == 1:
        return parts[0], None, ""
    if len(parts) == 2:
        return parts[0], None, parts[1]
    return parts[0], ".".join(parts[1:-1]), parts[-1]


def submodule_status(head_id: str | None, workdir_id: str | None) -> str:
    """Compare the recorded and the checked-out commit of a submodule."""
    if head_id is None:
        return "added" if workdir_id is not None else "uninitialized"
    if workdir_id is None:
        return "uninitialized"
    return "current" if head_id == workdir_id else "modified"


class ConfigExtractor:
    """Every configuration entry with a value, tagged with its scope."""

    table = "config"

    def rows(self, repo: GitRepo) -> Iterator[Row]:
        for entry in repo.config_entries():
            if entry.value is None:
                continue
            section, subsection, key = split_config_key(entry.name)
            yield (entry.scope, section, subsection, key, entry.name, entry.value)


class RemotesExtractor:
    """Remotes assembled from the merged remote.<name>.* entries."""

    table = "remotes"

    def rows(self, repo: GitRepo) -> Iterator[Row]:
        remotes: dict[str, dict[str, list[str]]] = {}
        for entry in repo.config_entries():
            if entry.value is None:
                continue
            section, subsection, key = split_config_key(entry.name)
            if section.lower() != "remote" or subsection is None:
                continue
            remotes.setdefault(subsection, {}).setdefault(key.lower(), []).append(entry.value)

        for name, values in remotes.items():
            if "url" not in values and "pushurl" not in values:
                continue
            yield (
                name,
                _first(values.get("url")),
                _first(values.get("pushurl")),
                _joined(values.get("fetch")),
                _joined(values.get("push")),
            )


def _first(values: list[str] | None) -> str | None:
    return values[0] if values else None


def _joined(values: list[str] | None) -> str | None:
    return ", ".join(values) if values else None


class SubmodulesExtractor:
    """Submodules declared in .gitmodules at HEAD."""

    table = "submodules"

    def rows(self, repo: GitRepo) -> Iterator[Row]:
        for submodule in repo.submodules():
            head_id = submodule.hexsha
            workdir_id = _checked_out_commit(submodule)
            yield (
                submodule.name,
                submodule.path,
                submodule.url or "",
                _tracked_branch(submodule),
                head_id,
                submodule_status(head_id, workdir_id),
            )


def _checked_out_commit(submodule: Submodule) -> str | None:
    if not submodule.module_exists():
        return None
    try:
        return submodule.module().head.commit.hexsha
    except GIT_ERRORS as e:
        logger.debug("Cannot read HEAD of submodule %s: %s", submodule.name, e)
        return None


def _tracked_branch(submodule: Submodule) -> str | None:
    try:
        reader = submodule.config_reader()
        if reader.has_option("branch"):
            return str(reader.get_value("branch"))
    except GIT_ERRORS as e:
        logger.debug("Cannot read .gitmodules entry of %s: %s", submodule.name, e)
    return None
