"""Shared fixtures: throwaway git repositories with deterministic dates."""

from __future__ import annotations

import tempfile
from collections.abc import Iterator
from pathlib import Path

import git
import pytest

# 2024-01-01 10:00:00 UTC
BASE_EPOCH = 1704103200


class RepoBuilder:
    """Builds a repository commit by commit.

    Every commit is one hour after the previous one so ordering by date is
    stable.
    """

    def __init__(self, path: Path, bare: bool = False) -> None:
        self.path = path
        self.repo = git.Repo.init(path, bare=bare, initial_branch="main")
        with self.repo.config_writer() as config:
            config.set_value("user", "name", "Test User")
            config.set_value("user", "email", "test@example.com")
            config.set_value("commit", "gpgsign", "false")
            config.set_value("tag", "gpgsign", "false")
        self._ticks = 0

    def _env(self, tz: str = "+0000") -> dict[str, str]:
        self._ticks += 1
        stamp = f"{BASE_EPOCH + self._ticks * 3600} {tz}"
        return {"GIT_AUTHOR_DATE": stamp, "GIT_COMMITTER_DATE": stamp}

    def git(self, *args: str, tz: str = "+0000") -> str:
        """Run a git command in the repository with the next timestamp."""
        return self.repo.git.execute(["git", *args], env=self._env(tz))

    def write(self, name: str, content: str | bytes) -> Path:
        target = self.path / name
        target.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            target.write_bytes(content)
        else:
            target.write_text(content)
        return target

    def commit(
        self,
        message: str,
        files: dict[str, str | bytes] | None = None,
        tz: str = "+0000",
    ) -> str:
        """Write ``files``, stage everything and commit; return the commit id."""
        for name, content in (files or {}).items():
            self.write(name, content)
        self.repo.git.add("-A")
        self.git("commit", "--allow-empty", "-m", message, tz=tz)
        return self.repo.head.commit.hexsha


@pytest.fixture
def temp_dir() -> Iterator[Path]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as td:
        yield Path(td)


@pytest.fixture
def builder(temp_dir: Path) -> Iterator[RepoBuilder]:
    """An empty repository on branch main."""
    repo_builder = RepoBuilder(temp_dir / "repo")
    yield repo_builder
    repo_builder.repo.close()
