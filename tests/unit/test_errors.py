"""Tests for error handling paths."""

from pathlib import Path

import pytest

from vcsql.core.exceptions import (
    ExtractionError,
    InvalidQueryError,
    RelationalError,
    RepoNotFoundError,
    TableNotFoundError,
    VcsqlError,
)
from vcsql.git import GitRepo


class TestExceptionHierarchy:
    """Tests for the exception types."""

    @pytest.mark.parametrize(
        "error",
        [
            RepoNotFoundError("/nowhere"),
            TableNotFoundError("nope"),
            ExtractionError("commits", OSError("disk")),
            RelationalError("no such table: x"),
            InvalidQueryError("empty query"),
        ],
    )
    def test_all_derive_from_base(self, error: VcsqlError) -> None:
        """Test that callers can catch every error through the base class."""
        assert isinstance(error, VcsqlError)

    def test_repo_not_found_message(self) -> None:
        """Test the message and attribute of RepoNotFoundError."""
        error = RepoNotFoundError("/nowhere")
        assert error.path == "/nowhere"
        assert str(error) == "Repository not found: /nowhere"

    def test_table_not_found_message(self) -> None:
        """Test the message and attribute of TableNotFoundError."""
        error = TableNotFoundError("nope")
        assert error.table == "nope"
        assert str(error) == "Table not found: nope"

    def test_extraction_error_keeps_cause(self) -> None:
        """Test that ExtractionError names the table and the failure."""
        cause = OSError("disk")
        error = ExtractionError("commits", cause)
        assert error.table == "commits"
        assert error.cause is cause
        assert str(error) == "Failed to load table 'commits': disk"


class TestOpenErrors:
    """Tests for opening paths that are not repositories."""

    def test_missing_path(self, temp_dir: Path) -> None:
        """Test that a nonexistent path raises RepoNotFoundError."""
        missing = temp_dir / "does-not-exist"
        with pytest.raises(RepoNotFoundError) as exc_info:
            GitRepo.open(missing)
        assert exc_info.value.path == str(missing)

    def test_plain_directory(self, temp_dir: Path) -> None:
        """Test that a directory outside any repository raises RepoNotFoundError."""
        plain = temp_dir / "plain"
        plain.mkdir()
        with pytest.raises(RepoNotFoundError):
            GitRepo.open(plain)

    def test_subdirectory_finds_repository(self, builder) -> None:
        """Test that a path inside the working tree opens the enclosing repository."""
        builder.commit("initial", {"src/app.py": "print('hi')\n"})
        repo = GitRepo.open(builder.path / "src")
        try:
            assert Path(repo.path).resolve() == builder.path.resolve()
        finally:
            repo.close()
