"""Tests for row shaping and git output parsing."""

import pytest

from vcsql.extractors.base import (
    decode_text,
    flag,
    format_time,
    format_time_with_offset,
    offset_minutes,
    split_lines,
    split_message,
)
from vcsql.extractors.config import split_config_key, submodule_status
from vcsql.extractors.refs import ref_kind, reflog_action, stash_branch
from vcsql.extractors.workdir import status_chars
from vcsql.git import StatusFlag, shorthand
from vcsql.git.repository import parse_config_list, parse_diff_tree, parse_status_code


class TestTimestamps:
    """Tests for timestamp rendering."""

    def test_utc(self) -> None:
        """Test plain UTC rendering."""
        assert format_time(0) == "1970-01-01 00:00:00"
        assert format_time(1704103200) == "2024-01-01 10:00:00"

    def test_offset_suffix(self) -> None:
        """Test that the offset is appended, the time itself stays UTC."""
        assert format_time_with_offset(1704103200, 330) == "2024-01-01 10:00:00 +0530"
        assert format_time_with_offset(1704103200, -480) == "2024-01-01 10:00:00 -0800"
        assert format_time_with_offset(1704103200, 0) == "2024-01-01 10:00:00 +0000"

    def test_negative_offset_under_an_hour(self) -> None:
        """Test that the sign survives for offsets between -1h and 0."""
        assert format_time_with_offset(0, -30) == "1970-01-01 00:00:00 -0030"

    def test_gitpython_offsets_are_west_of_utc(self) -> None:
        """Test conversion from seconds west of UTC to minutes east."""
        assert offset_minutes(-19800) == 330
        assert offset_minutes(28800) == -480
        assert offset_minutes(0) == 0


class TestMessages:
    """Tests for commit message splitting."""

    def test_single_line(self) -> None:
        """Test that a one-line message has no body."""
        assert split_message("Initial commit\n") == ("Initial commit", None)

    def test_summary_and_body(self) -> None:
        """Test that the body is everything after the first line."""
        summary, body = split_message("Fix parser\n\nHandle empty input.\nAdd tests.\n")
        assert summary == "Fix parser"
        assert body == "Handle empty input.\nAdd tests."

    def test_leading_blank_lines(self) -> None:
        """Test that leading blank lines are skipped."""
        assert split_message("\n\n  Title  \n") == ("Title", None)


class TestText:
    """Tests for blob text helpers."""

    def test_binary_is_empty(self) -> None:
        """Test that NUL bytes mark content as binary."""
        assert decode_text(b"\x00\x01\x02") == ""

    def test_invalid_utf8_is_replaced(self) -> None:
        """Test lossy decoding of text content."""
        assert decode_text(b"caf\xe9") == "caf�"

    def test_split_lines(self) -> None:
        """Test line splitting matches git line numbering."""
        assert split_lines("a\nb\r\nc\n") == ["a", "b", "c"]
        assert split_lines("a\n\nb") == ["a", "", "b"]
        assert split_lines("") == []
        assert split_lines("form\x0cfeed\n") == ["form\x0cfeed"]

    def test_flag(self) -> None:
        """Test boolean encoding."""
        assert flag(True) == 1
        assert flag(False) == 0


class TestConfigKeys:
    """Tests for config name decomposition."""

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("user.name", ("user", None, "name")),
            ("remote.origin.url", ("remote", "origin", "url")),
            ("a.b.c.d", ("a", "b.c", "d")),
            ("core", ("core", None, "")),
            ("url.https://github.com/.insteadof", ("url", "https://github.com/", "insteadof")),
        ],
    )
    def test_split(self, name: str, expected: tuple[str, str | None, str]) -> None:
        """Test section, subsection and key extraction."""
        assert split_config_key(name) == expected

    def test_parse_nul_terminated_scope(self) -> None:
        """Test config list output where the scope ends with NUL."""
        output = "global\0user.name\nTest User\0local\0core.bare\nfalse\0local\0flag.only\0"
        entries = parse_config_list(output)
        assert [(e.scope, e.name, e.value) for e in entries] == [
            ("global", "user.name", "Test User"),
            ("local", "core.bare", "false"),
            ("local", "flag.only", None),
        ]

    def test_parse_tab_terminated_scope(self) -> None:
        """Test config list output from git releases that end the scope with a tab."""
        output = "local\tuser.email\ntest@example.com\0local\tcore.autocrlf\n\0"
        entries = parse_config_list(output)
        assert [(e.scope, e.name, e.value) for e in entries] == [
            ("local", "user.email", "test@example.com"),
            ("local", "core.autocrlf", ""),
        ]

    def test_multiline_value(self) -> None:
        """Test that values keep embedded newlines."""
        entries = parse_config_list("local\0alias.x\nfirst\nsecond\0")
        assert entries[0].value == "first\nsecond"


class TestReferences:
    """Tests for reference naming and classification."""

    @pytest.mark.parametrize(
        ("full_name", "kind"),
        [
            ("refs/heads/main", "branch"),
            ("refs/remotes/origin/main", "remote"),
            ("refs/tags/v1.0", "tag"),
            ("refs/notes/commits", "note"),
            ("refs/stash", "stash"),
            ("refs/pull/1/head", "other"),
        ],
    )
    def test_kind(self, full_name: str, kind: str) -> None:
        """Test classification by namespace."""
        assert ref_kind(full_name) == kind

    def test_shorthand(self) -> None:
        """Test short names of references."""
        assert shorthand("refs/heads/feature/x") == "feature/x"
        assert shorthand("refs/remotes/origin/main") == "origin/main"
        assert shorthand("refs/tags/v1") == "v1"
        assert shorthand("refs/notes/commits") == "notes/commits"
        assert shorthand("refs/stash") == "stash"

    @pytest.mark.parametrize(
        ("message", "action"),
        [
            ("commit: Add feature", "commit"),
            ("commit (initial): First", "commit"),
            ("commit (amend): Fix typo", "commit"),
            ("checkout: moving from main to dev", "checkout"),
            ("merge feature: Fast-forward", "merge"),
            ("rebase (finish): returning to refs/heads/dev", "rebase"),
            ("reset: moving to HEAD~1", "reset"),
            ("pull: Fast-forward", "pull"),
            ("push", "push"),
            ("branch: Created from HEAD", "branch"),
            ("clone: from https://example.com/r.git", "clone"),
            ("cherry-pick: Fix bug", "cherry-pick"),
            ("revert: Revert change", "revert"),
            ("Commit: upper case", "commit"),
            ("commit (merge): Merge branch dev", "other"),
            ("", "other"),
        ],
    )
    def test_reflog_action(self, message: str, action: str) -> None:
        """Test reflog message classification."""
        assert reflog_action(message) == action

    def test_stash_branch(self) -> None:
        """Test branch recovery from stash messages."""
        assert stash_branch("WIP on feature-x: 1234abc fix bug") == "feature-x"
        assert stash_branch("On main: saved work") == "main"
        assert stash_branch("autostash") == "unknown"
        assert stash_branch("On main without colon") == "unknown"


class TestStatus:
    """Tests for working tree status translation."""

    def test_untracked(self) -> None:
        """Test untracked files."""
        flags = parse_status_code("??")
        assert flags == StatusFlag.WT_NEW
        assert status_chars(flags) == (" ", "?")

    def test_staged_and_modified(self) -> None:
        """Test a file staged and then modified again."""
        flags = parse_status_code("AM")
        assert StatusFlag.INDEX_NEW in flags
        assert StatusFlag.WT_MODIFIED in flags
        assert status_chars(flags) == ("A", "M")

    def test_conflict(self) -> None:
        """Test unmerged paths."""
        flags = parse_status_code("UU")
        assert flags == StatusFlag.CONFLICTED
        assert status_chars(flags) == (" ", "U")

    def test_deleted_in_worktree(self) -> None:
        """Test a tracked file removed from disk."""
        assert status_chars(parse_status_code(" D")) == (" ", "D")


class TestDiffTree:
    """Tests for diff-tree output parsing."""

    def test_added_modified_deleted(self) -> None:
        """Test raw and numstat blocks are paired by position."""
        output = (
            ":000000 100644 0000000 e69de29 A\0new.txt\0"
            ":100644 100644 1111111 2222222 M\0src/mod.py\0"
            ":100644 000000 3333333 0000000 D\0old.bin\0"
            "3\t0\tnew.txt\0"
            "2\t1\tsrc/mod.py\0"
            "-\t-\told.bin\0"
        )
        added, modified, deleted = parse_diff_tree(output)

        assert (added.old_path, added.new_path, added.status) == (None, "new.txt", "A")
        assert (added.insertions, added.deletions) == (3, 0)
        assert (modified.old_path, modified.new_path) == ("src/mod.py", "src/mod.py")
        assert (modified.insertions, modified.deletions, modified.is_binary) == (2, 1, False)
        assert (deleted.old_path, deleted.new_path, deleted.status) == ("old.bin", None, "D")
        assert deleted.is_binary
        assert all(d.similarity is None for d in (added, modified, deleted))

    def test_rename(self) -> None:
        """Test renames carry both paths and their similarity."""
        output = (
            ":100644 100644 1111111 2222222 R087\0before.txt\0after.txt\0"
            "1\t1\t\0before.txt\0after.txt\0"
        )
        (renamed,) = parse_diff_tree(output)
        assert (renamed.old_path, renamed.new_path, renamed.status) == (
            "before.txt",
            "after.txt",
            "R",
        )
        assert renamed.similarity == 87
        assert (renamed.insertions, renamed.deletions) == (1, 1)

    def test_empty(self) -> None:
        """Test a diff with no changes."""
        assert parse_diff_tree("") == []


class TestSubmoduleStatus:
    """Tests for submodule status derivation."""

    def test_states(self) -> None:
        """Test every combination of recorded and checked-out commit."""
        assert submodule_status(None, None) == "uninitialized"
        assert submodule_status("a" * 40, None) == "uninitialized"
        assert submodule_status("a" * 40, "a" * 40) == "current"
        assert submodule_status("a" * 40, "b" * 40) == "modified"
        assert submodule_status(None, "b" * 40) == "added"
