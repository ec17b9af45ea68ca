"""Static catalog of the tables vcsql can project a repository onto."""

from __future__ import annotations

from vcsql.core.models import ColumnDescriptor, ColumnType, TableDescriptor

CATEGORY_ORDER = (
    "CORE",
    "REFERENCES",
    "CHANGES",
    "CONFIGURATION",
    "WORKING DIRECTORY",
    "OPERATIONAL",
)

_TEXT = ColumnType.TEXT
_INT = ColumnType.INTEGER
_BOOL = ColumnType.BOOLEAN
_TIME = ColumnType.DATETIME


def _col(
    name: str, type_: ColumnType, description: str, nullable: bool = False
) -> ColumnDescriptor:
    return ColumnDescriptor(name=name, type=type_, nullable=nullable, description=description)


_REPO = _col("repo", _TEXT, "Repository path")


def _table(
    name: str,
    category: str,
    description: str,
    columns: list[ColumnDescriptor],
    primary_key: tuple[str, ...] = (),
) -> TableDescriptor:
    return TableDescriptor(
        name=name,
        category=category,
        description=description,
        columns=(*columns, _REPO),
        primary_key=primary_key,
    )


TABLES: tuple[TableDescriptor, ...] = (
    # CORE
    _table(
        "commits",
        "CORE",
        "Commit history and metadata",
        [
            _col("id", _TEXT, "Full SHA-1 hash (40 characters)"),
            _col("short_id", _TEXT, "Abbreviated hash (7 characters)"),
            _col("tree_id", _TEXT, "Tree object SHA"),
            _col("author_name", _TEXT, "Author's name"),
            _col("author_email", _TEXT, "Author's email"),
            _col("authored_at", _TIME, "When originally written"),
            _col("committer_name", _TEXT, "Committer's name"),
            _col("committer_email", _TEXT, "Committer's email"),
            _col("committed_at", _TIME, "When committed"),
            _col("message", _TEXT, "Full commit message"),
            _col("summary", _TEXT, "First line of message"),
            _col("body", _TEXT, "Message body (lines 2+)", nullable=True),
            _col("parent_count", _INT, "Number of parents"),
            _col("is_merge", _BOOL, "True if merge commit"),
        ],
        ("id", "repo"),
    ),
    _table(
        "commit_parents",
        "CORE",
        "Parent-child relationships",
        [
            _col("commit_id", _TEXT, "Child commit SHA"),
            _col("parent_id", _TEXT, "Parent commit SHA"),
            _col("parent_index", _INT, "Parent order (0=first)"),
        ],
        ("commit_id", "parent_id", "repo"),
    ),
    # REFERENCES
    _table(
        "branches",
        "REFERENCES",
        "Local and remote branches",
        [
            _col("name", _TEXT, "Branch name"),
            _col("full_name", _TEXT, "Full refname"),
            _col("target_id", _TEXT, "Commit SHA"),
            _col("is_remote", _BOOL, "Remote tracking branch"),
            _col("is_head", _BOOL, "Currently checked out"),
            _col("remote_name", _TEXT, "Remote name", nullable=True),
            _col("upstream", _TEXT, "Upstream branch", nullable=True),
            _col("ahead", _INT, "Commits ahead", nullable=True),
            _col("behind", _INT, "Commits behind", nullable=True),
        ],
        ("full_name", "repo"),
    ),
    _table(
        "tags",
        "REFERENCES",
        "Annotated and lightweight tags",
        [
            _col("name", _TEXT, "Tag name"),
            _col("full_name", _TEXT, "Full refname"),
            _col("target_id", _TEXT, "Tagged object SHA"),
            _col("target_type", _TEXT, "commit/tree/blob/tag"),
            _col("is_annotated", _BOOL, "Annotated tag"),
            _col("tagger_name", _TEXT, "Tagger name", nullable=True),
            _col("tagger_email", _TEXT, "Tagger email", nullable=True),
            _col("tagged_at", _TIME, "Tag creation time", nullable=True),
            _col("message", _TEXT, "Tag message", nullable=True),
        ],
        ("full_name", "repo"),
    ),
    _table(
        "refs",
        "REFERENCES",
        "All references (unified view)",
        [
            _col("name", _TEXT, "Short name"),
            _col("full_name", _TEXT, "Full reference name"),
            _col("target_id", _TEXT, "Target SHA"),
            _col("kind", _TEXT, "branch/remote/tag/note/stash/other"),
            _col("is_symbolic", _BOOL, "Symbolic ref"),
            _col("symbolic_target", _TEXT, "Target reference", nullable=True),
        ],
        ("full_name", "repo"),
    ),
    _table(
        "stashes",
        "REFERENCES",
        "Stashed changes",
        [
            _col("stash_index", _INT, "Stash index (0=most recent)"),
            _col("commit_id", _TEXT, "Stash commit SHA"),
            _col("message", _TEXT, "Stash message"),
            _col("author_name", _TEXT, "Who stashed"),
            _col("author_email", _TEXT, "Email"),
            _col("created_at", _TIME, "When stashed"),
            _col("branch", _TEXT, "Branch when stashed"),
        ],
        ("stash_index", "repo"),
    ),
    _table(
        "reflog",
        "REFERENCES",
        "Reference history",
        [
            _col("ref_name", _TEXT, "Reference name"),
            _col("entry_index", _INT, "Entry index (0=most recent)"),
            _col("old_id", _TEXT, "Previous SHA"),
            _col("new_id", _TEXT, "New SHA"),
            _col("committer_name", _TEXT, "Who made change"),
            _col("committer_email", _TEXT, "Email"),
            _col("committed_at", _TIME, "When changed"),
            _col("message", _TEXT, "Reflog message"),
            _col("action", _TEXT, "Action type"),
        ],
        ("ref_name", "entry_index", "repo"),
    ),
    # CHANGES
    _table(
        "diffs",
        "CHANGES",
        "Per-commit diff summary",
        [
            _col("commit_id", _TEXT, "Commit SHA"),
            _col("parent_id", _TEXT, "Parent SHA", nullable=True),
            _col("files_changed", _INT, "Files changed"),
            _col("insertions", _INT, "Lines added"),
            _col("deletions", _INT, "Lines removed"),
        ],
    ),
    _table(
        "diff_files",
        "CHANGES",
        "Per-file changes",
        [
            _col("commit_id", _TEXT, "Commit SHA"),
            _col("parent_id", _TEXT, "Parent SHA", nullable=True),
            _col("old_path", _TEXT, "Path before", nullable=True),
            _col("new_path", _TEXT, "Path after", nullable=True),
            _col("status", _TEXT, "A/D/M/R/C/T"),
            _col("insertions", _INT, "Lines added"),
            _col("deletions", _INT, "Lines removed"),
            _col("is_binary", _BOOL, "Binary file"),
            _col("similarity", _INT, "Rename similarity %", nullable=True),
        ],
    ),
    _table(
        "blame",
        "CHANGES",
        "Per-line attribution",
        [
            _col("path", _TEXT, "File path"),
            _col("line_number", _INT, "Line number"),
            _col("commit_id", _TEXT, "Commit that introduced line"),
            _col("original_line", _INT, "Original line number"),
            _col("original_path", _TEXT, "Original file path"),
            _col("author_name", _TEXT, "Author"),
            _col("author_email", _TEXT, "Email"),
            _col("authored_at", _TIME, "When written"),
            _col("line_content", _TEXT, "Line text"),
        ],
        ("path", "line_number", "repo"),
    ),
    # CONFIGURATION
    _table(
        "config",
        "CONFIGURATION",
        "Git configuration",
        [
            _col("level", _TEXT, "system/global/local"),
            _col("section", _TEXT, "Config section"),
            _col("subsection", _TEXT, "Subsection", nullable=True),
            _col("key", _TEXT, "Config key"),
            _col("name", _TEXT, "Full name"),
            _col("value", _TEXT, "Config value"),
        ],
    ),
    _table(
        "remotes",
        "CONFIGURATION",
        "Remote repositories",
        [
            _col("name", _TEXT, "Remote name"),
            _col("url", _TEXT, "Fetch URL", nullable=True),
            _col("push_url", _TEXT, "Push URL", nullable=True),
            _col("fetch_refspec", _TEXT, "Fetch refspec", nullable=True),
            _col("push_refspec", _TEXT, "Push refspec", nullable=True),
        ],
        ("name", "repo"),
    ),
    _table(
        "submodules",
        "CONFIGURATION",
        "Nested repositories",
        [
            _col("name", _TEXT, "Submodule name"),
            _col("path", _TEXT, "Filesystem path"),
            _col("url", _TEXT, "Repository URL"),
            _col("branch", _TEXT, "Tracked branch", nullable=True),
            _col("head_id", _TEXT, "Current HEAD SHA", nullable=True),
            _col("status", _TEXT, "current/modified/uninitialized"),
        ],
        ("name", "repo"),
    ),
    # WORKING DIRECTORY
    _table(
        "status",
        "WORKING DIRECTORY",
        "Working directory status",
        [
            _col("path", _TEXT, "File path"),
            _col("status_code", _TEXT, "Two-character status"),
            _col("head_status", _TEXT, "Index vs HEAD"),
            _col("index_status", _TEXT, "Worktree vs index"),
            _col("is_staged", _BOOL, "In staging area"),
            _col("is_modified", _BOOL, "Modified"),
            _col("is_new", _BOOL, "Untracked"),
            _col("is_deleted", _BOOL, "Deleted"),
            _col("is_renamed", _BOOL, "Renamed"),
            _col("is_copied", _BOOL, "Copied"),
            _col("is_ignored", _BOOL, "Ignored"),
            _col("is_conflicted", _BOOL, "Conflicted"),
        ],
        ("path", "repo"),
    ),
    _table(
        "worktrees",
        "WORKING DIRECTORY",
        "Linked working trees",
        [
            _col("name", _TEXT, "Worktree name"),
            _col("path", _TEXT, "Filesystem path", nullable=True),
            _col("head_id", _TEXT, "HEAD commit SHA", nullable=True),
            _col("branch", _TEXT, "Checked out branch", nullable=True),
            _col("is_bare", _BOOL, "Bare worktree"),
            _col("is_detached", _BOOL, "Detached HEAD"),
            _col("is_locked", _BOOL, "Locked state"),
            _col("lock_reason", _TEXT, "Lock reason", nullable=True),
            _col("is_prunable", _BOOL, "Can be pruned"),
        ],
        ("name", "repo"),
    ),
    # OPERATIONAL
    _table(
        "hooks",
        "OPERATIONAL",
        "Installed git hooks",
        [
            _col("name", _TEXT, "Hook name"),
            _col("path", _TEXT, "Full path"),
            _col("is_executable", _BOOL, "Has execute permission"),
            _col("is_sample", _BOOL, "Is a .sample file"),
            _col("size", _INT, "File size in bytes"),
        ],
    ),
    _table(
        "notes",
        "OPERATIONAL",
        "Git notes",
        [
            _col("notes_ref", _TEXT, "Notes reference"),
            _col("target_id", _TEXT, "Annotated object SHA"),
            _col("note_id", _TEXT, "Note blob SHA"),
            _col("content", _TEXT, "Note text"),
        ],
        ("notes_ref", "target_id", "repo"),
    ),
)

_BY_NAME = {table.name: table for table in TABLES}


def get_table_info(name: str) -> TableDescriptor | None:
    """Look up a table descriptor by exact name."""
    return _BY_NAME.get(name)


def table_names() -> list[str]:
    """All catalog table names in catalog order."""
    return [table.name for table in TABLES]


def tables_by_category() -> dict[str, list[TableDescriptor]]:
    """Group descriptors by category, categories in display order."""
    grouped: dict[str, list[TableDescriptor]] = {category: [] for category in CATEGORY_ORDER}
    for table in TABLES:
        grouped.setdefault(table.category, []).append(table)
    return grouped
