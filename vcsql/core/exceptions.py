"""vcsql custom exceptions."""


class VcsqlError(Exception):
    """Base exception for vcsql errors."""


class RepoNotFoundError(VcsqlError):
    """Path does not resolve to a git repository."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Repository not found: {path}")


class TableNotFoundError(VcsqlError):
    """Table is not part of the catalog."""

    def __init__(self, table: str) -> None:
        self.table = table
        super().__init__(f"Table not found: {table}")


class ExtractionError(VcsqlError):
    """Reading repository state for a table failed."""

    def __init__(self, table: str, cause: BaseException) -> None:
        self.table = table
        self.cause = cause
        super().__init__(f"Failed to load table '{table}': {cause}")


class RelationalError(VcsqlError):
    """SQLite rejected a statement."""


class InvalidQueryError(VcsqlError):
    """Query was rejected before execution."""
