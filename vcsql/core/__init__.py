"""
Core module: schema catalog, data models, exceptions and the projection engine.

Catalog (catalog.py):
    - TABLES: Descriptors of every projected table
    - get_table_info / tables_by_category: Lookup and grouping

Models (models.py):
    - TableDescriptor/ColumnDescriptor: Static schema data
    - QueryResult: Column names and rows of a query

Exceptions (exceptions.py):
    - VcsqlError: Base exception for all vcsql errors
    - RepoNotFoundError, TableNotFoundError, ExtractionError,
      RelationalError, InvalidQueryError

Engine (engine.py):
    - ProjectionEngine: Loads referenced tables into SQLite and runs queries.
      Import it from vcsql.core.engine.
"""

from vcsql.core.catalog import CATEGORY_ORDER, TABLES, get_table_info, tables_by_category
from vcsql.core.exceptions import (
    ExtractionError,
    InvalidQueryError,
    RelationalError,
    RepoNotFoundError,
    TableNotFoundError,
    VcsqlError,
)
from vcsql.core.models import ColumnDescriptor, ColumnType, QueryResult, TableDescriptor

__all__ = [
    # Catalog
    "TABLES",
    "CATEGORY_ORDER",
    "get_table_info",
    "tables_by_category",
    # Models
    "ColumnDescriptor",
    "ColumnType",
    "TableDescriptor",
    "QueryResult",
    # Exceptions
    "VcsqlError",
    "RepoNotFoundError",
    "TableNotFoundError",
    "ExtractionError",
    "RelationalError",
    "InvalidQueryError",
]
