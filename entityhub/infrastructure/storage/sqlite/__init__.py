"""SQLite storage implementations."""

from entityhub.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)
from entityhub.infrastructure.storage.sqlite.directory_store import SQLiteDirectory
from entityhub.infrastructure.storage.sqlite.filing_store import SQLiteFilingStore
from entityhub.infrastructure.storage.sqlite.filing_task_store import SQLiteFilingTaskStore
from entityhub.infrastructure.storage.sqlite.filing_type_store import SQLiteFilingTypeStore

# Singleton instances
_filing_type_store: SQLiteFilingTypeStore | None = None
_filing_store: SQLiteFilingStore | None = None
_task_store: SQLiteFilingTaskStore | None = None
_directory: SQLiteDirectory | None = None


async def get_filing_type_store() -> SQLiteFilingTypeStore:
    """Get singleton filing type store instance."""
    global _filing_type_store
    if _filing_type_store is None:
        _filing_type_store = SQLiteFilingTypeStore()
    return _filing_type_store


async def get_filing_store() -> SQLiteFilingStore:
    """Get singleton filing store instance."""
    global _filing_store
    if _filing_store is None:
        _filing_store = SQLiteFilingStore()
    return _filing_store


async def get_task_store() -> SQLiteFilingTaskStore:
    """Get singleton filing task store instance."""
    global _task_store
    if _task_store is None:
        _task_store = SQLiteFilingTaskStore()
    return _task_store


async def get_directory() -> SQLiteDirectory:
    """Get singleton directory instance."""
    global _directory
    if _directory is None:
        _directory = SQLiteDirectory()
    return _directory


__all__ = [
    # Connection
    "ConnectionPool",
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
    # Store classes
    "SQLiteFilingTypeStore",
    "SQLiteFilingStore",
    "SQLiteFilingTaskStore",
    "SQLiteDirectory",
    # Factory functions
    "get_filing_type_store",
    "get_filing_store",
    "get_task_store",
    "get_directory",
]
