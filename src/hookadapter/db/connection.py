"""Database connection management for the execution log."""

import sqlite3
from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path

from hookadapter.config import settings

# Concurrent hook processes append to the same database; wait for the write
# lock instead of failing with "database is locked".
BUSY_TIMEOUT_SECONDS = 5.0


@contextmanager
def get_connection(
    db_path: Path | None = None,
) -> Generator[sqlite3.Connection, None, None]:
    """Get a database connection with proper cleanup.

    Args:
        db_path: Path to database file. Defaults to settings.db_path.

    Yields:
        SQLite connection with dict-like row access
    """
    if db_path is None:
        db_path = settings.db_path

    conn = sqlite3.connect(db_path, timeout=BUSY_TIMEOUT_SECONDS)
    conn.row_factory = sqlite3.Row  # Enable dict-like access
    try:
        yield conn
    finally:
        conn.close()
