"""SQLite schema definitions for the execution log.

The log is append-only: rows are inserted by hook processes and never
updated. Reads always filter by session first, then file.
"""

import sqlite3
from pathlib import Path

CREATE_EXECUTION_LOG_TABLE = """
CREATE TABLE IF NOT EXISTS execution_log (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    session_id TEXT NOT NULL,
    file_path TEXT NOT NULL,
    operation TEXT NOT NULL,
    decision TEXT NOT NULL CHECK (decision IN ('allow', 'deny', 'ask', 'skip')),
    file_pattern TEXT NOT NULL DEFAULT '',  -- Comma-joined pattern names
    file_mtime REAL,
    file_checksum TEXT,
    project_path TEXT,
    timestamp INTEGER NOT NULL  -- Milliseconds since epoch
);
"""

CREATE_EXECUTION_LOG_SESSION_FILE_INDEX = """
CREATE INDEX IF NOT EXISTS idx_execution_log_session_file
    ON execution_log(session_id, file_path, id);
"""

ALL_TABLES = [
    CREATE_EXECUTION_LOG_TABLE,
]

ALL_INDEXES = [
    CREATE_EXECUTION_LOG_SESSION_FILE_INDEX,
]


def init_database(db_path: Path) -> None:
    """Initialize the execution log database with all tables and indexes.

    This function is idempotent - safe to call multiple times, including
    from concurrent hook processes.

    Args:
        db_path: Path to the SQLite database file
    """
    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(db_path, timeout=5.0)
    try:
        cursor = conn.cursor()

        for table_sql in ALL_TABLES:
            cursor.execute(table_sql)

        for index_sql in ALL_INDEXES:
            cursor.execute(index_sql)

        conn.commit()
    finally:
        conn.close()
