"""Session-scoped execution log for hook processes.

Every hook run is a fresh process, so anything a callback needs to remember
("did I already show patterns for this file?", "was this file reviewed a
second ago?") lives here. The log is append-only: concurrent processes may
both append for the same session/file and readers always look at the most
recent matching row, which yields at-least-once behaviour without locking.
"""

from __future__ import annotations

import hashlib
import sqlite3
import time
from collections.abc import Callable
from dataclasses import replace
from pathlib import Path
from typing import Any

import structlog

from hookadapter.db.connection import get_connection
from hookadapter.db.schema import init_database
from hookadapter.types import (
    ExecutionLogEntry,
    FileMetadata,
    LogStats,
    split_patterns,
)

logger = structlog.get_logger(__name__)

DEFAULT_DEBOUNCE_MS = 3000
REVIEW_OPERATION = "review"

_INSERT_ENTRY = """
INSERT INTO execution_log
(session_id, file_path, operation, decision, file_pattern, file_mtime,
 file_checksum, project_path, timestamp)
VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
"""


def _value(value: Any) -> Any:
    """Unwrap enum members to their stored value."""
    return getattr(value, "value", value)


def _row_to_entry(row: sqlite3.Row) -> ExecutionLogEntry:
    return ExecutionLogEntry(
        session_id=row["session_id"],
        file_path=row["file_path"],
        operation=row["operation"],
        decision=row["decision"],
        file_pattern=row["file_pattern"] or "",
        file_mtime=row["file_mtime"],
        file_checksum=row["file_checksum"],
        project_path=row["project_path"],
        timestamp=row["timestamp"],
    )


class ExecutionLogStore:
    """Durable record of hook decisions, keyed by session and file.

    Lookups for a (session, file) pair are memoized for the lifetime of the
    instance; `clear_cache` drops the memo without touching the database.
    """

    def __init__(
        self,
        db_path: Path | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the store.

        Args:
            db_path: Path to the SQLite database. Defaults to settings.db_path.
            clock: Returns the current time in seconds since epoch.
        """
        if db_path is None:
            from hookadapter.config import settings

            db_path = settings.db_path
        self.db_path = db_path
        self._clock = clock
        self._initialized = False
        self._cache: dict[tuple[str, str], list[ExecutionLogEntry]] = {}

    def _ensure_schema(self) -> None:
        if not self._initialized:
            init_database(self.db_path)
            self._initialized = True

    def now_ms(self) -> int:
        """Current time in milliseconds since epoch."""
        return round(self._clock() * 1000)

    def _entries_for(self, session_id: str, file_path: str) -> list[ExecutionLogEntry]:
        """All entries for a session/file pair, oldest first."""
        key = (session_id, file_path)
        if key not in self._cache:
            self._ensure_schema()
            with get_connection(self.db_path) as conn:
                cursor = conn.execute(
                    """
                    SELECT * FROM execution_log
                    WHERE session_id = ? AND file_path = ?
                    ORDER BY id ASC
                    """,
                    (session_id, file_path),
                )
                self._cache[key] = [_row_to_entry(row) for row in cursor.fetchall()]
        return self._cache[key]

    def log_execution(self, entry: ExecutionLogEntry) -> ExecutionLogEntry:
        """Append an entry to the log.

        Prior entries for the same session/file are never modified.

        Args:
            entry: Entry to append. A missing timestamp is set to now.

        Returns:
            The entry as stored (with its timestamp)
        """
        entry = replace(
            entry,
            operation=_value(entry.operation),
            decision=_value(entry.decision),
            file_pattern=entry.file_pattern or "",
            timestamp=self.now_ms() if entry.timestamp is None else entry.timestamp,
        )

        self._ensure_schema()
        with get_connection(self.db_path) as conn:
            conn.execute(
                _INSERT_ENTRY,
                (
                    entry.session_id,
                    entry.file_path,
                    entry.operation,
                    entry.decision,
                    entry.file_pattern,
                    entry.file_mtime,
                    entry.file_checksum,
                    entry.project_path,
                    entry.timestamp,
                ),
            )
            conn.commit()

        cached = self._cache.get((entry.session_id, entry.file_path))
        if cached is not None:
            cached.append(entry)

        logger.debug(
            "execution_log.append",
            session_id=entry.session_id,
            file_path=entry.file_path,
            decision=_value(entry.decision),
            operation=_value(entry.operation),
        )
        return entry

    def latest_entry(
        self,
        session_id: str,
        file_path: str,
        decision: str | None = None,
        operation: str | None = None,
    ) -> ExecutionLogEntry | None:
        """Most recent entry for a session/file.

        Args:
            session_id: Session identifier
            file_path: File path to look up
            decision: Only consider entries with this decision
            operation: Only consider entries with this operation

        Returns:
            The newest matching entry, or None
        """
        wanted = _value(decision)
        wanted_operation = _value(operation)
        for entry in reversed(self._entries_for(session_id, file_path)):
            if wanted is not None and entry.decision != wanted:
                continue
            if wanted_operation is not None and entry.operation != wanted_operation:
                continue
            return entry
        return None

    def has_executed(
        self,
        session_id: str,
        file_path: str,
        decision: str,
        pattern: str | None = None,
        project_path: str | None = None,
    ) -> bool:
        """Check whether an action was already taken for this file in this session.

        Args:
            session_id: Session identifier
            file_path: File path to check
            decision: Recorded decision to look for
            pattern: Comma-joined matched patterns. When given, the recorded
                pattern set must be the same set; a changed set of matching
                patterns counts as not executed.
            project_path: When given, the recorded project path must match

        Returns:
            True if a consistent entry exists
        """
        wanted = _value(decision)
        wanted_patterns = split_patterns(pattern) if pattern is not None else None

        for entry in reversed(self._entries_for(session_id, file_path)):
            if entry.decision != wanted:
                continue
            if wanted_patterns is not None and entry.patterns != wanted_patterns:
                continue
            if project_path is not None and entry.project_path != project_path:
                continue
            return True
        return False

    def was_recently_reviewed(
        self,
        session_id: str,
        file_path: str,
        window_ms: int = DEFAULT_DEBOUNCE_MS,
        operation: str | None = None,
    ) -> bool:
        """Check whether the last entry for this file is within the debounce window.

        The window is exclusive: an entry exactly `window_ms` old is not recent.
        When `operation` is given, only entries with that operation count.
        """
        entry = self.latest_entry(session_id, file_path, operation=operation)
        if entry is None or entry.timestamp is None:
            return False
        return self.now_ms() - entry.timestamp < window_ms

    @staticmethod
    def get_file_metadata(file_path: str | Path) -> FileMetadata | None:
        """Compute current metadata for change detection.

        Returns:
            FileMetadata, or None if the file cannot be read
        """
        path = Path(file_path)
        try:
            stat = path.stat()
            digest = hashlib.sha256(path.read_bytes()).hexdigest()
        except OSError:
            return None
        return FileMetadata(mtime=stat.st_mtime_ns / 1_000_000, checksum=digest)

    def has_file_changed(
        self,
        session_id: str,
        file_path: str,
        reference_decision: str,
        operation: str | None = None,
    ) -> bool:
        """Check whether a file changed since the last entry with a given decision.

        Defaults to True when there is no such entry, when it recorded no
        metadata, or when the file cannot be read now.
        """
        entry = self.latest_entry(session_id, file_path, reference_decision, operation)
        if entry is None:
            return True

        current = self.get_file_metadata(file_path)
        if current is None:
            return True

        if entry.file_checksum:
            return entry.file_checksum != current.checksum
        if entry.file_mtime is not None:
            return entry.file_mtime != current.mtime
        return True

    def get_stats(self, session_id: str | None = None) -> LogStats:
        """Summarize the log, optionally for one session."""
        query = """
            SELECT COUNT(*) AS total,
                   COUNT(DISTINCT session_id) AS sessions,
                   COUNT(DISTINCT file_path) AS files
            FROM execution_log
        """
        params: list[Any] = []
        if session_id is not None:
            query += " WHERE session_id = ?"
            params.append(session_id)

        self._ensure_schema()
        with get_connection(self.db_path) as conn:
            row = conn.execute(query, params).fetchone()
        return LogStats(
            total_entries=row["total"],
            unique_sessions=row["sessions"],
            unique_files=row["files"],
        )

    def clear_log(self, session_id: str | None = None) -> int:
        """Delete log entries. Housekeeping only; hooks never call this.

        Args:
            session_id: Only delete this session's entries when given

        Returns:
            Number of entries deleted
        """
        self._ensure_schema()
        with get_connection(self.db_path) as conn:
            if session_id is None:
                cursor = conn.execute("DELETE FROM execution_log")
            else:
                cursor = conn.execute(
                    "DELETE FROM execution_log WHERE session_id = ?", (session_id,)
                )
            conn.commit()
            deleted = cursor.rowcount
        self.clear_cache()
        logger.info("execution_log.cleared", session_id=session_id, deleted=deleted)
        return deleted

    def clear_cache(self) -> None:
        """Drop memoized lookups. The durable log is untouched."""
        self._cache.clear()
