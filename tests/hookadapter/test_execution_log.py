"""Tests for the execution log store."""

from __future__ import annotations

import sqlite3
from pathlib import Path

from hookadapter.store import REVIEW_OPERATION, ExecutionLogStore
from hookadapter.types import Decision, ExecutionLogEntry


def _entry(
    file_path: str = "/work/src/a.ts",
    decision: str = "allow",
    session_id: str = "session-1",
    **kwargs,
) -> ExecutionLogEntry:
    return ExecutionLogEntry(
        session_id=session_id,
        file_path=file_path,
        operation=kwargs.pop("operation", "write"),
        decision=decision,
        **kwargs,
    )


class TestLogExecution:
    """Tests for appending entries."""

    def test_stamps_timestamp(self, store: ExecutionLogStore, clock) -> None:
        """Test a missing timestamp is set from the clock."""
        stored = store.log_execution(_entry())
        assert stored.timestamp == round(clock.now * 1000)

    def test_appends_without_overwriting(self, store: ExecutionLogStore) -> None:
        """Test later entries are appended next to earlier ones."""
        store.log_execution(_entry(decision="allow"))
        store.log_execution(_entry(decision="skip"))

        conn = sqlite3.connect(store.db_path)
        rows = conn.execute(
            "SELECT decision FROM execution_log ORDER BY id"
        ).fetchall()
        conn.close()
        assert [r[0] for r in rows] == ["allow", "skip"]

    def test_accepts_enum_values(self, store: ExecutionLogStore) -> None:
        """Test enum members are stored as their values."""
        stored = store.log_execution(_entry(decision=Decision.DENY))
        assert stored.decision == "deny"
        assert store.latest_entry("session-1", "/work/src/a.ts").decision == "deny"


class TestHasExecuted:
    """Tests for has_executed."""

    def test_false_without_entries(self, store: ExecutionLogStore) -> None:
        """Test an empty log has no executions."""
        assert not store.has_executed("session-1", "/work/src/a.ts", "allow")

    def test_true_after_logging(self, store: ExecutionLogStore) -> None:
        """Test a logged decision is found."""
        store.log_execution(_entry(file_pattern="services"))
        assert store.has_executed("session-1", "/work/src/a.ts", "allow")
        assert store.has_executed("session-1", "/work/src/a.ts", "allow", pattern="services")

    def test_idempotent_reads(self, store: ExecutionLogStore) -> None:
        """Test repeated lookups give the same answer."""
        store.log_execution(_entry())
        first = store.has_executed("session-1", "/work/src/a.ts", "allow")
        second = store.has_executed("session-1", "/work/src/a.ts", "allow")
        assert first is second is True

    def test_pattern_set_is_order_insensitive(self, store: ExecutionLogStore) -> None:
        """Test pattern sets match regardless of order."""
        store.log_execution(_entry(file_pattern="tools,services"))
        assert store.has_executed(
            "session-1", "/work/src/a.ts", "allow", pattern="services,tools"
        )

    def test_changed_pattern_set_is_not_executed(self, store: ExecutionLogStore) -> None:
        """Test a different pattern set counts as not executed."""
        store.log_execution(_entry(file_pattern="services"))
        assert not store.has_executed(
            "session-1", "/work/src/a.ts", "allow", pattern="services,tools"
        )

    def test_scoped_to_session(self, store: ExecutionLogStore) -> None:
        """Test entries from another session are ignored."""
        store.log_execution(_entry(session_id="other"))
        assert not store.has_executed("session-1", "/work/src/a.ts", "allow")

    def test_decision_must_match(self, store: ExecutionLogStore) -> None:
        """Test the recorded decision must match."""
        store.log_execution(_entry(decision="skip"))
        assert not store.has_executed("session-1", "/work/src/a.ts", "allow")

    def test_project_path_must_match(self, store: ExecutionLogStore) -> None:
        """Test the recorded project path must match when given."""
        store.log_execution(_entry(project_path="/work"))
        assert store.has_executed(
            "session-1", "/work/src/a.ts", "allow", project_path="/work"
        )
        assert not store.has_executed(
            "session-1", "/work/src/a.ts", "allow", project_path="/elsewhere"
        )

    def test_cache_sees_own_appends(self, store: ExecutionLogStore) -> None:
        """Test the cache reflects entries this store appends."""
        assert not store.has_executed("session-1", "/work/src/a.ts", "allow")
        store.log_execution(_entry())
        assert store.has_executed("session-1", "/work/src/a.ts", "allow")

    def test_cache_sees_other_writers_after_clear(
        self, store: ExecutionLogStore, clock
    ) -> None:
        """Test entries from another process appear after clear_cache."""
        assert not store.has_executed("session-1", "/work/src/a.ts", "allow")

        other_process = ExecutionLogStore(store.db_path, clock=clock)
        other_process.log_execution(_entry())

        assert not store.has_executed("session-1", "/work/src/a.ts", "allow")
        store.clear_cache()
        assert store.has_executed("session-1", "/work/src/a.ts", "allow")


class TestWasRecentlyReviewed:
    """Tests for the debounce window."""

    def test_no_entry_is_not_recent(self, store: ExecutionLogStore) -> None:
        """Test a file with no entries was not recently reviewed."""
        assert not store.was_recently_reviewed("session-1", "/work/src/a.ts")

    def test_inside_window_is_recent(self, store: ExecutionLogStore, clock) -> None:
        """Test an entry inside the window is recent."""
        store.log_execution(_entry())
        clock.advance_ms(2999)
        assert store.was_recently_reviewed("session-1", "/work/src/a.ts", 3000)

    def test_exact_boundary_is_not_recent(self, store: ExecutionLogStore, clock) -> None:
        """Test the window is exclusive."""
        store.log_execution(_entry())
        clock.advance_ms(3000)
        assert not store.was_recently_reviewed("session-1", "/work/src/a.ts", 3000)

    def test_past_window_is_not_recent(self, store: ExecutionLogStore, clock) -> None:
        """Test an entry older than the window is not recent."""
        store.log_execution(_entry())
        clock.advance_ms(3001)
        assert not store.was_recently_reviewed("session-1", "/work/src/a.ts", 3000)

    def test_uses_most_recent_entry(self, store: ExecutionLogStore, clock) -> None:
        """Test the newest entry decides."""
        store.log_execution(_entry())
        clock.advance_ms(10_000)
        store.log_execution(_entry(decision="deny"))
        clock.advance_ms(1000)
        assert store.was_recently_reviewed("session-1", "/work/src/a.ts")

    def test_operation_filter_ignores_other_entries(
        self, store: ExecutionLogStore, clock
    ) -> None:
        """Test only entries with the requested operation count toward the window."""
        store.log_execution(_entry(operation=REVIEW_OPERATION))
        clock.advance_ms(10_000)
        store.log_execution(_entry(decision="skip", file_pattern=".ts"))

        assert store.was_recently_reviewed("session-1", "/work/src/a.ts")
        assert not store.was_recently_reviewed(
            "session-1", "/work/src/a.ts", operation=REVIEW_OPERATION
        )


class TestFileChangeDetection:
    """Tests for get_file_metadata and has_file_changed."""

    def test_metadata_for_missing_file(self, tmp_path: Path) -> None:
        """Test missing files have no metadata."""
        assert ExecutionLogStore.get_file_metadata(tmp_path / "missing.ts") is None

    def test_metadata_checksum(self, tmp_path: Path) -> None:
        """Test metadata carries a sha256 checksum and mtime."""
        target = tmp_path / "a.ts"
        target.write_text("export {}")
        metadata = ExecutionLogStore.get_file_metadata(target)
        assert metadata is not None
        assert len(metadata.checksum) == 64
        assert metadata.mtime > 0

    def test_changed_without_prior_entry(
        self, store: ExecutionLogStore, tmp_path: Path
    ) -> None:
        """Test a file with no reference entry counts as changed."""
        target = tmp_path / "a.ts"
        target.write_text("export {}")
        assert store.has_file_changed("session-1", str(target), "allow")

    def test_unchanged_after_review(self, store: ExecutionLogStore, tmp_path: Path) -> None:
        """Test a file is unchanged right after its metadata is logged."""
        target = tmp_path / "a.ts"
        target.write_text("export {}")
        metadata = store.get_file_metadata(target)
        store.log_execution(
            _entry(
                file_path=str(target),
                file_mtime=metadata.mtime,
                file_checksum=metadata.checksum,
            )
        )
        assert not store.has_file_changed("session-1", str(target), "allow")

    def test_checksum_decides(self, store: ExecutionLogStore, tmp_path: Path) -> None:
        """Test the checksum wins over the recorded mtime."""
        target = tmp_path / "a.ts"
        target.write_text("export {}")
        metadata = store.get_file_metadata(target)
        # Same content, different recorded mtime: still unchanged
        store.log_execution(
            _entry(
                file_path=str(target),
                file_mtime=metadata.mtime - 5000,
                file_checksum=metadata.checksum,
            )
        )
        assert not store.has_file_changed("session-1", str(target), "allow")

        target.write_text("export const a = 1")
        assert store.has_file_changed("session-1", str(target), "allow")

    def test_mtime_used_without_checksum(
        self, store: ExecutionLogStore, tmp_path: Path
    ) -> None:
        """Test mtime is compared when no checksum was recorded."""
        target = tmp_path / "a.ts"
        target.write_text("export {}")
        metadata = store.get_file_metadata(target)
        store.log_execution(_entry(file_path=str(target), file_mtime=metadata.mtime))
        assert not store.has_file_changed("session-1", str(target), "allow")

    def test_no_recorded_metadata_counts_as_changed(
        self, store: ExecutionLogStore, tmp_path: Path
    ) -> None:
        """Test an entry without metadata counts as changed."""
        target = tmp_path / "a.ts"
        target.write_text("export {}")
        store.log_execution(_entry(file_path=str(target)))
        assert store.has_file_changed("session-1", str(target), "allow")

    def test_compares_against_reference_decision(
        self, store: ExecutionLogStore, tmp_path: Path
    ) -> None:
        """Test only entries with the reference decision are compared."""
        target = tmp_path / "a.ts"
        target.write_text("export {}")
        metadata = store.get_file_metadata(target)
        store.log_execution(
            _entry(file_path=str(target), decision="deny", file_checksum=metadata.checksum)
        )
        assert store.has_file_changed("session-1", str(target), "allow")

    def test_compares_against_reference_operation(
        self, store: ExecutionLogStore, tmp_path: Path
    ) -> None:
        """Test entries with another operation do not hide the reference entry."""
        target = tmp_path / "a.ts"
        target.write_text("export {}")
        metadata = store.get_file_metadata(target)
        store.log_execution(
            _entry(
                file_path=str(target),
                operation=REVIEW_OPERATION,
                file_checksum=metadata.checksum,
            )
        )
        store.log_execution(_entry(file_path=str(target), file_pattern=".ts"))

        assert store.has_file_changed("session-1", str(target), "allow")
        assert not store.has_file_changed(
            "session-1", str(target), "allow", operation=REVIEW_OPERATION
        )


class TestHousekeeping:
    """Tests for stats and clearing."""

    def test_get_stats(self, store: ExecutionLogStore) -> None:
        """Test counting entries, sessions and files."""
        store.log_execution(_entry())
        store.log_execution(_entry(decision="skip"))
        store.log_execution(_entry(file_path="/work/src/b.ts", session_id="other"))

        stats = store.get_stats()
        assert stats.total_entries == 3
        assert stats.unique_sessions == 2
        assert stats.unique_files == 2

        session_stats = store.get_stats("session-1")
        assert session_stats.total_entries == 2
        assert session_stats.unique_files == 1

    def test_clear_log_for_session(self, store: ExecutionLogStore) -> None:
        """Test clearing one session leaves the others."""
        store.log_execution(_entry())
        store.log_execution(_entry(session_id="other"))

        assert store.clear_log("session-1") == 1
        assert not store.has_executed("session-1", "/work/src/a.ts", "allow")
        assert store.get_stats().total_entries == 1

    def test_clear_log_all(self, store: ExecutionLogStore) -> None:
        """Test clearing the whole log."""
        store.log_execution(_entry())
        store.log_execution(_entry(session_id="other"))
        assert store.clear_log() == 2
        assert store.get_stats().total_entries == 0

    def test_empty_stats(self, store: ExecutionLogStore) -> None:
        """Test stats on an empty log."""
        stats = store.get_stats()
        assert stats.total_entries == 0
        assert stats.unique_sessions == 0
