"""Tests for logging setup and the hook error log."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from hookadapter.logging import (
    _HOOK_LOG_MAX_BYTES,
    configure_logging,
    format_hook_error,
    get_hook_error_log_path,
    log_hook_error,
)


def _caught(exc: BaseException) -> BaseException:
    """Raise and catch an exception so it carries a traceback."""
    try:
        raise exc
    except BaseException as e:
        return e


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_logs_to_stderr(self) -> None:
        """Test log output goes to stderr."""
        configure_logging("DEBUG")
        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert all(getattr(h, "stream", None) is sys.stderr for h in root.handlers)

    def test_unknown_level_defaults_to_warning(self) -> None:
        """Test an unknown level falls back to WARNING."""
        configure_logging("verbose", "json")
        assert logging.getLogger().level == logging.WARNING


class TestGetHookErrorLogPath:
    """Tests for get_hook_error_log_path."""

    def test_uses_configured_home(self, hookadapter_home: Path) -> None:
        """Test returns hook_errors.log in the configured home directory."""
        assert get_hook_error_log_path() == hookadapter_home / "hook_errors.log"


class TestLogHookError:
    """Tests for log_hook_error."""

    def test_creates_log_file(self, hookadapter_home: Path) -> None:
        """Test the first error creates the log file."""
        log_hook_error("ClaudeCode.Stop", _caught(ValueError("bad payload")))

        content = (hookadapter_home / "hook_errors.log").read_text()
        assert "hook=ClaudeCode.Stop" in content
        assert "exception=ValueError" in content
        assert "message=bad payload" in content
        assert "Traceback" in content

    def test_appends(self, hookadapter_home: Path) -> None:
        """Test later errors are appended."""
        log_hook_error("first", _caught(ValueError("one")))
        log_hook_error("second", _caught(KeyError("two")))

        content = (hookadapter_home / "hook_errors.log").read_text()
        assert "hook=first" in content
        assert "hook=second" in content

    def test_rotates_large_log(self, hookadapter_home: Path) -> None:
        """Test a full log is rotated to a single backup."""
        log_path = hookadapter_home / "hook_errors.log"
        log_path.write_text("x" * _HOOK_LOG_MAX_BYTES)

        log_hook_error("hook", _caught(RuntimeError("after rotation")))

        backup = hookadapter_home / "hook_errors.log.1"
        assert backup.exists()
        assert backup.stat().st_size == _HOOK_LOG_MAX_BYTES
        assert "after rotation" in log_path.read_text()
        assert log_path.stat().st_size < _HOOK_LOG_MAX_BYTES

    def test_never_raises(self, hookadapter_home: Path) -> None:
        """Test write failures are not raised."""
        with patch("builtins.open", side_effect=OSError("disk full")):
            log_hook_error("hook", _caught(RuntimeError("boom")))

    def test_emits_structured_event(self, hookadapter_home: Path) -> None:
        """Test the failure is also emitted as a structlog event."""
        mock_logger = MagicMock()
        with patch("hookadapter.logging.logger", mock_logger):
            log_hook_error("ClaudeCode.PostToolUse", _caught(ValueError("bad payload")))

        mock_logger.error.assert_called_once_with(
            "hook.error",
            hook="ClaudeCode.PostToolUse",
            error_type="ValueError",
            error="bad payload",
            error_log=str(hookadapter_home / "hook_errors.log"),
        )
        mock_logger.warning.assert_not_called()

    def test_unwritable_log_is_reported(self, hookadapter_home: Path) -> None:
        """Test an unwritable log file is reported as a warning."""
        mock_logger = MagicMock()
        with (
            patch("hookadapter.logging.logger", mock_logger),
            patch("builtins.open", side_effect=OSError("disk full")),
        ):
            log_hook_error("hook", _caught(RuntimeError("boom")))

        mock_logger.error.assert_called_once()
        assert mock_logger.warning.call_args.args == ("hook.error_log_unwritable",)
        assert mock_logger.warning.call_args.kwargs["error"] == "disk full"

    @pytest.mark.parametrize("exc", [ValueError("v"), OSError("o"), KeyboardInterrupt()])
    def test_accepts_any_exception(self, hookadapter_home: Path, exc: BaseException) -> None:
        """Test any exception type can be logged."""
        log_hook_error("hook", exc)
        assert (hookadapter_home / "hook_errors.log").exists()


class TestFormatHookError:
    """Tests for format_hook_error."""

    def test_header_and_traceback(self) -> None:
        """Test the record starts with a header line and ends with the traceback."""
        record = format_hook_error("GeminiCli.AfterTool", _caught(KeyError("tool_name")))

        header, _, trace = record.partition("\n")
        assert header.startswith("[")
        assert header.endswith("hook=GeminiCli.AfterTool exception=KeyError message='tool_name'")
        assert trace.startswith("Traceback")
        assert record.endswith("\n\n")
