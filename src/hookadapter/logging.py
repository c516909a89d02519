"""Logging configuration using structlog.

Hook processes talk to the agent over stdout, so every log line goes to
stderr. Hook failures are additionally appended to a rotating error log so
that fail-open errors remain visible after the process has exited.
"""

from __future__ import annotations

import logging
import sys
import traceback
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import structlog

logger = structlog.get_logger(__name__)

# Rotate hook_errors.log once it reaches 1 MB, keeping one backup
_HOOK_LOG_MAX_BYTES = 1_048_576


def configure_logging(log_level: str = "WARNING", log_format: str = "console") -> None:
    """Configure structlog for a hook process.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Output format ("json" for JSON lines, "console" for human-readable)
    """
    numeric_level = getattr(logging, log_level.upper(), logging.WARNING)

    # stdout is reserved for the hook response envelope.
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=numeric_level,
        force=True,
    )

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if log_format == "json":
        processors.extend([
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ])
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_hook_error_log_path() -> Path:
    """Get path to hook error log file.

    Returns:
        Path to hook_errors.log in the hookadapter home directory
    """
    from hookadapter.config import settings

    return settings.hook_error_log


def _rotate_hook_error_log(log_path: Path) -> None:
    """Move a full error log aside to `<name>.1`, replacing any older backup."""
    try:
        if log_path.stat().st_size >= _HOOK_LOG_MAX_BYTES:
            log_path.replace(log_path.with_suffix(".log.1"))
    except OSError:
        return


def format_hook_error(hook_name: str, exc: BaseException) -> str:
    """Render one error log record: a header line followed by the traceback."""
    timestamp = datetime.now(UTC).strftime("%Y-%m-%dT%H:%M:%S.%fZ")
    trace = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__)).rstrip()
    return (
        f"[{timestamp}] hook={hook_name} exception={type(exc).__name__} message={exc}\n"
        f"{trace}\n\n"
    )


def log_hook_error(hook_name: str, exc: BaseException) -> None:
    """Record a hook failure.

    The failure is emitted as a `hook.error` structlog event and appended to
    hook_errors.log. The caller is already failing open, so problems writing
    the file are reported on the structlog event stream and never raised.

    Args:
        hook_name: Routing token or name of the hook that failed
        exc: The exception that was caught
    """
    log_path = get_hook_error_log_path()
    logger.error(
        "hook.error",
        hook=hook_name,
        error_type=type(exc).__name__,
        error=str(exc),
        error_log=str(log_path),
    )
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        _rotate_hook_error_log(log_path)
        with open(log_path, "a", encoding="utf-8") as f:
            f.write(format_hook_error(hook_name, exc))
    except OSError as e:
        logger.warning("hook.error_log_unwritable", error_log=str(log_path), error=str(e))
