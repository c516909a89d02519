"""Test fixtures for hookadapter tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

import hookadapter.config
import hookadapter.db.connection
from hookadapter.config import HookAdapterSettings
from hookadapter.logging import configure_logging
from hookadapter.store import ExecutionLogStore


class FakeClock:
    """Controllable replacement for time.time."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance_ms(self, ms: int) -> None:
        self.now += ms / 1000


@pytest.fixture(autouse=True)
def stderr_logging() -> None:
    """Keep structlog output off stdout, which carries hook responses."""
    configure_logging("WARNING")


@pytest.fixture
def hookadapter_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point settings at a temporary home directory."""
    home = tmp_path / ".hookadapter"
    home.mkdir()

    monkeypatch.setenv("HOOKADAPTER_HOME", str(home))
    monkeypatch.setenv("HOOKADAPTER_DB_PATH", str(home / "executions.db"))

    new_settings = HookAdapterSettings()
    monkeypatch.setattr(hookadapter.config, "settings", new_settings)
    monkeypatch.setattr(hookadapter.db.connection, "settings", new_settings)

    return home


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(hookadapter_home: Path, clock: FakeClock) -> ExecutionLogStore:
    """Execution log store backed by a temporary database."""
    return ExecutionLogStore(hookadapter_home / "executions.db", clock=clock)


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """Working directory of the simulated agent session."""
    project_dir = tmp_path / "project"
    (project_dir / "src").mkdir(parents=True)
    return project_dir


def claude_payload(
    event: str = "PreToolUse",
    cwd: str = "/work",
    tool_name: str = "Write",
    tool_input: dict[str, Any] | None = None,
    session_id: str = "session-1",
    **extra: Any,
) -> str:
    """Build a Claude Code stdin payload."""
    payload: dict[str, Any] = {
        "session_id": session_id,
        "cwd": cwd,
        "hook_event_name": event,
        "tool_name": tool_name,
        "tool_input": tool_input if tool_input is not None else {},
    }
    payload.update(extra)
    return json.dumps(payload)


@pytest.fixture
def make_claude_payload():
    """Factory for Claude Code stdin payloads."""
    return claude_payload
