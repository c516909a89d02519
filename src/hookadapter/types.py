"""Normalized hook types shared by adapters, the engine, and callbacks.

Adapters translate agent-specific payloads into a HookEvent and translate a
HookDecision back into the agent's envelope. Callbacks only ever see these
types.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Decision(str, Enum):
    """Normalized decision values returned by callbacks."""

    ALLOW = "allow"
    DENY = "deny"
    ASK = "ask"
    SKIP = "skip"


class EventKind(str, Enum):
    """Event subtypes that change the shape of an adapter's output."""

    PRE_ACTION = "pre_action"
    POST_ACTION = "post_action"
    STOP = "stop"
    PROMPT_SUBMIT = "prompt_submit"
    TASK_COMPLETE = "task_complete"


class Operation(str, Enum):
    """File operations inferred from the acting tool."""

    READ = "read"
    WRITE = "write"
    EDIT = "edit"


# Session-boundary events only support a block/no-block response
SESSION_BOUNDARY_EVENTS = frozenset(
    {EventKind.STOP, EventKind.PROMPT_SUBMIT, EventKind.TASK_COMPLETE}
)


@dataclass
class HookEvent:
    """A hook invocation normalized across agents.

    Attributes:
        agent: Canonical agent name (e.g. "ClaudeCode")
        kind: Event subtype, used to pick the output envelope
        event_name: The agent's own event name (e.g. "PreToolUse")
        session_id: Agent session identifier
        cwd: Agent working directory
        tool_name: Acting tool, empty for session-boundary events
        tool_input: Tool input payload
        file_path: Absolute path for file-touching tools only
        operation: Inferred file operation for file-touching tools only
        llm_tool: LLM backend chosen by the agent integration
        tool_config: Free-form configuration for the LLM backend
        raw: Full parsed payload
    """

    agent: str
    kind: EventKind
    event_name: str
    session_id: str
    cwd: str
    tool_name: str = ""
    tool_input: dict[str, Any] = field(default_factory=dict)
    file_path: str | None = None
    operation: Operation | None = None
    llm_tool: str | None = None
    tool_config: dict[str, Any] | None = None
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    @property
    def is_file_operation(self) -> bool:
        """Whether the acting tool touches a file."""
        return self.file_path is not None


@dataclass
class HookDecision:
    """Decision produced by a callback.

    Attributes:
        decision: allow, deny, ask or skip
        message: Text intended for the agent's model
        user_message: Text shown only to the human operator (written to stderr)
        updated_input: Replacement tool input, pre-action events only
        exit_code: Explicit process exit status overriding the adapter default
    """

    decision: Decision
    message: str = ""
    user_message: str | None = None
    updated_input: dict[str, Any] | None = None
    exit_code: int | None = None

    def __post_init__(self) -> None:
        self.decision = Decision(self.decision)

    @property
    def is_skip(self) -> bool:
        return self.decision == Decision.SKIP

    @classmethod
    def allow(cls, message: str = "", **kwargs: Any) -> HookDecision:
        return cls(Decision.ALLOW, message, **kwargs)

    @classmethod
    def deny(cls, message: str = "", **kwargs: Any) -> HookDecision:
        return cls(Decision.DENY, message, **kwargs)

    @classmethod
    def ask(cls, message: str = "", **kwargs: Any) -> HookDecision:
        return cls(Decision.ASK, message, **kwargs)

    @classmethod
    def skip(cls, reason: str = "") -> HookDecision:
        """Build a skip decision.

        The reason is kept for logging only; adapters never emit it.
        """
        return cls(Decision.SKIP, reason)


HookCallback = Callable[[HookEvent], HookDecision]


@dataclass(frozen=True)
class FileMetadata:
    """On-disk state of a file used for change detection."""

    mtime: float  # milliseconds since epoch
    checksum: str  # sha256 hex digest


@dataclass(frozen=True)
class ExecutionLogEntry:
    """One completed hook run, as recorded in the execution log.

    Entries are immutable once written. `timestamp` is in milliseconds since
    epoch; when left as None the store stamps it at append time.
    """

    session_id: str
    file_path: str
    operation: str
    decision: str
    file_pattern: str = ""
    file_mtime: float | None = None
    file_checksum: str | None = None
    project_path: str | None = None
    timestamp: int | None = None

    @property
    def patterns(self) -> frozenset[str]:
        """Matched pattern names as a set."""
        return split_patterns(self.file_pattern)


@dataclass(frozen=True)
class LogStats:
    """Summary of the execution log."""

    total_entries: int
    unique_sessions: int
    unique_files: int


def split_patterns(file_pattern: str | None) -> frozenset[str]:
    """Split a comma-joined pattern string into a set of pattern names."""
    if not file_pattern:
        return frozenset()
    return frozenset(p.strip() for p in file_pattern.split(",") if p.strip())
