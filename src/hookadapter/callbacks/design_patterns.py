"""Design pattern guidance before file writes.

The first write/edit of a file in a session gets the matching design pattern
guidance as additional context. Later writes of the same file with the same
set of matching patterns are skipped.
"""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace

import structlog

from hookadapter.store import ExecutionLogStore
from hookadapter.types import (
    Decision,
    ExecutionLogEntry,
    HookDecision,
    HookEvent,
    Operation,
)

logger = structlog.get_logger(__name__)

GUIDANCE_HEADER = (
    "You must follow these design patterns when editing/writing this file. "
    "They are shown only once per file in this session.\n\n"
)


@dataclass(frozen=True)
class DesignPattern:
    """A design pattern that applies to a file."""

    name: str
    guidance: str


class PatternSource(ABC):
    """Looks up the design patterns that apply to a file."""

    @abstractmethod
    def match(self, file_path: str) -> list[DesignPattern]:
        """Return the patterns matching a file, in a stable order."""
        ...


class SuffixPatternSource(PatternSource):
    """Patterns keyed by file suffix (e.g. ".ts", ".test.ts")."""

    def __init__(self, patterns: dict[str, str]) -> None:
        self.patterns = dict(patterns)

    def match(self, file_path: str) -> list[DesignPattern]:
        return [
            DesignPattern(name=suffix, guidance=guidance)
            for suffix, guidance in sorted(self.patterns.items())
            if file_path.endswith(suffix)
        ]


def _is_within(file_path: str, directory: str) -> bool:
    directory = os.path.normpath(directory)
    return file_path == directory or file_path.startswith(directory + os.sep)


class DesignPatternHook:
    """Show design patterns once per file and session."""

    def __init__(self, store: ExecutionLogStore, source: PatternSource) -> None:
        self.store = store
        self.source = source

    def pre_tool_use(self, event: HookEvent) -> HookDecision:
        """Provide design patterns before a file write or edit."""
        if event.file_path is None or event.operation not in (Operation.WRITE, Operation.EDIT):
            return HookDecision.skip("Not a file write")

        if not _is_within(event.file_path, event.cwd):
            return HookDecision.skip("File is outside working directory")

        patterns = self.source.match(event.file_path)
        if not patterns:
            return HookDecision.skip("No design patterns configured for this file")

        file_pattern = ",".join(p.name for p in patterns)
        entry = ExecutionLogEntry(
            session_id=event.session_id,
            file_path=event.file_path,
            operation=event.operation.value,
            decision=Decision.ALLOW.value,
            file_pattern=file_pattern,
            project_path=event.cwd,
        )

        if self.store.has_executed(
            event.session_id,
            event.file_path,
            Decision.ALLOW,
            pattern=file_pattern,
            project_path=event.cwd,
        ):
            self.store.log_execution(replace(entry, decision=Decision.SKIP.value))
            return HookDecision.skip("Design patterns already provided for this file")

        message = GUIDANCE_HEADER + f"**Matched file patterns:** {file_pattern}\n\n"
        message += "".join(f"**{p.name}**\n{p.guidance}\n\n" for p in patterns)

        self.store.log_execution(entry)
        logger.info(
            "design_patterns.provided",
            session_id=event.session_id,
            file_path=event.file_path,
            patterns=file_pattern,
        )
        return HookDecision.allow(message.rstrip())

    def post_tool_use(self, event: HookEvent) -> HookDecision:
        return HookDecision.skip("Design patterns are only provided before file operations")
