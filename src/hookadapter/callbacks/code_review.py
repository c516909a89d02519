"""Code review after file writes.

Each written file is handed to a reviewer. Reviews are debounced per file and
skipped when the file content has not changed since the last passing review.
"""

from __future__ import annotations

import json
import shlex
import subprocess
from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass, field

import structlog

from hookadapter.store import DEFAULT_DEBOUNCE_MS, REVIEW_OPERATION, ExecutionLogStore
from hookadapter.types import (
    Decision,
    ExecutionLogEntry,
    HookDecision,
    HookEvent,
    Operation,
)

logger = structlog.get_logger(__name__)


@dataclass
class ReviewResult:
    """Outcome of reviewing one file.

    Attributes:
        fix_required: Whether the change must be fixed before continuing
        feedback: Reviewer summary
        identified_issues: Individual issues found
    """

    fix_required: bool
    feedback: str = ""
    identified_issues: list[str] = field(default_factory=list)


class Reviewer(ABC):
    """Reviews a changed file."""

    @abstractmethod
    def review(self, file_path: str, event: HookEvent) -> ReviewResult:
        """Review a file after it was written.

        Args:
            file_path: Absolute path of the written file
            event: The hook event that triggered the review

        Returns:
            ReviewResult for the file
        """
        ...


class CommandReviewer(Reviewer):
    """Run an external command against the file.

    The file path is appended to the command. A non-zero exit status means a
    fix is required; the command output becomes the feedback.
    """

    def __init__(self, command: str, timeout: float = 60.0) -> None:
        self.command = command
        self.timeout = timeout

    def review(self, file_path: str, event: HookEvent) -> ReviewResult:
        result = subprocess.run(
            [*shlex.split(self.command), file_path],
            cwd=event.cwd,
            capture_output=True,
            text=True,
            timeout=self.timeout,
        )
        output = (result.stdout + result.stderr).strip()
        issues = [line for line in output.splitlines() if line.strip()]
        return ReviewResult(
            fix_required=result.returncode != 0,
            feedback=output,
            identified_issues=issues if result.returncode != 0 else [],
        )


class CodeReviewHook:
    """Review written files and block when fixes are required.

    Review outcomes are logged under the `review` operation so that entries
    other callbacks write for the same file do not debounce the review.
    """

    def __init__(
        self,
        store: ExecutionLogStore,
        reviewer: Reviewer | None,
        debounce_ms: int = DEFAULT_DEBOUNCE_MS,
    ) -> None:
        self.store = store
        self.reviewer = reviewer
        self.debounce_ms = debounce_ms

    def pre_tool_use(self, event: HookEvent) -> HookDecision:
        return HookDecision.skip("Reviews only run after file operations")

    def post_tool_use(self, event: HookEvent) -> HookDecision:
        """Review a file after a write or edit."""
        if event.file_path is None or event.operation not in (Operation.WRITE, Operation.EDIT):
            return HookDecision.skip("Not a file write")
        if self.reviewer is None:
            return HookDecision.skip("No reviewer configured")

        file_path = event.file_path
        if self.store.was_recently_reviewed(
            event.session_id, file_path, self.debounce_ms, operation=REVIEW_OPERATION
        ):
            return HookDecision.skip("File was recently reviewed")
        if not self.store.has_file_changed(
            event.session_id, file_path, Decision.ALLOW, operation=REVIEW_OPERATION
        ):
            return HookDecision.skip("File unchanged since last review")

        metadata = self.store.get_file_metadata(file_path)
        result = self.reviewer.review(file_path, event)
        decision = Decision.DENY if result.fix_required else Decision.ALLOW

        self.store.log_execution(
            ExecutionLogEntry(
                session_id=event.session_id,
                file_path=file_path,
                operation=REVIEW_OPERATION,
                decision=decision.value,
                file_mtime=metadata.mtime if metadata else None,
                file_checksum=metadata.checksum if metadata else None,
                project_path=event.cwd,
            )
        )
        logger.info(
            "code_review.completed",
            session_id=event.session_id,
            file_path=file_path,
            fix_required=result.fix_required,
        )

        if result.fix_required:
            return HookDecision.deny(json.dumps(asdict(result), indent=2))
        return HookDecision.allow(
            json.dumps(
                {"feedback": result.feedback, "identified_issues": result.identified_issues},
                indent=2,
            )
        )
